from ephemera.domain.chart.zodiac import AspectType, CelestialBody


SATURN_JUPITER = frozenset({CelestialBody.SATURN, CelestialBody.JUPITER})
LUMINARIES = frozenset({CelestialBody.SUN, CelestialBody.MOON})


def significance_score(
    transiting: CelestialBody,
    natal: CelestialBody,
    aspect_type: AspectType,
    orb: float,
) -> int:
    """
    Ranking weight of a transit aspect. The terms are summed:

      +10 outer planet transiting a personal point
      +7  Saturn or Jupiter transiting
      +5  natal Sun or Moon, unless already weighted as outer to personal
      +3  conjunction or opposition
      +3  orb < 1°, else +2 if orb < 2°
    """
    score = 0

    outer_to_personal = transiting.is_outer and natal.is_personal
    if outer_to_personal:
        score += 10
    if transiting in SATURN_JUPITER:
        score += 7
    if natal in LUMINARIES and not outer_to_personal:
        score += 5

    if aspect_type in (AspectType.CONJUNCTION, AspectType.OPPOSITION):
        score += 3

    if orb < 1.0:
        score += 3
    elif orb < 2.0:
        score += 2

    return score
