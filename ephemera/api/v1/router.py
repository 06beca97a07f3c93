from fastapi import APIRouter

from ephemera.api.v1.routes.health import router as health_router
from ephemera.api.v1.routes.charts import router as charts_router
from ephemera.api.v1.routes.transits import router as transits_router
from ephemera.api.v1.routes.location import router as location_router

api_router = APIRouter()

# ─────────────────────────────────────────────
# Public Routes
# ─────────────────────────────────────────────

api_router.include_router(
    health_router,
    tags=["Health"],
)

api_router.include_router(
    charts_router,
    tags=["Charts"],
)

api_router.include_router(
    transits_router,
    tags=["Transits"],
)

api_router.include_router(
    location_router,
    tags=["Locations"],
)
