import json
import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

import redis.asyncio as redis
from pydantic import BaseModel

from ephemera.config import settings

logger = logging.getLogger(__name__)


def _encode(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, UUID):
        return str(obj)
    raise TypeError(f"Object of type {obj.__class__.__name__} is not JSON serializable")


class RedisClient:
    """
    Lazily created, process-wide async Redis connection.

    Values go in and come out as JSON text; pydantic models are dumped
    in JSON mode, so a cached report reads back as plain dicts.
    """

    _client: Optional[redis.Redis] = None

    @classmethod
    def get_client(cls) -> redis.Redis:
        if cls._client is None:
            logger.info(f"Connecting to Redis at {settings.REDIS_HOST}:{settings.REDIS_PORT}/{settings.REDIS_DB}")
            cls._client = redis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                password=settings.REDIS_PASSWORD,
                decode_responses=True,
                socket_timeout=settings.REDIS_TIMEOUT,
                socket_connect_timeout=settings.REDIS_TIMEOUT,
            )
        return cls._client

    @classmethod
    async def close(cls) -> None:
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None

    @staticmethod
    def serialize(value: Any) -> str:
        return json.dumps(value, default=_encode)

    @staticmethod
    def deserialize(value: str) -> Any:
        return json.loads(value)
