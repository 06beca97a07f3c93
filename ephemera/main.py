import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from ephemera.api.v1.router import api_router
from ephemera.cache.redis import RedisClient
from ephemera.config import settings


def setup_logging(level: str = settings.LOG_LEVEL) -> None:
    """
    Configure root logging for the service process.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await RedisClient.close()


app = FastAPI(title="Ephemera Chart Engine", lifespan=lifespan)

# 1. Enable CORS for the mobile and web clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2. Include API Routes
app.include_router(api_router, prefix="/api/v1")

if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    logging.getLogger(__name__).info(f"Server starting on http://{args.host}:{args.port}/api/v1")
    uvicorn.run("ephemera.main:app", host=args.host, port=args.port, reload=settings.DEBUG)
