from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from merge2048.api.routes import router
from merge2048.infra.redis_client import close_shared_redis

__version__ = "0.1.0"

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info("merge2048 %s starting", __version__)
    yield
    close_shared_redis()


app = FastAPI(title="merge2048", version=__version__, lifespan=_lifespan)
app.include_router(router)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "merge2048", "version": __version__}
