import logging

import uvicorn
from fastapi import FastAPI

from config.settings import UVICORN_CONFIG
from server.api.rest.dependencies import shutdown_dependencies
from server.api_router import api_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Watchlist service", description="Per-user movie watchlist REST API")

app.include_router(api_router)


@app.on_event("shutdown")
async def shutdown_event():
    """Release connection pools on shutdown."""
    await shutdown_dependencies()
    logger.info("Watchlist service stopped")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    uvicorn.run("server.main:app", **UVICORN_CONFIG)
