import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import GatewayConfig
from app.db.profile_store import close_store, get_store
from app.services.preview_gateway import PreviewGateway

# Routers
from app.api.routers.core import router as core_router
from app.api.routers.preview import router as preview_router


config = GatewayConfig.from_env()
logging.getLogger("app").setLevel(config.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Ensure resources (like the profile store HTTP client) are closed on shutdown."""
    try:
        yield
    finally:
        await close_store()


app = FastAPI(title="Link Preview Gateway", version="0.1", lifespan=lifespan)
app.state.gateway = PreviewGateway(config, get_store(config))

# Register routers; the preview catch-all must come last
app.include_router(core_router)
app.include_router(preview_router)
