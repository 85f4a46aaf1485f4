"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prompt_relay.api.proxy import router as proxy_router
from prompt_relay.utils.config import RelaySettings, load_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


def create_app(settings: Optional[RelaySettings] = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        app.state.settings = settings
        if not settings.has_credential:
            logger.warning("API_KEY is not set; every proxy call will be rejected")
        logger.info("Prompt relay ready (text=%s image=%s video=%s)",
                    settings.text_model, settings.image_model, settings.video_model)
        yield

    app = FastAPI(title="Prompt Relay", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["*"],
    )
    app.include_router(proxy_router, prefix="/api", tags=["proxy"])

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app

