import logging.config
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import structlog
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from earbug_gchat import settings
from earbug_gchat.api.summary import router as summary_router
from earbug_gchat.clients.gchat import WebhookClient
from earbug_gchat.clients.storage import build_object_store
from earbug_gchat.domains.summary.pipeline import Services
from earbug_gchat.utils.logging import setup_logging


logging.config.dictConfig(setup_logging(debug=settings.DEBUG))

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "services", None) is not None:
        yield
        return

    logger.info("services_starting", bucket=settings.EARBUG_BUCKET, data_dir=settings.EARBUG_DATA_DIR)

    http_client = httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT)

    try:
        if not settings.EARBUG_GCHAT:
            raise RuntimeError("EARBUG_GCHAT must be set")
        app.state.services = Services(
            store=build_object_store(),
            notifier=WebhookClient(settings.EARBUG_GCHAT, http_client),
            timeout=settings.REQUEST_TIMEOUT,
        )
        logger.info("services_ready")
        yield
    except Exception as e:
        logger.critical("services_start_failed", error=str(e), exc_info=True)
        raise e
    finally:
        logger.info("services_closing")
        await http_client.aclose()
        logger.info("services_closed")


def create_app(services: Optional[Services] = None) -> FastAPI:
    """`services` skips the startup wiring; tests pass fakes this way."""
    app = FastAPI(
        title="earbug-gchat",
        version="1.0.0",
        lifespan=lifespan
    )
    if services is not None:
        app.state.services = services

    app.include_router(summary_router, tags=["Summary"])
    app.mount("/metrics", make_asgi_app())

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "earbug-gchat"}

    return app
