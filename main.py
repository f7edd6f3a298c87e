import asyncio
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from consultoria.config import get_settings
from consultoria.interfaces.api.routes import register_routes
from consultoria.infrastructure.database import initialize_database, engine
from consultoria.infrastructure.notifications import notification_publisher
from consultoria.interfaces.scheduler import shutdown_scheduler, start_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Inicializa la base de datos y el planificador al arrancar, y los libera al cerrar."""

    initialize_database()
    notification_publisher.bind_loop(asyncio.get_running_loop())
    start_scheduler()
    try:
        yield
    finally:
        shutdown_scheduler()
        notification_publisher.unbind_loop()
        engine.dispose()


def create_app() -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    settings = get_settings()
    app = FastAPI(title="Consultoria Notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    logger.debug("Application created (realtime=%s)", settings.realtime_enabled)
    return app


app = create_app()
