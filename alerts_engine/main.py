from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from alerts_engine.application.use_cases.notifications import create_engine_state
from alerts_engine.config import get_settings
from alerts_engine.infrastructure.database import engine, initialize_database
from alerts_engine.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the database on startup and release resources on shutdown."""

    initialize_database()
    app.state.notification_engine = create_engine_state()
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="Alerts Engine", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Refreshed-Token"],
    )

    register_routes(app)
    return app


app = create_app()
