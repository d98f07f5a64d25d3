"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from larder.api import auth, ingredients, inventory, recipes, shopping_lists
from larder.config import Settings, get_settings
from larder.database import create_db_engine, create_session_factory, init_db
from larder.errors import register_exception_handlers

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    settings = app.state.settings
    if settings.create_tables:
        init_db(app.state.engine)
    logger.info(f"Larder API starting ({settings.environment})")
    yield
    app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around an explicit settings object.

    The engine, session factory and settings live on ``app.state`` and reach
    handlers through dependencies.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Larder API",
        description="Recipes, ingredient inventory and shopping lists",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = create_db_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)

    # CORS middleware for development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["http://localhost:3000", "http://localhost:5173"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Register routers
    app.include_router(auth.router)
    app.include_router(recipes.router)
    app.include_router(ingredients.router)
    app.include_router(inventory.router)
    app.include_router(shopping_lists.router)

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint."""
        try:
            with request.app.state.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "error", "environment": settings.environment, "message": str(e)},
            )
        return {"status": "ok", "environment": settings.environment, "database": "ok"}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("larder.main:app", host=settings.host, port=settings.port)
