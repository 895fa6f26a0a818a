"""Main FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notekeeper.config.settings import settings
from notekeeper.config.database import Database
from notekeeper.controllers import note_controller, tag_controller, share_controller
from notekeeper.exceptions import DatabaseUnavailable
from notekeeper.middlewares.auth import AccessGateMiddleware
from notekeeper.utils.logger import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    database: Database = app.state.database

    try:
        await database.create_all()
    except DatabaseUnavailable as e:
        # Requests retry the connection on their own
        logger.error(f"Database not ready at startup: {e}")

    yield

    logger.info("Shutting down...")
    await database.dispose()


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Application factory."""
    setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        openapi_url=f"{settings.API_PREFIX}/openapi.json"
    )
    app.state.database = database or Database()

    # Added first so that CORS wraps it and answers preflights itself
    app.add_middleware(AccessGateMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all uncaught exceptions."""
        logger.exception(f"Uncaught exception on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred" if not settings.DEBUG else str(exc)
                }
            }
        )

    @app.get(f"{settings.API_PREFIX}/health", tags=["System"])
    async def health_check(request: Request):
        """Health check endpoint."""
        database_ok = await request.app.state.database.ping()
        return {
            "status": "ok" if database_ok else "degraded",
            "version": settings.APP_VERSION,
            "database": "connected" if database_ok else "unavailable",
        }

    app.include_router(note_controller.router, prefix=settings.API_PREFIX)
    app.include_router(tag_controller.router, prefix=settings.API_PREFIX)
    app.include_router(tag_controller.category_router, prefix=settings.API_PREFIX)
    app.include_router(share_controller.router, prefix=settings.API_PREFIX)

    return app


app = create_app()


def main():
    import uvicorn
    uvicorn.run(
        "notekeeper.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )


if __name__ == "__main__":
    main()
