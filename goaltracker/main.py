import sys
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from goaltracker import __version__
from goaltracker.config import get_settings
from goaltracker.utils.logging_config import setup_logging
from goaltracker.utils.logger import get_logger
from goaltracker.utils.error_handling import register_exception_handlers
from goaltracker.middleware.logging_middleware import log_requests
from goaltracker.middleware.security_middleware import SecurityHeadersMiddleware
from goaltracker.services.database_service import DatabaseService, init_database
from goaltracker.services.ai_client import AIPlanClient
from goaltracker.routers import auth, goals, tasks, health

# Setup logging configuration
setup_logging()
logger = get_logger(__name__)


def validate_startup(settings):
    """Log configuration problems found at startup."""
    issues = settings.validate_configuration()
    if issues:
        logger.warning(f"Configuration issues found: {issues}")
    else:
        logger.info("✅ Configuration validation passed")


def create_app(database_service: Optional[DatabaseService] = None) -> FastAPI:
    """Build the application and wire its storage and AI collaborators."""
    settings = get_settings()

    app = FastAPI(
        title="Goal Tracker API",
        description="Goals, tasks and derived progress for authenticated users.",
        version=__version__,
    )

    app.state.database_service = database_service or DatabaseService(settings)
    app.state.ai_client = AIPlanClient(settings) if settings.is_openai_configured else None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.cors_config["allow_credentials"],
        allow_methods=settings.cors_config["allow_methods"],
        allow_headers=settings.cors_config["allow_headers"],
        expose_headers=settings.cors_config["expose_headers"],
        max_age=settings.cors_config["max_age"]
    )
    app.add_middleware(SecurityHeadersMiddleware)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        return await log_requests(request, call_next)

    register_exception_handlers(app)

    for router in (auth.router, goals.router, tasks.router, health.router):
        app.include_router(router)

    @app.on_event("startup")
    async def startup_event():
        """Open the database; an unreachable database aborts startup."""
        validate_startup(settings)
        try:
            init_database(app.state.database_service)
        except Exception as e:
            logger.error(f"❌ Failed to initialize database: {e}")
            raise

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.database_service.close()
        if app.state.ai_client is not None:
            await app.state.ai_client.close()

    @app.get("/")
    async def root():
        return {
            "message": "Goal Tracker API",
            "version": __version__,
            "docs": "/docs",
        }

    return app


app = create_app()


def main():
    """Console entry point: check storage, then serve."""
    import uvicorn

    settings = get_settings()
    try:
        init_database(app.state.database_service)
    except Exception as e:
        logger.error(f"❌ Cannot start without a database: {e}")
        sys.exit(1)

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
