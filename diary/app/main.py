import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from diary.app.api.v1.router import api_router
from diary.app.config import Settings, get_settings
from diary.app.core.exceptions import register_exception_handlers
from diary.app.core.logging import configure_logging
from diary.app.database import DiaryStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[DiaryStore] = None) -> FastAPI:
    settings = settings or get_settings()
    store = store or DiaryStore(settings)
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s", settings.app_name)
        # Fails fast with ConfigurationError when DATABASE_URL is missing
        store.connect()
        if settings.gratitude_limit:
            logger.info("Gratitude list capped at %d items", settings.gratitude_limit)
        else:
            logger.info("Gratitude list is uncapped")
        yield
        logger.info("Shutting down %s", settings.app_name)
        store.dispose()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        description="Daily diary entries with mood tracking",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint."""
        return {"status": "healthy", "store": request.app.state.store.state}

    # Include all API routes
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("diary.app.main:app", host="0.0.0.0", port=8000, reload=True)
