import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_router
from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.core.rate_limit import configure_rate_limiting
from app.services.dispatch.dispatcher import CrackDispatcher
from app.services.lexicon.loader import LexiconLoader

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Load the lexicon and own the worker pool for the app's lifetime."""
        # Startup
        loader = LexiconLoader()
        app.state.dictionary = loader.load_dictionary(settings.dictionary_path)
        app.state.known_keys = loader.load_known_keys(settings.known_keys_path)

        dispatcher = CrackDispatcher(
            app.state.dictionary,
            max_workers=settings.worker_count,
            backend=settings.dispatcher_backend,
        )
        app.state.dispatcher = dispatcher.start()
        try:
            yield
        finally:
            # Shutdown
            dispatcher.shutdown()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Vigenère cryptanalysis API. Decrypt with a known key, or recover "
            "an unknown key by frequency analysis, dictionary recognition and "
            "hill-climbing."
        ),
        version="0.1.0",
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )
    app.dependency_overrides[get_settings] = lambda: settings
    configure_rate_limiting(app, settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API router
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {"message": "Vigenère Cipher API Server"}

    return app


app = create_app()


def run() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
