"""FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request

from recordgate.api.endpoints import create_collection_router, register_error_handlers
from recordgate.auth import JWTService, Session, SessionResolver
from recordgate.config import Settings
from recordgate.hooks import register_builtin_hooks
from recordgate.metadata.loader import ResourceLoader
from recordgate.metadata.validator import validate_resources_dir
from recordgate.persistence import StoreFactory, create_store_factory
from recordgate.resources.collection import Collection, build_collections

logger = logging.getLogger(__name__)


def _load_collections(settings: Settings) -> tuple[dict[str, Collection], StoreFactory]:
    """Load resource YAML and build collections on the configured stores."""
    register_builtin_hooks()
    settings.import_hook_modules()

    # Validate resource files (warn on errors, loader raises on fatal ones)
    for issue in validate_resources_dir(settings.resources_path):
        if issue.severity == "error":
            logger.error("Resource schema error: %s", issue)
        else:
            logger.warning("Resource schema warning: %s", issue)

    loader = ResourceLoader(settings.resources_path)
    loader.load_all()

    store_factory = create_store_factory(settings.database)
    configs = [loader.resources[name] for name in loader.list_resources()]
    return build_collections(configs, store_factory), store_factory


def create_app(
    settings: Settings | None = None,
    collections: list[Collection] | None = None,
) -> FastAPI:
    """Create the RecordGate application.

    Args:
        settings: Runtime settings (read from the environment on startup
            when omitted)
        collections: Prebuilt collections to serve instead of the ones
            declared under ``settings.resources_path``
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize on startup, cleanup on shutdown."""
        nonlocal settings
        if settings is None:
            settings = Settings.from_env()

        store_factory: StoreFactory | None = None
        if collections is not None:
            served = {c.name: c for c in collections}
        else:
            served, store_factory = _load_collections(settings)

        resolver = SessionResolver(JWTService(settings.secret_key), settings.root_key)

        def get_session(request: Request) -> Session:
            return resolver.resolve(request.headers)

        for collection in served.values():
            app.include_router(create_collection_router(collection, get_session))
            logger.info("Serving %s", collection.path)

        app.state.collections = served
        yield

        # Cleanup
        if store_factory:
            store_factory.close()

    app = FastAPI(title="RecordGate API", lifespan=lifespan)
    register_error_handlers(app)

    @app.get("/_status")
    async def status(request: Request) -> dict[str, Any]:
        served = getattr(request.app.state, "collections", {})
        return {
            "status": "ok",
            "resources": sorted(c.path for c in served.values()),
        }

    return app


app = create_app()
