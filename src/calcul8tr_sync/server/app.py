"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from calcul8tr_sync import __version__
from calcul8tr_sync.server.dependencies import (
    get_app_config,
    get_entitlements_store,
    get_sync_store,
)
from calcul8tr_sync.server.models import HealthResponse
from calcul8tr_sync.server.routes import account_router, sync_router
from calcul8tr_sync.store.base import DocumentStore
from calcul8tr_sync.store.factory import create_document_store
from calcul8tr_sync.utils.config import Config, get_config

logger = logging.getLogger(__name__)


def create_app(
    config: Config | None = None,
    *,
    sync_store: DocumentStore | None = None,
    entitlements_store: DocumentStore | None = None,
    title: str = "calcul8tr-sync",
    description: str = "Incremental cloud sync for calcul8tr presets and sales",
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Stores are built once in the lifespan handler and live for the process
    lifetime. Passing stores in skips construction; the caller then owns
    their lifecycle.

    Args:
        config: Application configuration (default: loaded from environment)
        sync_store: Pre-built store for the sync container
        entitlements_store: Pre-built store for the entitlements container
        title: API title
        description: API description

    Returns:
        Configured FastAPI application
    """
    app_config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        owned: list[DocumentStore] = []

        if sync_store is not None:
            app.state.sync_store = sync_store
        else:
            app.state.sync_store = await create_document_store(
                app_config, app_config.sync_container_id
            )
            owned.append(app.state.sync_store)

        if entitlements_store is not None:
            app.state.entitlements_store = entitlements_store
        else:
            app.state.entitlements_store = await create_document_store(
                app_config, app_config.entitlements_container_id
            )
            owned.append(app.state.entitlements_store)

        logger.info(
            "calcul8tr-sync %s started (env=%s, database=%s)",
            __version__,
            app_config.api_env,
            app_config.database_id,
        )
        try:
            yield
        finally:
            for store in owned:
                await store.close()

    app = FastAPI(
        title=title,
        description=description,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    is_wildcard = app_config.allowed_origins == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.allowed_origins,
        allow_credentials=not is_wildcard,  # Don't allow creds with wildcard
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "x-user-id"],
        max_age=86400,
    )

    async def _sync_store() -> DocumentStore:
        store: DocumentStore = app.state.sync_store
        return store

    async def _entitlements_store() -> DocumentStore:
        store: DocumentStore = app.state.entitlements_store
        return store

    app.dependency_overrides[get_app_config] = lambda: app_config
    app.dependency_overrides[get_sync_store] = _sync_store
    app.dependency_overrides[get_entitlements_store] = _entitlements_store

    app.include_router(sync_router)
    app.include_router(account_router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    @app.get("/", tags=["health"])
    async def root() -> dict[str, str]:
        """Root endpoint with API info."""
        return {
            "name": title,
            "description": description,
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    return app
