"""calcul8tr-sync CLI main entry point."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any, TypeVar

import typer

from calcul8tr_sync import __version__
from calcul8tr_sync.account.entitlements import EntitlementRepository
from calcul8tr_sync.account.service import AccountService
from calcul8tr_sync.store.base import DocumentStore
from calcul8tr_sync.store.factory import create_document_store
from calcul8tr_sync.sync.repository import SyncRepository
from calcul8tr_sync.utils.config import get_config

T = TypeVar("T")

app = typer.Typer(
    name="calcul8tr-sync",
    help="calcul8tr-sync - incremental cloud sync backend",
    no_args_is_help=True,
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _with_stores(action: Callable[[DocumentStore, DocumentStore], Awaitable[T]]) -> T:
    """Open both containers, run ``action`` and close them before the loop ends."""

    async def _run() -> T:
        config = get_config()
        opened: list[DocumentStore] = []
        try:
            sync_store = await create_document_store(config, config.sync_container_id)
            opened.append(sync_store)
            entitlements_store = await create_document_store(
                config, config.entitlements_container_id
            )
            opened.append(entitlements_store)
            return await action(sync_store, entitlements_store)
        finally:
            for store in opened:
                await store.close()

    return asyncio.run(_run())


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", "-h", help="Host to bind to")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port to bind to")] = None,
    reload: Annotated[
        bool, typer.Option("--reload", "-r", help="Enable auto-reload for development")
    ] = False,
    log_level: Annotated[str, typer.Option("--log-level", help="Logging level")] = "info",
) -> None:
    """Run the sync API server.

    Examples:
        calcul8tr-sync serve                    # Run on localhost:8000
        calcul8tr-sync serve -p 9000            # Run on port 9000
        calcul8tr-sync serve --host 0.0.0.0     # Expose to network
    """
    import uvicorn

    _configure_logging(log_level)
    config = get_config()
    bind_host = host or config.host
    bind_port = port or config.port

    typer.echo(f"Starting calcul8tr-sync on http://{bind_host}:{bind_port}")
    typer.echo(f"  Docs: http://{bind_host}:{bind_port}/docs")

    uvicorn.run(
        "calcul8tr_sync.server.app:create_app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        factory=True,
        log_level=log_level.lower(),
    )


@app.command()
def status(
    user_id: Annotated[str, typer.Argument(help="User whose sync state to inspect")],
) -> None:
    """Show the stored sync version and preset count for a user."""

    async def _status(sync_store: DocumentStore, _: DocumentStore) -> dict[str, Any]:
        read = await SyncRepository(sync_store).read_snapshot(user_id)
        snapshot = read.snapshot
        return {
            "source": read.source.value,
            "version": snapshot.version if snapshot else 0,
            "updatedAt": snapshot.updated_at if snapshot else None,
            "presets": len(snapshot.presets) if snapshot else 0,
        }

    result = _with_stores(_status)
    typer.echo(f"User:     {user_id}")
    typer.echo(f"Source:   {result['source']}")
    typer.echo(f"Version:  {result['version']}")
    typer.echo(f"Updated:  {result['updatedAt'] or '-'}")
    typer.echo(f"Presets:  {result['presets']}")


@app.command("export")
def export_account(
    user_id: Annotated[str, typer.Argument(help="User to export")],
) -> None:
    """Print everything stored for a user as JSON."""

    async def _export(sync_store: DocumentStore, entitlements_store: DocumentStore) -> dict[str, Any]:
        service = AccountService(SyncRepository(sync_store), EntitlementRepository(entitlements_store))
        return await service.export(user_id)

    typer.echo(json.dumps(_with_stores(_export), indent=2, default=str))


@app.command()
def version() -> None:
    """Show the installed version."""
    typer.echo(f"calcul8tr-sync {__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
