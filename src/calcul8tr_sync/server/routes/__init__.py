"""API routes for the calcul8tr-sync server."""

from calcul8tr_sync.server.routes.account import router as account_router
from calcul8tr_sync.server.routes.sync import router as sync_router

__all__ = [
    "account_router",
    "sync_router",
]
