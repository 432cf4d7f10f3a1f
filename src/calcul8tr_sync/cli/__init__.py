"""calcul8tr-sync CLI.

Usage:
    calcul8tr-sync serve            Run the sync API server
    calcul8tr-sync status USER_ID   Show a user's stored sync version
    calcul8tr-sync export USER_ID   Dump a user's account data as JSON
"""

from calcul8tr_sync.cli.main import app, main

__all__ = ["app", "main"]
