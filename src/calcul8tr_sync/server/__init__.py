"""HTTP API for calcul8tr-sync."""
