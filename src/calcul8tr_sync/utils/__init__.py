"""Utility modules for calcul8tr-sync."""
