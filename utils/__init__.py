"""Drobné pomocné funkce."""
