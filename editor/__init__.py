"""Relace editoru a stroj interakcí."""
