"""Prostorové pomocné funkce a projekce 3D pohledu."""
