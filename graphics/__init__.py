"""Kreslení grafu a scéna 2D editoru (Qt)."""
