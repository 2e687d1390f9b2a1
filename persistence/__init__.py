"""Import/export dokumentu (JSON, CSV)."""
