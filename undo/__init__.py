"""Undo/redo historie."""
