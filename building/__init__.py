"""Datový model grafu budovy."""
