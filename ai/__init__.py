"""AI extrakce grafu z obrázků půdorysů."""
