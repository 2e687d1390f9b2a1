"""Generátor unikátních ID pro patra, uzly a hrany."""
import uuid


def next_id(prefix: str) -> str:
    """
    Vygeneruje nové unikátní ID s daným prefixem.

    Používá UUID4, aby se ID nesrazila s prvky načtenými z jiného dokumentu.

    Args:
        prefix: Prefix ID (např. "node", "edge", "floor")

    Returns:
        Unikátní ID ve formátu "{prefix}_{hex}" (např. "node_3f2a9c1b7d4e")
    """
    return f"{prefix}_{uuid.uuid4().hex[:12]}"
