"""Modul pro import/export dokumentu grafu budovy do/z JSON formátu (persistence).

Zajišťuje ukládání a načítání kompletního stavu: metadata, patra (včetně
vložených obrázků), uzly s 3D boxy a hrany. Import je atomický – nejdřív se
celý dokument zvaliduje a převede, teprve pak se může nahradit aktuální stav.
"""
import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from building.document import GraphDocument
from building.models import Floor, GraphEdge, GraphNode
from constants import APP_NAME

REQUIRED_FIELDS = ("floors", "nodes", "edges")


class DocumentFormatError(ValueError):
    """Importovaný dokument nemá očekávanou strukturu."""


def document_to_dict(document: GraphDocument) -> Dict[str, Any]:
    """
    Převede dokument na slovník (pro JSON export).

    Returns:
        Slovník s klíči "metadata", "floors", "nodes" a "edges"
    """
    return {
        "metadata": {
            "generated": datetime.now(timezone.utc).isoformat(),
            "app": APP_NAME,
        },
        "floors": [f.to_dict() for f in document.floors],
        "nodes": [n.to_dict() for n in document.nodes],
        "edges": [e.to_dict() for e in document.edges],
    }


def parse_document(data: Any) -> Tuple[List[Floor], List[GraphNode], List[GraphEdge]]:
    """
    Zvaliduje a převede slovník (z JSON) na patra, uzly a hrany.

    Raises:
        DocumentFormatError: Chybí povinné pole, záznam je neúplný nebo má hodnota špatný typ
    """
    if not isinstance(data, dict):
        raise DocumentFormatError("Invalid JSON format: top level must be an object.")
    missing = [k for k in REQUIRED_FIELDS if k not in data]
    if missing:
        raise DocumentFormatError(f"Invalid JSON format: Missing required fields ({', '.join(missing)}).")
    for key in REQUIRED_FIELDS:
        if not isinstance(data[key], list):
            raise DocumentFormatError(f"Invalid JSON format: '{key}' must be a list.")

    try:
        floors = [Floor.from_dict(f) for f in data["floors"]]
        nodes = [GraphNode.from_dict(n) for n in data["nodes"]]
        edges = [GraphEdge.from_dict(e) for e in data["edges"]]
    except (KeyError, TypeError, AttributeError) as e:
        raise DocumentFormatError(f"Invalid JSON format: malformed entry ({e}).") from e
    _check_types(floors, nodes, edges)
    return floors, nodes, edges


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_types(floors: List[Floor], nodes: List[GraphNode], edges: List[GraphEdge]) -> None:
    """
    Ověří typy hodnot, na kterých závisí geometrie a vrstvení pater.

    Raises:
        DocumentFormatError: Některá hodnota má nesprávný typ
    """
    def fail(what: str, item_id: Any) -> None:
        raise DocumentFormatError(f"Invalid JSON format: {what} of {item_id!r}.")

    for f in floors:
        if not isinstance(f.id, str):
            fail("floor id must be a string", f.id)
        if not _is_int(f.level):
            fail("level must be an integer", f.id)
        if not (_is_number(f.width) and _is_number(f.height)):
            fail("width and height must be numbers", f.id)
        if not (isinstance(f.name, str) and isinstance(f.image_url, str)):
            fail("name and imageUrl must be strings", f.id)
    for n in nodes:
        if not isinstance(n.id, str):
            fail("node id must be a string", n.id)
        box = n.bounding_box
        if not all(_is_number(getattr(box, k)) for k in ("x1", "y1", "z1", "x2", "y2", "z2")):
            fail("boundingBox coordinates must be numbers", n.id)
        if not all(_is_int(level) for level in n.floor_levels):
            fail("floorLevels must be integers", n.id)
        if not (_is_number(n.capacity) and _is_number(n.safety_level)):
            fail("capacity and safetyLevel must be numbers", n.id)
        if not (isinstance(n.label, str) and isinstance(n.type, str)):
            fail("label and type must be strings", n.id)
    for e in edges:
        if not all(isinstance(v, str) for v in (e.id, e.source, e.target)):
            fail("edge id, source and target must be strings", e.id)
        if not (_is_number(e.traversal_time) and _is_number(e.capacity)):
            fail("traversalTime and capacity must be numbers", e.id)
        if not (isinstance(e.active, bool) and isinstance(e.bidirectional, bool)):
            fail("active and bidirectional must be booleans", e.id)


def loads_document(text: str) -> Tuple[List[Floor], List[GraphNode], List[GraphEdge]]:
    """Načte a zvaliduje dokument z JSON textu."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentFormatError(f"Error parsing JSON file: {e}") from e
    return parse_document(data)


def save_document_as_json(document: GraphDocument, path: str) -> None:
    """Uloží dokument do JSON souboru (UTF-8, odsazení 2)."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document_to_dict(document), f, ensure_ascii=False, indent=2)
    print(f"[Export] Saved {len(document.nodes)} nodes, {len(document.edges)} edges to {os.path.basename(path)}")


def load_document_from_json(path: str) -> Tuple[List[Floor], List[GraphNode], List[GraphEdge]]:
    """
    Načte dokument z JSON souboru.

    Raises:
        DocumentFormatError: Soubor není platný dokument
    """
    with open(path, "rb") as f:
        raw = f.read()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DocumentFormatError(f"Error reading JSON file: not valid UTF-8 ({e}).") from e
    floors, nodes, edges = loads_document(text)
    print(f"[Import] Loaded {len(floors)} floors, {len(nodes)} nodes, {len(edges)} edges from {os.path.basename(path)}")
    return floors, nodes, edges
