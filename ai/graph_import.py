"""Převod výsledku AI extrakce na uzly a hrany grafu.

AI vrací best-effort strukturu:
    {"nodes": [{"label", "type", "box_2d": [ymin, xmin, ymax, xmax]}],
     "connections": [{"source_label", "target_label"}]}
kde box_2d je v normalizovaném měřítku 0–1000 vůči rozměrům obrázku.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from building.models import BoundingBox3D, Floor, GraphEdge, GraphNode
from constants import (
    DEFAULT_EDGE_CAPACITY, DEFAULT_SAFETY_LEVEL, EXTRACTED_LABEL,
    EXTRACTED_NODE_CAPACITY, EXTRACTED_TRAVERSAL_TIME, NORMALIZED_SCALE, NodeType,
)
from geometry.spatial import floor_z_range
from utils.ids import next_id


class ExtractionError(RuntimeError):
    """AI extrakci nelze provést nebo vrátila nepoužitelnou odpověď."""


@dataclass
class MergeReport:
    """Souhrn jednoho sloučení výsledku extrakce do dokumentu."""
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)
    dropped_connections: int = 0  # Spojení, jejichž popisek se nepodařilo dohledat

    def summary(self) -> str:
        text = f"{len(self.nodes)} nodes, {len(self.edges)} edges"
        if self.dropped_connections:
            text += f" ({self.dropped_connections} connections dropped)"
        return text


def map_node_type(text: Any) -> str:
    """
    Převede volný text typu na uzavřený výčet NodeType pomocí podřetězců.

    Pořadí pravidel je důležité (např. "outdoor corridor" → corridor).
    """
    t = str(text).lower() if text else NodeType.CLASSROOM
    if "corridor" in t:
        return NodeType.CORRIDOR
    if "stair" in t:
        return NodeType.STAIRS
    if "out" in t:
        return NodeType.OUTDOOR
    if "office" in t:
        return NodeType.OFFICE
    if any(k in t for k in ("bath", "wc", "toilet", "restroom")):
        return NodeType.BATHROOM
    if "service" in t:
        return NodeType.SERVICE
    return NodeType.CLASSROOM


def normalized_box_to_pixels(box_2d: Sequence[float], floor: Floor) -> Tuple[float, float, float, float]:
    """
    Převede [ymin, xmin, ymax, xmax] v měřítku 0–1000 na pixely patra.

    Returns:
        (x1, y1, x2, y2) v pixelech obrázku
    """
    ymin, xmin, ymax, xmax = box_2d[:4]
    return (xmin / NORMALIZED_SCALE * floor.width,
            ymin / NORMALIZED_SCALE * floor.height,
            xmax / NORMALIZED_SCALE * floor.width,
            ymax / NORMALIZED_SCALE * floor.height)


def _entries(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    """Seznam záznamů pod klíčem; chybějící klíč je prázdný seznam."""
    items = data.get(key) or []
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise ExtractionError(f"AI extraction result: '{key}' must be a list of objects.")
    return items


def _label(value: Any) -> Optional[str]:
    """Popisek jako neprázdný text, jinak None."""
    text = str(value).strip() if value is not None else ""
    return text or None


def _box_2d(entry: Dict[str, Any]) -> List[float]:
    box = entry.get("box_2d")
    if (not isinstance(box, (list, tuple)) or len(box) < 4
            or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in box[:4])):
        raise ExtractionError(f"AI extraction result: invalid box_2d {box!r}.")
    return list(box[:4])


def build_graph_from_extraction(data: Dict[str, Any], floor: Floor,
                                id_factory: Callable[[str], str] = next_id) -> MergeReport:
    """
    Vytvoří nové uzly a hrany z výsledku extrakce pro dané patro.

    Spojení se přiřazují podle popisků; spojení s nedohledatelným popiskem
    se zahodí a započítají do `dropped_connections`.

    Raises:
        ExtractionError: Uzly nebo spojení nejsou seznam objektů, případně chybí box_2d
    """
    report = MergeReport()
    label_to_id: Dict[str, str] = {}
    z1, z2 = floor_z_range(floor.level)

    for n in _entries(data, "nodes"):
        node_id = id_factory("node")
        label = _label(n.get("label"))
        if label:
            label_to_id[label] = node_id
        x1, y1, x2, y2 = normalized_box_to_pixels(_box_2d(n), floor)
        report.nodes.append(GraphNode(
            id=node_id,
            label=label or EXTRACTED_LABEL,
            type=map_node_type(n.get("type")),
            capacity=EXTRACTED_NODE_CAPACITY,
            safety_level=DEFAULT_SAFETY_LEVEL,
            floor_levels=(floor.level,),
            bounding_box=BoundingBox3D(x1=x1, y1=y1, x2=x2, y2=y2, z1=z1, z2=z2).normalized(),
        ))

    for c in _entries(data, "connections"):
        source_id = label_to_id.get(_label(c.get("source_label")))
        target_id = label_to_id.get(_label(c.get("target_label")))
        if not source_id or not target_id:
            report.dropped_connections += 1
            continue
        report.edges.append(GraphEdge(
            id=id_factory("edge"),
            source=source_id,
            target=target_id,
            traversal_time=EXTRACTED_TRAVERSAL_TIME,
            capacity=DEFAULT_EDGE_CAPACITY,
            active=True,
            bidirectional=True,
        ))
    return report
