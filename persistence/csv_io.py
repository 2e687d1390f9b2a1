"""Tabulkový export grafu: dvě nezávislé CSV tabulky (uzly a hrany)."""
import csv
import io
import os
from typing import Iterable, Tuple

from building.models import GraphEdge, GraphNode

NODE_COLUMNS = ["id", "label", "type", "x1", "y1", "z1", "x2", "y2", "z2", "capacity", "safetyLevel"]
EDGE_COLUMNS = ["id", "source", "target", "traversalTime", "capacity", "active", "bidirectional"]


def _bool(value: bool) -> str:
    return "true" if value else "false"


def nodes_to_csv(nodes: Iterable[GraphNode]) -> str:
    """Tabulka uzlů – hlavička a jeden řádek na uzel."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(NODE_COLUMNS)
    for n in nodes:
        b = n.bounding_box
        writer.writerow([n.id, n.label, n.type, b.x1, b.y1, b.z1, b.x2, b.y2, b.z2,
                         n.capacity, n.safety_level])
    return buf.getvalue()


def edges_to_csv(edges: Iterable[GraphEdge]) -> str:
    """Tabulka hran – hlavička a jeden řádek na hranu."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(EDGE_COLUMNS)
    for e in edges:
        writer.writerow([e.id, e.source, e.target, e.traversal_time, e.capacity,
                         _bool(e.active), _bool(e.bidirectional)])
    return buf.getvalue()


def export_csv(nodes: Iterable[GraphNode], edges: Iterable[GraphEdge], directory: str) -> Tuple[str, str]:
    """
    Zapíše nodes.csv a edges.csv do zvoleného adresáře.

    Returns:
        Cesty k oběma souborům
    """
    nodes_path = os.path.join(directory, "nodes.csv")
    edges_path = os.path.join(directory, "edges.csv")
    with open(nodes_path, "w", encoding="utf-8", newline="") as f:
        f.write(nodes_to_csv(nodes))
    with open(edges_path, "w", encoding="utf-8", newline="") as f:
        f.write(edges_to_csv(edges))
    print(f"[Export] CSV written to {directory}")
    return nodes_path, edges_path
