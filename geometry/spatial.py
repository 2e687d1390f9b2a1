"""Prostorové pomocné funkce: obdélníky, příslušnost k patrům, hit-testing.

Všechny funkce jsou čisté (bez stavu) a používá je jak stroj interakcí,
tak projekční/vrstvicí engine.
"""
from __future__ import annotations
import math
from typing import Iterable, List, Optional, Sequence, Tuple

from building.models import BoundingBox3D, GraphEdge, GraphNode
from constants import EDGE_HIT_TOLERANCE, FLOOR_HEIGHT

# Obdélník jako (x, y, w, h) – w a h jsou vždy nezáporné
Rect = Tuple[float, float, float, float]


def normalize_rect(ax: float, ay: float, bx: float, by: float) -> Rect:
    """Obdélník mezi kotvou a aktuálním bodem bez ohledu na směr tažení."""
    return min(ax, bx), min(ay, by), abs(bx - ax), abs(by - ay)


def rect_overlaps_box(rect: Rect, box: BoundingBox3D) -> bool:
    """Osově zarovnaný překryv (ne obsažení) obdélníku a boxu v rovině x/y."""
    x, y, w, h = rect
    return not (box.x2 < x or box.x1 > x + w or box.y2 < y or box.y1 > y + h)


def box_contains(box: BoundingBox3D, x: float, y: float) -> bool:
    return box.x1 <= x <= box.x2 and box.y1 <= y <= box.y2


# ========== Patra ==========

def floor_z_range(level: int, floor_height: float = FLOOR_HEIGHT) -> Tuple[float, float]:
    """Vertikální rozsah patra [level*H, (level+1)*H)."""
    return level * floor_height, (level + 1) * floor_height


def in_floor_extent(z: float, level: int, floor_height: float = FLOOR_HEIGHT) -> bool:
    """Zda z leží v polouzavřeném rozsahu patra."""
    lo, hi = floor_z_range(level, floor_height)
    return lo <= z < hi


def spanned_levels(z1: float, z2: float, floor_height: float = FLOOR_HEIGHT) -> Tuple[int, ...]:
    """
    Všechny úrovně, přes které zasahuje z-rozsah [z1, z2).

    Např. schodiště 0–600 při H=300 leží na patrech 0 a 1.
    """
    first = math.floor(z1 / floor_height)
    last = math.ceil(z2 / floor_height) - 1
    return tuple(range(first, max(first, last) + 1))


def is_on_floor(node: GraphNode, level: int, floor_height: float = FLOOR_HEIGHT) -> bool:
    """
    Filtr 2D editoru: uzel je na patře, pokud má patro ve floor_levels
    nebo jeho z-rozsah ostře překrývá rozsah patra.
    """
    lo, hi = floor_z_range(level, floor_height)
    box = node.bounding_box
    return level in node.floor_levels or (box.z1 < hi and box.z2 > lo)


def nodes_on_floor(nodes: Iterable[GraphNode], level: int,
                   floor_height: float = FLOOR_HEIGHT) -> List[GraphNode]:
    return [n for n in nodes if is_on_floor(n, level, floor_height)]


def edges_between(edges: Iterable[GraphEdge], nodes: Sequence[GraphNode]) -> List[GraphEdge]:
    """Hrany, jejichž oba konce jsou v zadané množině uzlů."""
    ids = {n.id for n in nodes}
    return [e for e in edges if e.source in ids and e.target in ids]


# ========== Hit-testing ==========

def node_at(nodes: Sequence[GraphNode], x: float, y: float) -> Optional[GraphNode]:
    """Nejvrchnější uzel (poslední v pořadí vykreslení), jehož box obsahuje bod."""
    for node in reversed(nodes):
        if box_contains(node.bounding_box, x, y):
            return node
    return None


def point_segment_distance(px: float, py: float, ax: float, ay: float,
                           bx: float, by: float) -> float:
    """Vzdálenost bodu od úsečky AB."""
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(px - ax, py - ay)
    t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / length_sq))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def edge_at(edges: Sequence[GraphEdge], nodes: Sequence[GraphNode], x: float, y: float,
            tolerance: float = EDGE_HIT_TOLERANCE) -> Optional[GraphEdge]:
    """Nejvrchnější hrana, jejíž úsečka mezi středy uzlů je blíž než tolerance."""
    by_id = {n.id: n for n in nodes}
    for edge in reversed(edges):
        src, dst = by_id.get(edge.source), by_id.get(edge.target)
        if src is None or dst is None:
            continue
        (ax, ay), (bx, by) = src.bounding_box.center, dst.bounding_box.center
        if point_segment_distance(x, y, ax, ay, bx, by) <= tolerance:
            return edge
    return None
