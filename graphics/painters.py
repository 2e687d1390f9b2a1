"""Kreslení prvků grafu budovy pomocí QPainter.

Funkce sdílí 2D editor (souřadnice scény = pixely obrázku patra) i 3D pohled
(promítnuté body). Nekreslí se přes QGraphicsItem – scéna celý graf překreslí
z aktuálního stavu relace.
"""
from __future__ import annotations
import math
from typing import Iterable, Optional, Sequence, Tuple

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPen, QPolygonF

from building.models import BoundingBox3D, GraphEdge, GraphNode
from constants import HANDLE_SIZE, NodeType
from graphics.resize import handle_positions

Point = Tuple[float, float]

# Výplň (poloprůhledná) podle typu prostoru
NODE_FILL = {
    NodeType.CLASSROOM: QColor(59, 130, 246, 102),
    NodeType.CORRIDOR: QColor(16, 185, 129, 102),
    NodeType.STAIRS: QColor(245, 158, 11, 102),
    NodeType.OUTDOOR: QColor(107, 114, 128, 102),
    NodeType.OFFICE: QColor(139, 92, 246, 102),
    NodeType.SERVICE: QColor(236, 72, 153, 102),
    NodeType.BATHROOM: QColor(6, 182, 212, 102),
}
NODE_BORDER = {
    NodeType.CLASSROOM: QColor("#2563EB"),
    NodeType.CORRIDOR: QColor("#059669"),
    NodeType.STAIRS: QColor("#D97706"),
    NodeType.BATHROOM: QColor("#0891B2"),
}
DEFAULT_FILL = QColor(200, 200, 200, 102)
DEFAULT_BORDER = QColor("#4B5563")

SELECTED_COLOR = QColor("#4F46E5")
HOVER_COLOR = QColor("#F59E0B")
EDGE_COLOR = QColor("#374151")
INACTIVE_EDGE_COLOR = QColor("#EF4444")
PENDING_EDGE_COLOR = QColor("#6366F1")


def node_fill(node_type: str) -> QColor:
    return NODE_FILL.get(node_type, DEFAULT_FILL)


def node_border(node_type: str) -> QColor:
    return NODE_BORDER.get(node_type, DEFAULT_BORDER)


def _pen(color: QColor, width: float, dashed: bool = False) -> QPen:
    # cosmetic pero = stejná tloušťka bez ohledu na zoom
    pen = QPen(color, width)
    pen.setCosmetic(True)
    if dashed:
        pen.setStyle(Qt.DashLine)
    return pen


def box_rect(box: BoundingBox3D) -> QRectF:
    return QRectF(box.x1, box.y1, box.width, box.height)


def paint_node(painter: QPainter, node: GraphNode, selected: bool = False, hover: bool = False) -> None:
    """Obdélník uzlu s výplní podle typu a popiskem ve štítku uprostřed."""
    rect = box_rect(node.bounding_box)
    if selected:
        pen = _pen(SELECTED_COLOR, 3)
    elif hover:
        pen = _pen(HOVER_COLOR, 3)
    else:
        pen = _pen(node_border(node.type), 1)
    painter.setPen(pen)
    painter.setBrush(QBrush(node_fill(node.type)))
    painter.drawRect(rect)
    paint_label(painter, QPointF(rect.center()), node.label)


def paint_label(painter: QPainter, pos: QPointF, text: str, size: int = 10) -> None:
    """Bílý text na tmavém poloprůhledném štítku vystředěný na pozici."""
    if not text:
        return
    font = QFont("Arial", size)
    painter.setFont(font)
    metrics = painter.fontMetrics()
    w = metrics.horizontalAdvance(text) + 8
    h = metrics.height() + 2
    label_rect = QRectF(pos.x() - w / 2, pos.y() - h / 2, w, h)
    painter.setPen(Qt.NoPen)
    painter.setBrush(QColor(0, 0, 0, 178))
    painter.drawRoundedRect(label_rect, 3, 3)
    painter.setPen(Qt.white)
    painter.drawText(label_rect, Qt.AlignCenter, text)


def paint_edge(painter: QPainter, edge: GraphEdge, start: Point, end: Point,
               selected: bool = False, show_time: bool = True) -> None:
    """
    Úsečka hrany mezi dvěma body.

    Neaktivní hrana je červená přerušovaná; jednosměrná má šipku u cíle.
    """
    a, b = QPointF(*start), QPointF(*end)
    if selected:
        pen = _pen(SELECTED_COLOR, 4)
    elif edge.active:
        pen = _pen(EDGE_COLOR, 2)
    else:
        pen = _pen(INACTIVE_EDGE_COLOR, 2, dashed=True)
    painter.setPen(pen)
    painter.drawLine(a, b)

    if not edge.bidirectional:
        _paint_arrow_head(painter, a, b, pen.color())

    if show_time:
        mid = QPointF((a.x() + b.x()) / 2, (a.y() + b.y()) / 2)
        paint_label(painter, mid, f"{edge.traversal_time:g}s", size=8)


def _paint_arrow_head(painter: QPainter, a: QPointF, b: QPointF, color: QColor, size: float = 10) -> None:
    angle = math.atan2(b.y() - a.y(), b.x() - a.x())
    left = QPointF(b.x() - size * math.cos(angle - math.pi / 7), b.y() - size * math.sin(angle - math.pi / 7))
    right = QPointF(b.x() - size * math.cos(angle + math.pi / 7), b.y() - size * math.sin(angle + math.pi / 7))
    painter.setPen(Qt.NoPen)
    painter.setBrush(color)
    painter.drawPolygon(QPolygonF([b, left, right]))


def paint_handles(painter: QPainter, box: BoundingBox3D, size: float = HANDLE_SIZE) -> None:
    """Čtyři rohová táhla vybraného uzlu."""
    painter.setPen(_pen(SELECTED_COLOR, 1))
    painter.setBrush(Qt.white)
    half = size / 2
    for hx, hy in handle_positions(box).values():
        painter.drawRect(QRectF(hx - half, hy - half, size, size))


def paint_preview_rect(painter: QPainter, rect: Tuple[float, float, float, float],
                       strong: bool = False) -> None:
    """Náhled nového uzlu (strong) nebo výběrového obdélníku."""
    x, y, w, h = rect
    painter.setPen(_pen(SELECTED_COLOR, 2 if strong else 1, dashed=True))
    painter.setBrush(QColor(99, 102, 241, 51 if strong else 25))
    painter.drawRect(QRectF(x, y, w, h))


def paint_pending_edge(painter: QPainter, start: Point, end: Point) -> None:
    """Dočasná čára od zdroje rozpracované hrany ke kurzoru."""
    painter.setPen(_pen(PENDING_EDGE_COLOR, 2, dashed=True))
    painter.drawLine(QPointF(*start), QPointF(*end))


def paint_footprint(painter: QPainter, node: GraphNode, corners: Sequence[Point],
                    selected: bool = False) -> None:
    """Promítnutý půdorys uzlu ve 3D pohledu (čtyřúhelník)."""
    painter.setPen(_pen(SELECTED_COLOR if selected else node_border(node.type), 2 if selected else 1))
    painter.setBrush(QBrush(node_fill(node.type)))
    painter.drawPolygon(QPolygonF([QPointF(x, y) for x, y in corners]))


def paint_graph(painter: QPainter, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge],
                selected_nodes: Iterable[str] = (), selected_edge: Optional[str] = None,
                hover_node: Optional[str] = None) -> None:
    """Hrany (pod uzly) a uzly jednoho patra ve 2D editoru."""
    nodes = list(nodes)
    selected_nodes = set(selected_nodes)
    by_id = {n.id: n for n in nodes}
    for e in edges:
        src, dst = by_id.get(e.source), by_id.get(e.target)
        if src is None or dst is None:
            continue
        paint_edge(painter, e, src.bounding_box.center, dst.bounding_box.center, selected=e.id == selected_edge)
    for n in nodes:
        paint_node(painter, n, selected=n.id in selected_nodes, hover=n.id == hover_node)
