"""Generování vlastních ikon pro toolbar.

Vytváří vektorové ikony přímo v kódu pomocí QPainter pro:
- Nástroje editoru (select, add node, add edge)
- Akce (delete, 2D/3D pohled, AI extrakce)
"""
from PySide6.QtCore import Qt, QRectF, QPointF
from PySide6.QtGui import QIcon, QPixmap, QPainter, QPen, QPainterPath, QPolygonF, QColor


def icon_shape(kind: str, size: int = 22) -> QIcon:
    """
    Vytvoří vektorovou ikonu pro daný nástroj/akci.

    Args:
        kind: Typ ikony ("cursor", "node", "edge", "delete", "plan", "building", "ai")
        size: Velikost ikony v pixelech (výchozí 22)

    Returns:
        QIcon s vykreslenou ikonou
    """
    pm = QPixmap(size, size)
    pm.fill(Qt.transparent)
    p = QPainter(pm)
    p.setRenderHint(QPainter.Antialiasing)
    p.setPen(QPen(Qt.black, 2))
    p.setBrush(Qt.NoBrush)
    s = float(size)

    if kind == "cursor":
        # šipka kurzoru
        arrow = QPolygonF([
            QPointF(s * 0.25, s * 0.15), QPointF(s * 0.25, s * 0.80),
            QPointF(s * 0.42, s * 0.64), QPointF(s * 0.55, s * 0.88),
            QPointF(s * 0.65, s * 0.83), QPointF(s * 0.52, s * 0.59),
            QPointF(s * 0.75, s * 0.59),
        ])
        p.setPen(QPen(Qt.black, 1))
        p.setBrush(Qt.black)
        p.drawPolygon(arrow)

    elif kind == "node":
        p.setBrush(QColor(59, 130, 246, 102))
        p.drawRect(QRectF(3, 5, s - 6, s - 10))

    elif kind == "edge":
        r = 3.0
        a, b = QPointF(5, s - 5), QPointF(s - 5, 5)
        p.drawLine(a, b)
        p.setBrush(Qt.black)
        p.drawEllipse(a, r, r)
        p.drawEllipse(b, r, r)

    elif kind == "delete":
        # červený křížek
        p.setPen(QPen(Qt.red, 3, Qt.SolidLine, Qt.RoundCap))
        m = s * 0.25
        p.drawLine(QPointF(m, m), QPointF(s - m, s - m))
        p.drawLine(QPointF(s - m, m), QPointF(m, s - m))

    elif kind == "plan":
        # půdorys: rám s příčkami
        p.drawRect(QRectF(3, 3, s - 6, s - 6))
        p.drawLine(QPointF(s / 2, 3), QPointF(s / 2, s * 0.6))
        p.drawLine(QPointF(3, s * 0.6), QPointF(s * 0.75, s * 0.6))

    elif kind == "building":
        # tři šikmo posunuté vrstvy
        for i in range(3):
            y = s * 0.70 - i * s * 0.22
            layer = QPolygonF([
                QPointF(s * 0.5, y - s * 0.12), QPointF(s - 3, y),
                QPointF(s * 0.5, y + s * 0.12), QPointF(3, y),
            ])
            p.drawPolygon(layer)

    elif kind == "ai":
        # čtyřcípá jiskra
        path = QPainterPath(QPointF(s / 2, 2))
        path.quadTo(s / 2, s / 2, s - 2, s / 2)
        path.quadTo(s / 2, s / 2, s / 2, s - 2)
        path.quadTo(s / 2, s / 2, 2, s / 2)
        path.quadTo(s / 2, s / 2, s / 2, 2)
        p.setPen(QPen(QColor("#6366F1"), 1))
        p.setBrush(QColor("#6366F1"))
        p.drawPath(path)

    p.end()
    return QIcon(pm)


def icon_std(widget, sp):
    """Nativní systémová ikonka (QStyle)."""
    return widget.style().standardIcon(sp)
