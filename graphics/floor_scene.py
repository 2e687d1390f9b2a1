"""Scéna 2D editoru jednoho patra.

Třída rozšiřuje QGraphicsScene: na pozadí kreslí obrázek aktivního patra
a v popředí celý graf (uzly, hrany, táhla, náhledy) přímo ze stavu relace.
Souřadnice scény odpovídají pixelům obrázku patra.
"""
from __future__ import annotations
from typing import Dict, Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QImage, QPainter, QPixmap
from PySide6.QtWidgets import QGraphicsScene

from editor.session import EditorSession
from graphics.painters import (
    paint_graph, paint_handles, paint_pending_edge, paint_preview_rect,
)
from utils.data_url import from_data_url


class FloorScene(QGraphicsScene):
    def __init__(self, session: EditorSession, parent=None):
        """Inicializuje scénu nad relací editoru."""
        super().__init__(parent)
        self.session = session
        self._pixmaps: Dict[str, QPixmap] = {}  # Cache dekódovaných obrázků podle ID patra
        self.hover_node_id: Optional[str] = None  # Uzel pod kurzorem (cíl hrany)
        self.sync_floor()

    def sync_floor(self) -> None:
        """Nastaví rozměr scény podle aktivního patra a zahodí cache smazaných pater."""
        floor = self.session.active_floor
        known = {f.id for f in self.session.document.floors}
        for floor_id in list(self._pixmaps):
            if floor_id not in known:
                del self._pixmaps[floor_id]
        if floor is None:
            self.setSceneRect(QRectF(0, 0, 800, 600))
        else:
            self.setSceneRect(QRectF(0, 0, floor.width, floor.height))
        self.update()

    def floor_pixmap(self) -> Optional[QPixmap]:
        floor = self.session.active_floor
        if floor is None or not floor.image_url:
            return None
        if floor.id not in self._pixmaps:
            try:
                image = QImage.fromData(from_data_url(floor.image_url))
            except ValueError:
                image = QImage()
            self._pixmaps[floor.id] = QPixmap.fromImage(image)
        return self._pixmaps[floor.id]

    def drawBackground(self, painter: QPainter, rect: QRectF) -> None:
        """Vykreslí obrázek aktivního patra (nebo prázdnou plochu)."""
        super().drawBackground(painter, rect)
        pixmap = self.floor_pixmap()
        if pixmap is None or pixmap.isNull():
            painter.fillRect(self.sceneRect(), Qt.white)
            return
        painter.drawPixmap(QPointF(0, 0), pixmap)

    def drawForeground(self, painter: QPainter, rect: QRectF) -> None:
        """Vykreslí graf aktivního patra a stav rozpracované interakce."""
        super().drawForeground(painter, rect)
        engine = self.session.interaction
        selection = self.session.selection
        nodes = engine.visible_nodes()
        painter.setRenderHint(QPainter.Antialiasing)
        paint_graph(painter, nodes, engine.visible_edges(nodes),
                    selected_nodes=selection.node_ids, selected_edge=selection.edge_id,
                    hover_node=self.hover_node_id)

        if engine.resize_handles_visible():
            node = self.session.document.get_node(selection.primary_node_id())
            if node is not None and node in nodes:
                paint_handles(painter, node.bounding_box)

        if engine.preview_rect is not None:
            paint_preview_rect(painter, engine.preview_rect, strong=True)
        if engine.selection_rect is not None:
            paint_preview_rect(painter, engine.selection_rect)

        source = self.session.document.get_node(engine.edge_source_id)
        if source is not None and engine.pointer_pos is not None:
            paint_pending_edge(painter, source.bounding_box.center, engine.pointer_pos)
