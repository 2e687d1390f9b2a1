from __future__ import annotations
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPainter
from PySide6.QtWidgets import QGraphicsView

from constants import Mode
from graphics.floor_scene import FloorScene
from geometry.spatial import node_at


class EditorView(QGraphicsView):
    """
    2D pohled na aktivní patro.

    Události myši převádí do souřadnic scény (pixely obrázku) a předává je
    stroji interakcí relace. Vlastní výběr a tažení Qt se nepoužívá.
    """

    documentChanged = Signal()  # Dokument nebo výběr se změnil (panely se mají obnovit)
    zoomRequested = Signal(int)  # +1 / -1 při Ctrl + kolečko

    def __init__(self, scene: FloorScene, app):
        super().__init__(scene)
        self.app = app
        self.setRenderHints(self.renderHints() | QPainter.Antialiasing | QPainter.SmoothPixmapTransform)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setViewportUpdateMode(QGraphicsView.FullViewportUpdate)
        self.setTransformationAnchor(QGraphicsView.AnchorUnderMouse)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)

    @property
    def session(self):
        return self.scene().session

    def wheelEvent(self, event):
        if event.modifiers() & Qt.ControlModifier:
            self.zoomRequested.emit(1 if event.angleDelta().y() > 0 else -1)
            event.accept()
        else:
            super().wheelEvent(event)

    def mousePressEvent(self, event):
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        pos = self.mapToScene(event.position().toPoint())
        modifier = bool(event.modifiers() & Qt.ShiftModifier)
        if self.session.interaction.pointer_down(pos.x(), pos.y(), modifier):
            self.scene().update()
            self.documentChanged.emit()
        event.accept()

    def mouseMoveEvent(self, event):
        pos = self.mapToScene(event.position().toPoint())
        engine = self.session.interaction
        redraw = engine.pointer_move(pos.x(), pos.y())

        # zvýraznění cíle rozpracované hrany
        hover_id = None
        if engine.mode == Mode.ADD_EDGE and engine.edge_source_id is not None and not engine.is_dragging():
            hit = node_at(engine.visible_nodes(), pos.x(), pos.y())
            hover_id = hit.id if hit is not None else None
        if hover_id != self.scene().hover_node_id:
            self.scene().hover_node_id = hover_id
            redraw = True

        if redraw:
            self.scene().update()
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.LeftButton:
            super().mouseReleaseEvent(event)
            return
        pos = self.mapToScene(event.position().toPoint())
        modifier = bool(event.modifiers() & Qt.ShiftModifier)
        if self.session.interaction.pointer_up(pos.x(), pos.y(), modifier):
            self.scene().update()
            self.documentChanged.emit()
        event.accept()

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape and self.session.interaction.cancel_edge():
            self.scene().hover_node_id = None
            self.scene().update()
            event.accept()
            return
        if event.key() in (Qt.Key_Delete, Qt.Key_Backspace):
            self.app.delete_selected()
            event.accept()
            return
        super().keyPressEvent(event)
