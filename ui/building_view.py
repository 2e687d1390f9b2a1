"""3D (šikmá projekce) pohled na celou budovu s ovládáním kamery."""
from __future__ import annotations
from typing import Dict, Optional

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QImage, QPainter, QPen, QPixmap, QTransform
from PySide6.QtWidgets import (
    QFormLayout, QHBoxLayout, QLabel, QSlider, QVBoxLayout, QWidget,
)

from constants import (
    CAMERA_ANGLE, CAMERA_SEPARATION, CAMERA_TILT, CAMERA_ZOOM,
    LABEL_ZOOM_THRESHOLD, VIEW_BOX, VIEW_OFFSET_Y,
)
from graphics.painters import paint_edge, paint_footprint, paint_label
from utils.data_url import from_data_url

# Slider pracuje s celými čísly: (atribut kamery, rozsah, dělitel)
SLIDERS = (
    ("angle", CAMERA_ANGLE, 1),
    ("tilt", CAMERA_TILT, 100),
    ("zoom", CAMERA_ZOOM, 100),
    ("separation", CAMERA_SEPARATION, 10),
)


class BuildingCanvas(QWidget):
    """Plátno, které vykresluje promítnuté vrstvy relace."""

    cameraDragged = Signal()

    def __init__(self, session, parent=None):
        super().__init__(parent)
        self.session = session
        self._pixmaps: Dict[str, QPixmap] = {}
        self._drag_pos: Optional[QPointF] = None
        self.setMinimumSize(400, 300)
        self.setCursor(Qt.SizeAllCursor)

    def _pixmap(self, floor) -> Optional[QPixmap]:
        if not floor.image_url:
            return None
        if floor.id not in self._pixmaps:
            try:
                image = QImage.fromData(from_data_url(floor.image_url))
            except ValueError:
                image = QImage()
            self._pixmaps[floor.id] = QPixmap.fromImage(image)
        return self._pixmaps[floor.id]

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        painter.fillRect(self.rect(), QColor("#F9FAFB"))

        camera = self.session.camera
        # viewBox VIEW_BOX × VIEW_BOX se středem uprostřed widgetu, pak zoom a posun dolů
        fit = min(self.width(), self.height()) / VIEW_BOX
        painter.translate(self.width() / 2, self.height() / 2)
        painter.scale(fit * camera.zoom, fit * camera.zoom)
        painter.translate(0, VIEW_OFFSET_Y)

        selected = self.session.selection.node_ids
        for layer in self.session.projected_layers():
            floor = layer.floor
            painter.save()
            painter.setTransform(QTransform(*layer.transform), True)
            painter.setOpacity(0.5)
            pixmap = self._pixmap(floor)
            if pixmap is not None and not pixmap.isNull():
                painter.drawPixmap(QPointF(0, 0), pixmap)
            painter.setOpacity(1.0)
            pen = QPen(QColor("#9CA3AF"), 1)
            pen.setCosmetic(True)
            painter.setPen(pen)
            painter.setBrush(Qt.NoBrush)
            painter.drawRect(QRectF(0, 0, floor.width, floor.height))
            painter.restore()

            for pn in layer.nodes:
                paint_footprint(painter, pn.node, pn.corners, selected=pn.node.id in selected)
            for pe in layer.edges:
                paint_edge(painter, pe.edge, pe.start, pe.end, show_time=False)
            if camera.zoom > LABEL_ZOOM_THRESHOLD:
                for pn in layer.nodes:
                    paint_label(painter, QPointF(*pn.label_pos), pn.node.label, size=12)
        painter.end()

    # tažení myší: vodorovně otáčí, svisle mění sklon
    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self._drag_pos = event.position()
            event.accept()

    def mouseMoveEvent(self, event):
        if self._drag_pos is None:
            return
        delta = event.position() - self._drag_pos
        self._drag_pos = event.position()
        camera = self.session.camera
        self.session.set_camera(
            angle=(camera.angle + delta.x() * 0.5) % 360.0,
            tilt=camera.tilt + delta.y() * 0.005,
        )
        self.cameraDragged.emit()
        self.update()

    def mouseReleaseEvent(self, event):
        self._drag_pos = None


class BuildingView(QWidget):
    """3D pohled: plátno + posuvníky kamery (rotace, sklon, zoom, rozestup pater)."""

    def __init__(self, session, parent=None):
        super().__init__(parent)
        self.session = session
        self.canvas = BuildingCanvas(session, self)
        self.canvas.cameraDragged.connect(self._sync_sliders)
        self.sliders: Dict[str, QSlider] = {}
        self.value_labels: Dict[str, QLabel] = {}

        controls = QFormLayout()
        for name, (lo, hi, _), div in SLIDERS:
            slider = QSlider(Qt.Horizontal)
            slider.setRange(int(lo * div), int(hi * div))
            slider.valueChanged.connect(lambda value, n=name, d=div: self._on_slider(n, value / d))
            label = QLabel()
            label.setFixedWidth(48)
            row = QHBoxLayout()
            row.addWidget(slider)
            row.addWidget(label)
            controls.addRow(name.capitalize(), row)
            self.sliders[name] = slider
            self.value_labels[name] = label

        lay = QVBoxLayout(self)
        lay.addWidget(self.canvas, 1)
        lay.addLayout(controls)
        self._sync_sliders()

    def _on_slider(self, name: str, value: float):
        self.session.set_camera(**{name: value})
        self.value_labels[name].setText(f"{getattr(self.session.camera, name):g}")
        self.canvas.update()

    def _sync_sliders(self):
        """Nastaví posuvníky podle kamery bez zpětného zápisu."""
        camera = self.session.camera
        for name, _, div in SLIDERS:
            slider = self.sliders[name]
            slider.blockSignals(True)
            slider.setValue(int(round(getattr(camera, name) * div)))
            slider.blockSignals(False)
            self.value_labels[name].setText(f"{getattr(camera, name):g}")

    def invalidate_images(self):
        """Zahodí cache obrázků pater (po importu nebo změně pater)."""
        self.canvas._pixmaps.clear()

    def refresh(self):
        self.canvas.update()
