"""
Panel pater budovy: seznam, výběr aktivního patra, přidání a odebrání.
"""
import os

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QDockWidget, QFileDialog, QHBoxLayout, QLabel, QListWidget, QListWidgetItem,
    QMessageBox, QPushButton, QSpinBox, QVBoxLayout, QWidget
)

from ai.image_processing import load_image_file
from building.models import Floor
from utils.ids import next_id

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp)"


class FloorPanel(QDockWidget):
    """Dock se seznamem pater seřazeným podle úrovně."""

    floorsChanged = Signal()  # Přidání/odebrání patra nebo změna aktivního patra

    def __init__(self, parent=None):
        super().__init__("Floors", parent)
        self.main_window = parent
        self.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)
        self._is_refreshing = False  # Ochrana proti rekurzivním voláním
        self._init_ui()

    @property
    def session(self):
        return self.main_window.session

    def _init_ui(self):
        container = QWidget(self)
        layout = QVBoxLayout(container)

        self.list = QListWidget()
        self.list.setAlternatingRowColors(True)
        self.list.currentItemChanged.connect(self._on_current_changed)
        layout.addWidget(self.list)

        row = QHBoxLayout()
        row.addWidget(QLabel("Level:"))
        self.sp_level = QSpinBox()
        self.sp_level.setRange(-10, 100)
        self.sp_level.setToolTip("Úroveň nově přidaného patra (0 = přízemí)")
        row.addWidget(self.sp_level)
        layout.addLayout(row)

        row = QHBoxLayout()
        btn_add = QPushButton("Add floor…")
        btn_add.clicked.connect(self.add_floor_dialog)
        btn_remove = QPushButton("Remove")
        btn_remove.clicked.connect(self.remove_current_floor)
        btn_level = QPushButton("Set level")
        btn_level.setToolTip("Nastaví vybranému patru úroveň ze spinboxu")
        btn_level.clicked.connect(self.set_current_level)
        row.addWidget(btn_add)
        row.addWidget(btn_remove)
        row.addWidget(btn_level)
        layout.addLayout(row)

        self.setWidget(container)

    def refresh(self):
        """Obnoví seznam pater z dokumentu."""
        if self._is_refreshing:
            return
        self._is_refreshing = True
        try:
            self.list.clear()
            active_id = self.session.active_floor_id
            for floor in sorted(self.session.document.floors, key=lambda f: f.level):
                item = QListWidgetItem(f"L{floor.level}  {floor.name}")
                item.setData(Qt.UserRole, floor.id)
                item.setToolTip(f"{floor.width}x{floor.height} px")
                self.list.addItem(item)
                if floor.id == active_id:
                    self.list.setCurrentItem(item)
            next_level = max((f.level for f in self.session.document.floors), default=-1) + 1
            self.sp_level.setValue(next_level)
        finally:
            self._is_refreshing = False

    def _on_current_changed(self, current, previous):
        if self._is_refreshing or current is None:
            return
        self.session.set_active_floor(current.data(Qt.UserRole))
        self.floorsChanged.emit()

    def add_floor_dialog(self):
        """Vybere obrázek půdorysu a přidá ho jako nové patro."""
        level = self.sp_level.value()
        if self.session.document.floor_by_level(level) is not None:
            QMessageBox.warning(self, "Add floor", f"Patro s úrovní {level} už existuje.")
            return
        path, _ = QFileDialog.getOpenFileName(self, "Add floor image", "", IMAGE_FILTER)
        if not path:
            return
        try:
            image_url, width, height = load_image_file(path)
        except (OSError, ValueError) as e:
            QMessageBox.warning(self, "Add floor", f"Obrázek nelze načíst:\n{e}")
            return
        floor = Floor(
            id=next_id("floor"),
            level=level,
            name=os.path.basename(path),
            image_url=image_url,
            width=width,
            height=height,
        )
        self.session.add_floor(floor)
        self.refresh()
        self.floorsChanged.emit()

    def remove_current_floor(self):
        item = self.list.currentItem()
        if item is None:
            return
        self.session.remove_floor(item.data(Qt.UserRole))
        if self.session.active_floor is None and self.session.document.floors:
            first = sorted(self.session.document.floors, key=lambda f: f.level)[0]
            self.session.set_active_floor(first.id)
        self.refresh()
        self.floorsChanged.emit()

    def set_current_level(self):
        """Změní úroveň vybraného patra; uzly zůstávají na svých z-souřadnicích."""
        item = self.list.currentItem()
        if item is None:
            return
        level = self.sp_level.value()
        other = self.session.document.floor_by_level(level)
        if other is not None and other.id != item.data(Qt.UserRole):
            QMessageBox.warning(self, "Set level", f"Patro s úrovní {level} už existuje.")
            return
        if self.session.update_floor_level(item.data(Qt.UserRole), level):
            self.refresh()
            self.floorsChanged.emit()
