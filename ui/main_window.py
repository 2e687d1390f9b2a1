"""Hlavní okno aplikace Building Graph editor."""
from __future__ import annotations
import os

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QStackedWidget,
)

from ai.api_key_manager import APIKeyManager
from ai.extraction import ExtractionError, extract_graph_from_image
from ai.image_processing import prepare_for_extraction
from constants import APP_NAME, DEFAULT_JSON_NAME, EDITOR_ZOOM_MAX, EDITOR_ZOOM_MIN, Mode
from editor.session import EditorSession
from graphics.floor_scene import FloorScene
from persistence.csv_io import export_csv
from persistence.json_io import DocumentFormatError, save_document_as_json
from ui.building_view import BuildingView
from ui.dialogs import ensure_api_key, show_api_key_dialog
from ui.floor_panel import FloorPanel
from ui.properties_panel import PropertiesPanel
from ui.toolbar import ToolbarManager
from ui.view import EditorView


class MainWindow(QMainWindow):
    """Hlavní okno: 2D editor aktivního patra / 3D pohled, panely pater a vlastností."""

    def __init__(self, session: EditorSession | None = None):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.session = session or EditorSession()
        self._scale = 1.0

        self._init_views()
        # Nejprve vytvoř dokovací panely, aby na ně mohl toolbar/menu odkazovat
        self._init_floor_panel()
        self._init_properties_panel()
        self._init_toolbars()
        self.dock_floors.refresh()
        self.refresh()

    def _init_views(self):
        """2D editor a 3D pohled ve společném QStackedWidget."""
        self.scene = FloorScene(self.session, self)
        self.view = EditorView(self.scene, self)
        self.view.documentChanged.connect(self.refresh)
        self.view.zoomRequested.connect(lambda step: self.zoom_in() if step > 0 else self.zoom_out())
        self.building_view = BuildingView(self.session, self)

        self.stack = QStackedWidget(self)
        self.stack.addWidget(self.view)
        self.stack.addWidget(self.building_view)
        self.setCentralWidget(self.stack)

    def _init_floor_panel(self):
        self.dock_floors = FloorPanel(self)
        self.addDockWidget(Qt.LeftDockWidgetArea, self.dock_floors)
        self.dock_floors.floorsChanged.connect(self._on_floors_changed)

    def _init_properties_panel(self):
        self.dock_props = PropertiesPanel(self)
        self.addDockWidget(Qt.RightDockWidgetArea, self.dock_props)

    def _init_toolbars(self):
        toolbar_manager = ToolbarManager(self)
        toolbar_manager.create_all_toolbars()

    # ========== Obnova pohledů ==========

    def refresh(self):
        """Překreslí pohledy a obnoví panely podle stavu relace."""
        self.scene.update()
        self.building_view.refresh()
        self.dock_props.update_for_selection()
        if hasattr(self, "act_undo"):
            self.act_undo.setEnabled(self.session.can_undo())
            self.act_redo.setEnabled(self.session.can_redo())
        floor = self.session.active_floor
        doc = self.session.document
        where = f"{floor.name} (level {floor.level})" if floor else "no floor"
        self.statusBar().showMessage(f"{where} | {len(doc.nodes)} nodes, {len(doc.edges)} edges")

    def _on_floors_changed(self):
        self.scene.sync_floor()
        self.building_view.invalidate_images()
        self.refresh()

    # ========== Mode & zoom ==========

    def set_mode(self, mode: str):
        """Nastaví nástroj editoru; rozpracovaná hrana a náhledy se zruší."""
        self.session.set_mode(mode)
        if hasattr(self, "actions") and mode in self.actions:
            self.actions[mode].setChecked(True)
        self.view.setCursor(Qt.ArrowCursor if mode == Mode.SELECT else Qt.CrossCursor)
        self.scene.hover_node_id = None
        self.scene.update()
        self.statusBar().showMessage(f"Mode: {mode}", 2000)

    def show_3d(self, enabled: bool):
        self.stack.setCurrentWidget(self.building_view if enabled else self.view)
        self.refresh()

    def set_zoom(self, scale: float):
        """Nastaví konkrétní úroveň zoomu 2D editoru."""
        scale = max(EDITOR_ZOOM_MIN, min(scale, EDITOR_ZOOM_MAX))
        self._scale = scale
        self.view.resetTransform()
        self.view.scale(scale, scale)
        self._update_zoom_ui()

    def _update_zoom_ui(self):
        """Aktualizuje UI prvky pro zoom (slider a label)."""
        if hasattr(self, 'zoom_slider') and hasattr(self, 'zoom_value_label'):
            # Dočasně odpojíme signal, aby se zabránilo rekurzi
            self.zoom_slider.blockSignals(True)
            self.zoom_slider.setValue(int(self._scale * 100))
            self.zoom_slider.blockSignals(False)
            self.zoom_value_label.setText(f"{int(self._scale * 100)}%")

    def zoom_in(self):
        self.set_zoom(self._scale * 1.2)

    def zoom_out(self):
        self.set_zoom(self._scale / 1.2)

    # ========== Editace ==========

    def undo(self):
        if self.session.undo():
            self.refresh()

    def redo(self):
        if self.session.redo():
            self.refresh()

    def delete_selected(self):
        if self.session.delete_selected():
            self.refresh()

    # ========== Soubory ==========

    def save_json(self):
        path, _ = QFileDialog.getSaveFileName(self, "Save JSON", DEFAULT_JSON_NAME, "JSON (*.json)")
        if not path:
            return
        if not path.lower().endswith(".json"):
            path += ".json"
        try:
            save_document_as_json(self.session.document, path)
        except OSError as e:
            QMessageBox.warning(self, "Save JSON", f"Soubor nelze uložit:\n{e}")
            return
        self.statusBar().showMessage(f"Saved {os.path.basename(path)}", 3000)

    def load_json(self):
        """Načte dokument; neplatný soubor se odmítne a stav zůstane beze změny."""
        path, _ = QFileDialog.getOpenFileName(self, "Load JSON", "", "JSON (*.json)")
        if not path:
            return
        try:
            self.session.load_file(path)
        except (DocumentFormatError, OSError) as e:
            QMessageBox.warning(self, "Load JSON", str(e))
            return
        self.set_mode(Mode.SELECT)
        self.dock_floors.refresh()
        self._on_floors_changed()

    def export_csv(self):
        directory = QFileDialog.getExistingDirectory(self, "Export CSV to directory")
        if not directory:
            return
        try:
            export_csv(self.session.document.nodes, self.session.document.edges, directory)
        except OSError as e:
            QMessageBox.warning(self, "Export CSV", f"CSV nelze zapsat:\n{e}")
            return
        self.statusBar().showMessage(f"Exported nodes.csv and edges.csv to {directory}", 3000)

    # ========== AI ==========

    def set_api_key(self):
        if show_api_key_dialog(self):
            model = APIKeyManager().get_model()
            self.statusBar().showMessage(f"AI extrakce: klíč nastaven, model {model}", 3000)

    def run_ai_extraction(self):
        """Pošle obrázek aktivního patra AI a výsledek sloučí jako jeden commit."""
        floor = self.session.active_floor
        if floor is None:
            QMessageBox.information(self, "AI Extract", "Nejdřív přidej patro s obrázkem půdorysu.")
            return
        if not ensure_api_key(self):
            return

        error = None
        QApplication.setOverrideCursor(Qt.WaitCursor)
        try:
            image_b64, mime_type, _, _ = prepare_for_extraction(floor.image_url, self.chk_enhance.isChecked())
            data = extract_graph_from_image(image_b64, mime_type, floor.level)
            report = self.session.merge_extraction(data, floor)
        except (ExtractionError, ValueError) as e:
            error = str(e)
        finally:
            QApplication.restoreOverrideCursor()
        if error is not None:
            QMessageBox.warning(self, "AI Extract", error)
            return
        self.refresh()
        self.statusBar().showMessage(f"AI extraction: {report.summary()}", 5000)
