"""Toolbar a menu pro Building Graph editor."""
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup, QKeySequence, QMouseEvent
from PySide6.QtWidgets import (
    QApplication,
    QCheckBox,
    QLabel,
    QMenu,
    QSlider,
    QStyle,
    QToolBar,
)
from constants import EDITOR_ZOOM_MAX, EDITOR_ZOOM_MIN, Mode
from ui.icons import icon_shape, icon_std


class ZoomSlider(QSlider):
    """Slider pro zoom s podporou dvojkliku pro reset na 100%."""

    def __init__(self, orientation, parent=None):
        super().__init__(orientation, parent)
        self._double_click_pending = False

    def mousePressEvent(self, event: QMouseEvent):
        """Zachytí stisk myši - pokud jde o dvojklik, ignoruj změnu hodnoty."""
        if self._double_click_pending:
            self._double_click_pending = False
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseDoubleClickEvent(self, event: QMouseEvent):
        """Při dvojkliku nastaví hodnotu na 100%."""
        self._double_click_pending = True
        self.setValue(100)
        event.accept()


class ToolbarManager:
    """Manager pro správu toolbarů a menu aplikace."""

    def __init__(self, main_window):
        self.main_window = main_window
        self.actions = {}

    def create_all_toolbars(self):
        """Vytvoří všechny toolbary a menu aplikace."""
        self._create_main_toolbar()
        self._create_edit_toolbar()
        self._create_ai_toolbar()
        self._add_menu_to_menubar()

    def _create_main_toolbar(self):
        tb = QToolBar("Tools")
        self.main_window.addToolBar(Qt.TopToolBarArea, tb)

        self._add_mode_actions(tb)

        tb.addSeparator()
        act_delete = self._add_icon_btn(
            tb,
            icon_shape("delete"),
            "Delete (Del)",
            lambda: self.main_window.delete_selected()
        )
        self.main_window.act_delete = act_delete

        tb.addSeparator()
        # Přepínač 2D editor / 3D pohled
        act_3d = self._add_icon_btn(
            tb,
            icon_shape("building"),
            "3D building view",
            lambda checked: self.main_window.show_3d(checked),
            checkable=True
        )
        self.main_window.act_3d = act_3d

        tb.addSeparator()
        tb.addWidget(QLabel("Zoom:"))
        zoom_slider = ZoomSlider(Qt.Horizontal)
        zoom_slider.setMinimum(int(EDITOR_ZOOM_MIN * 100))
        zoom_slider.setMaximum(int(EDITOR_ZOOM_MAX * 100))
        zoom_slider.setValue(100)
        zoom_slider.setTickPosition(QSlider.TicksBelow)
        zoom_slider.setTickInterval(50)
        zoom_slider.setFixedWidth(150)
        zoom_slider.setToolTip("Zoom (Ctrl + Wheel, dvojklik = reset na 100%)")
        zoom_slider.valueChanged.connect(lambda value: self.main_window.set_zoom(value / 100.0))
        tb.addWidget(zoom_slider)

        self.main_window.zoom_value_label = QLabel("100%")
        self.main_window.zoom_value_label.setFixedWidth(45)
        tb.addWidget(self.main_window.zoom_value_label)
        self.main_window.zoom_slider = zoom_slider

    def _create_edit_toolbar(self):
        """Vytvoří edit toolbar s undo/redo nad historií relace."""
        tb = self.main_window.addToolBar("Edit")
        act_undo = QAction(icon_std(self.main_window, QStyle.SP_ArrowBack), "Undo", self.main_window)
        act_undo.setShortcut(QKeySequence("Ctrl+Z"))
        act_undo.triggered.connect(self.main_window.undo)
        act_redo = QAction(icon_std(self.main_window, QStyle.SP_ArrowForward), "Redo", self.main_window)
        act_redo.setShortcuts([QKeySequence("Ctrl+Shift+Z"), QKeySequence("Ctrl+Y")])
        act_redo.triggered.connect(self.main_window.redo)
        tb.addAction(act_undo)
        tb.addAction(act_redo)
        self.main_window.act_undo = act_undo
        self.main_window.act_redo = act_redo

    def _create_ai_toolbar(self):
        """Toolbar pro AI extrakci grafu z obrázku aktivního patra."""
        tb = self.main_window.addToolBar("AI")
        act_extract = self._add_icon_btn(
            tb,
            icon_shape("ai"),
            "AI Extract (floor plan → graph)",
            lambda: self.main_window.run_ai_extraction()
        )
        self.main_window.act_extract = act_extract

        chk = QCheckBox("Enhance walls")
        chk.setToolTip("Před odesláním převést obrázek na černobílý (práh 210)")
        tb.addWidget(chk)
        self.main_window.chk_enhance = chk

    def _add_menu_to_menubar(self):
        """Přidá menu do nativního menubaru."""
        self.main_window.menuBar().addMenu(self._create_file_menu())
        self.main_window.menuBar().addMenu(self._create_view_menu())
        self.main_window.menuBar().addMenu(self._create_ai_menu())

    def _create_file_menu(self):
        file_menu = QMenu("File", self.main_window)

        act_open = QAction("Load JSON…", self.main_window)
        act_open.setShortcut(QKeySequence("Ctrl+O"))
        act_open.triggered.connect(lambda: self.main_window.load_json())
        file_menu.addAction(act_open)

        act_save = QAction("Save JSON…", self.main_window)
        act_save.setShortcut(QKeySequence("Ctrl+S"))
        act_save.triggered.connect(lambda: self.main_window.save_json())
        file_menu.addAction(act_save)

        act_csv = QAction("Export CSV…", self.main_window)
        act_csv.setShortcut(QKeySequence("Ctrl+E"))
        act_csv.triggered.connect(lambda: self.main_window.export_csv())
        file_menu.addAction(act_csv)

        file_menu.addSeparator()
        act_floor = QAction("Add floor image…", self.main_window)
        act_floor.triggered.connect(lambda: self.main_window.dock_floors.add_floor_dialog())
        file_menu.addAction(act_floor)

        file_menu.addSeparator()
        act_exit = QAction("Exit", self.main_window)
        act_exit.setShortcut(QKeySequence("Ctrl+Q"))
        act_exit.triggered.connect(QApplication.instance().quit)
        file_menu.addAction(act_exit)
        return file_menu

    def _create_view_menu(self):
        view_menu = QMenu("View", self.main_window)
        for dock, shortcut in ((self.main_window.dock_floors, "Ctrl+Shift+F"),
                               (self.main_window.dock_props, "Ctrl+Shift+P")):
            act = dock.toggleViewAction()
            act.setShortcut(QKeySequence(shortcut))
            view_menu.addAction(act)
            self.main_window.addAction(act)  # umožní fungování zkratky globálně
        return view_menu

    def _create_ai_menu(self):
        ai_menu = QMenu("AI", self.main_window)
        act_key = QAction("Extraction Settings…", self.main_window)
        act_key.triggered.connect(lambda: self.main_window.set_api_key())
        ai_menu.addAction(act_key)
        ai_menu.addAction(self.main_window.act_extract)
        return ai_menu

    def _add_mode_actions(self, tb: QToolBar):
        """Přidá akce pro přepínání nástrojů (exkluzivní skupina)."""
        act_select = self._add_icon_btn(
            tb, icon_shape("cursor"), "Select / Move (V)",
            lambda: self.main_window.set_mode(Mode.SELECT), checkable=True
        )
        act_node = self._add_icon_btn(
            tb, icon_shape("node"), "Add Node (N)",
            lambda: self.main_window.set_mode(Mode.ADD_NODE), checkable=True
        )
        act_edge = self._add_icon_btn(
            tb, icon_shape("edge"), "Add Edge (E)",
            lambda: self.main_window.set_mode(Mode.ADD_EDGE), checkable=True
        )
        act_select.setShortcut(QKeySequence("V"))
        act_node.setShortcut(QKeySequence("N"))
        act_edge.setShortcut(QKeySequence("E"))

        group = QActionGroup(self.main_window)
        group.setExclusive(True)
        for a in (act_select, act_node, act_edge):
            group.addAction(a)
        act_select.setChecked(True)

        self.actions = {
            Mode.SELECT: act_select,
            Mode.ADD_NODE: act_node,
            Mode.ADD_EDGE: act_edge,
        }
        self.main_window.actions = self.actions

    def _add_icon_btn(self, tb: QToolBar, icon, tooltip: str, slot, checkable=False):
        """Přidá tlačítko s ikonou do toolbaru."""
        act = QAction(icon, "", self.main_window)
        act.setToolTip(tooltip)
        act.setStatusTip(tooltip)
        act.triggered.connect(slot)
        act.setCheckable(checkable)
        tb.addAction(act)
        return act
