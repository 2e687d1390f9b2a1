"""Properties panel pro Building Graph editor."""
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDockWidget,
    QDoubleSpinBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)
from building.models import BoundingBox3D
from constants import NODE_TYPES

BOX_FIELDS = ("x1", "y1", "z1", "x2", "y2", "z2")


class PropertiesPanel(QDockWidget):
    """
    Dock widget pro zobrazení a úpravu vlastností vybraného uzlu nebo hrany.

    Textová a číselná pole se zapíší při opuštění pole (editingFinished),
    výběr typu a zaškrtávátka okamžitě. Každá skutečná změna = jeden commit.
    """

    def __init__(self, parent=None):
        super().__init__("Properties", parent)
        self.main_window = parent
        self._updating = False  # Potlačí zápis během plnění polí z modelu
        self._init_ui()

    @property
    def session(self):
        return self.main_window.session

    def _init_ui(self):
        """Inicializace UI panelu: jedna stránka pro každý druh výběru."""
        self.pages = QStackedWidget(self)
        self.page_empty = QLabel("Select a node or an edge.", self)
        self.page_node = self._build_node_page()
        self.page_edge = self._build_edge_page()
        self.page_multi = self._build_multi_page()
        for page in (self.page_empty, self.page_node, self.page_edge, self.page_multi):
            self.pages.addWidget(page)
        self.setWidget(self.pages)

    def _build_node_page(self) -> QWidget:
        page = QWidget(self)
        form = QFormLayout(page)

        self.ed_label = QLineEdit(page)
        self.ed_label.setPlaceholderText("Label…")
        self.ed_label.editingFinished.connect(self._on_label_changed)
        form.addRow("Label", self.ed_label)

        self.cmb_type = QComboBox(page)
        self.cmb_type.addItems(NODE_TYPES)
        self.cmb_type.currentTextChanged.connect(self._on_type_changed)
        form.addRow("Type", self.cmb_type)

        self.sp_capacity = QSpinBox(page)
        self.sp_capacity.setRange(0, 100000)
        self.sp_capacity.editingFinished.connect(self._on_node_capacity_changed)
        form.addRow("Capacity", self.sp_capacity)

        self.sp_safety = QSpinBox(page)
        self.sp_safety.setRange(0, 10)
        self.sp_safety.editingFinished.connect(self._on_safety_changed)
        form.addRow("Safety level", self.sp_safety)

        # souřadnice boxu (x/y v pixelech obrázku, z ve světových jednotkách)
        self.sp_box = {}
        for name in BOX_FIELDS:
            sp = QDoubleSpinBox(page)
            sp.setRange(-100000.0, 100000.0)
            sp.setDecimals(1)
            sp.editingFinished.connect(self._on_box_changed)
            self.sp_box[name] = sp
            form.addRow(name.upper(), sp)

        self.lbl_floors = QLabel(page)
        form.addRow("Floor levels", self.lbl_floors)

        btn_delete = QPushButton("Delete node", page)
        btn_delete.clicked.connect(self._on_delete_clicked)
        form.addRow(btn_delete)
        return page

    def _build_edge_page(self) -> QWidget:
        page = QWidget(self)
        form = QFormLayout(page)

        self.lbl_source = QLabel(page)
        self.lbl_target = QLabel(page)
        form.addRow("Source", self.lbl_source)
        form.addRow("Target", self.lbl_target)

        self.sp_traversal = QDoubleSpinBox(page)
        self.sp_traversal.setRange(0.1, 100000.0)
        self.sp_traversal.setDecimals(1)
        self.sp_traversal.setSuffix(" s")
        self.sp_traversal.editingFinished.connect(self._on_traversal_changed)
        form.addRow("Traversal time", self.sp_traversal)

        self.sp_edge_capacity = QSpinBox(page)
        self.sp_edge_capacity.setRange(0, 100000)
        self.sp_edge_capacity.editingFinished.connect(self._on_edge_capacity_changed)
        form.addRow("Capacity", self.sp_edge_capacity)

        self.chk_active = QCheckBox("Active", page)
        self.chk_active.toggled.connect(lambda v: self._update_edge(active=v))
        form.addRow(self.chk_active)

        self.chk_bidirectional = QCheckBox("Bidirectional", page)
        self.chk_bidirectional.toggled.connect(lambda v: self._update_edge(bidirectional=v))
        form.addRow(self.chk_bidirectional)

        btn_delete = QPushButton("Delete edge", page)
        btn_delete.clicked.connect(self._on_delete_clicked)
        form.addRow(btn_delete)
        return page

    def _build_multi_page(self) -> QWidget:
        page = QWidget(self)
        lay = QVBoxLayout(page)
        self.lbl_multi = QLabel(page)
        lay.addWidget(self.lbl_multi)
        btn_delete = QPushButton("Delete selected", page)
        btn_delete.clicked.connect(self._on_delete_clicked)
        lay.addWidget(btn_delete)
        lay.addStretch(1)
        return page

    # ========== Synchronizace s výběrem ==========

    def update_for_selection(self):
        """Přepne stránku a naplní pole podle aktuálního výběru."""
        selection = self.session.selection
        document = self.session.document
        self._updating = True
        try:
            if len(selection.node_ids) > 1:
                self.lbl_multi.setText(f"{len(selection.node_ids)} nodes selected")
                self.pages.setCurrentWidget(self.page_multi)
                return
            node = document.get_node(selection.primary_node_id())
            if node is not None:
                self._fill_node(node)
                self.pages.setCurrentWidget(self.page_node)
                return
            edge = document.get_edge(selection.edge_id)
            if edge is not None:
                self._fill_edge(edge)
                self.pages.setCurrentWidget(self.page_edge)
                return
            self.pages.setCurrentWidget(self.page_empty)
        finally:
            self._updating = False

    def _fill_node(self, node):
        self.ed_label.setText(node.label)
        self.cmb_type.setCurrentText(node.type)
        self.sp_capacity.setValue(node.capacity)
        self.sp_safety.setValue(node.safety_level)
        box = node.bounding_box
        for name, sp in self.sp_box.items():
            sp.setValue(getattr(box, name))
        self.lbl_floors.setText(", ".join(str(level) for level in node.floor_levels) or "–")

    def _fill_edge(self, edge):
        document = self.session.document
        src, dst = document.get_node(edge.source), document.get_node(edge.target)
        self.lbl_source.setText(src.label if src else edge.source)
        self.lbl_target.setText(dst.label if dst else edge.target)
        self.sp_traversal.setValue(edge.traversal_time)
        self.sp_edge_capacity.setValue(edge.capacity)
        self.chk_active.setChecked(edge.active)
        self.chk_bidirectional.setChecked(edge.bidirectional)

    # ========== Zápis změn ==========

    def _update_node(self, **fields):
        if self._updating:
            return
        node_id = self.session.selection.primary_node_id()
        if node_id is None:
            return
        try:
            changed = self.session.update_node_properties(node_id, **fields)
        except ValueError as e:
            QMessageBox.warning(self, "Neplatná hodnota", str(e))
            changed = True  # vrátí pole na hodnotu z modelu
        if changed:
            self.main_window.refresh()

    def _update_edge(self, **fields):
        if self._updating:
            return
        edge_id = self.session.selection.edge_id
        if edge_id is None:
            return
        try:
            changed = self.session.update_edge_properties(edge_id, **fields)
        except ValueError as e:
            QMessageBox.warning(self, "Neplatná hodnota", str(e))
            changed = True
        if changed:
            self.main_window.refresh()

    def _on_label_changed(self):
        self._update_node(label=self.ed_label.text().strip())

    def _on_type_changed(self, text: str):
        self._update_node(type=text)

    def _on_node_capacity_changed(self):
        self._update_node(capacity=self.sp_capacity.value())

    def _on_safety_changed(self):
        self._update_node(safety_level=self.sp_safety.value())

    def _on_box_changed(self):
        values = {name: sp.value() for name, sp in self.sp_box.items()}
        self._update_node(bounding_box=BoundingBox3D(**values))

    def _on_traversal_changed(self):
        self._update_edge(traversal_time=self.sp_traversal.value())

    def _on_edge_capacity_changed(self):
        self._update_edge(capacity=self.sp_edge_capacity.value())

    def _on_delete_clicked(self):
        self.main_window.delete_selected()
