"""Stroj interakcí editoru: převádí události ukazatele na operace nad grafem.

Režim nástroje (select / add-node / add-edge) volí uživatel zvenku. Uvnitř
stroj drží stav tažení (idle, move, resize, create, select-box) a v režimu
add-edge „západku“ se zdrojovým uzlem rozpracované hrany.

Tažení (move/resize) mění živý dokument po malých přírůstcích, ale do historie
zapíše jediný commit až při puštění tlačítka.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional, Tuple

from building.models import BoundingBox3D, GraphEdge, GraphNode
from constants import (
    DEFAULT_EDGE_CAPACITY, DEFAULT_NODE_CAPACITY, DEFAULT_NODE_LABEL,
    DEFAULT_SAFETY_LEVEL, DEFAULT_TRAVERSAL_TIME, MIN_BOX_SIZE,
    MODES, DragAction, Mode, NodeType,
)
from geometry.spatial import (
    Rect, edge_at, edges_between, floor_z_range, node_at, nodes_on_floor,
    normalize_rect, rect_overlaps_box,
)
from graphics.resize import handle_at, resize_box
from utils.ids import next_id

if TYPE_CHECKING:
    from editor.session import EditorSession
    from building.models import Floor

Point = Tuple[float, float]


class InteractionEngine:
    """
    Konečný automat nad událostmi ukazatele.

    Metody `pointer_down`, `pointer_move` a `pointer_up` přijímají souřadnice
    v pixelech obrázku aktivního patra a vrací True, pokud se změnil stav,
    který je potřeba překreslit. Pohledy si aktuální stav čtou samy.
    """

    def __init__(self, session: "EditorSession"):
        self.session = session
        self.mode = Mode.SELECT
        self.drag_action = DragAction.IDLE
        self.anchor: Optional[Point] = None  # Kde tažení začalo
        self.last_pos: Optional[Point] = None  # Poslední pozice pro přírůstkové delty
        self.resize_role: Optional[str] = None  # Uchopený roh
        self.modified = False  # Zda tažení něco změnilo (→ commit při puštění)
        self.preview_rect: Optional[Rect] = None  # Náhled nového uzlu
        self.selection_rect: Optional[Rect] = None  # Náhled výběrového obdélníku
        self.edge_source_id: Optional[str] = None  # Západka zdroje hrany
        self.pointer_pos: Optional[Point] = None

    # ========== Režim a zrušení ==========

    def set_mode(self, mode: str) -> None:
        """Přepne nástroj; zruší rozpracovanou hranu i náhledy."""
        if mode not in MODES:
            raise ValueError(f"Unknown tool mode: {mode!r}")
        self.mode = mode
        self.cancel()

    def cancel(self) -> None:
        """Vrátí stroj do klidu bez jakékoli částečné změny."""
        self._reset_drag()
        self.preview_rect = None
        self.selection_rect = None
        self.edge_source_id = None

    def cancel_edge(self) -> bool:
        """Zruší západku rozpracované hrany (např. klávesou Escape)."""
        if self.edge_source_id is None:
            return False
        self.edge_source_id = None
        return True

    def is_dragging(self) -> bool:
        return self.drag_action != DragAction.IDLE

    # ========== Viditelné prvky aktivního patra ==========

    def visible_nodes(self) -> List[GraphNode]:
        floor = self.session.active_floor
        if floor is None:
            return []
        return nodes_on_floor(self.session.document.nodes, floor.level)

    def visible_edges(self, nodes: Optional[List[GraphNode]] = None) -> List[GraphEdge]:
        if nodes is None:
            nodes = self.visible_nodes()
        return edges_between(self.session.document.edges, nodes)

    def resize_handles_visible(self) -> bool:
        """Táhla jsou vidět jen v režimu select při výběru právě jednoho uzlu."""
        return self.mode == Mode.SELECT and self.session.selection.primary_node_id() is not None

    # ========== Události ==========

    def pointer_down(self, x: float, y: float, modifier: bool = False) -> bool:
        """
        Stisk tlačítka. Cíl se určuje v pořadí: táhlo → uzel → hrana → prázdné plátno.

        Args:
            x, y: Pozice v souřadnicích obrázku patra
            modifier: Zda je držen modifikátor pro vícenásobný výběr (Shift)
        """
        if self.session.active_floor is None:
            return False
        self.pointer_pos = (x, y)
        selection = self.session.selection
        nodes = self.visible_nodes()

        # Táhlo pro změnu velikosti
        if self.resize_handles_visible():
            node = self.session.document.get_node(selection.primary_node_id())
            if node is not None and node in nodes:
                role = handle_at(node.bounding_box, x, y)
                if role is not None:
                    self._begin_drag(DragAction.RESIZE, x, y)
                    self.resize_role = role
                    return True

        # Uzel
        hit = node_at(nodes, x, y)
        if hit is not None:
            if self.mode == Mode.SELECT:
                if modifier:
                    selection.toggle_node(hit.id)
                elif hit.id not in selection.node_ids:
                    selection.set_nodes([hit.id])
                # klik na už vybraný uzel zachová skupinu, aby šla táhnout celá
                selection.edge_id = None
                self._begin_drag(DragAction.MOVE, x, y)
                return True
            if self.mode == Mode.ADD_EDGE:
                self._edge_step(hit.id)
                return True
            return False

        # Prázdné plátno (případně hrana)
        if self.mode == Mode.SELECT:
            edge = edge_at(self.visible_edges(nodes), nodes, x, y)
            if edge is not None:
                selection.clear()
                selection.edge_id = edge.id
                return True
            if not modifier:
                selection.clear()
            self.edge_source_id = None
            self._begin_drag(DragAction.SELECT_BOX, x, y)
            self.selection_rect = (x, y, 0.0, 0.0)
            return True
        if self.mode == Mode.ADD_NODE:
            self._begin_drag(DragAction.CREATE, x, y)
            self.preview_rect = (x, y, 0.0, 0.0)
            return True
        return False

    def pointer_move(self, x: float, y: float) -> bool:
        """Pohyb ukazatele; během tažení upravuje náhledy nebo dokument."""
        self.pointer_pos = (x, y)
        action = self.drag_action
        if action == DragAction.IDLE:
            # dočasná čára od zdroje rozpracované hrany
            return self.edge_source_id is not None

        ax, ay = self.anchor
        if action == DragAction.CREATE:
            self.preview_rect = normalize_rect(ax, ay, x, y)
            return True
        if action == DragAction.SELECT_BOX:
            self.selection_rect = normalize_rect(ax, ay, x, y)
            return True

        # Přírůstek od poslední události (ne od začátku tažení)
        lx, ly = self.last_pos
        dx, dy = x - lx, y - ly
        self.last_pos = (x, y)
        if dx == 0 and dy == 0:
            return False

        if action == DragAction.MOVE:
            return self._move_selected(dx, dy)
        if action == DragAction.RESIZE:
            return self._resize_selected(dx, dy)
        return False

    def pointer_up(self, x: float, y: float, modifier: bool = False) -> bool:
        """Puštění tlačítka: dokončí vytvoření, výběr obdélníkem nebo tažení."""
        self.pointer_pos = (x, y)
        action = self.drag_action
        changed = action != DragAction.IDLE

        if action == DragAction.CREATE:
            ax, ay = self.anchor
            self._finish_create(normalize_rect(ax, ay, x, y))
            self.preview_rect = None
        elif action == DragAction.SELECT_BOX:
            ax, ay = self.anchor
            self._finish_select_box(normalize_rect(ax, ay, x, y), modifier)
            self.selection_rect = None
        elif action in (DragAction.MOVE, DragAction.RESIZE) and self.modified:
            self.session.commit()

        self._reset_drag()
        return changed

    # ========== Interní kroky ==========

    def _begin_drag(self, action: str, x: float, y: float) -> None:
        self.drag_action = action
        self.anchor = (x, y)
        self.last_pos = (x, y)
        self.modified = False

    def _reset_drag(self) -> None:
        self.drag_action = DragAction.IDLE
        self.anchor = None
        self.last_pos = None
        self.resize_role = None
        self.modified = False

    def _move_selected(self, dx: float, dy: float) -> bool:
        document = self.session.document
        updates = {}
        for node_id in self.session.selection.node_ids:
            node = document.get_node(node_id)
            if node is not None:
                updates[node_id] = {"bounding_box": node.bounding_box.translated(dx, dy)}
        if not updates:
            return False
        document.update_nodes(updates)
        self.modified = True
        return True

    def _resize_selected(self, dx: float, dy: float) -> bool:
        node_id = self.session.selection.primary_node_id()
        node = self.session.document.get_node(node_id)
        if node is None or self.resize_role is None:
            return False
        box = resize_box(node.bounding_box, self.resize_role, dx, dy)
        self.session.document.update_node(node_id, bounding_box=box)
        self.modified = True
        return True

    def _finish_create(self, rect: Rect) -> None:
        x, y, w, h = rect
        # kliknutí bez tažení (nebo příliš malý obdélník) se zahodí
        if w <= MIN_BOX_SIZE or h <= MIN_BOX_SIZE:
            return
        floor: "Floor" = self.session.active_floor
        z1, z2 = floor_z_range(floor.level)
        node = GraphNode(
            id=next_id("node"),
            label=DEFAULT_NODE_LABEL,
            type=NodeType.CLASSROOM,
            capacity=DEFAULT_NODE_CAPACITY,
            safety_level=DEFAULT_SAFETY_LEVEL,
            floor_levels=(floor.level,),
            bounding_box=BoundingBox3D(x1=x, y1=y, x2=x + w, y2=y + h, z1=z1, z2=z2),
        )
        self.session.document.add_node(node)
        self.session.selection.set_nodes([node.id])
        self.session.commit()

    def _finish_select_box(self, rect: Rect, modifier: bool) -> None:
        hits = {n.id for n in self.visible_nodes() if rect_overlaps_box(rect, n.bounding_box)}
        selection = self.session.selection
        if modifier:
            selection.set_nodes(selection.node_ids | hits)
        else:
            selection.set_nodes(hits)

    def _edge_step(self, node_id: str) -> None:
        """Jeden krok tvorby hrany: západka zdroje → vytvoření / zrušení."""
        document = self.session.document
        source = self.edge_source_id
        if source is None or not document.has_node(source):
            self.edge_source_id = node_id
            self.session.selection.set_nodes([node_id])
            return
        if source != node_id:
            document.add_edge(GraphEdge(
                id=next_id("edge"),
                source=source,
                target=node_id,
                traversal_time=DEFAULT_TRAVERSAL_TIME,
                capacity=DEFAULT_EDGE_CAPACITY,
                active=True,
                bidirectional=True,
            ))
            self.session.commit()
        # opětovný klik na zdroj = zrušení bez vytvoření hrany
        self.edge_source_id = None
