"""Relace editoru: explicitní kontext, který vlastní celý editovaný stav.

Relace drží dokument, historii, výběr, kameru 3D pohledu, aktivní patro a stroj
interakcí. Všechny diskrétní editace (mazání, změny vlastností, sloučení AI
extrakce, import) procházejí přes ni, aby každá skončila nejvýše jedním commitem.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from ai.graph_import import ExtractionError, MergeReport, build_graph_from_extraction
from building.document import GraphDocument, Selection
from building.models import BoundingBox3D, Floor
from constants import NODE_TYPES
from editor.interaction import InteractionEngine
from geometry.projection import Camera, ProjectedLayer, project_layers
from geometry.spatial import spanned_levels
from persistence.json_io import document_to_dict, load_document_from_json, parse_document
from undo.history import HistoryManager, Snapshot

NODE_FIELDS = ("label", "type", "capacity", "safety_level", "bounding_box", "floor_levels")
EDGE_FIELDS = ("source", "target", "traversal_time", "capacity", "active", "bidirectional")


class EditorSession:
    """
    Kontext jedné otevřené budovy.

    Attributes:
        document: Editovaný dokument (patra, uzly, hrany)
        history: Lineární undo/redo historie snapshotů
        selection: Aktuální výběr
        camera: Konfigurace 3D pohledu
        active_floor_id: ID patra zobrazeného ve 2D editoru
        interaction: Stroj interakcí nad událostmi ukazatele
    """

    def __init__(self, document: Optional[GraphDocument] = None):
        self.document = document or GraphDocument()
        self.history = HistoryManager(Snapshot(self.document.nodes, self.document.edges))
        self.selection = Selection()
        self.camera = Camera()
        floors = self.document.floors
        self.active_floor_id: Optional[str] = floors[0].id if floors else None
        self.interaction = InteractionEngine(self)

    # ========== Aktivní patro a režim ==========

    @property
    def active_floor(self) -> Optional[Floor]:
        return self.document.get_floor(self.active_floor_id)

    def set_active_floor(self, floor_id: Optional[str]) -> None:
        """Přepne 2D editor na jiné patro; rozpracovaná interakce se zruší."""
        if floor_id is not None and self.document.get_floor(floor_id) is None:
            return
        self.active_floor_id = floor_id
        self.interaction.cancel()

    @property
    def mode(self) -> str:
        return self.interaction.mode

    def set_mode(self, mode: str) -> None:
        self.interaction.set_mode(mode)

    # ========== Historie ==========

    def commit(self) -> None:
        """Uloží aktuální uzly a hrany jako nový snapshot."""
        self.history.commit(self.document.nodes, self.document.edges)

    def undo(self) -> bool:
        """
        Vrátí dokument o jeden snapshot zpět.

        Výběr se celý zruší, protože vybrané prvky nemusí v obnoveném stavu existovat.
        """
        snap = self.history.undo()
        if snap is None:
            return False
        self.interaction.cancel()
        self.document.restore(snap.nodes, snap.edges)
        self.selection.clear()
        print(f"[History] Undo → {self.history.index + 1}/{len(self.history)}")
        return True

    def redo(self) -> bool:
        """Přejde na následující snapshot; z výběru se odstraní jen neexistující ID."""
        snap = self.history.redo()
        if snap is None:
            return False
        self.interaction.cancel()
        self.document.restore(snap.nodes, snap.edges)
        self.selection.purge(self.document)
        print(f"[History] Redo → {self.history.index + 1}/{len(self.history)}")
        return True

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    # ========== Mazání ==========

    def delete_nodes(self, node_ids: Iterable[str]) -> bool:
        """Smaže uzly (kaskádově i jejich hrany) jedním commitem."""
        ids = [i for i in node_ids if self.document.has_node(i)]
        if not ids:
            return False
        self.document.remove_nodes(ids)
        self.selection.purge(self.document)
        self.commit()
        return True

    def delete_edge(self, edge_id: str) -> bool:
        if not self.document.remove_edge(edge_id):
            return False
        self.selection.purge(self.document)
        self.commit()
        return True

    def delete_selected(self) -> bool:
        """Smaže vybrané uzly, a pokud žádné nejsou, vybranou hranu."""
        if self.selection.node_ids:
            return self.delete_nodes(list(self.selection.node_ids))
        if self.selection.edge_id is not None:
            return self.delete_edge(self.selection.edge_id)
        return False

    # ========== Úpravy vlastností ==========

    def update_node_properties(self, node_id: str, **fields: Any) -> bool:
        """
        Částečná úprava uzlu z panelu vlastností.

        Box se normalizuje; pokud se změnil z-rozsah, přepočítá se floor_levels
        na všechna protnutá patra. Commit proběhne jen při skutečné změně.

        Raises:
            ValueError: Neznámé pole, neznámý typ nebo záporná kapacita
        """
        node = self.document.get_node(node_id)
        if node is None:
            return False
        _check_fields(fields, NODE_FIELDS)
        if "type" in fields and fields["type"] not in NODE_TYPES:
            raise ValueError(f"Unknown node type: {fields['type']!r}")
        if "capacity" in fields and fields["capacity"] < 0:
            raise ValueError("Capacity must not be negative.")

        box: Optional[BoundingBox3D] = fields.get("bounding_box")
        if box is not None:
            box = box.normalized()
            fields["bounding_box"] = box
            old = node.bounding_box
            if (box.z1, box.z2) != (old.z1, old.z2) and "floor_levels" not in fields:
                fields["floor_levels"] = spanned_levels(box.z1, box.z2)
        if "floor_levels" in fields:
            fields["floor_levels"] = tuple(sorted(fields["floor_levels"]))

        if all(getattr(node, k) == v for k, v in fields.items()):
            return False
        self.document.update_node(node_id, **fields)
        self.commit()
        return True

    def update_edge_properties(self, edge_id: str, **fields: Any) -> bool:
        """
        Částečná úprava hrany z panelu vlastností; commit jen při skutečné změně.

        Raises:
            ValueError: Neznámé pole, nekladná doba průchodu nebo záporná kapacita
        """
        edge = self.document.get_edge(edge_id)
        if edge is None:
            return False
        _check_fields(fields, EDGE_FIELDS)
        if "traversal_time" in fields and fields["traversal_time"] <= 0:
            raise ValueError("Traversal time must be positive.")
        if "capacity" in fields and fields["capacity"] < 0:
            raise ValueError("Capacity must not be negative.")
        if all(getattr(edge, k) == v for k, v in fields.items()):
            return False
        self.document.update_edge(edge_id, **fields)
        self.commit()
        return True

    # ========== Patra (mimo historii) ==========

    def add_floor(self, floor: Floor) -> None:
        """Přidá patro; první přidané patro se stane aktivním."""
        self.document.add_floor(floor)
        if self.active_floor is None:
            self.set_active_floor(floor.id)
        print(f"[Floors] Added '{floor.name}' (level {floor.level}, {floor.width}x{floor.height})")

    def remove_floor(self, floor_id: str) -> bool:
        if not self.document.remove_floor(floor_id):
            return False
        if self.active_floor_id == floor_id:
            self.set_active_floor(None)
        print(f"[Floors] Removed {floor_id}")
        return True

    def update_floor_level(self, floor_id: str, level: int) -> bool:
        """Změní úroveň patra (uzly se nepřesouvají)."""
        floor = self.document.get_floor(floor_id)
        if floor is None or floor.level == level:
            return False
        self.document.update_floor(floor_id, level=level)
        return True

    # ========== 3D pohled ==========

    def set_camera(self, **changes: float) -> Camera:
        """Změní parametry kamery (hodnoty mimo rozsah se ořežou)."""
        self.camera = self.camera.with_changes(**changes)
        return self.camera

    def projected_layers(self) -> List[ProjectedLayer]:
        return project_layers(self.document.floors, self.document.nodes, self.document.edges, self.camera)

    # ========== Import / export ==========

    def to_dict(self) -> Dict[str, Any]:
        return document_to_dict(self.document)

    def load_dict(self, data: Any) -> None:
        """
        Nahradí celý dokument importovanými daty a resetuje historii.

        Raises:
            DocumentFormatError: Data nejsou platný dokument (stav se nemění)
        """
        floors, nodes, edges = parse_document(data)
        self._replace(floors, nodes, edges)

    def load_file(self, path: str) -> None:
        """Načte dokument z JSON souboru (viz `load_dict`)."""
        floors, nodes, edges = load_document_from_json(path)
        self._replace(floors, nodes, edges)

    def _replace(self, floors, nodes, edges) -> None:
        self.interaction.cancel()
        self.document.replace_all(floors, nodes, edges)
        self.history.reset(self.document.nodes, self.document.edges)
        self.selection.clear()
        floors = self.document.floors
        self.active_floor_id = floors[0].id if floors else None

    # ========== AI extrakce ==========

    def merge_extraction(self, data: Optional[Dict[str, Any]], floor: Optional[Floor] = None) -> MergeReport:
        """
        Sloučí výsledek AI extrakce do dokumentu jako jeden další commit.

        Args:
            data: Odpověď extrakce ({"nodes", "connections"}) nebo None
            floor: Cílové patro (výchozí je aktivní patro)

        Raises:
            ExtractionError: Prázdný nebo neplatný výsledek, případně chybí patro
        """
        floor = floor or self.active_floor
        if floor is None:
            raise ExtractionError("No active floor to merge the extraction into.")
        if not isinstance(data, dict) or not data.get("nodes"):
            raise ExtractionError("AI extraction returned no nodes.")
        try:
            report = build_graph_from_extraction(data, floor)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ExtractionError(f"AI extraction result is malformed: {e}") from e

        self.document.add_nodes(report.nodes)
        self.document.add_edges(report.edges)
        self.commit()
        print(f"[AI] Merged {report.summary()} into '{floor.name}'")
        return report


def _check_fields(fields: Dict[str, Any], allowed: tuple) -> None:
    unknown = [k for k in fields if k not in allowed]
    if unknown:
        raise ValueError(f"Unknown field(s): {', '.join(unknown)}")
