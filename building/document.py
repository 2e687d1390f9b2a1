"""In-memory dokument grafu budovy a výběr prvků.

GraphDocument drží patra, uzly a hrany a nabízí synchronní mutační primitiva.
Mutace neexistujícího ID je tichá no-op (vrací False), aby stroj interakcí
nemusel řešit rychlé nebo duplicitní události.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from building.models import Floor, GraphEdge, GraphNode


class GraphDocument:
    """Patra, uzly a hrany jednoho editovaného dokumentu."""

    def __init__(self, floors: Iterable[Floor] = (), nodes: Iterable[GraphNode] = (),
                 edges: Iterable[GraphEdge] = ()):
        # Slovníky zachovávají pořadí vložení → pořadí vykreslování (poslední = nahoře)
        self._floors: Dict[str, Floor] = {f.id: f for f in floors}
        self._nodes: Dict[str, GraphNode] = {n.id: n for n in nodes}
        self._edges: Dict[str, GraphEdge] = {e.id: e for e in edges}
        self.revision = 0  # Zvyšuje se při každé změně (pro překreslení pohledů)

    # ========== Čtení ==========

    @property
    def floors(self) -> List[Floor]:
        return list(self._floors.values())

    @property
    def nodes(self) -> Tuple[GraphNode, ...]:
        return tuple(self._nodes.values())

    @property
    def edges(self) -> Tuple[GraphEdge, ...]:
        return tuple(self._edges.values())

    def get_floor(self, floor_id: Optional[str]) -> Optional[Floor]:
        return self._floors.get(floor_id) if floor_id else None

    def floor_by_level(self, level: int) -> Optional[Floor]:
        for f in self._floors.values():
            if f.level == level:
                return f
        return None

    def get_node(self, node_id: Optional[str]) -> Optional[GraphNode]:
        return self._nodes.get(node_id) if node_id else None

    def get_edge(self, edge_id: Optional[str]) -> Optional[GraphEdge]:
        return self._edges.get(edge_id) if edge_id else None

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edges

    # ========== Patra (nejsou součástí historie) ==========

    def add_floor(self, floor: Floor) -> None:
        self._floors[floor.id] = floor
        self._touch()

    def update_floor(self, floor_id: str, **fields: Any) -> bool:
        floor = self._floors.get(floor_id)
        if floor is None:
            return False
        self._floors[floor_id] = replace(floor, **fields)
        self._touch()
        return True

    def remove_floor(self, floor_id: str) -> bool:
        if self._floors.pop(floor_id, None) is None:
            return False
        self._touch()
        return True

    # ========== Uzly ==========

    def add_node(self, node: GraphNode) -> None:
        self._nodes[node.id] = node
        self._touch()

    def add_nodes(self, nodes: Iterable[GraphNode]) -> None:
        """Hromadné vložení (např. výsledek AI extrakce)."""
        for n in nodes:
            self._nodes[n.id] = n
        self._touch()

    def update_node(self, node_id: str, **fields: Any) -> bool:
        """Částečná aktualizace uzlu. Neexistující ID je no-op."""
        node = self._nodes.get(node_id)
        if node is None:
            return False
        self._nodes[node_id] = replace(node, **fields)
        self._touch()
        return True

    def update_nodes(self, updates: Dict[str, Dict[str, Any]]) -> int:
        """
        Dávková aktualizace více uzlů jedním voláním (tažení skupiny).

        Returns:
            Počet skutečně aktualizovaných uzlů
        """
        count = 0
        for node_id, fields in updates.items():
            node = self._nodes.get(node_id)
            if node is None:
                continue
            self._nodes[node_id] = replace(node, **fields)
            count += 1
        if count:
            self._touch()
        return count

    def remove_nodes(self, node_ids: Iterable[str]) -> Set[str]:
        """
        Smaže uzly a kaskádově i všechny hrany, které na ně odkazují.

        Returns:
            Množina ID skutečně smazaných hran
        """
        ids = {i for i in node_ids if i in self._nodes}
        if not ids:
            return set()
        for i in ids:
            del self._nodes[i]
        removed_edges = {e.id for e in self._edges.values() if e.source in ids or e.target in ids}
        for e_id in removed_edges:
            del self._edges[e_id]
        self._touch()
        return removed_edges

    # ========== Hrany ==========

    def add_edge(self, edge: GraphEdge) -> None:
        self._edges[edge.id] = edge
        self._touch()

    def add_edges(self, edges: Iterable[GraphEdge]) -> None:
        for e in edges:
            self._edges[e.id] = e
        self._touch()

    def update_edge(self, edge_id: str, **fields: Any) -> bool:
        edge = self._edges.get(edge_id)
        if edge is None:
            return False
        self._edges[edge_id] = replace(edge, **fields)
        self._touch()
        return True

    def remove_edge(self, edge_id: str) -> bool:
        if self._edges.pop(edge_id, None) is None:
            return False
        self._touch()
        return True

    # ========== Snapshoty ==========

    def restore(self, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]) -> None:
        """Nahradí uzly a hrany (patra zůstávají) – použití při undo/redo."""
        self._nodes = {n.id: n for n in nodes}
        self._edges = {e.id: e for e in edges}
        self._touch()

    def replace_all(self, floors: Iterable[Floor], nodes: Iterable[GraphNode],
                    edges: Iterable[GraphEdge]) -> None:
        """Nahradí celý obsah dokumentu (import)."""
        self._floors = {f.id: f for f in floors}
        self.restore(nodes, edges)

    def _touch(self) -> None:
        self.revision += 1


@dataclass
class Selection:
    """
    Výběr prvků: množina uzlů (multi-select) a nejvýše jedna hrana.

    Attributes:
        node_ids: ID vybraných uzlů
        edge_id: ID vybrané hrany nebo None
    """
    node_ids: Set[str] = field(default_factory=set)
    edge_id: Optional[str] = None

    def clear(self) -> None:
        self.node_ids = set()
        self.edge_id = None

    def set_nodes(self, node_ids: Iterable[str]) -> None:
        self.node_ids = set(node_ids)

    def toggle_node(self, node_id: str) -> None:
        if node_id in self.node_ids:
            self.node_ids.discard(node_id)
        else:
            self.node_ids.add(node_id)

    def primary_node_id(self) -> Optional[str]:
        """ID jediného vybraného uzlu, jinak None."""
        if len(self.node_ids) == 1:
            return next(iter(self.node_ids))
        return None

    def is_empty(self) -> bool:
        return not self.node_ids and self.edge_id is None

    def purge(self, document: GraphDocument) -> None:
        """Odstraní z výběru ID, která v dokumentu už neexistují."""
        self.node_ids = {i for i in self.node_ids if document.has_node(i)}
        if self.edge_id is not None and not document.has_edge(self.edge_id):
            self.edge_id = None
