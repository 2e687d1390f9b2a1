"""Historie pro undo/redo systém editoru.

Každá diskrétní editační operace (vytvoření, smazání, dokončení tažení,
změna vlastnosti, ...) uloží jeden neměnný snapshot uzlů a hran.
Historie je lineární: commit po undo zahodí „budoucnost“.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from building.models import GraphEdge, GraphNode


@dataclass(frozen=True)
class Snapshot:
    """Neměnná dvojice (uzly, hrany) zachycená v jednom okamžiku."""
    nodes: Tuple[GraphNode, ...] = ()
    edges: Tuple[GraphEdge, ...] = ()


class HistoryManager:
    """
    Lineární zásobník snapshotů s kurzorem `index`.

    Počáteční stav je jeden prázdný snapshot na indexu 0, takže undo pod první
    skutečnou editaci vrací prázdný dokument místo chyby.
    """

    def __init__(self, initial: Optional[Snapshot] = None):
        self._stack: List[Snapshot] = [initial or Snapshot()]
        self.index = 0

    def commit(self, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]) -> Snapshot:
        """Ořízne redo-suffix za kurzorem, přidá nový snapshot a posune na něj kurzor."""
        snap = Snapshot(tuple(nodes), tuple(edges))
        del self._stack[self.index + 1:]
        self._stack.append(snap)
        self.index = len(self._stack) - 1
        return snap

    def undo(self) -> Optional[Snapshot]:
        """Vrátí předchozí snapshot nebo None, pokud je kurzor na začátku."""
        if not self.can_undo():
            return None
        self.index -= 1
        return self._stack[self.index]

    def redo(self) -> Optional[Snapshot]:
        """Vrátí následující snapshot nebo None, pokud je kurzor na konci."""
        if not self.can_redo():
            return None
        self.index += 1
        return self._stack[self.index]

    def reset(self, nodes: Iterable[GraphNode] = (), edges: Iterable[GraphEdge] = ()) -> None:
        """Zahodí celou historii a začne jedním snapshotem (import dokumentu)."""
        self._stack = [Snapshot(tuple(nodes), tuple(edges))]
        self.index = 0

    def can_undo(self) -> bool:
        return self.index > 0

    def can_redo(self) -> bool:
        return self.index < len(self._stack) - 1

    @property
    def current(self) -> Snapshot:
        return self._stack[self.index]

    def __len__(self) -> int:
        return len(self._stack)
