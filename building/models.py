"""Datové modely pro reprezentaci grafu budovy (patra, uzly, hrany).

Modely jsou neměnné (frozen dataclass) – každá změna vytváří novou instanci
přes `dataclasses.replace`, takže snapshoty v historii zůstávají nedotčené.
Klíče ve slovnících odpovídají perzistentnímu JSON formátu (camelCase).
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple

from constants import NodeType


@dataclass(frozen=True)
class BoundingBox3D:
    """
    3D ohraničující box uzlu.

    Attributes:
        x1, y1, x2, y2: Souřadnice v pixelech obrázku referenčního patra
        z1, z2: Vertikální rozsah ve světových jednotkách
    """
    x1: float
    y1: float
    x2: float
    y2: float
    z1: float
    z2: float

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1

    @property
    def center(self) -> Tuple[float, float]:
        """Střed boxu v rovině obrázku."""
        return (self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2

    @property
    def mid_z(self) -> float:
        return (self.z1 + self.z2) / 2

    def normalized(self) -> "BoundingBox3D":
        """Vrátí box s prohozenými souřadnicemi tak, aby platilo x1<=x2, y1<=y2, z1<=z2."""
        return BoundingBox3D(
            x1=min(self.x1, self.x2), y1=min(self.y1, self.y2),
            x2=max(self.x1, self.x2), y2=max(self.y1, self.y2),
            z1=min(self.z1, self.z2), z2=max(self.z1, self.z2),
        )

    def translated(self, dx: float, dy: float) -> "BoundingBox3D":
        """Posune box v rovině x/y (z zůstává)."""
        return replace(self, x1=self.x1 + dx, y1=self.y1 + dy, x2=self.x2 + dx, y2=self.y2 + dy)

    def to_dict(self) -> Dict[str, Any]:
        return {"x1": self.x1, "y1": self.y1, "z1": self.z1,
                "x2": self.x2, "y2": self.y2, "z2": self.z2}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoundingBox3D":
        return cls(x1=data["x1"], y1=data["y1"], x2=data["x2"],
                   y2=data["y2"], z1=data["z1"], z2=data["z2"])


@dataclass(frozen=True)
class Floor:
    """
    Jedno patro budovy s vlastním podkladovým obrázkem.

    Attributes:
        id: Unikátní identifikátor patra
        level: Celočíselná úroveň (0 = přízemí, záporné = podzemí)
        name: Název patra (typicky název souboru s obrázkem)
        image_url: Obrázek patra jako data URL
        width: Šířka obrázku v pixelech
        height: Výška obrázku v pixelech
    """
    id: str
    level: int
    name: str
    image_url: str
    width: int
    height: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "level": self.level, "name": self.name,
                "imageUrl": self.image_url, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Floor":
        return cls(id=data["id"], level=data["level"], name=data.get("name", ""),
                   image_url=data.get("imageUrl", ""), width=data["width"], height=data["height"])


@dataclass(frozen=True)
class GraphNode:
    """
    Uzel grafu – místnost, chodba, schodiště apod.

    Attributes:
        id: Unikátní identifikátor uzlu
        label: Textový popisek
        bounding_box: 3D ohraničující box
        type: Typ prostoru (viz NodeType)
        capacity: Kapacita osob (nezáporné celé číslo)
        safety_level: Úroveň bezpečnosti
        floor_levels: Úrovně pater, na kterých uzel leží (seřazené)
    """
    id: str
    label: str
    bounding_box: BoundingBox3D
    type: str = NodeType.CLASSROOM
    capacity: int = 0
    safety_level: int = 1
    floor_levels: Tuple[int, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "boundingBox": self.bounding_box.to_dict(),
            "floorLevels": list(self.floor_levels),
            "capacity": self.capacity,
            "type": self.type,
            "safetyLevel": self.safety_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphNode":
        return cls(
            id=data["id"],
            label=data.get("label", ""),
            bounding_box=BoundingBox3D.from_dict(data["boundingBox"]),
            type=data.get("type", NodeType.CLASSROOM),
            capacity=data.get("capacity", 0),
            safety_level=data.get("safetyLevel", 1),
            floor_levels=tuple(data.get("floorLevels", ())),
        )


@dataclass(frozen=True)
class GraphEdge:
    """
    Hrana grafu – průchodnost mezi dvěma uzly.

    Hrana odkazuje na uzly pouze přes jejich ID (slabá reference).

    Attributes:
        id: Unikátní identifikátor hrany
        source: ID zdrojového uzlu
        target: ID cílového uzlu
        traversal_time: Doba průchodu v sekundách
        capacity: Kapacita hrany
        active: Zda je průchod aktivní
        bidirectional: Zda je průchod obousměrný
    """
    id: str
    source: str
    target: str
    traversal_time: float = 10
    capacity: int = 100
    active: bool = True
    bidirectional: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "traversalTime": self.traversal_time,
            "capacity": self.capacity,
            "active": self.active,
            "bidirectional": self.bidirectional,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphEdge":
        return cls(
            id=data["id"],
            source=data["source"],
            target=data["target"],
            traversal_time=data.get("traversalTime", 10),
            capacity=data.get("capacity", 100),
            active=data.get("active", True),
            bidirectional=data.get("bidirectional", True),
        )
