"""Projekční a vrstvicí engine pro „3D“ pohled na budovu.

Šikmá (oblique) projekce: posun o střed → rotace kolem svislé osy o `angle`
→ zkrácení y o `tilt` → posun nahoru o `z * separation`. Stejnou transformaci
lze vyjádřit po bodech (`project`) i jako afinní matici pro umístění celého
obrázku patra (`floor_transform`).

Engine nikdy nemění dokument; výstup se vždy celý přepočítá.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Sequence, Tuple

from building.models import Floor, GraphEdge, GraphNode
from constants import (
    CAMERA_ANGLE, CAMERA_SEPARATION, CAMERA_TILT, CAMERA_ZOOM,
    DEFAULT_CENTER, FLOOR_HEIGHT,
)
from geometry.spatial import in_floor_extent

Point = Tuple[float, float]
# Afinní matice ve tvaru SVG matrix(a, b, c, d, e, f):
#   x' = a*x + c*y + e
#   y' = b*x + d*y + f
Affine = Tuple[float, float, float, float, float, float]


def _clamp(value: float, bounds: Tuple[float, float, float]) -> float:
    lo, hi, _ = bounds
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class Camera:
    """
    Konfigurace kamery 3D pohledu.

    Attributes:
        angle: Rotace kolem svislé osy ve stupních (0–360)
        tilt: Svislé zkrácení (0.1–1)
        zoom: Přiblížení (0.1–2)
        separation: Násobek svislé vzdálenosti pater (0–5)
    """
    angle: float = CAMERA_ANGLE[2]
    tilt: float = CAMERA_TILT[2]
    zoom: float = CAMERA_ZOOM[2]
    separation: float = CAMERA_SEPARATION[2]

    def __post_init__(self):
        # Hodnoty mimo rozsah se ořežou (angle se přetočí)
        angle = self.angle if self.angle == CAMERA_ANGLE[1] else self.angle % 360.0
        object.__setattr__(self, "angle", angle)
        object.__setattr__(self, "tilt", _clamp(self.tilt, CAMERA_TILT))
        object.__setattr__(self, "zoom", _clamp(self.zoom, CAMERA_ZOOM))
        object.__setattr__(self, "separation", _clamp(self.separation, CAMERA_SEPARATION))

    def with_changes(self, **changes) -> "Camera":
        return replace(self, **changes)


def rotation_center(floors: Iterable[Floor]) -> Point:
    """
    Společný střed rotace: polovina maximální šířky a výšky přes všechna patra.

    Patra různých velikostí se tak otáčejí kolem jedné osy a „neujíždějí“.
    """
    floors = list(floors)
    if not floors:
        return DEFAULT_CENTER
    return max(f.width for f in floors) / 2, max(f.height for f in floors) / 2


class Projector:
    """Šikmá projekce bodů a pater pro danou kameru a střed rotace."""

    def __init__(self, camera: Camera, center: Point = DEFAULT_CENTER):
        self.camera = camera
        self.center = center
        rad = math.radians(camera.angle)
        self._cos = math.cos(rad)
        self._sin = math.sin(rad)

    @classmethod
    def for_floors(cls, floors: Iterable[Floor], camera: Camera) -> "Projector":
        return cls(camera, rotation_center(floors))

    def project(self, x: float, y: float, z: float) -> Point:
        """Promítne 3D bod: rotace, pak tilt pouze na y, pak posun o z * separation."""
        dx = x - self.center[0]
        dy = y - self.center[1]
        rx = dx * self._cos - dy * self._sin
        ry = dx * self._sin + dy * self._cos
        return rx, ry * self.camera.tilt - z * self.camera.separation

    def floor_transform(self, z: float) -> Affine:
        """
        Afinní matice umisťující obrázek patra (lokální pixely, počátek vlevo nahoře)
        do promítnutého prostoru ve výšce z.

        Algebraicky rozepsaná stejná skladba jako `project`:
            x' = x*cos - y*sin + (-cx*cos + cy*sin)
            y' = x*sin*tilt + y*cos*tilt + ((-cx*sin - cy*cos)*tilt - z*separation)
        """
        cx, cy = self.center
        cos, sin, tilt = self._cos, self._sin, self.camera.tilt
        a = cos
        b = sin * tilt
        c = -sin
        d = cos * tilt
        e = -cx * cos + cy * sin
        f = (-cx * sin - cy * cos) * tilt - z * self.camera.separation
        return a, b, c, d, e, f


def apply_affine(m: Affine, x: float, y: float) -> Point:
    """Aplikuje afinní matici na bod."""
    a, b, c, d, e, f = m
    return a * x + c * y + e, b * x + d * y + f


# ========== Vrstvy ==========

@dataclass
class Layer:
    """Podmnožina uzlů a hran přiřazená jednomu patru."""
    floor: Floor
    z: float
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)


def build_layers(floors: Iterable[Floor], nodes: Sequence[GraphNode], edges: Sequence[GraphEdge],
                 floor_height: float = FLOOR_HEIGHT) -> List[Layer]:
    """
    Rozdělí uzly a hrany do vrstev podle pater (vzestupně podle level).

    - Uzel patří do vrstvy, do jejíhož rozsahu padne střed jeho z-rozsahu.
    - Hrana patří do vrstvy konce s vyšším z1; hrana s chybějícím koncem
      nepatří nikam.
    """
    by_id = {n.id: n for n in nodes}
    layers = []
    for floor in sorted(floors, key=lambda f: f.level):
        z_base = floor.level * floor_height
        layer = Layer(floor=floor, z=z_base)
        layer.nodes = [n for n in nodes if in_floor_extent(n.bounding_box.mid_z, floor.level, floor_height)]
        for e in edges:
            src, dst = by_id.get(e.source), by_id.get(e.target)
            if src is None or dst is None:
                continue
            top_z = max(src.bounding_box.z1, dst.bounding_box.z1)
            if in_floor_extent(top_z, floor.level, floor_height):
                layer.edges.append(e)
        layers.append(layer)
    return layers


# ========== Promítnutá scéna ==========

@dataclass
class ProjectedNode:
    node: GraphNode
    corners: List[Point]  # nw, ne, se, sw v pořadí obrysu
    label_pos: Point


@dataclass
class ProjectedEdge:
    edge: GraphEdge
    start: Point
    end: Point


@dataclass
class ProjectedLayer:
    floor: Floor
    z: float
    transform: Affine
    nodes: List[ProjectedNode] = field(default_factory=list)
    edges: List[ProjectedEdge] = field(default_factory=list)


def project_layers(floors: Iterable[Floor], nodes: Sequence[GraphNode], edges: Sequence[GraphEdge],
                   camera: Camera, floor_height: float = FLOOR_HEIGHT) -> List[ProjectedLayer]:
    """
    Spočítá vykreslitelnou scénu: vrstvy s maticí patra, promítnutými půdorysy
    uzlů (na úrovni patra) a hranami mezi středy uzlů.

    Konce hran se promítají ve skutečném z1 každého uzlu, takže spojnice mezi
    patry jsou šikmé.
    """
    floors = list(floors)
    projector = Projector.for_floors(floors, camera)
    by_id = {n.id: n for n in nodes}
    result = []
    for layer in build_layers(floors, nodes, edges, floor_height):
        z = layer.z
        pl = ProjectedLayer(floor=layer.floor, z=z, transform=projector.floor_transform(z))
        for n in layer.nodes:
            b = n.bounding_box
            corners = [projector.project(b.x1, b.y1, z), projector.project(b.x2, b.y1, z),
                       projector.project(b.x2, b.y2, z), projector.project(b.x1, b.y2, z)]
            cx, cy = b.center
            pl.nodes.append(ProjectedNode(n, corners, projector.project(cx, cy, z)))
        for e in layer.edges:
            src, dst = by_id[e.source], by_id[e.target]
            (sx, sy), (tx, ty) = src.bounding_box.center, dst.bounding_box.center
            pl.edges.append(ProjectedEdge(
                e,
                projector.project(sx, sy, src.bounding_box.z1),
                projector.project(tx, ty, dst.bounding_box.z1),
            ))
        result.append(pl)
    return result
