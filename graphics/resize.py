"""Geometrie rohových táhel (resize handles) pro změnu velikosti uzlu.

Implementuje:
- Pozice 4 rohových táhel kolem boxu uzlu
- Hit-test táhla pod kurzorem
- Přepočet boxu při tažení za roh s minimálními rozměry
"""
from typing import Dict, Optional, Tuple
from dataclasses import replace

from building.models import BoundingBox3D
from constants import HANDLE_ROLES, HANDLE_SIZE, MIN_BOX_SIZE


def handle_positions(box: BoundingBox3D) -> Dict[str, Tuple[float, float]]:
    """Rozmístí táhla do rohů boxu (role ∈ {"nw","ne","sw","se"})."""
    return {
        "nw": (box.x1, box.y1),
        "ne": (box.x2, box.y1),
        "sw": (box.x1, box.y2),
        "se": (box.x2, box.y2),
    }


def handle_at(box: BoundingBox3D, x: float, y: float, size: float = HANDLE_SIZE) -> Optional[str]:
    """Vrátí roli táhla, jehož čtverec (size × size) obsahuje bod, jinak None."""
    half = size / 2
    for role in HANDLE_ROLES:
        hx, hy = handle_positions(box)[role]
        if abs(x - hx) <= half and abs(y - hy) <= half:
            return role
    return None


def resize_box(box: BoundingBox3D, role: str, dx: float, dy: float,
               min_size: float = MIN_BOX_SIZE) -> BoundingBox3D:
    """
    Posune pouze dvě souřadnice vlastněné uchopeným rohem o přírůstek (dx, dy).

    Pokud by box byl menší než min_size, dorovná se strana, za kterou se táhne,
    takže protější (ukotvený) roh zůstává na místě.
    """
    x1, y1, x2, y2 = box.x1, box.y1, box.x2, box.y2

    if role in ("nw", "sw"):
        x1 += dx
    if role in ("ne", "se"):
        x2 += dx
    if role in ("nw", "ne"):
        y1 += dy
    if role in ("sw", "se"):
        y2 += dy

    # minimální rozměry: opravíme stranu podle role
    if x2 - x1 < min_size:
        if "e" in role:
            x2 = x1 + min_size
        else:
            x1 = x2 - min_size
    if y2 - y1 < min_size:
        if "s" in role:
            y2 = y1 + min_size
        else:
            y1 = y2 - min_size

    return replace(box, x1=x1, y1=y1, x2=x2, y2=y2)
