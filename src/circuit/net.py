"""
Net representation for placement netlists.

A Net connects pins across multiple cells. It holds ids into the model's
pin arena; each pin record names the owning cell and the pin's slot in that
cell, so a net reference resolves to (cell id, pin-slot index).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class Net:
    """
    An electrical net connecting multiple pins.

    Attributes:
        name: Unique net identifier.
        pins: Ids of the connected pins in the model's pin arena.
    """
    name: str
    pins: tuple[int, ...] = ()

    @property
    def degree(self) -> int:
        """Number of pins on this net."""
        return len(self.pins)

    @property
    def is_two_pin(self) -> bool:
        """Whether this is a simple two-pin net."""
        return len(self.pins) == 2

    def __repr__(self) -> str:
        return f"Net('{self.name}', degree={self.degree})"


# ── Wirelength Estimation ─────────────────────────────────────────────

def bounding_box(points: Iterable[tuple[float, float]]) -> Optional[tuple[float, float, float, float]]:
    """
    Bounding box of a set of pin locations.

    Returns:
        (x_min, y_min, x_max, y_max) or None if there are no points.
    """
    xs, ys = [], []
    for x, y in points:
        xs.append(x)
        ys.append(y)

    if not xs:
        return None

    return (min(xs), min(ys), max(xs), max(ys))


def hpwl(points: Iterable[tuple[float, float]]) -> float:
    """
    Half-Perimeter Wirelength of a set of pin locations.

    HPWL is the half-perimeter of the bounding box enclosing all pin
    positions. A net with fewer than one pin has zero length.
    """
    bbox = bounding_box(points)
    if bbox is None:
        return 0.0
    x_min, y_min, x_max, y_max = bbox
    return (x_max - x_min) + (y_max - y_min)
