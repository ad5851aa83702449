"""
Cell and Pin records for placement netlists.

A Cell is a standard cell, macro or terminal (I/O pad) with physical
dimensions and an ordered list of pins. Pins are stored once, in a pin arena
owned by the NetlistModel; both the cell and the net a pin belongs to refer
to it by its integer id in that arena.

Cell positions are not stored here. They change far more often than cell
shapes and live in a separate array on the NetlistModel.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Pin:
    """
    A connection point on a cell, shared by the cell and its net.

    Attributes:
        cell: Id of the owning cell.
        net: Id of the net this pin is connected to.
        slot: Position of this pin within the owning cell's pin list.
        dx: X offset from the cell's lower-left corner.
        dy: Y offset from the cell's lower-left corner.
        name: Optional pin name (e.g. "A", "Y"); may be empty.
    """
    cell: int
    net: int
    slot: int
    dx: float = 0.0
    dy: float = 0.0
    name: str = ""

    def absolute_position(self, cell_x: float, cell_y: float) -> tuple[float, float]:
        """Get absolute coordinates given the parent cell's position."""
        return (cell_x + self.dx, cell_y + self.dy)


@dataclass(frozen=True)
class Cell:
    """
    A physical block in the netlist.

    Coordinate system: a cell placed at (x, y) has its lower-left corner
    there and extends to (x + width, y + height).

    Attributes:
        name: Unique cell identifier.
        width: Cell width.
        height: Cell height.
        pins: Ids of this cell's pins in the model's pin arena, in slot order.
        terminal: Whether the cell is a fixed terminal (pad).
        is_macro: Whether the cell is a macro block.
    """
    name: str
    width: float
    height: float
    pins: tuple[int, ...] = ()
    terminal: bool = False
    is_macro: bool = False

    # ── Geometric Properties ──────────────────────────────────────────

    @property
    def area(self) -> float:
        """Cell area (width × height)."""
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        """Width-to-height ratio."""
        return self.width / self.height if self.height > 0 else float('inf')

    @property
    def num_pins(self) -> int:
        return len(self.pins)

    def __repr__(self) -> str:
        kind = "terminal" if self.terminal else ("macro" if self.is_macro else "cell")
        return (f"Cell('{self.name}', {self.width:g}×{self.height:g}, "
                f"pins={len(self.pins)}, {kind})")
