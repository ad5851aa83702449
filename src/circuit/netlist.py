"""
NetlistModel: the complete placement netlist.

A NetlistModel holds all cells, nets, pins and placement rows of a design,
along with the current cell positions. The structure (cells, nets, pins,
rows, name lookups) is fixed once the model is built; positions are kept in
a separate numpy array because placers update them constantly.

Pins are stored once, in `pins`. Each Cell and each Net lists integer ids
into that arena, so a pin seen from its cell and seen from its net is always
the same record.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional
import numpy as np

from .cell import Cell, Pin
from .net import Net, hpwl


BBox = tuple[float, float, float, float]


@dataclass(frozen=True)
class Row:
    """
    A standard cell placement row.

    Attributes:
        name: Row identifier.
        bounds: (x_min, y_min, x_max, y_max) of the row.
        site_spacing: Distance between adjacent placement sites.
    """
    name: str
    bounds: BBox
    site_spacing: float = 1.0

    @property
    def area(self) -> float:
        x_min, y_min, x_max, y_max = self.bounds
        return (x_max - x_min) * (y_max - y_min)


@dataclass(frozen=True, eq=False)
class NetlistModel:
    """
    Read-only netlist with mutable cell positions.

    Usually created through NetlistBuilder, which guarantees that every pin
    listed by a cell is also listed by its net. Constructing a model directly
    skips that guarantee.

    Attributes:
        name: Design name.
        cells: Cells indexed by cell id.
        nets: Nets indexed by net id.
        pins: The pin arena, indexed by pin id.
        positions: (num_cells, 2) float array of lower-left cell positions.
        rows: Placement rows.
        cell_map: Cell name to cell id.
        net_map: Net name to net id.
    """
    name: str
    cells: tuple[Cell, ...]
    nets: tuple[Net, ...]
    pins: tuple[Pin, ...]
    positions: np.ndarray = field(repr=False)
    rows: tuple[Row, ...] = ()
    cell_map: Mapping[str, int] = field(default_factory=dict, repr=False)
    net_map: Mapping[str, int] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        positions = np.asarray(self.positions, dtype=np.float64)
        if positions.shape != (len(self.cells), 2):
            raise ValueError(
                f"positions must have shape ({len(self.cells)}, 2), "
                f"got {positions.shape}"
            )
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "cell_map", MappingProxyType(dict(self.cell_map)))
        object.__setattr__(self, "net_map", MappingProxyType(dict(self.net_map)))

    # ── Sizes ─────────────────────────────────────────────────────────

    @property
    def num_cells(self) -> int:
        return len(self.cells)

    @property
    def num_nets(self) -> int:
        return len(self.nets)

    @property
    def num_pins(self) -> int:
        return len(self.pins)

    @property
    def num_terminals(self) -> int:
        return sum(1 for c in self.cells if c.terminal)

    @property
    def num_macros(self) -> int:
        return sum(1 for c in self.cells if c.is_macro)

    # ── Connectivity Queries ──────────────────────────────────────────

    def cell_pins(self, cell_id: int) -> list[Pin]:
        """Pins owned by a cell, in slot order."""
        return [self.pins[p] for p in self.cells[cell_id].pins]

    def net_pins(self, net_id: int) -> list[Pin]:
        """Pins connected by a net, in net order."""
        return [self.pins[p] for p in self.nets[net_id].pins]

    def cell_index(self, name: str) -> Optional[int]:
        """Look up a cell id by name."""
        return self.cell_map.get(name)

    def net_index(self, name: str) -> Optional[int]:
        """Look up a net id by name."""
        return self.net_map.get(name)

    # ── Positions ─────────────────────────────────────────────────────

    def position(self, cell_id: int) -> tuple[float, float]:
        """Lower-left corner of a cell."""
        x, y = self.positions[cell_id]
        return (float(x), float(y))

    def pin_location(self, pin_id: int) -> tuple[float, float]:
        """Absolute location of a pin: cell position plus pin offset."""
        pin = self.pins[pin_id]
        x, y = self.positions[pin.cell]
        return pin.absolute_position(float(x), float(y))

    def set_cell_center(self, cell_id: int, x: float, y: float) -> None:
        """Place a cell so that its center lands on (x, y)."""
        cell = self.cells[cell_id]
        self.positions[cell_id, 0] = x - cell.width / 2.0
        self.positions[cell_id, 1] = y - cell.height / 2.0

    def set_cell_centers(self, cell_ids: Iterable[int], x: float, y: float) -> None:
        """Stack several cells on the same center point."""
        for cell_id in cell_ids:
            self.set_cell_center(cell_id, x, y)

    # ── Area ──────────────────────────────────────────────────────────

    def cell_area(self) -> float:
        """Total area of all non-terminal cells."""
        return sum(c.area for c in self.cells if not c.terminal)

    def cell_weights(self, cell_ids: Iterable[int]) -> float:
        """Summed area of the given cells."""
        return sum(self.cells[c].area for c in cell_ids)

    def row_area(self) -> float:
        return sum(r.area for r in self.rows)

    # ── Wirelength ────────────────────────────────────────────────────

    def net_hpwl(self, net_id: int) -> float:
        """Pin-accurate HPWL of a single net."""
        return hpwl(self.pin_location(p) for p in self.nets[net_id].pins)

    def total_hpwl(self) -> float:
        """Compute total HPWL across all nets."""
        return sum(self.net_hpwl(n) for n in range(len(self.nets)))

    # ── Core Area ─────────────────────────────────────────────────────

    def core(self) -> BBox:
        """
        Placement region of the design.

        The union of the row bounds when the design has more than one row.
        Otherwise a square at the origin, sized 10% larger than what the
        non-terminal cell area needs.
        """
        if len(self.rows) > 1:
            x_min = min(r.bounds[0] for r in self.rows)
            y_min = min(r.bounds[1] for r in self.rows)
            x_max = max(r.bounds[2] for r in self.rows)
            y_max = max(r.bounds[3] for r in self.rows)
            return (x_min, y_min, x_max, y_max)

        side = float(np.sqrt(self.cell_area())) * 1.10
        return (0.0, 0.0, side, side)

    def _utilization(self, core: BBox) -> float:
        x_min, y_min, x_max, y_max = core
        core_area = (x_max - x_min) * (y_max - y_min)
        if core_area <= 0:
            return 0.0
        return self.cell_area() / core_area

    def mincore(self) -> BBox:
        """
        Core shrunk about its center to the area the cells actually need.

        Both sides are scaled by sqrt(utilization), so the result has the
        same aspect ratio as the core.
        """
        core = self.core()
        x_min, y_min, x_max, y_max = core
        scale = float(np.sqrt(self._utilization(core)))

        dx = (x_max - x_min) * scale
        dy = (y_max - y_min) * scale
        llx = x_min + ((x_max - x_min) - dx) * 0.5
        lly = y_min + ((y_max - y_min) - dy) * 0.5
        return (llx, lly, llx + dx, lly + dy)

    def leftcore(self) -> BBox:
        """Left-aligned core, narrowed by the utilization ratio."""
        core = self.core()
        x_min, y_min, x_max, y_max = core
        dx = (x_max - x_min) * self._utilization(core)
        return (x_min, y_min, x_min + dx, y_max)

    # ── Design Statistics ─────────────────────────────────────────────

    def summary(self) -> str:
        """Return a human-readable summary of the netlist."""
        row_area = self.row_area()
        utilization = self.cell_area() / row_area if row_area > 0 else 0.0
        lines = [
            f"╔══════════════════════════════════════════╗",
            f"║  Netlist: {self.name:<30s} ║",
            f"╠══════════════════════════════════════════╣",
            f"║  Cells:           {self.num_cells:<22d} ║",
            f"║  Nets:            {self.num_nets:<22d} ║",
            f"║  Pins:            {self.num_pins:<22d} ║",
            f"║  Rows:            {len(self.rows):<22d} ║",
            f"║  Terminals:       {self.num_terminals:<22d} ║",
            f"║  Macros:          {self.num_macros:<22d} ║",
            f"║  Cell Area:       {self.cell_area():<22.1f} ║",
            f"║  Row Area:        {row_area:<22.1f} ║",
            f"║  Utilization:     {utilization:<22.3f} ║",
            f"║  Total HPWL:      {self.total_hpwl():<22.1f} ║",
            f"╚══════════════════════════════════════════╝",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"NetlistModel('{self.name}', cells={self.num_cells}, "
                f"nets={self.num_nets}, pins={self.num_pins})")
