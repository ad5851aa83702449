"""
NetlistBuilder: incremental construction of a NetlistModel.

Parsers and generators feed cells, nets and pins into a builder, then call
build() to get an immutable NetlistModel. Name-to-id lookups are kept inside
the builder while it runs and handed to the model as plain fields, so no
partially built state is visible to anyone else.

Usage:
    builder = NetlistBuilder("adder")
    a = builder.add_cell("a", width=2, height=1)
    b = builder.add_cell("b", width=2, height=1)
    n = builder.add_net("n1")
    builder.add_pin(a, n, dx=1.0, dy=0.5)
    builder.add_pin("b", "n1")
    model = builder.build()
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union
import numpy as np

from .cell import Cell, Pin
from .net import Net
from .netlist import NetlistModel, Row, BBox


CellRef = Union[int, str]
NetRef = Union[int, str]


class NetlistError(ValueError):
    """Raised when a netlist cannot be assembled from the given records."""


@dataclass
class _CellDraft:
    name: str
    width: float
    height: float
    terminal: bool = False
    is_macro: bool = False
    pins: list[int] = field(default_factory=list)


@dataclass
class _NetDraft:
    name: str
    pins: list[int] = field(default_factory=list)


class NetlistBuilder:
    """Collects netlist records and produces a NetlistModel."""

    def __init__(self, name: str = "design"):
        self.name = name
        self._cells: list[_CellDraft] = []
        self._nets: list[_NetDraft] = []
        self._pins: list[Pin] = []
        self._positions: list[tuple[float, float]] = []
        self._rows: list[Row] = []
        self._cell_map: dict[str, int] = {}
        self._net_map: dict[str, int] = {}

    # ── Cells ─────────────────────────────────────────────────────────

    def add_cell(self, name: str, width: float, height: float,
                 terminal: bool = False, is_macro: bool = False,
                 x: float = 0.0, y: float = 0.0) -> int:
        """Add a cell and return its id."""
        if name in self._cell_map:
            raise NetlistError(f"Duplicate cell name '{name}'")
        if width < 0 or height < 0:
            raise NetlistError(
                f"Cell '{name}' has negative size {width} x {height}"
            )
        cell_id = len(self._cells)
        self._cells.append(_CellDraft(name, float(width), float(height),
                                      terminal, is_macro))
        self._positions.append((float(x), float(y)))
        self._cell_map[name] = cell_id
        return cell_id

    def place(self, cell: CellRef, x: float, y: float) -> None:
        """Set the lower-left position of a cell."""
        cell_id = self._resolve_cell(cell)
        self._positions[cell_id] = (float(x), float(y))

    # ── Nets and Pins ─────────────────────────────────────────────────

    def add_net(self, name: str) -> int:
        """Add an empty net and return its id."""
        if name in self._net_map:
            raise NetlistError(f"Duplicate net name '{name}'")
        net_id = len(self._nets)
        self._nets.append(_NetDraft(name))
        self._net_map[name] = net_id
        return net_id

    def add_pin(self, cell: CellRef, net: NetRef,
                dx: float = 0.0, dy: float = 0.0, name: str = "") -> int:
        """
        Connect a new pin on `cell` to `net`.

        The pin is recorded once in the arena and its id is appended to both
        the cell's and the net's pin lists.

        Returns:
            The pin id.
        """
        cell_id = self._resolve_cell(cell)
        net_id = self._resolve_net(net)
        draft = self._cells[cell_id]

        pin_id = len(self._pins)
        self._pins.append(Pin(cell=cell_id, net=net_id, slot=len(draft.pins),
                              dx=float(dx), dy=float(dy), name=name))
        draft.pins.append(pin_id)
        self._nets[net_id].pins.append(pin_id)
        return pin_id

    # ── Rows ──────────────────────────────────────────────────────────

    def add_row(self, name: str, bounds: BBox, site_spacing: float = 1.0) -> None:
        x_min, y_min, x_max, y_max = bounds
        if x_max < x_min or y_max < y_min:
            raise NetlistError(f"Row '{name}' has inverted bounds {bounds}")
        self._rows.append(Row(name, (float(x_min), float(y_min),
                                     float(x_max), float(y_max)),
                              float(site_spacing)))

    # ── Lookup ────────────────────────────────────────────────────────

    @property
    def num_cells(self) -> int:
        return len(self._cells)

    @property
    def num_nets(self) -> int:
        return len(self._nets)

    def _resolve_cell(self, cell: CellRef) -> int:
        if isinstance(cell, str):
            if cell not in self._cell_map:
                raise NetlistError(f"Unknown cell '{cell}'")
            return self._cell_map[cell]
        if not 0 <= cell < len(self._cells):
            raise NetlistError(f"Cell id {cell} out of range")
        return cell

    def _resolve_net(self, net: NetRef) -> int:
        if isinstance(net, str):
            if net not in self._net_map:
                raise NetlistError(f"Unknown net '{net}'")
            return self._net_map[net]
        if not 0 <= net < len(self._nets):
            raise NetlistError(f"Net id {net} out of range")
        return net

    # ── Build ─────────────────────────────────────────────────────────

    def build(self) -> NetlistModel:
        """Freeze the collected records into a NetlistModel."""
        cells = tuple(
            Cell(name=c.name, width=c.width, height=c.height,
                 pins=tuple(c.pins), terminal=c.terminal, is_macro=c.is_macro)
            for c in self._cells
        )
        nets = tuple(Net(name=n.name, pins=tuple(n.pins)) for n in self._nets)
        positions = np.array(self._positions, dtype=np.float64).reshape(-1, 2)

        return NetlistModel(
            name=self.name,
            cells=cells,
            nets=nets,
            pins=tuple(self._pins),
            positions=positions,
            rows=tuple(self._rows),
            cell_map=self._cell_map,
            net_map=self._net_map,
        )
