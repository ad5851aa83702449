"""Exceptions raised during hypergraph extraction."""

from __future__ import annotations
from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .hypergraph import Hypergraph


class ExtractionError(Exception):
    """Base class for extraction failures."""


class SubsetError(ExtractionError, ValueError):
    """The caller passed an invalid cell subset."""


class CellIndexError(SubsetError, IndexError):
    """A subset entry is not a valid cell id."""

    def __init__(self, cell_id: int, num_cells: int):
        super().__init__(
            f"Cell id {cell_id} out of range for netlist with {num_cells} cells"
        )
        self.cell_id = cell_id
        self.num_cells = num_cells


class DuplicateCellError(SubsetError):
    """A cell id appears more than once in the subset."""

    def __init__(self, cell_id: int, position: int):
        super().__init__(
            f"Cell id {cell_id} repeated in subset (entry {position})"
        )
        self.cell_id = cell_id
        self.position = position


class InconsistentNetlistError(ExtractionError):
    """
    Cell and net pin lists disagree about incidence.

    Raised in strict mode only. The completed hypergraph is attached so the
    caller can still inspect it.
    """

    def __init__(self, net_ids: Sequence[int],
                 hypergraph: Optional["Hypergraph"] = None):
        shown = ", ".join(str(n) for n in list(net_ids)[:8])
        more = f" (+{len(net_ids) - 8} more)" if len(net_ids) > 8 else ""
        super().__init__(
            f"{len(net_ids)} net(s) reached from the subset have no pins on "
            f"subset cells: {shown}{more}"
        )
        self.net_ids = list(net_ids)
        self.hypergraph = hypergraph


class HypergraphError(ExtractionError):
    """An extracted hypergraph violates its structural guarantees."""
