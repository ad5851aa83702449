"""
Extraction configuration and reusable scratch state.

An ExtractionContext owns the two MarkSets used while extracting (one over
cells, one over nets) plus the settings that control terminal propagation
and edge weighting. It is created once per netlist and reused across many
extractions; each extraction clears it first.

A context is scratch space for one extraction at a time. Concurrent
extractions need separate contexts.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional
import numpy as np

from circuit.netlist import NetlistModel
from .marklist import MarkSet


class EdgeWeightMode(IntEnum):
    """Hyperedge weighting schemes understood by the extractor."""
    UNIFORM = 0       # Every hyperedge weighs 1
    PROPAGATION = 1   # 6 if the net leaves the subset, else 5


@dataclass
class ExtractionConfig:
    """
    Configuration for hypergraph extraction.

    `horizontal` picks the cut axis: False means a vertical cut line at
    x = split_point, True a horizontal one at y = split_point. Pins outside
    the subset strictly before the line pull toward the source side, all
    others toward the sink side.

    `edge_weight` accepts any int. Values other than the EdgeWeightMode
    members weigh every hyperedge 1, the same as UNIFORM.

    bias, k, passes and seed are not used by the extractor; they travel with
    the context to the partitioner that consumes the hypergraph.
    """
    horizontal: bool = False
    split_point: float = 0.0
    term_prop: bool = True
    edge_weight: int = EdgeWeightMode.UNIFORM
    strict: bool = False              # Raise on cell/net incidence mismatches
    bias: float = 0.5                 # Target balance between the two sides
    k: int = 2                        # Number of partitions
    passes: int = 1
    seed: int = 8675309


class ExtractionContext:
    """
    Reusable MarkSets plus extraction settings.

    Attributes:
        cellmark: MarkSet over cell ids; its order defines local vertex ids.
        netmark: MarkSet over net ids; its order defines hyperedge ids.
        config: Extraction settings.
        partition: Per-cell partition assignment for the partitioner to fill
            in (-1 = unassigned). Not read by the extractor.
    """

    def __init__(self, num_cells: int, num_nets: int,
                 config: Optional[ExtractionConfig] = None):
        self.cellmark = MarkSet(num_cells)
        self.netmark = MarkSet(num_nets)
        self.config = config or ExtractionConfig()
        self.partition = np.full(num_cells, -1, dtype=np.int32)

    @classmethod
    def for_netlist(cls, netlist: NetlistModel,
                    config: Optional[ExtractionConfig] = None) -> ExtractionContext:
        """Create a context sized for `netlist`."""
        return cls(netlist.num_cells, netlist.num_nets, config)

    def clear(self) -> None:
        """Forget the cells and nets marked by the previous extraction."""
        self.cellmark.clear()
        self.netmark.clear()

    def matches(self, netlist: NetlistModel) -> bool:
        """Whether the MarkSets are sized for `netlist`."""
        return (self.cellmark.size == netlist.num_cells and
                self.netmark.size == netlist.num_nets)

    def __repr__(self) -> str:
        return (f"ExtractionContext(cells={self.cellmark.size}, "
                f"nets={self.netmark.size}, config={self.config})")
