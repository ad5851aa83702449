"""Hypergraph extraction for partitioning subsets of a netlist."""
from .marklist import MarkSet
from .context import EdgeWeightMode, ExtractionConfig, ExtractionContext
from .hypergraph import Hypergraph
from .extractor import HypergraphExtractor, build_graph, edge_weight
from .wirelength import SubsetWirelength
from .errors import (
    ExtractionError, SubsetError, CellIndexError, DuplicateCellError,
    InconsistentNetlistError, HypergraphError,
)

__all__ = [
    "MarkSet", "EdgeWeightMode", "ExtractionConfig", "ExtractionContext",
    "Hypergraph", "HypergraphExtractor", "build_graph", "edge_weight",
    "SubsetWirelength",
    "ExtractionError", "SubsetError", "CellIndexError", "DuplicateCellError",
    "InconsistentNetlistError", "HypergraphError",
]
