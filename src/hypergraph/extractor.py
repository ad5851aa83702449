"""
Subset hypergraph extraction.

Given a netlist and a subset of its cells, builds the hypergraph a balanced
bipartitioner needs to split that subset:

  1. Mark the subset cells; their marking order defines local vertex ids.
  2. Mark every net touched by a pin of a subset cell. MarkSet marking is
     idempotent, so each net is discovered once in O(1) per pin.
  3. Scan each marked net. Pins on subset cells become hyperedge members;
     pins elsewhere are boundary pins and, with terminal propagation on,
     are classified by which side of the cut line they sit on.
  4. Emit vertex weights (cell areas), the SOURCE/SINK pseudo-vertices,
     hyperedges in CSR form and hyperedge weights.

The whole pass is linear in the number of pins on the subset's nets.
"""

from __future__ import annotations
import logging
import operator
from typing import Iterable, Optional
import numpy as np

from circuit.netlist import NetlistModel
from .context import EdgeWeightMode, ExtractionContext
from .errors import CellIndexError, DuplicateCellError, InconsistentNetlistError
from .hypergraph import Hypergraph

logger = logging.getLogger(__name__)

SOURCE_PARTITION = 0
SINK_PARTITION = 1
PSEUDO_VERTEX_WEIGHT = 1


class HypergraphExtractor:
    """
    Extracts partitioning hypergraphs from subsets of one netlist.

    The netlist is only read. Cell positions are read for terminal
    propagation, so they must not change while an extraction runs.

    Usage:
        extractor = HypergraphExtractor(netlist)
        context = ExtractionContext.for_netlist(netlist)
        context.config.split_point = 500.0
        hg = extractor.build_graph([3, 7, 11], context)
    """

    def __init__(self, netlist: NetlistModel):
        self.netlist = netlist

    # ── Main Extraction ───────────────────────────────────────────────

    def build_graph(self, cells: Iterable[int],
                    context: ExtractionContext) -> Hypergraph:
        """
        Build the hypergraph induced by `cells`.

        Args:
            cells: Global ids of the subset cells, each at most once.
            context: Reusable MarkSets and settings; cleared before use.

        Returns:
            A new Hypergraph owned by the caller.

        Raises:
            CellIndexError: an id is not a valid cell id. Raised before the
                context is touched.
            DuplicateCellError: an id appears twice. Also raised before the
                context is touched.
            InconsistentNetlistError: strict mode only, when a net reached
                from the subset has no pin on a subset cell.
        """
        netlist = self.netlist
        config = context.config
        if not context.matches(netlist):
            raise ValueError(
                f"{context!r} is not sized for {netlist!r}"
            )
        subset = self._check_subset(cells)

        context.clear()
        cellmark = context.cellmark
        netmark = context.netmark

        # Mark subset cells and every net they touch
        for cell_id in subset:
            cellmark.mark(cell_id)
            for pin_id in netlist.cells[cell_id].pins:
                netmark.mark(netlist.pins[pin_id].net)

        # Collect hyperedge members and classify boundary pins
        num_edges = len(netmark)
        members: list[list[int]] = [[] for _ in range(num_edges)]
        sources = [False] * num_edges
        sinks = [False] * num_edges
        inconsistent: list[int] = []
        axis = 1 if config.horizontal else 0

        for e, net_id in enumerate(netmark.list):
            internal = members[e]
            for pin_id in netlist.nets[net_id].pins:
                pin = netlist.pins[pin_id]
                if cellmark.marked[pin.cell]:
                    internal.append(cellmark.index[pin.cell])
                elif config.term_prop:
                    offset = pin.dy if config.horizontal else pin.dx
                    coord = float(netlist.positions[pin.cell, axis]) + offset
                    if coord < config.split_point:
                        sources[e] = True
                    else:
                        sinks[e] = True
            if not internal:
                inconsistent.append(net_id)
                self._report_inconsistent(net_id, subset)

        hg = Hypergraph()
        hg.cells = np.array(cellmark.list, dtype=np.int64)
        hg.nets = np.array(netmark.list, dtype=np.int64)
        hg.inconsistent_nets = inconsistent

        # Vertices: subset cells, then SOURCE and SINK
        areas = np.array([netlist.cells[c].area for c in cellmark.list],
                         dtype=np.float64)
        vertex_weights = np.clip(np.trunc(areas), 0,
                                 np.iinfo(np.int32).max).astype(np.int32)
        partition = np.full(len(areas), -1, dtype=np.int32)
        if config.term_prop:
            hg.source_id = len(areas)
            hg.sink_id = len(areas) + 1
            vertex_weights = np.concatenate([
                vertex_weights,
                np.full(2, PSEUDO_VERTEX_WEIGHT, dtype=np.int32),
            ])
            partition = np.concatenate([
                partition,
                np.array([SOURCE_PARTITION, SINK_PARTITION], dtype=np.int32),
            ])

        # Hyperedges in CSR form
        pins: list[int] = []
        edge_start = [0]
        edge_weights = []
        propagated = 0
        for e in range(num_edges):
            pins.extend(members[e])
            if sources[e]:
                pins.append(hg.source_id)
                propagated += 1
            if sinks[e]:
                pins.append(hg.sink_id)
                propagated += 1
            edge_start.append(len(pins))
            edge_weights.append(edge_weight(config.edge_weight, sources[e] or sinks[e]))
            if edge_start[-1] - edge_start[-2] < 2:
                hg.degenerate_edges.append(e)

        hg.vertex_weights = vertex_weights
        hg.partition = partition
        hg.edge_weights = np.array(edge_weights, dtype=np.int32)
        hg.pins = np.array(pins, dtype=np.uint32)
        hg.edge_start = np.array(edge_start, dtype=np.uint64)

        self._report_degenerate(hg, sources, sinks)
        if config.edge_weight not in tuple(EdgeWeightMode):
            logger.debug("Unknown edge weight mode %r, using uniform weights",
                         config.edge_weight)
        logger.debug("Extracted %d vertices, %d hyperedges, %d pins from %d cells "
                     "(%d propagated terminals)", hg.num_vertices, hg.num_edges,
                     hg.num_pins, len(subset), propagated)

        if inconsistent and config.strict:
            raise InconsistentNetlistError(inconsistent, hg)
        return hg

    # ── Checks and Diagnostics ────────────────────────────────────────

    def _check_subset(self, cells: Iterable[int]) -> list[int]:
        """Convert the subset to plain ints, range-check it and reject repeats."""
        num_cells = self.netlist.num_cells
        subset = [operator.index(c) for c in cells]
        seen = set()
        for position, cell_id in enumerate(subset):
            if not 0 <= cell_id < num_cells:
                raise CellIndexError(cell_id, num_cells)
            if cell_id in seen:
                raise DuplicateCellError(cell_id, position)
            seen.add(cell_id)
        return subset

    def _report_inconsistent(self, net_id: int, subset: list[int]) -> None:
        netlist = self.netlist
        claimed_by = [
            netlist.cells[c].name for c in subset
            if any(netlist.pins[p].net == net_id for p in netlist.cells[c].pins)
        ]
        logger.error("Net %d (%s) was marked, but no pin on a subset cell was "
                     "found in its pin list; claimed by cells %s",
                     net_id, netlist.nets[net_id].name, claimed_by)

    def _report_degenerate(self, hg: Hypergraph,
                           sources: list[bool], sinks: list[bool]) -> None:
        if not hg.degenerate_edges:
            return
        e = hg.degenerate_edges[0]
        logger.warning("Hyperedge %d (net %d) has %d pin(s), source %s, sink %s",
                       e, int(hg.nets[e]), len(hg.edge(e)), sources[e], sinks[e])
        logger.debug("%d hyperedge(s) with fewer than two pins",
                     len(hg.degenerate_edges))


def edge_weight(mode: int, propagated: bool) -> int:
    """
    Weight of one hyperedge under an edge weighting mode.

    Modes other than UNIFORM and PROPAGATION fall back to uniform weights.
    That matches the long-standing behaviour and is kept on purpose, even
    though another scheme may have been intended for them.
    """
    if mode == EdgeWeightMode.PROPAGATION:
        return 6 if propagated else 5
    return 1


def build_graph(netlist: NetlistModel, cells: Iterable[int],
                context: Optional[ExtractionContext] = None) -> Hypergraph:
    """Extract the hypergraph of `cells`, creating a context if none is given."""
    if context is None:
        context = ExtractionContext.for_netlist(netlist)
    return HypergraphExtractor(netlist).build_graph(cells, context)
