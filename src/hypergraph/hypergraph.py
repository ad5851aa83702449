"""
Hypergraph: the extracted partitioning problem.

The layout follows the CSR convention of hypergraph partitioners: vertex and
hyperedge weights, an initial partition per vertex, and the hyperedge pin
lists flattened into `pins` with `edge_start[e]:edge_start[e + 1]` marking
hyperedge e. Array dtypes match a native partitioner interface: 32-bit
signed weights and partitions, 32-bit vertex ids, 64-bit offsets.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import numpy as np
import networkx as nx

from .errors import HypergraphError


@dataclass
class Hypergraph:
    """
    Hypergraph extracted from a subset of a netlist.

    Vertices 0..len(cells)-1 are the subset cells in marking order. With
    terminal propagation enabled two more vertices follow: SOURCE (fixed to
    partition 0) and SINK (fixed to partition 1).

    Attributes:
        vertex_weights: Weight per vertex (cell area, 1 for SOURCE/SINK).
        partition: Initial partition per vertex; -1 = free, 0/1 = fixed.
        edge_weights: Weight per hyperedge.
        pins: Local vertex ids of all hyperedges, concatenated.
        edge_start: Offsets into `pins`; length num_edges + 1, starts at 0.
        cells: Global cell id of each real vertex.
        nets: Global net id of each hyperedge.
        source_id: Local id of SOURCE, None without terminal propagation.
        sink_id: Local id of SINK, None without terminal propagation.
        inconsistent_nets: Global ids of nets reached from the subset that
            had no pin on a subset cell.
        degenerate_edges: Hyperedges with fewer than two pins.
    """
    vertex_weights: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))
    partition: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))
    edge_weights: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))
    pins: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.uint32))
    edge_start: np.ndarray = field(default_factory=lambda: np.zeros(1, dtype=np.uint64))
    cells: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    nets: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    source_id: Optional[int] = None
    sink_id: Optional[int] = None
    inconsistent_nets: list[int] = field(default_factory=list)
    degenerate_edges: list[int] = field(default_factory=list)

    # ── Sizes ─────────────────────────────────────────────────────────

    @property
    def num_vertices(self) -> int:
        return len(self.vertex_weights)

    @property
    def num_edges(self) -> int:
        return len(self.edge_weights)

    @property
    def num_pins(self) -> int:
        return len(self.pins)

    @property
    def total_vertex_weight(self) -> int:
        return int(self.vertex_weights.sum(dtype=np.int64))

    @property
    def has_propagation(self) -> bool:
        return self.source_id is not None

    @property
    def is_consistent(self) -> bool:
        return not self.inconsistent_nets

    # ── Hyperedge Access ──────────────────────────────────────────────

    def edge(self, e: int) -> np.ndarray:
        """Local vertex ids of hyperedge `e`."""
        if not 0 <= e < self.num_edges:
            raise IndexError(f"Hyperedge {e} out of range ({self.num_edges} edges)")
        return self.pins[int(self.edge_start[e]):int(self.edge_start[e + 1])]

    def edge_cells(self, e: int) -> list[int]:
        """Global cell ids of the real vertices in hyperedge `e`."""
        num_real = len(self.cells)
        return [int(self.cells[v]) for v in self.edge(e) if v < num_real]

    def edge_degrees(self) -> np.ndarray:
        """Number of pins of every hyperedge."""
        return np.diff(self.edge_start.astype(np.int64))

    # ── Validation ────────────────────────────────────────────────────

    def validate(self) -> None:
        """
        Check the structural guarantees a partitioner relies on.

        Raises:
            HypergraphError: if any array is inconsistent with the others.
        """
        if len(self.partition) != self.num_vertices:
            raise HypergraphError(
                f"{len(self.partition)} partition entries for "
                f"{self.num_vertices} vertices"
            )
        if len(self.edge_start) != self.num_edges + 1:
            raise HypergraphError(
                f"edge_start has {len(self.edge_start)} entries for "
                f"{self.num_edges} hyperedges"
            )
        if int(self.edge_start[0]) != 0:
            raise HypergraphError("edge_start must begin at 0")
        if np.any(self.edge_degrees() < 0):
            raise HypergraphError("edge_start is not non-decreasing")
        if int(self.edge_start[-1]) != self.num_pins:
            raise HypergraphError(
                f"edge_start ends at {int(self.edge_start[-1])} but there are "
                f"{self.num_pins} pins"
            )
        if self.num_pins and int(self.pins.max()) >= self.num_vertices:
            raise HypergraphError(
                f"pin refers to vertex {int(self.pins.max())}, only "
                f"{self.num_vertices} vertices"
            )

    # ── Export ────────────────────────────────────────────────────────

    def to_networkx(self) -> nx.Graph:
        """
        Star expansion of the hypergraph as a bipartite networkx Graph.

        Vertex nodes are ("v", i) and hyperedge nodes ("e", j); node
        attribute `bipartite` is 0 for vertices and 1 for hyperedges.
        Graph edges carry `pins`, the number of times the vertex appears in
        the hyperedge.
        """
        graph = nx.Graph()
        num_real = len(self.cells)
        for v in range(self.num_vertices):
            graph.add_node(
                ("v", v), bipartite=0,
                weight=int(self.vertex_weights[v]),
                partition=int(self.partition[v]),
                cell=int(self.cells[v]) if v < num_real else None,
            )
        for e in range(self.num_edges):
            graph.add_node(("e", e), bipartite=1,
                           weight=int(self.edge_weights[e]),
                           net=int(self.nets[e]))
            for v in self.edge(e):
                key = (("v", int(v)), ("e", e))
                if graph.has_edge(*key):
                    graph.edges[key]["pins"] += 1
                else:
                    graph.add_edge(*key, pins=1)
        return graph

    # ── Summary ───────────────────────────────────────────────────────

    def summary(self) -> str:
        """Human-readable summary of the hypergraph."""
        degrees = self.edge_degrees()
        avg_degree = float(degrees.mean()) if len(degrees) else 0.0
        propagation = "on" if self.has_propagation else "off"
        lines = [
            f"┌──────────────────────────────────────────┐",
            f"│  Hypergraph Summary                      │",
            f"├──────────────────────────────────────────┤",
            f"│  Vertices:        {self.num_vertices:<22d} │",
            f"│  Hyperedges:      {self.num_edges:<22d} │",
            f"│  Pins:            {self.num_pins:<22d} │",
            f"│  Avg Degree:      {avg_degree:<22.2f} │",
            f"│  Vertex Weight:   {self.total_vertex_weight:<22d} │",
            f"│  Propagation:     {propagation:<22s} │",
            f"│  Degenerate:      {len(self.degenerate_edges):<22d} │",
            f"│  Inconsistent:    {len(self.inconsistent_nets):<22d} │",
            f"└──────────────────────────────────────────┘",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"Hypergraph(vertices={self.num_vertices}, "
                f"edges={self.num_edges}, pins={self.num_pins})")
