"""
Tests for subset hypergraph extraction.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import logging

import numpy as np
import pytest

from circuit.builder import NetlistBuilder
from circuit.generator import generate_random
from hypergraph.context import EdgeWeightMode, ExtractionConfig, ExtractionContext
from hypergraph.errors import (
    CellIndexError, DuplicateCellError, InconsistentNetlistError, SubsetError,
)
from hypergraph.extractor import HypergraphExtractor, build_graph, edge_weight


def straddle_netlist():
    """N3 connects A (x=0), B (x=100) and C (x=200)."""
    builder = NetlistBuilder("straddle")
    builder.add_cell("A", 1, 1, x=0)
    builder.add_cell("B", 1, 1, x=100)
    builder.add_cell("C", 1, 1, x=200)
    builder.add_net("N3")
    for name in ("A", "B", "C"):
        builder.add_pin(name, "N3")
    return builder.build()


class TestScenarios:
    """The three reference cases on the A-B-C chain."""

    def test_single_cell_sink_propagation(self, chain_netlist, chain_context):
        chain_context.config.edge_weight = EdgeWeightMode.PROPAGATION
        hg = HypergraphExtractor(chain_netlist).build_graph([0], chain_context)

        assert hg.num_edges == 1
        assert list(hg.nets) == [0]
        assert hg.source_id == 1
        assert hg.sink_id == 2
        assert list(hg.edge(0)) == [0, hg.sink_id]
        assert list(hg.edge_weights) == [6]
        assert list(hg.vertex_weights) == [6, 1, 1]
        assert list(hg.partition) == [-1, 0, 1]

    def test_two_cells(self, chain_netlist, chain_context):
        chain_context.config.edge_weight = EdgeWeightMode.PROPAGATION
        hg = HypergraphExtractor(chain_netlist).build_graph([0, 1], chain_context)

        assert list(hg.nets) == [0, 1]
        assert list(hg.edge(0)) == [0, 1]
        assert list(hg.edge(1)) == [1, hg.sink_id]
        assert list(hg.edge_weights) == [5, 6]
        assert list(hg.edge_start) == [0, 2, 4]
        assert list(hg.vertex_weights) == [6, 20, 1, 1]

    def test_empty_subset_with_propagation(self, chain_netlist, chain_context):
        hg = HypergraphExtractor(chain_netlist).build_graph([], chain_context)

        assert hg.num_vertices == 2
        assert list(hg.vertex_weights) == [1, 1]
        assert list(hg.partition) == [0, 1]
        assert hg.source_id == 0
        assert hg.sink_id == 1
        assert hg.num_edges == 0
        assert list(hg.edge_start) == [0]
        assert hg.num_pins == 0
        hg.validate()

    def test_empty_subset_without_propagation(self, chain_netlist, chain_context):
        chain_context.config.term_prop = False
        hg = HypergraphExtractor(chain_netlist).build_graph([], chain_context)

        assert hg.num_vertices == 0
        assert hg.num_edges == 0
        assert hg.source_id is None
        assert hg.sink_id is None
        hg.validate()


class TestTerminalPropagation:
    """Boundary pin classification."""

    def test_source_only(self, chain_netlist, chain_context):
        chain_context.config.split_point = 500.0
        hg = build_graph(chain_netlist, [1], chain_context)
        for e in range(hg.num_edges):
            assert list(hg.edge(e)) == [0, hg.source_id]

    def test_source_and_sink_on_different_nets(self, chain_netlist, chain_context):
        chain_context.config.split_point = 150.0
        hg = build_graph(chain_netlist, [1], chain_context)
        assert list(hg.edge(0)) == [0, hg.source_id]
        assert list(hg.edge(1)) == [0, hg.sink_id]

    def test_straddling_net_touches_both(self):
        netlist = straddle_netlist()
        ctx = ExtractionContext.for_netlist(
            netlist, ExtractionConfig(split_point=150.0))
        hg = build_graph(netlist, [1], ctx)
        assert list(hg.edge(0)) == [0, hg.source_id, hg.sink_id]

    def test_pin_on_split_line_is_sink(self):
        netlist = straddle_netlist()
        ctx = ExtractionContext.for_netlist(
            netlist, ExtractionConfig(split_point=200.0))
        hg = build_graph(netlist, [1], ctx)
        # A (x=0) is before the line, C (x=200) sits exactly on it
        assert list(hg.edge(0)) == [0, hg.source_id, hg.sink_id]

    def test_pin_offset_is_used(self):
        builder = NetlistBuilder()
        builder.add_cell("in", 1, 1, x=0)
        builder.add_cell("out", 20, 1, x=45)
        builder.add_net("n")
        builder.add_pin("in", "n")
        builder.add_pin("out", "n", dx=10)
        netlist = builder.build()
        ctx = ExtractionContext.for_netlist(netlist, ExtractionConfig(split_point=50.0))
        hg = build_graph(netlist, [0], ctx)
        # Cell corner at 45 is before the line, but the pin is at 55
        assert list(hg.edge(0)) == [0, hg.sink_id]

    def test_horizontal_split_uses_y(self):
        builder = NetlistBuilder()
        builder.add_cell("a", 1, 1, x=0, y=0)
        builder.add_cell("b", 1, 1, x=1000, y=10)
        builder.add_net("n")
        builder.add_pin("a", "n")
        builder.add_pin("b", "n")
        netlist = builder.build()
        ctx = ExtractionContext.for_netlist(
            netlist, ExtractionConfig(horizontal=True, split_point=50.0))
        hg = build_graph(netlist, [0], ctx)
        assert list(hg.edge(0)) == [0, hg.source_id]

    def test_propagation_disabled_ignores_boundary(self, chain_netlist, chain_context):
        chain_context.config.term_prop = False
        hg = build_graph(chain_netlist, [0, 1], chain_context)
        assert hg.num_vertices == 2
        assert list(hg.edge(0)) == [0, 1]
        assert list(hg.edge(1)) == [1]


class TestEdgeWeights:
    """Hyperedge weighting modes."""

    def test_uniform_mode(self, chain_netlist, chain_context):
        chain_context.config.edge_weight = EdgeWeightMode.UNIFORM
        hg = build_graph(chain_netlist, [0, 1], chain_context)
        assert list(hg.edge_weights) == [1, 1]

    def test_propagation_mode(self):
        assert edge_weight(EdgeWeightMode.PROPAGATION, True) == 6
        assert edge_weight(EdgeWeightMode.PROPAGATION, False) == 5
        assert edge_weight(1, True) == 6

    def test_unknown_mode_falls_back_to_uniform(self, chain_netlist, chain_context, caplog):
        chain_context.config.edge_weight = 7
        with caplog.at_level(logging.DEBUG, logger="hypergraph.extractor"):
            hg = build_graph(chain_netlist, [0, 1], chain_context)
        assert list(hg.edge_weights) == [1, 1]
        assert "Unknown edge weight mode" in caplog.text


class TestExtractionContext:
    """Configuration defaults and context sizing."""

    def test_config_defaults(self):
        config = ExtractionConfig()
        assert config.horizontal is False
        assert config.split_point == 0.0
        assert config.term_prop is True
        assert config.edge_weight == EdgeWeightMode.UNIFORM
        assert config.strict is False
        assert config.bias == 0.5
        assert config.k == 2
        assert config.passes == 1
        assert config.seed == 8675309

    def test_context_partition_starts_unassigned(self, chain_netlist):
        ctx = ExtractionContext.for_netlist(chain_netlist)
        assert ctx.partition.dtype == np.int32
        assert list(ctx.partition) == [-1, -1, -1]
        assert ctx.cellmark.size == 3
        assert ctx.netmark.size == 2

    def test_partition_is_not_read(self, chain_netlist, chain_context):
        chain_context.partition[:] = 1
        hg = build_graph(chain_netlist, [0, 1], chain_context)
        assert list(hg.partition) == [-1, -1, 0, 1]
        assert list(chain_context.partition) == [1, 1, 1]


class TestSubsetErrors:
    """Caller-input errors."""

    def test_duplicate_cell(self, chain_netlist, chain_context):
        build_graph(chain_netlist, [2], chain_context)
        with pytest.raises(DuplicateCellError) as excinfo:
            build_graph(chain_netlist, [0, 1, 0], chain_context)
        assert excinfo.value.cell_id == 0
        assert excinfo.value.position == 2
        assert isinstance(excinfo.value, SubsetError)
        assert isinstance(excinfo.value, ValueError)
        # Previous extraction is still intact
        assert chain_context.cellmark.list == [2]
        assert chain_context.netmark.list == [1]

    def test_out_of_range_leaves_context_untouched(self, chain_netlist, chain_context):
        build_graph(chain_netlist, [2], chain_context)
        with pytest.raises(CellIndexError) as excinfo:
            build_graph(chain_netlist, [0, 3], chain_context)
        assert excinfo.value.cell_id == 3
        assert isinstance(excinfo.value, IndexError)
        assert chain_context.cellmark.list == [2]
        assert chain_context.netmark.list == [1]

    def test_negative_id(self, chain_netlist, chain_context):
        with pytest.raises(CellIndexError):
            build_graph(chain_netlist, [-1], chain_context)

    def test_non_integer_id(self, chain_netlist, chain_context):
        with pytest.raises(TypeError):
            build_graph(chain_netlist, [1.5], chain_context)

    def test_numpy_ids_accepted(self, chain_netlist, chain_context):
        hg = build_graph(chain_netlist, np.array([2, 0]), chain_context)
        assert list(hg.cells) == [2, 0]

    def test_context_for_other_netlist(self, chain_netlist):
        ctx = ExtractionContext(num_cells=10, num_nets=2)
        with pytest.raises(ValueError):
            build_graph(chain_netlist, [0], ctx)


class TestConsistency:
    """Internal-consistency and degenerate hyperedge reporting."""

    def test_inconsistent_net_is_reported(self, broken_netlist, caplog):
        ctx = ExtractionContext.for_netlist(broken_netlist)
        with caplog.at_level(logging.WARNING, logger="hypergraph.extractor"):
            hg = build_graph(broken_netlist, [0], ctx)

        assert hg.inconsistent_nets == [0]
        assert not hg.is_consistent
        assert list(hg.edge(0)) == [hg.sink_id]
        assert hg.degenerate_edges == [0]
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "'A'" in errors[0].getMessage()

    def test_strict_mode_raises_with_result(self, broken_netlist):
        ctx = ExtractionContext.for_netlist(
            broken_netlist, ExtractionConfig(strict=True))
        with pytest.raises(InconsistentNetlistError) as excinfo:
            build_graph(broken_netlist, [0], ctx)
        assert excinfo.value.net_ids == [0]
        assert excinfo.value.hypergraph is not None
        assert excinfo.value.hypergraph.num_edges == 1

    def test_consistent_netlist_has_no_errors(self, chain_netlist, chain_context, caplog):
        with caplog.at_level(logging.WARNING, logger="hypergraph.extractor"):
            hg = build_graph(chain_netlist, [0, 1, 2], chain_context)
        assert hg.is_consistent
        assert hg.degenerate_edges == []
        assert caplog.records == []

    def test_degenerate_edge_warning(self, chain_netlist, chain_context, caplog):
        chain_context.config.term_prop = False
        with caplog.at_level(logging.WARNING, logger="hypergraph.extractor"):
            hg = build_graph(chain_netlist, [0], chain_context)
        assert hg.degenerate_edges == [0]
        assert list(hg.edge(0)) == [0]
        assert any(r.levelno == logging.WARNING for r in caplog.records)


class TestExtractionStructure:
    """Output layout and id renumbering."""

    def test_dtypes(self, chain_netlist, chain_context):
        hg = build_graph(chain_netlist, [0, 1], chain_context)
        assert hg.vertex_weights.dtype == np.int32
        assert hg.partition.dtype == np.int32
        assert hg.edge_weights.dtype == np.int32
        assert hg.pins.dtype == np.uint32
        assert hg.edge_start.dtype == np.uint64

    def test_area_is_truncated(self):
        builder = NetlistBuilder()
        builder.add_cell("a", 2.5, 3)
        netlist = builder.build()
        hg = build_graph(netlist, [0])
        assert list(hg.vertex_weights) == [7, 1, 1]

    def test_huge_area_is_capped(self):
        builder = NetlistBuilder()
        builder.add_cell("macro", 50000, 50000)
        builder.add_cell("small", 2, 2)
        netlist = builder.build()
        hg = build_graph(netlist, [0, 1])
        assert hg.vertex_weights[0] == np.iinfo(np.int32).max
        assert list(hg.vertex_weights[1:]) == [4, 1, 1]

    def test_local_ids_follow_subset_order(self, chain_netlist, chain_context):
        hg = build_graph(chain_netlist, [2, 0], chain_context)
        assert list(hg.cells) == [2, 0]
        # N2 discovered first through C, then N1 through A
        assert list(hg.nets) == [1, 0]
        assert hg.edge_cells(0) == [2]
        assert hg.edge_cells(1) == [0]

    def test_multiple_pins_on_same_cell(self):
        builder = NetlistBuilder()
        builder.add_cell("a", 1, 1)
        builder.add_cell("b", 1, 1)
        builder.add_net("n")
        builder.add_pin("a", "n", name="A1")
        builder.add_pin("a", "n", name="A2")
        builder.add_pin("b", "n")
        netlist = builder.build()
        ctx = ExtractionContext.for_netlist(netlist, ExtractionConfig(term_prop=False))
        hg = build_graph(netlist, [0, 1], ctx)
        assert hg.num_edges == 1
        assert sorted(hg.edge(0)) == [0, 0, 1]

    def test_context_reuse(self, chain_netlist, chain_context):
        extractor = HypergraphExtractor(chain_netlist)
        extractor.build_graph([0, 1, 2], chain_context)
        hg = extractor.build_graph([2], chain_context)
        assert list(hg.cells) == [2]
        assert list(hg.nets) == [1]
        assert chain_context.cellmark.list == [2]
        assert list(hg.edge(0)) == [0, hg.sink_id]

    def test_build_graph_without_context(self, chain_netlist):
        hg = build_graph(chain_netlist, [0, 1])
        # Default cut at x=0: every boundary pin is on the sink side
        assert hg.has_propagation
        assert list(hg.edge(1)) == [1, hg.sink_id]


class TestRandomNetlists:
    """Properties checked against brute-force counts on random designs."""

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_hyperedges_match_touched_nets(self, seed):
        netlist = generate_random(num_cells=40, num_nets=80, seed=seed)
        rng = np.random.default_rng(seed)
        subset = [int(c) for c in rng.choice(netlist.num_cells, size=15, replace=False)]
        ctx = ExtractionContext.for_netlist(
            netlist, ExtractionConfig(split_point=500.0))

        hg = build_graph(netlist, subset, ctx)
        hg.validate()

        touched = {netlist.pins[p].net for c in subset for p in netlist.cells[c].pins}
        assert hg.num_edges == len(touched)
        assert set(int(n) for n in hg.nets) == touched
        assert hg.is_consistent

        in_subset = set(subset)
        for e, net_id in enumerate(hg.nets):
            expected = sorted(
                subset.index(pin.cell) for pin in netlist.net_pins(int(net_id))
                if pin.cell in in_subset
            )
            internal = sorted(int(v) for v in hg.edge(e) if v < len(subset))
            assert internal == expected

    def test_vertex_count_and_pin_bounds(self):
        netlist = generate_random(num_cells=25, num_nets=40, seed=3)
        subset = list(range(0, netlist.num_cells, 2))
        hg = build_graph(netlist, subset)
        assert hg.num_vertices == len(subset) + 2
        assert len(hg.partition) == hg.num_vertices
        assert int(hg.edge_start[-1]) == hg.num_pins
        assert hg.num_pins == 0 or int(hg.pins.max()) < hg.num_vertices


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
