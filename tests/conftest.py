"""Shared pytest fixtures for the netlist and extraction tests."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import numpy as np
import pytest

from circuit.builder import NetlistBuilder
from circuit.cell import Cell, Pin
from circuit.net import Net
from circuit.netlist import NetlistModel
from hypergraph.context import ExtractionConfig, ExtractionContext


@pytest.fixture
def chain_netlist() -> NetlistModel:
    """
    Three cells in a row: N1 connects A-B, N2 connects B-C.

    A sits at x=0, B at x=100, C at x=200; every pin is at offset (1, 1).
    """
    builder = NetlistBuilder("chain")
    builder.add_cell("A", width=2, height=3, x=0, y=0)
    builder.add_cell("B", width=4, height=5, x=100, y=0)
    builder.add_cell("C", width=6, height=7, x=200, y=0)
    builder.add_net("N1")
    builder.add_net("N2")
    builder.add_pin("A", "N1", dx=1, dy=1)
    builder.add_pin("B", "N1", dx=1, dy=1)
    builder.add_pin("B", "N2", dx=1, dy=1)
    builder.add_pin("C", "N2", dx=1, dy=1)
    return builder.build()


@pytest.fixture
def chain_context(chain_netlist) -> ExtractionContext:
    """Vertical cut at x=50: A is on the source side, B and C on the sink side."""
    config = ExtractionConfig(split_point=50.0, term_prop=True)
    return ExtractionContext.for_netlist(chain_netlist, config)


@pytest.fixture
def broken_netlist() -> NetlistModel:
    """
    Two cells whose pin lists disagree with net N0.

    Pin 0 belongs to A and claims net N0, but N0 only lists pin 1 (on B).
    """
    pins = (
        Pin(cell=0, net=0, slot=0, dx=0.0, dy=0.0),
        Pin(cell=1, net=0, slot=0, dx=0.0, dy=0.0),
    )
    cells = (
        Cell("A", width=1, height=1, pins=(0,)),
        Cell("B", width=1, height=1, pins=(1,)),
    )
    nets = (Net("N0", pins=(1,)),)
    positions = np.array([[0.0, 0.0], [10.0, 0.0]])
    return NetlistModel(
        name="broken", cells=cells, nets=nets, pins=pins, positions=positions,
        cell_map={"A": 0, "B": 1}, net_map={"N0": 0},
    )
