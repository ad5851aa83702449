"""Incremental wirelength of the nets touched by a set of cells."""

from __future__ import annotations
from typing import Iterable

from circuit.netlist import NetlistModel
from .marklist import MarkSet


class SubsetWirelength:
    """
    HPWL over the nets connected to a group of cells.

    Cells can be added in several batches; each net is counted once no
    matter how many of its pins belong to the added cells. Useful for
    scoring a local move without recomputing the whole design.

    Usage:
        wl = SubsetWirelength(netlist)
        wl.add_cells([4, 5, 9])
        before = wl.wirelength()
        netlist.set_cell_center(4, 120.0, 80.0)
        after = wl.wirelength()
    """

    def __init__(self, netlist: NetlistModel):
        self.netlist = netlist
        self.marked_nets = MarkSet(netlist.num_nets)

    def add_cells(self, cells: Iterable[int]) -> None:
        """Include every net touching `cells`."""
        netlist = self.netlist
        for cell_id in cells:
            for pin_id in netlist.cells[cell_id].pins:
                self.marked_nets.mark(netlist.pins[pin_id].net)

    def clear(self) -> None:
        self.marked_nets.clear()

    @property
    def nets(self) -> list[int]:
        """Ids of the included nets, in discovery order."""
        return list(self.marked_nets.list)

    def wirelength(self) -> float:
        """Total HPWL of the included nets at the current positions."""
        return sum(self.netlist.net_hpwl(n) for n in self.marked_nets.list)
