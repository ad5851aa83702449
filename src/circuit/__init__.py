"""Netlist data structures for placement designs."""
from .cell import Cell, Pin
from .net import Net, hpwl
from .netlist import NetlistModel, Row
from .builder import NetlistBuilder, NetlistError
from .generator import generate_random

__all__ = [
    "Cell", "Pin", "Net", "hpwl", "NetlistModel", "Row",
    "NetlistBuilder", "NetlistError", "generate_random",
]
