"""
Random netlist generation for experiments and tests.

Produces placed netlists with a configurable number of cells, nets and
boundary pads. Everything is driven by numpy's Generator so a seed gives a
reproducible design.
"""

from __future__ import annotations
from typing import Optional
import numpy as np

from .builder import NetlistBuilder
from .netlist import NetlistModel


def generate_random(num_cells: int = 20, num_nets: int = 30,
                    chip_size: float = 1000.0,
                    min_cell_size: float = 30.0,
                    max_cell_size: float = 200.0,
                    avg_net_degree: int = 3,
                    num_pads: Optional[int] = None,
                    seed: Optional[int] = None) -> NetlistModel:
    """
    Generate a random placed netlist.

    Cells are scattered uniformly over a square die, pads are spread along
    its four edges, and every net connects at least two distinct cells with
    pins at random offsets inside each cell.

    Args:
        num_cells: Number of movable cells to generate.
        num_nets: Number of nets to generate.
        chip_size: Chip dimension (square die).
        min_cell_size: Minimum cell dimension.
        max_cell_size: Maximum cell dimension.
        avg_net_degree: Average pins per net.
        num_pads: Number of terminal pads; defaults to max(4, num_cells // 5).
        seed: Random seed for reproducibility.

    Returns:
        A NetlistModel with num_cells + num_pads cells and num_nets nets.
    """
    rng = np.random.default_rng(seed)
    builder = NetlistBuilder(name=f"random_{num_cells}c_{num_nets}n")

    # Movable cells with varied sizes
    sizes = []
    for i in range(num_cells):
        width = round(float(rng.uniform(min_cell_size, max_cell_size)), 1)
        height = round(float(rng.uniform(min_cell_size, max_cell_size)), 1)
        x = float(rng.uniform(0.0, max(chip_size - width, 0.0)))
        y = float(rng.uniform(0.0, max(chip_size - height, 0.0)))
        builder.add_cell(f"block_{i:03d}", width, height,
                         is_macro=bool(rng.random() < 0.1), x=x, y=y)
        sizes.append((width, height))

    # I/O pads evenly spread over the four die edges
    if num_pads is None:
        num_pads = max(4, num_cells // 5)
    per_side = -(-num_pads // 4)
    steps = [chip_size * i / (per_side + 1) for i in range(1, per_side + 1)]
    pad_positions = (
        [(0.0, s) for s in steps] + [(chip_size, s) for s in steps] +
        [(s, 0.0) for s in steps] + [(s, chip_size) for s in steps]
    )
    for i, (px, py) in enumerate(pad_positions[:num_pads]):
        builder.add_cell(f"pad_{i:02d}", 0.0, 0.0, terminal=True, x=px, y=py)
        sizes.append((0.0, 0.0))

    total = builder.num_cells
    if total < 2 and num_nets > 0:
        raise ValueError("At least two cells are needed to generate nets.")

    for i in range(num_nets):
        degree = max(2, int(rng.poisson(avg_net_degree - 1) + 1))
        degree = min(degree, total)

        net_id = builder.add_net(f"net_{i:03d}")
        connected = rng.choice(total, size=degree, replace=False)
        for cell_id in connected:
            width, height = sizes[int(cell_id)]
            builder.add_pin(int(cell_id), net_id,
                            dx=round(float(rng.uniform(0.0, width)), 1),
                            dy=round(float(rng.uniform(0.0, height)), 1))

    return builder.build()
