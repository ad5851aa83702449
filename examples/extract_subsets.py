"""
Subset Hypergraph Extraction: Example Flow
==========================================

This script walks through the extraction steps a recursive bisection placer
performs at every level:
  1. Generate a placed random netlist
  2. Split the movable cells into left and right halves of the core
  3. Extract the hypergraph of each half with terminal propagation
  4. Compare edge weighting modes
  5. Score the touched nets with subset wirelength

Usage:
    cd <repo root>
    python examples/extract_subsets.py
"""

import sys
import os
import logging

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from circuit import generate_random
from hypergraph import (
    EdgeWeightMode, ExtractionConfig, ExtractionContext, HypergraphExtractor,
    SubsetWirelength,
)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("  Subset Hypergraph Extraction")
    print("=" * 60)

    # ── Step 1: Netlist ───────────────────────────────────────────
    print("\n[GEN] Step 1: Generating random netlist...")
    netlist = generate_random(num_cells=200, num_nets=320,
                              chip_size=1000.0, seed=42)
    print(netlist.summary())

    # ── Step 2: Split the core ────────────────────────────────────
    x_min, _, x_max, _ = netlist.core()
    split = (x_min + x_max) / 2.0
    movable = [c for c in range(netlist.num_cells) if not netlist.cells[c].terminal]
    left = [c for c in movable if netlist.positions[c, 0] < split]
    right = [c for c in movable if netlist.positions[c, 0] >= split]
    print(f"\n[SPLIT] Step 2: Cut at x={split:.1f}: "
          f"{len(left)} cells left, {len(right)} cells right")

    # ── Step 3: Extract each half ─────────────────────────────────
    print("\n[HG] Step 3: Extracting hypergraphs...")
    config = ExtractionConfig(split_point=split, term_prop=True,
                              edge_weight=EdgeWeightMode.PROPAGATION)
    context = ExtractionContext.for_netlist(netlist, config)
    extractor = HypergraphExtractor(netlist)

    for label, subset in (("left", left), ("right", right)):
        hg = extractor.build_graph(subset, context)
        hg.validate()
        print(f"\n  {label} half:")
        print(hg.summary())

    # ── Step 4: Edge weighting ────────────────────────────────────
    print("\n[WT] Step 4: Edge weight modes on the left half...")
    for mode in (EdgeWeightMode.UNIFORM, EdgeWeightMode.PROPAGATION):
        context.config.edge_weight = mode
        hg = extractor.build_graph(left, context)
        print(f"  {mode.name:<12s} total edge weight = {int(hg.edge_weights.sum())}")

    # ── Step 5: Subset wirelength ─────────────────────────────────
    print("\n[WL] Step 5: Wirelength of nets touching the left half...")
    wl = SubsetWirelength(netlist)
    wl.add_cells(left)
    print(f"  Nets: {len(wl.nets)}  HPWL: {wl.wirelength():.1f}")
    print(f"  Design HPWL: {netlist.total_hpwl():.1f}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
