"""Tab/blank assignment for the edges shared between neighbouring pieces."""

import enum
import random
from typing import Dict, NamedTuple


class Polarity(enum.IntEnum):
    TAB_IN = -1
    FLAT = 0
    TAB_OUT = 1

    @property
    def inverted(self):
        return Polarity(-self.value)


class EdgePolarities(NamedTuple):
    top: Polarity
    right: Polarity
    bottom: Polarity
    left: Polarity


def random_polarity(rng):
    return Polarity.TAB_OUT if rng.random() < 0.5 else Polarity.TAB_IN


def generate_edges(grid, rng=None) -> Dict[int, EdgePolarities]:
    """Assign every interior edge a polarity, shared with inverted sign by its neighbour.

    Cells are visited row-major: a cell's top edge comes from the bottom of
    the cell above and its left edge from the right of the cell before it,
    so each interior edge is drawn from ``rng`` exactly once. Border edges
    are always flat.
    """
    rng = rng or random.Random()
    rows, cols = grid.rows, grid.cols
    piece_edges = [[None for _ in range(cols)] for _ in range(rows)]
    for r, c in grid.cells():
        top = Polarity.FLAT if r == 0 else piece_edges[r - 1][c].bottom.inverted
        left = Polarity.FLAT if c == 0 else piece_edges[r][c - 1].right.inverted
        right = Polarity.FLAT if c == cols - 1 else random_polarity(rng)
        bottom = Polarity.FLAT if r == rows - 1 else random_polarity(rng)
        piece_edges[r][c] = EdgePolarities(top, right, bottom, left)
    return {grid.piece_id(r, c): piece_edges[r][c] for r, c in grid.cells()}
