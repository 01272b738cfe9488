"""The authoritative set of pieces: static shape plus mutable placement."""

import logging
from dataclasses import dataclass

from .errors import PieceLockedError
from .geometry import build_outline
from .grid import Surface

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Piece:
    row: int
    col: int
    id: int
    correct_x: float
    correct_y: float
    edges: object
    outline: object
    x: float = 0.0
    y: float = 0.0
    surface: Surface = Surface.TRAY
    locked: bool = False

    @property
    def position(self):
        return self.x, self.y

    @property
    def correct_position(self):
        return self.correct_x, self.correct_y

    @property
    def state(self):
        if self.locked:
            return "board-locked"
        return "board-loose" if self.surface is Surface.BOARD else "tray-loose"


class PieceRegistry:
    """Pieces indexed by (row, col) and by id, kept in z-order (last is top-most).

    All placement changes go through ``move`` and ``lock`` so a locked piece
    can never be displaced.
    """

    def __init__(self, grid, pieces):
        self.grid = grid
        self._cells = [[None] * grid.cols for _ in range(grid.rows)]
        self._order = []
        for p in pieces:
            if self._cells[p.row][p.col] is not None:
                raise ValueError(f"Duplicate piece for cell ({p.row}, {p.col})")
            self._cells[p.row][p.col] = p
            self._order.append(p)
        if len(self._order) != grid.size:
            raise ValueError(f"Expected {grid.size} pieces, got {len(self._order)}")

    def __len__(self):
        return len(self._order)

    def __iter__(self):
        return iter(list(self._order))

    def get(self, piece_id):
        row, col = self.grid.cell(piece_id)
        if not 0 <= row < self.grid.rows:
            raise KeyError(piece_id)
        return self._cells[row][col]

    def at(self, row, col):
        return self._cells[row][col]

    def on_surface(self, surface):
        """Pieces on ``surface``, bottom-most first."""
        return [p for p in self._order if p.surface is surface]

    def unlocked(self):
        return [p for p in self._order if not p.locked]

    def move(self, piece, x, y, surface=None):
        if piece.locked:
            raise PieceLockedError(piece.id)
        piece.x = x
        piece.y = y
        if surface is not None:
            piece.surface = surface

    def lock(self, piece):
        """Snap ``piece`` onto its correct board position; irreversible."""
        if piece.locked:
            raise PieceLockedError(piece.id)
        piece.x, piece.y = piece.correct_x, piece.correct_y
        piece.surface = Surface.BOARD
        piece.locked = True

    def reset(self):
        """Unlock every piece and put it back in the tray, in row-major z-order.

        Shapes and outlines are kept as they are.
        """
        self._order = [self._cells[r][c] for r, c in self.grid.cells()]
        for p in self._order:
            p.x = p.y = 0.0
            p.surface = Surface.TRAY
            p.locked = False

    def raise_to_top(self, piece):
        self._order.remove(piece)
        self._order.append(piece)

    @property
    def locked_count(self):
        return sum(1 for p in self._order if p.locked)


def build_registry(grid, edge_map):
    """Create one piece per cell, all loose in the tray at the origin."""
    pieces = []
    for r, c in grid.cells():
        pid = grid.piece_id(r, c)
        edges = edge_map[pid]
        cx, cy = grid.correct_origin(r, c)
        pieces.append(Piece(
            row=r,
            col=c,
            id=pid,
            correct_x=cx,
            correct_y=cy,
            edges=edges,
            outline=build_outline(grid.piece_width, grid.piece_height, edges),
        ))
    logger.debug("Built %d pieces for a %dx%d grid", len(pieces), grid.rows, grid.cols)
    return PieceRegistry(grid, pieces)
