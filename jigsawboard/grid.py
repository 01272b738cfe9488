"""Grid dimensions, surface identifiers and rectangle bounds."""

import enum
from dataclasses import dataclass


class Surface(enum.Enum):
    """The two drawing surfaces a piece can belong to."""

    BOARD = "board"
    TRAY = "tray"


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    def contains(self, px, py):
        """Inclusive containment, edges count as inside."""
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def to_local(self, px, py):
        return px - self.x, py - self.y


@dataclass(frozen=True)
class Grid:
    """R x C partition of a board of the given pixel size."""

    rows: int
    cols: int
    board_width: float
    board_height: float

    def __post_init__(self):
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Grid must be at least 1x1, got {self.rows}x{self.cols}")
        if self.board_width <= 0 or self.board_height <= 0:
            raise ValueError(
                f"Board must have a positive size, got {self.board_width}x{self.board_height}"
            )

    @property
    def piece_width(self):
        return self.board_width / self.cols

    @property
    def piece_height(self):
        return self.board_height / self.rows

    @property
    def size(self):
        return self.rows * self.cols

    def piece_id(self, row, col):
        return row * self.cols + col

    def cell(self, piece_id):
        """Inverse of piece_id: (row, col)."""
        return divmod(piece_id, self.cols)

    def cells(self):
        """Yield (row, col) in row-major order."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield r, c

    def correct_origin(self, row, col):
        return col * self.piece_width, row * self.piece_height
