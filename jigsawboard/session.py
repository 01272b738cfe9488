"""PuzzleSession: grid, pieces and the held-piece slot for one puzzle."""

import logging
import random
from dataclasses import dataclass

from . import placement
from .config import TRAY_HEIGHT, TRAY_WIDTH, PuzzleSettings
from .edges import generate_edges
from .grid import Bounds, Grid, Surface
from .registry import build_registry

logger = logging.getLogger(__name__)


@dataclass
class Selection:
    piece: object = None
    offset_x: float = 0.0
    offset_y: float = 0.0

    def clear(self):
        self.piece = None
        self.offset_x = self.offset_y = 0.0


class PuzzleSession:
    """Everything one puzzle needs, passed explicitly to placement and rendering.

    ``bounds`` holds each surface's rectangle in the shared pointer
    coordinate space; pointer-down coordinates are surface-local while
    pointer-move coordinates are global.
    """

    def __init__(self, image, grid, edges, settings=None, tray_size=(TRAY_WIDTH, TRAY_HEIGHT), rng=None):
        self.image = image
        self.grid = grid
        self.edges = edges
        self.settings = settings or PuzzleSettings()
        self.rng = rng or random.Random()
        self.registry = build_registry(grid, edges)
        self.selection = Selection()
        tray_w, tray_h = tray_size
        # default layout: tray to the right of the board
        self.bounds = {
            Surface.BOARD: Bounds(0, 0, grid.board_width, grid.board_height),
            Surface.TRAY: Bounds(grid.board_width, 0, tray_w, tray_h),
        }

    @classmethod
    def create(cls, image, settings=None, tray_size=(TRAY_WIDTH, TRAY_HEIGHT), rng=None):
        """Build a fresh puzzle for ``image``: board fitted to it, new tabs, pieces scattered."""
        settings = (settings or PuzzleSettings()).validate()
        rng = rng or random.Random()
        board_w, board_h = image.board_size(settings.max_board_width)
        grid = Grid(settings.rows, settings.cols, board_w, board_h)
        session = cls(image, grid, generate_edges(grid, rng), settings, tray_size, rng)
        placement.scatter(session)
        logger.info("New %dx%d puzzle from %s, board %dx%d",
                    grid.rows, grid.cols, image.name, board_w, board_h)
        return session

    @property
    def snap_threshold(self):
        return self.settings.snap_threshold

    @property
    def held_piece(self):
        return self.selection.piece

    @property
    def placed_count(self):
        return self.registry.locked_count

    @property
    def is_solved(self):
        return self.registry.locked_count == len(self.registry)

    # --- Layout ---
    def set_layout(self, board_origin, tray_origin):
        board, tray = self.bounds[Surface.BOARD], self.bounds[Surface.TRAY]
        self.bounds = {
            Surface.BOARD: Bounds(board_origin[0], board_origin[1], board.width, board.height),
            Surface.TRAY: Bounds(tray_origin[0], tray_origin[1], tray.width, tray.height),
        }

    def resize_tray(self, width, height):
        tray = self.bounds[Surface.TRAY]
        self.bounds[Surface.TRAY] = Bounds(tray.x, tray.y, width, height)

    # --- Control triggers ---
    def shuffle(self):
        """Scatter the unsolved pieces back into the tray; locked pieces stay."""
        self.selection.clear()
        moved = placement.scatter(self)
        logger.info("Shuffled %d pieces", moved)

    def restart(self):
        """Unlock and re-scatter everything, keeping the current tab layout."""
        self.registry.reset()
        self.selection.clear()
        placement.scatter(self)
        logger.info("Restarted puzzle with %d pieces", len(self.registry))

    # --- Pointer events ---
    def on_pointer_down(self, surface, x, y):
        piece = placement.hit_test(self, x, y, surface)
        if piece is not None and placement.begin_drag(self, piece, x, y):
            return piece
        return None

    def on_pointer_move(self, x, y):
        placement.update_drag(self, x, y)

    def on_pointer_up(self):
        snapped = placement.end_drag(self)
        if snapped and self.is_solved:
            logger.info("Puzzle solved")
        return snapped
