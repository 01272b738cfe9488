"""Puzzle defaults and per-session settings."""

from dataclasses import dataclass

# --- Global Settings ---
DEFAULT_ROWS = 10
DEFAULT_COLS = 10
SNAP_THRESHOLD = 20          # px, measured between current and correct origin
MAX_BOARD_WIDTH = 800        # board is the image scaled down to this width
TRAY_WIDTH = 360
TRAY_HEIGHT = 600
FPS = 60
HINT_ALPHA = 0.1             # opacity of the reference image on the board
POINTS_PER_CURVE = 16

# --- Colours ---
TRAY_BACKGROUND = (37, 37, 37)
OUTLINE_COLOR = (0, 0, 0)
HIGHLIGHT_COLOR = (255, 235, 59)
OUTLINE_WIDTH = 1
HIGHLIGHT_WIDTH = 2


@dataclass
class PuzzleSettings:
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    snap_threshold: float = SNAP_THRESHOLD
    max_board_width: int = MAX_BOARD_WIDTH
    hint_alpha: float = HINT_ALPHA
    points_per_curve: int = POINTS_PER_CURVE

    def validate(self):
        """Raise ValueError for settings a puzzle cannot be built from."""
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Grid must be at least 1x1, got {self.rows}x{self.cols}")
        if self.snap_threshold < 0:
            raise ValueError(f"Snap threshold must be non-negative, got {self.snap_threshold}")
        if self.max_board_width < 1:
            raise ValueError(f"Board width must be positive, got {self.max_board_width}")
        if not 0.0 <= self.hint_alpha <= 1.0:
            raise ValueError(f"Hint alpha must lie in [0, 1], got {self.hint_alpha}")
        return self
