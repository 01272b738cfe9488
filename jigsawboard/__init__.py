"""Interactive jigsaw puzzle model: tab generation, piece outlines, drag and snap."""

from .config import PuzzleSettings
from .edges import EdgePolarities, Polarity, generate_edges
from .errors import JigsawError, PieceLockedError, PuzzleImageError
from .geometry import BezierCurve, PiecePath, build_outline, texture_rect
from .grid import Bounds, Grid, Surface
from .images import PuzzleImage
from .registry import Piece, PieceRegistry, build_registry
from .session import PuzzleSession, Selection

__all__ = [
    "PuzzleSettings",
    "EdgePolarities",
    "Polarity",
    "generate_edges",
    "JigsawError",
    "PieceLockedError",
    "PuzzleImageError",
    "BezierCurve",
    "PiecePath",
    "build_outline",
    "texture_rect",
    "Bounds",
    "Grid",
    "Surface",
    "PuzzleImage",
    "Piece",
    "PieceRegistry",
    "build_registry",
    "PuzzleSession",
    "Selection",
]
