"""Per-frame drawing of the board and the tray through a small canvas contract.

A ``Canvas`` offers fill, clip-to-path, draw-image-region and stroke-path.
The renderer only reads the session; backends decide how pixels get made.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
import math

from PIL import Image, ImageDraw

from .config import (HIGHLIGHT_COLOR, HIGHLIGHT_WIDTH, OUTLINE_COLOR, OUTLINE_WIDTH,
                     POINTS_PER_CURVE, TRAY_BACKGROUND)
from .geometry import texture_rect
from .grid import Bounds, Surface


class Canvas(ABC):
    """Drawing context for one surface. Coordinates are surface-local pixels."""

    def __init__(self, width, height, points_per_curve=POINTS_PER_CURVE):
        self.width = width
        self.height = height
        self.points_per_curve = points_per_curve

    @abstractmethod
    def fill(self, color=None):
        """Fill the whole surface; ``None`` clears to transparent."""

    @abstractmethod
    def draw_image(self, image, src, dest, alpha=1.0):
        """Draw the ``src`` box of a PuzzleImage scaled into the ``dest`` Bounds."""

    @abstractmethod
    def push_clip(self, path, origin):
        """Restrict drawing to ``path`` placed at ``origin`` until pop_clip."""

    @abstractmethod
    def pop_clip(self):
        pass

    @abstractmethod
    def stroke_path(self, path, origin, color, width=1):
        pass

    @contextmanager
    def clipped(self, path, origin):
        self.push_clip(path, origin)
        try:
            yield self
        finally:
            self.pop_clip()


# --- Piece Drawing ---
def full_image_box(image):
    return (0, 0, image.width, image.height)


def draw_order(session, surface):
    """Pieces on ``surface`` bottom to top, the held piece always last."""
    pieces = session.registry.on_surface(surface)
    held = session.selection.piece
    if held is not None and held in pieces:
        pieces.remove(held)
        pieces.append(held)
    return pieces


def draw_piece(canvas, session, piece, highlight=False):
    # whole image shifted so the piece's slot sits at its origin, then clipped
    tex = texture_rect(session.grid, piece)
    origin = (piece.x, piece.y)
    dest = Bounds(piece.x + tex.x, piece.y + tex.y, tex.width, tex.height)
    with canvas.clipped(piece.outline, origin):
        canvas.draw_image(session.image, full_image_box(session.image), dest)
    canvas.stroke_path(piece.outline, origin, OUTLINE_COLOR, OUTLINE_WIDTH)
    if highlight:
        canvas.stroke_path(piece.outline, origin, HIGHLIGHT_COLOR, HIGHLIGHT_WIDTH)


def render_board(canvas, session, background=None):
    """Clear, draw the faint reference image, then every board piece."""
    grid = session.grid
    canvas.fill(background)
    if session.settings.hint_alpha > 0:
        canvas.draw_image(session.image, full_image_box(session.image),
                          Bounds(0, 0, grid.board_width, grid.board_height),
                          alpha=session.settings.hint_alpha)
    for p in draw_order(session, Surface.BOARD):
        draw_piece(canvas, session, p, highlight=p is session.selection.piece)


def render_tray(canvas, session, background=TRAY_BACKGROUND):
    canvas.fill(background)
    for p in draw_order(session, Surface.TRAY):
        draw_piece(canvas, session, p, highlight=p is session.selection.piece)


# --- Pillow Backend ---
def _paste(dst, src, x, y):
    """alpha_composite ``src`` onto ``dst`` at (x, y), cropping whatever falls outside."""
    x, y = int(math.floor(x)), int(math.floor(y))
    left, top = max(0, -x), max(0, -y)
    right = min(src.width, dst.width - x)
    bottom = min(src.height, dst.height - y)
    if right <= left or bottom <= top:
        return
    if (left, top, right, bottom) != (0, 0, src.width, src.height):
        src = src.crop((left, top, right, bottom))
    dst.alpha_composite(src, dest=(x + left, y + top))


class ImageCanvas(Canvas):
    """Canvas drawing into an RGBA Pillow image, for headless rendering."""

    def __init__(self, image, points_per_curve=POINTS_PER_CURVE):
        super().__init__(image.width, image.height, points_per_curve)
        self.image = image
        # (layer, layer origin, mask); drawing goes to the last layer
        self._layers = [(image, (0, 0), None)]

    @classmethod
    def new(cls, width, height, points_per_curve=POINTS_PER_CURVE):
        return cls(Image.new("RGBA", (int(width), int(height)), (0, 0, 0, 0)), points_per_curve)

    @property
    def _target(self):
        return self._layers[-1][0], self._layers[-1][1]

    def fill(self, color=None):
        if len(self._layers) > 1:
            raise RuntimeError("fill() inside a clip")
        rgba = (0, 0, 0, 0) if color is None else tuple(color) + (255,) * (4 - len(color))
        self.image.paste(rgba, (0, 0, self.width, self.height))

    def draw_image(self, image, src, dest, alpha=1.0):
        region = image.region(src, (dest.width, dest.height))
        if alpha < 1.0:
            region = region.copy()
            region.putalpha(region.getchannel("A").point(lambda v: int(v * alpha)))
        target, (ox, oy) = self._target
        _paste(target, region, dest.x - ox, dest.y - oy)

    def push_clip(self, path, origin):
        box = path.bounds(self.points_per_curve)
        bx = int(math.floor(origin[0] + box.x))
        by = int(math.floor(origin[1] + box.y))
        size = (int(math.ceil(origin[0] + box.right)) - bx + 1,
                int(math.ceil(origin[1] + box.bottom)) - by + 1)
        mask = Image.new("L", size, 0)
        ImageDraw.Draw(mask).polygon(
            path.polygon((origin[0] - bx, origin[1] - by), self.points_per_curve), fill=255)
        self._layers.append((Image.new("RGBA", size, (0, 0, 0, 0)), (bx, by), mask))

    def pop_clip(self):
        layer, (bx, by), mask = self._layers.pop()
        alpha = Image.new("L", layer.size, 0)
        alpha.paste(layer.getchannel("A"), mask=mask)
        layer.putalpha(alpha)
        target, (ox, oy) = self._target
        _paste(target, layer, bx - ox, by - oy)

    def stroke_path(self, path, origin, color, width=1):
        target, (ox, oy) = self._target
        pts = path.polygon((origin[0] - ox, origin[1] - oy), self.points_per_curve)
        ImageDraw.Draw(target).line(pts + pts[:1], fill=tuple(color), width=width)


def render_board_image(session, background=None):
    """The board as a Pillow RGBA image."""
    canvas = ImageCanvas.new(session.grid.board_width, session.grid.board_height,
                             session.settings.points_per_curve)
    render_board(canvas, session, background)
    return canvas.image
