"""Piece outlines built from edge polarities, and the texture sampling rule."""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Union

import numpy as np

from .edges import Polarity
from .grid import Bounds

Point = Tuple[float, float]

TAB_START = 0.35   # fraction along the edge where the lobe begins
TAB_END = 0.65
TAB_DEPTH = 0.2    # lobe depth relative to the dimension perpendicular to the edge


@dataclass(frozen=True)
class LineSegment:
    p0: Point
    p1: Point

    @property
    def end(self):
        return self.p1

    def get_points(self, num_points=2):
        return np.array([self.p0, self.p1], dtype=float)


@dataclass(frozen=True)
class BezierCurve:
    """A cubic Bezier curve defined by 4 control points."""

    p0: Point  # Start point
    p1: Point  # Control point 1
    p2: Point  # Control point 2
    p3: Point  # End point

    @property
    def end(self):
        return self.p3

    def evaluate(self, t):
        """Evaluate the curve at parameter t (0 to 1)."""
        mt = 1 - t
        a, b, c, d = mt * mt * mt, 3 * mt * mt * t, 3 * mt * t * t, t * t * t
        x = a * self.p0[0] + b * self.p1[0] + c * self.p2[0] + d * self.p3[0]
        y = a * self.p0[1] + b * self.p1[1] + c * self.p2[1] + d * self.p3[1]
        return (x, y)

    def get_points(self, num_points=16):
        t = np.linspace(0.0, 1.0, max(num_points, 2))[:, None]
        mt = 1.0 - t
        p = np.array([self.p0, self.p1, self.p2, self.p3], dtype=float)
        return (mt ** 3) * p[0] + 3 * (mt ** 2) * t * p[1] + 3 * mt * (t ** 2) * p[2] + (t ** 3) * p[3]


Segment = Union[LineSegment, BezierCurve]


@dataclass(frozen=True)
class PiecePath:
    """Closed outline in piece-local coordinates, origin at the piece's top-left corner.

    The same path serves as the clip region for the texture and as the
    stroke for the outline. Raster backends draw it through ``points``.
    """

    start: Point
    segments: Tuple[Segment, ...]
    _flattened: Dict[int, np.ndarray] = field(default_factory=dict, compare=False, repr=False)

    def points(self, points_per_curve=16):
        """Flatten to an (N, 2) polygon, closing point not repeated."""
        cached = self._flattened.get(points_per_curve)
        if cached is None:
            parts = [np.array([self.start], dtype=float)]
            for seg in self.segments:
                parts.append(seg.get_points(points_per_curve)[1:])
            cached = np.concatenate(parts)
            if len(cached) > 1 and np.allclose(cached[0], cached[-1]):
                cached = cached[:-1]
            self._flattened[points_per_curve] = cached
        return cached

    def polygon(self, offset=(0.0, 0.0), points_per_curve=16):
        pts = self.points(points_per_curve) + np.asarray(offset, dtype=float)
        return [(float(x), float(y)) for x, y in pts]

    def bounds(self, points_per_curve=16):
        pts = self.points(points_per_curve)
        x0, y0 = pts.min(axis=0)
        x1, y1 = pts.max(axis=0)
        return Bounds(float(x0), float(y0), float(x1 - x0), float(y1 - y0))

    @property
    def is_closed(self):
        return bool(self.segments) and np.allclose(self.segments[-1].end, self.start)


def lerp(a, b, t):
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def generate_edge(start, end, polarity, depth, outward):
    """Segments from ``start`` to ``end``, with a lobe when the edge is not flat.

    ``outward`` is the unit normal pointing away from the piece; a positive
    polarity bulges along it, a negative one recedes into the piece.
    """
    if polarity == Polarity.FLAT:
        return [LineSegment(start, end)]
    a = lerp(start, end, TAB_START)
    b = lerp(start, end, TAB_END)
    dx = outward[0] * depth * int(polarity)
    dy = outward[1] * depth * int(polarity)
    return [
        LineSegment(start, a),
        BezierCurve(a, (a[0] + dx, a[1] + dy), (b[0] + dx, b[1] + dy), b),
        LineSegment(b, end),
    ]


def build_outline(width, height, edges) -> PiecePath:
    """Closed outline for a ``width`` x ``height`` piece with the given edge polarities.

    Edges are walked clockwise from the top-left corner: top, right, bottom,
    left. Top and bottom lobes are ``TAB_DEPTH * height`` deep, left and
    right lobes ``TAB_DEPTH * width``, so a tab and the socket it meets on
    the neighbouring piece trace the same curve.
    """
    tl = (0.0, 0.0)
    tr = (float(width), 0.0)
    br = (float(width), float(height))
    bl = (0.0, float(height))
    segments = []
    segments += generate_edge(tl, tr, edges.top, height * TAB_DEPTH, (0, -1))
    segments += generate_edge(tr, br, edges.right, width * TAB_DEPTH, (1, 0))
    segments += generate_edge(br, bl, edges.bottom, height * TAB_DEPTH, (0, 1))
    segments += generate_edge(bl, tl, edges.left, width * TAB_DEPTH, (-1, 0))
    return PiecePath(tl, tuple(segments))


def texture_rect(grid, piece) -> Bounds:
    """Where the whole board-sized image lands in the piece's local frame.

    Drawing the full image here and clipping to the outline lets a tab show
    the pixels of the neighbour it protrudes into.
    """
    return Bounds(-piece.correct_x, -piece.correct_y, grid.board_width, grid.board_height)
