import random

import numpy as np
import pytest
from PIL import Image

from jigsawboard import PuzzleImage, PuzzleSession, PuzzleSettings, Surface


def gradient_image(width=200, height=100):
    """RGBA image whose red channel encodes x and green channel encodes y."""
    xs = np.linspace(0, 255, width).astype(np.uint8)
    ys = np.linspace(0, 255, height).astype(np.uint8)
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[:, :, 0] = xs[None, :]
    arr[:, :, 1] = ys[:, None]
    arr[:, :, 2] = 128
    arr[:, :, 3] = 255
    return Image.fromarray(arr)


@pytest.fixture
def source_image():
    return gradient_image()


@pytest.fixture
def image(source_image):
    return PuzzleImage.from_pil(source_image)


@pytest.fixture
def make_session(image):
    """Factory for seeded sessions on the 200x100 gradient image."""

    def _make(rows=2, cols=2, seed=7, tray=(400, 300), **overrides):
        settings = PuzzleSettings(rows=rows, cols=cols, **overrides)
        return PuzzleSession.create(image, settings, tray_size=tray, rng=random.Random(seed))

    return _make


@pytest.fixture
def session(make_session):
    return make_session()


@pytest.fixture
def drag():
    """Drag a piece so its top-left corner lands on surface-local (to_x, to_y), then release."""

    def _drag(session, piece, to_x, to_y, surface=Surface.BOARD):
        grab_x, grab_y = piece.x + 1, piece.y + 1
        session.registry.raise_to_top(piece)
        assert session.on_pointer_down(piece.surface, grab_x, grab_y) is piece
        bounds = session.bounds[surface]
        session.on_pointer_move(bounds.x + to_x + 1, bounds.y + to_y + 1)
        return session.on_pointer_up()

    return _drag
