"""Headless checks for the pygame drawing backend."""

import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
pygame = pytest.importorskip("pygame")

from jigsawboard import Surface  # noqa: E402
from jigsawboard.config import TRAY_BACKGROUND  # noqa: E402
from jigsawboard.pygame_canvas import PygameCanvas  # noqa: E402
from jigsawboard.render import render_board, render_tray  # noqa: E402


@pytest.fixture
def tray_canvas():
    surface = pygame.Surface((400, 300), pygame.SRCALPHA)
    return PygameCanvas(surface)


class TestPygameCanvas:
    def test_tray_piece_shows_its_slot_of_the_image(self, session, source_image, tray_canvas):
        piece = session.registry.get(3)
        session.registry.move(piece, 40, 30, Surface.TRAY)
        session.registry.raise_to_top(piece)
        render_tray(tray_canvas, session)
        got = tuple(tray_canvas.surface.get_at((40 + 50, 30 + 25)))
        assert got == source_image.getpixel((100 + 50, 50 + 25))

    def test_background_outside_pieces(self, session, tray_canvas):
        for p in session.registry:
            session.registry.move(p, 0, 0)
        render_tray(tray_canvas, session)
        assert tuple(tray_canvas.surface.get_at((350, 250)))[:3] == TRAY_BACKGROUND

    def test_board_render_of_a_locked_piece(self, session, source_image, drag):
        drag(session, session.registry.get(0), 0, 0)
        canvas = PygameCanvas(pygame.Surface((200, 100), pygame.SRCALPHA))
        render_board(canvas, session)
        assert tuple(canvas.surface.get_at((50, 25))) == source_image.getpixel((50, 25))
        # empty slot only carries the faint hint
        assert canvas.surface.get_at((150, 75)).a < 64

    def test_masks_are_cached_per_outline(self, session, tray_canvas):
        render_tray(tray_canvas, session)
        render_tray(tray_canvas, session)
        assert len(tray_canvas._masks) == len(session.registry)

    def test_restart_reuses_the_cached_masks(self, session, tray_canvas):
        for _ in range(5):
            render_tray(tray_canvas, session)
            session.restart()
        assert len(tray_canvas._masks) == len(session.registry)
