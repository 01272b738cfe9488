"""Tests for the command-line entry point (headless paths only)."""

import os

import pytest
from PIL import Image

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
pytest.importorskip("pygame")

import main  # noqa: E402


def test_snapshot_renders_the_assembled_puzzle(tmp_path, source_image):
    src = tmp_path / "photo.png"
    source_image.save(src)
    out = tmp_path / "out" / "solved.png"
    assert main.main([str(src), "--rows", "2", "--cols", "3", "--seed", "4", "--snapshot", str(out)]) == 0
    with Image.open(out) as img:
        assert img.size == (200, 100)
        assert img.getpixel((30, 25)) == source_image.convert("RGB").getpixel((30, 25))


def test_snapshot_of_a_broken_image(tmp_path):
    src = tmp_path / "broken.jpg"
    src.write_bytes(b"nope")
    assert main.main([str(src), "--snapshot", str(tmp_path / "x.png")]) == 1


def test_no_images_found(tmp_path):
    assert main.main(["--images-dir", str(tmp_path / "empty")]) == 1


def test_invalid_grid(tmp_path, source_image):
    src = tmp_path / "photo.png"
    source_image.save(src)
    assert main.main([str(src), "--rows", "0"]) == 2


def test_completed_filename(session, tmp_path):
    assert main.completed_filename(tmp_path, session) == tmp_path / "4-Pieces-untitled.jpeg"


@pytest.fixture
def app_factory(tmp_path, monkeypatch, source_image):
    monkeypatch.chdir(tmp_path)
    apps = []

    def _make(names):
        paths = []
        for name in names:
            path = tmp_path / name
            if name.startswith("broken"):
                path.write_bytes(b"not an image")
            else:
                source_image.save(path)
            paths.append(path)
        app = main.JigsawApp(paths, main.PuzzleSettings(rows=2, cols=2), seed=3, tray_width=300)
        apps.append(app)
        return app

    yield _make
    if apps:
        main.pygame.quit()


class TestJigsawApp:
    def test_next_image_skips_a_broken_file(self, app_factory):
        app = app_factory(["a.png", "broken-b.png", "c.png"])
        assert app.load_puzzle(0)
        app.press("next")
        assert (app.image_index, app.session.image.name) == (2, "c.png")
        app.press("next")
        assert (app.image_index, app.session.image.name) == (0, "a.png")

    def test_failed_load_keeps_the_current_puzzle(self, app_factory):
        app = app_factory(["a.png", "broken-b.png"])
        assert app.load_puzzle(0)
        session = app.session
        assert not app.load_puzzle(1)
        assert app.session is session

    def test_window_resize_stretches_the_tray(self, app_factory):
        app = app_factory(["a.png"])
        app.load_puzzle(0)
        tray = app.session.bounds[main.Surface.TRAY]
        app.handle_event(main.pygame.event.Event(main.pygame.VIDEORESIZE,
                                                 w=int(tray.x) + 500 + main.MARGIN,
                                                 h=main.TOOLBAR_HEIGHT + 2 * main.MARGIN + 700))
        resized = app.session.bounds[main.Surface.TRAY]
        assert (resized.width, resized.height) == (500, 700)
        assert app.tray_surface.get_size() == (500, 700)
