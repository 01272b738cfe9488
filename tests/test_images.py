"""Tests for loading the puzzle image."""

import pytest
from PIL import Image

from jigsawboard import PuzzleImage, PuzzleImageError
from jigsawboard.images import list_images


class TestPuzzleImage:
    def test_open_png(self, tmp_path, source_image):
        path = tmp_path / "photo.png"
        source_image.save(path)
        img = PuzzleImage.open(path)
        assert img.size == (200, 100)
        assert img.image.mode == "RGBA"
        assert img.name == "photo.png"

    def test_rgb_is_converted(self, tmp_path):
        path = tmp_path / "photo.jpg"
        Image.new("RGB", (30, 20), (10, 20, 30)).save(path)
        assert PuzzleImage.open(path).image.mode == "RGBA"

    def test_missing_file(self, tmp_path):
        with pytest.raises(PuzzleImageError):
            PuzzleImage.open(tmp_path / "nope.png")

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"definitely not a png")
        with pytest.raises(PuzzleImageError) as excinfo:
            PuzzleImage.open(path)
        assert excinfo.value.__cause__ is not None

    @pytest.mark.parametrize("max_width,expected", [(800, (200, 100)), (100, (100, 50)), (50, (50, 25))])
    def test_board_size(self, image, max_width, expected):
        assert image.board_size(max_width) == expected

    def test_region_is_cached(self, image):
        a = image.region((0, 0, 200, 100), (100, 50))
        assert a.size == (100, 50)
        assert image.region((0, 0, 200, 100), (100, 50)) is a

    def test_region_at_native_size_is_a_crop(self, image, source_image):
        region = image.region((10, 20, 30, 40), (30, 40))
        assert region.getpixel((0, 0)) == source_image.getpixel((10, 20))


def test_list_images(tmp_path):
    for name in ["b.png", "a.JPG", "notes.txt"]:
        (tmp_path / name).write_bytes(b"")
    assert [p.name for p in list_images(tmp_path)] == ["a.JPG", "b.png"]
    assert list_images(tmp_path / "missing") == []
