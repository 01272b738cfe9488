"""Decoding and scaling of the puzzle's source image."""

import logging
import os
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import PuzzleImageError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.gif', '.webp')


def list_images(directory):
    """Image files in ``directory``, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(directory / f for f in os.listdir(directory)
                  if f.lower().endswith(IMAGE_EXTENSIONS))


class PuzzleImage:
    """A decoded RGBA raster with a cache of scaled regions."""

    def __init__(self, image, source=None):
        if image.width < 1 or image.height < 1:
            raise PuzzleImageError(f"Image has no pixels: {source or image}")
        self.image = image if image.mode == "RGBA" else image.convert("RGBA")
        self.source = source
        self._cache = {}

    @classmethod
    def open(cls, path):
        """Decode ``path``; any failure is a PuzzleImageError."""
        try:
            with Image.open(path) as img:
                img.load()
                rgba = img.convert("RGBA")
        except (UnidentifiedImageError, OSError) as exc:
            raise PuzzleImageError(f"Could not load image {path}: {exc}") from exc
        logger.info("Loaded %s (%dx%d)", path, rgba.width, rgba.height)
        return cls(rgba, source=Path(path))

    @classmethod
    def from_pil(cls, image):
        return cls(image)

    @property
    def width(self):
        return self.image.width

    @property
    def height(self):
        return self.image.height

    @property
    def size(self):
        return self.image.size

    @property
    def name(self):
        return self.source.name if self.source else "untitled"

    def board_size(self, max_width):
        """Image size scaled down (never up) to at most ``max_width`` wide."""
        scale = min(1.0, max_width / self.width)
        return max(1, round(self.width * scale)), max(1, round(self.height * scale))

    def region(self, src, size):
        """The ``src`` box (x, y, w, h) of the image resized to ``size`` (w, h)."""
        x, y, w, h = (int(round(v)) for v in src)
        size = (max(1, int(round(size[0]))), max(1, int(round(size[1]))))
        key = (x, y, w, h, size)
        out = self._cache.get(key)
        if out is None:
            out = self.image.crop((x, y, x + w, y + h))
            if out.size != size:
                out = out.resize(size, Image.LANCZOS)
            self._cache[key] = out
        return out
