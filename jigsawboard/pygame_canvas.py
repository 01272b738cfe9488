"""Canvas backend drawing onto pygame surfaces."""

import math
import weakref

import pygame

from .config import POINTS_PER_CURVE
from .render import Canvas

# --- Global Caches for Performance ---
_IMAGE_SURFACES = weakref.WeakKeyDictionary()   # PuzzleImage -> {key: Surface}


def to_surface(pil_image):
    return pygame.image.frombytes(pil_image.tobytes(), pil_image.size, "RGBA")


def image_surface(image, src, size, alpha=255):
    """Cached pygame surface of an image region scaled to ``size``."""
    cache = _IMAGE_SURFACES.setdefault(image, {})
    size = (max(1, int(round(size[0]))), max(1, int(round(size[1]))))
    key = (tuple(int(round(v)) for v in src), size, alpha)
    surf = cache.get(key)
    if surf is None:
        surf = to_surface(image.region(src, size))
        if alpha < 255:
            surf.set_alpha(alpha)
        cache[key] = surf
    return surf


class PygameCanvas(Canvas):
    def __init__(self, surface, points_per_curve=POINTS_PER_CURVE):
        super().__init__(surface.get_width(), surface.get_height(), points_per_curve)
        self.surface = surface
        self._layers = [(surface, (0, 0), None)]
        self._masks = {}

    def fill(self, color=None):
        self.surface.fill((0, 0, 0, 0) if color is None else color)

    def draw_image(self, image, src, dest, alpha=1.0):
        surf = image_surface(image, src, (dest.width, dest.height), int(round(alpha * 255)))
        target, (ox, oy) = self._layers[-1][0], self._layers[-1][1]
        target.blit(surf, (int(round(dest.x)) - ox, int(round(dest.y)) - oy))

    def _mask(self, path):
        # outline polygon rasterised once per path, relative to its bounding box
        entry = self._masks.get(id(path))
        if entry is None or entry[0] is not path:
            box = path.bounds(self.points_per_curve)
            bx, by = int(math.floor(box.x)), int(math.floor(box.y))
            size = (int(math.ceil(box.right)) - bx + 1, int(math.ceil(box.bottom)) - by + 1)
            mask_surface = pygame.Surface(size, pygame.SRCALPHA)
            mask_surface.fill((0, 0, 0, 0))
            pygame.draw.polygon(mask_surface, (255, 255, 255, 255),
                                path.polygon((-bx, -by), self.points_per_curve))
            entry = (path, mask_surface, (bx, by))
            self._masks[id(path)] = entry
        return entry[1], entry[2]

    def push_clip(self, path, origin):
        mask, (bx, by) = self._mask(path)
        pos = (int(round(origin[0])) + bx, int(round(origin[1])) + by)
        layer = pygame.Surface(mask.get_size(), pygame.SRCALPHA)
        layer.fill((0, 0, 0, 0))
        self._layers.append((layer, pos, mask))

    def pop_clip(self):
        layer, (x, y), mask = self._layers.pop()
        layer.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MULT)
        target, (ox, oy) = self._layers[-1][0], self._layers[-1][1]
        target.blit(layer, (x - ox, y - oy))

    def stroke_path(self, path, origin, color, width=1):
        target, (ox, oy) = self._layers[-1][0], self._layers[-1][1]
        ox = int(round(origin[0])) - ox
        oy = int(round(origin[1])) - oy
        pygame.draw.polygon(target, color, path.polygon((ox, oy), self.points_per_curve), width)
