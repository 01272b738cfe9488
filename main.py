import argparse
import logging
import os
import random
import sys
from pathlib import Path

import pygame

from jigsawboard import PuzzleImage, PuzzleImageError, PuzzleSession, PuzzleSettings, Surface
from jigsawboard import config
from jigsawboard.images import list_images
from jigsawboard.pygame_canvas import PygameCanvas
from jigsawboard.render import render_board, render_board_image, render_tray

logger = logging.getLogger("jigsawboard.main")

# --- Layout ---
MARGIN = 20
TOOLBAR_HEIGHT = 60
WINDOW_BACKGROUND = (30, 30, 30)
SNAPSHOT_BACKGROUND = (255, 255, 255)

# --- Global Caches for Performance ---
FONTS = {}          # Cache for fonts keyed by size.


def get_font(size):
    """Return a cached font of the given size."""
    if size not in FONTS:
        FONTS[size] = pygame.font.SysFont("arial", size)
    return FONTS[size]


# --- Helper Functions ---
def draw_text(screen, text, pos, font_size=30, color=(255, 255, 255), shadow_color=(0, 0, 0), shadow_offset=(2, 2)):
    """Draws text with a subtle drop shadow for improved legibility."""
    font = get_font(font_size)
    shadow_surface = font.render(text, True, shadow_color)
    shadow_rect = shadow_surface.get_rect(center=(pos[0] + shadow_offset[0], pos[1] + shadow_offset[1]))
    screen.blit(shadow_surface, shadow_rect)
    text_surface = font.render(text, True, color)
    text_rect = text_surface.get_rect(center=pos)
    screen.blit(text_surface, text_rect)


def draw_rounded_button(screen, button, mouse_pos=None):
    """Draws a button with a border, lightened on hover."""
    rect = button["rect"]
    base_color = button["color"]
    if mouse_pos and rect.collidepoint(mouse_pos):
        color = tuple(min(255, c + 30) for c in base_color)
    else:
        color = base_color
    border_rect = rect.inflate(4, 4)
    pygame.draw.rect(screen, (0, 0, 0), border_rect, border_radius=8)
    pygame.draw.rect(screen, color, rect, border_radius=8)
    draw_text(screen, button["label"], rect.center, font_size=24, shadow_offset=(1, 1))


def load_snap_sound(path="snap.mp3"):
    if not os.path.exists(path):
        return None
    try:
        return pygame.mixer.Sound(path)
    except pygame.error as exc:
        logger.warning("Snap sound unavailable: %s", exc)
        return None


def solve_all(session):
    """Lock every piece in its slot."""
    for p in session.registry:
        if not p.locked:
            session.registry.lock(p)


def save_board(session, filename):
    """Saves the board, flattened onto a white background."""
    img = render_board_image(session, background=SNAPSHOT_BACKGROUND).convert("RGB")
    Path(filename).parent.mkdir(parents=True, exist_ok=True)
    img.save(filename)
    logger.info("Saved board as %s", filename)


def completed_filename(directory, session):
    return Path(directory) / f"{len(session.registry)}-Pieces-{Path(session.image.name).stem}.jpeg"


class JigsawApp:
    """Window hosting the board and the tray side by side, with a toolbar above."""

    def __init__(self, image_paths, settings, completed_dir=None, seed=None, tray_width=config.TRAY_WIDTH):
        self.image_paths = list(image_paths)
        self.image_index = 0
        self.settings = settings
        self.completed_dir = completed_dir
        self.tray_width = tray_width
        self.rng = random.Random(seed)
        self.session = None
        self.puzzle_auto_saved = False
        pygame.init()
        pygame.display.set_caption("Jigsaw Puzzle")
        self.clock = pygame.time.Clock()
        self.snap_sound = load_snap_sound()
        self.screen = None
        self.buttons = {}

    # --- Puzzle Construction ---
    def load_puzzle(self, index):
        """Build a new puzzle from the image at ``index``; keeps the old one on failure."""
        path = self.image_paths[index % len(self.image_paths)]
        try:
            image = PuzzleImage.open(path)
        except PuzzleImageError as exc:
            logger.error("%s", exc)
            return False
        _, board_h = image.board_size(self.settings.max_board_width)
        tray_size = (self.tray_width, max(board_h, config.TRAY_HEIGHT))
        self.session = PuzzleSession.create(image, self.settings, tray_size, self.rng)
        self.image_index = index % len(self.image_paths)
        self.puzzle_auto_saved = False
        self.layout()
        return True

    def layout(self):
        grid = self.session.grid
        board_w, board_h = int(grid.board_width), int(grid.board_height)
        tray = self.session.bounds[Surface.TRAY]
        board_origin = (MARGIN, TOOLBAR_HEIGHT + MARGIN)
        tray_origin = (MARGIN * 2 + board_w, TOOLBAR_HEIGHT + MARGIN)
        self.session.set_layout(board_origin, tray_origin)
        width = tray_origin[0] + int(tray.width) + MARGIN
        height = TOOLBAR_HEIGHT + MARGIN * 2 + max(board_h, int(tray.height))
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.board_surface = pygame.Surface((board_w, board_h), pygame.SRCALPHA)
        self.tray_surface = pygame.Surface((int(tray.width), int(tray.height)), pygame.SRCALPHA)
        self.board_canvas = PygameCanvas(self.board_surface, self.settings.points_per_curve)
        self.tray_canvas = PygameCanvas(self.tray_surface, self.settings.points_per_curve)
        self.buttons = {
            "shuffle": {"label": "Shuffle", "rect": pygame.Rect(MARGIN, 10, 140, 40), "color": (70, 130, 180)},
            "restart": {"label": "Restart", "rect": pygame.Rect(MARGIN + 160, 10, 140, 40), "color": (178, 34, 34)},
            "next": {"label": "Next Image", "rect": pygame.Rect(MARGIN + 320, 10, 160, 40), "color": (34, 139, 34)},
        }

    def on_resize(self, width, height):
        """Stretch the tray to fill a resized window; pieces keep their positions."""
        tray = self.session.bounds[Surface.TRAY]
        tray_w = max(1, width - int(tray.x) - MARGIN)
        tray_h = max(1, height - TOOLBAR_HEIGHT - MARGIN * 2)
        self.session.resize_tray(tray_w, tray_h)
        self.tray_width = tray_w
        self.layout()

    # --- Drawing ---
    def draw(self):
        session = self.session
        self.screen.fill(WINDOW_BACKGROUND)
        mouse_pos = pygame.mouse.get_pos()
        for btn in self.buttons.values():
            draw_rounded_button(self.screen, btn, mouse_pos)
        draw_text(self.screen, f"{session.placed_count} / {len(session.registry)} placed",
                  (self.screen.get_width() - 140, 30), font_size=24)
        render_board(self.board_canvas, session)
        render_tray(self.tray_canvas, session)
        board = session.bounds[Surface.BOARD]
        tray = session.bounds[Surface.TRAY]
        self.screen.blit(self.board_surface, (board.x, board.y))
        self.screen.blit(self.tray_surface, (tray.x, tray.y))
        if session.is_solved:
            center = (board.x + board.width / 2, board.y + board.height / 2)
            draw_text(self.screen, "Congratulations!", center, font_size=72, color=(255, 215, 0))

    # --- Events ---
    def handle_event(self, event):
        session = self.session
        if event.type == pygame.VIDEORESIZE:
            self.on_resize(event.w, event.h)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            pos = event.pos
            for key, btn in self.buttons.items():
                if btn["rect"].collidepoint(pos):
                    self.press(key)
                    return
            for surface in (Surface.BOARD, Surface.TRAY):
                bounds = session.bounds[surface]
                if bounds.contains(*pos):
                    session.on_pointer_down(surface, *bounds.to_local(*pos))
                    break
        elif event.type == pygame.MOUSEMOTION:
            session.on_pointer_move(*event.pos)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            if session.on_pointer_up():
                if self.snap_sound is not None:
                    self.snap_sound.play(fade_ms=1)
                if session.is_solved:
                    self.on_solved()

    def press(self, key):
        if key == "shuffle":
            self.session.shuffle()
        elif key == "restart":
            self.session.restart()
            self.puzzle_auto_saved = False
        elif key == "next":
            self.next_puzzle()

    def next_puzzle(self):
        """Load the next image that decodes, skipping broken ones."""
        for step in range(1, len(self.image_paths) + 1):
            if self.load_puzzle(self.image_index + step):
                return True
        return False

    def on_solved(self):
        if self.puzzle_auto_saved or not self.completed_dir:
            return
        save_board(self.session, completed_filename(self.completed_dir, self.session))
        self.puzzle_auto_saved = True

    def run(self):
        while True:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    pygame.quit()
                    return
                self.handle_event(event)
            self.draw()
            pygame.display.flip()
            self.clock.tick(config.FPS)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Drag-and-snap jigsaw puzzle.")
    parser.add_argument("images", nargs="*", help="Image files to cycle through")
    parser.add_argument("--images-dir", default="images", help="Folder searched when no images are given")
    parser.add_argument("--rows", type=int, default=config.DEFAULT_ROWS)
    parser.add_argument("--cols", type=int, default=config.DEFAULT_COLS)
    parser.add_argument("--snap", type=float, default=config.SNAP_THRESHOLD, help="Snap distance in pixels")
    parser.add_argument("--max-board-width", type=int, default=config.MAX_BOARD_WIDTH)
    parser.add_argument("--tray-width", type=int, default=config.TRAY_WIDTH)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--completed-dir", default="completed",
                        help="Where solved puzzles are saved; empty to disable")
    parser.add_argument("--snapshot", metavar="PATH",
                        help="Render the assembled first puzzle to PATH and exit")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    image_paths = [Path(p) for p in args.images] or list_images(args.images_dir)
    if not image_paths:
        logger.error("No images given and none found in '%s'.", args.images_dir)
        return 1
    try:
        settings = PuzzleSettings(rows=args.rows, cols=args.cols, snap_threshold=args.snap,
                                  max_board_width=args.max_board_width).validate()
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    if args.snapshot:
        try:
            image = PuzzleImage.open(image_paths[0])
        except PuzzleImageError as exc:
            logger.error("%s", exc)
            return 1
        session = PuzzleSession.create(image, settings, rng=random.Random(args.seed))
        solve_all(session)
        save_board(session, args.snapshot)
        return 0

    app = JigsawApp(image_paths, settings, completed_dir=args.completed_dir or None,
                    seed=args.seed, tray_width=args.tray_width)
    if not any(app.load_puzzle(i) for i in range(len(image_paths))):
        logger.error("None of the images could be loaded.")
        pygame.quit()
        return 1
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
