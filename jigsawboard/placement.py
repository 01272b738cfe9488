"""Scatter, hit testing and the drag/snap state machine.

Each piece is in one of three states: ``tray-loose``, ``board-loose`` or
``board-locked``. Locking only happens on release, only from the board,
and is final.
"""

import logging
import math

from .grid import Surface

logger = logging.getLogger(__name__)


def scatter(session):
    """Put every unlocked piece at a random spot fully inside the tray."""
    grid, registry = session.grid, session.registry
    tray = session.bounds[Surface.TRAY]
    max_x = max(0.0, tray.width - grid.piece_width)
    max_y = max(0.0, tray.height - grid.piece_height)
    moved = 0
    for p in registry.unlocked():
        registry.move(p, session.rng.uniform(0, max_x), session.rng.uniform(0, max_y), Surface.TRAY)
        moved += 1
    return moved


def hit_test(session, x, y, surface):
    """Top-most unlocked piece on ``surface`` whose box contains (x, y), else None."""
    pw, ph = session.grid.piece_width, session.grid.piece_height
    for p in reversed(session.registry.on_surface(surface)):
        if p.locked:
            continue
        if p.x < x < p.x + pw and p.y < y < p.y + ph:
            return p
    return None


def begin_drag(session, piece, x, y):
    """Hold ``piece`` with the pointer at surface-local (x, y)."""
    sel = session.selection
    if piece is None or piece.locked or sel.piece is not None:
        return False
    sel.piece = piece
    sel.offset_x = x - piece.x
    sel.offset_y = y - piece.y
    session.registry.raise_to_top(piece)
    logger.debug("Picked up piece %d from %s", piece.id, piece.surface.value)
    return True


def update_drag(session, x, y):
    """Follow the pointer at global (x, y), switching surface when it crosses into one."""
    sel = session.selection
    piece = sel.piece
    if piece is None:
        return
    board = session.bounds[Surface.BOARD]
    tray = session.bounds[Surface.TRAY]
    if board.contains(x, y):
        target = Surface.BOARD
    elif tray.contains(x, y):
        target = Surface.TRAY
    else:
        # outside both: keep the current surface's frame
        target = piece.surface
    lx, ly = session.bounds[target].to_local(x, y)
    session.registry.move(piece, lx - sel.offset_x, ly - sel.offset_y, target)


def end_drag(session):
    """Release the held piece, snapping and locking it when close enough on the board.

    Returns True if the piece locked.
    """
    sel = session.selection
    piece = sel.piece
    if piece is None:
        return False
    sel.clear()
    if piece.surface is not Surface.BOARD:
        logger.debug("Dropped piece %d in the tray", piece.id)
        return False
    dist = math.hypot(piece.x - piece.correct_x, piece.y - piece.correct_y)
    if dist < session.snap_threshold:
        session.registry.lock(piece)
        logger.info("Piece %d snapped into place (%d/%d)",
                    piece.id, session.registry.locked_count, len(session.registry))
        return True
    logger.debug("Dropped piece %d on the board %.1fpx from its slot", piece.id, dist)
    return False
