"""Exceptions raised by the puzzle model."""


class JigsawError(Exception):
    """Base class for puzzle errors."""


class PuzzleImageError(JigsawError):
    """The source image could not be opened or decoded."""


class PieceLockedError(JigsawError):
    """A locked piece was asked to move."""

    def __init__(self, piece_id):
        super().__init__(f"Piece {piece_id} is locked in place")
        self.piece_id = piece_id
