"""Pieces and compact move encoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional, Union

from .bitboard import Side, square_name

PIECE_SYMBOLS = "PNBRQKpnbrqk"

_SOURCE_MASK = 0x3F
_TARGET_MASK = 0xFC0
_PIECE_MASK = 0xF000
_PROMOTED_MASK = 0xF0000
_CAPTURE_FLAG = 0x100000
_DOUBLE_FLAG = 0x200000
_ENPASSANT_FLAG = 0x400000
_CASTLING_FLAG = 0x800000


class Piece(IntEnum):
    """The twelve piece kinds, white first."""

    WHITE_PAWN = 0
    WHITE_KNIGHT = 1
    WHITE_BISHOP = 2
    WHITE_ROOK = 3
    WHITE_QUEEN = 4
    WHITE_KING = 5
    BLACK_PAWN = 6
    BLACK_KNIGHT = 7
    BLACK_BISHOP = 8
    BLACK_ROOK = 9
    BLACK_QUEEN = 10
    BLACK_KING = 11

    @property
    def symbol(self) -> str:
        return PIECE_SYMBOLS[self]

    @property
    def side(self) -> Side:
        return Side.WHITE if self < Piece.BLACK_PAWN else Side.BLACK

    @classmethod
    def from_symbol(cls, symbol: str) -> "Piece":
        if len(symbol) != 1 or symbol not in PIECE_SYMBOLS:
            raise ValueError(f"unknown piece symbol: {symbol!r}")
        return cls(PIECE_SYMBOLS.index(symbol))


class MoveFlag(IntEnum):
    """Which moves make_move accepts."""

    ALL_MOVES = 0
    ONLY_CAPTURES = 1


@dataclass(frozen=True)
class Move:
    """A move with its flags; encodes to a 24-bit integer."""

    source: int
    target: int
    piece: Piece
    promoted: Optional[Piece] = None
    capture: bool = False
    double_push: bool = False
    enpassant: bool = False
    castling: bool = False

    def __post_init__(self) -> None:
        for name in ("source", "target"):
            value = getattr(self, name)
            if not 0 <= value < 64:
                raise ValueError(f"{name} square out of range: {value}")
        object.__setattr__(self, "piece", Piece(self.piece))
        if self.promoted is not None:
            promoted = Piece(self.promoted)
            if promoted in (Piece.WHITE_PAWN, Piece.BLACK_PAWN):
                raise ValueError("cannot promote to a pawn")
            object.__setattr__(self, "promoted", promoted)

    def encode(self) -> int:
        """The packed integer form of the move."""
        return (
            self.source
            | (self.target << 6)
            | (int(self.piece) << 12)
            | ((int(self.promoted) if self.promoted is not None else 0) << 16)
            | (_CAPTURE_FLAG if self.capture else 0)
            | (_DOUBLE_FLAG if self.double_push else 0)
            | (_ENPASSANT_FLAG if self.enpassant else 0)
            | (_CASTLING_FLAG if self.castling else 0)
        )

    def __int__(self) -> int:
        return self.encode()

    @classmethod
    def decode(cls, code: int) -> "Move":
        """Unpack a move from its integer form."""
        if not 0 <= code < (1 << 24):
            raise ValueError(f"move code out of range: {code}")
        promoted = (code & _PROMOTED_MASK) >> 16
        return cls(
            source=code & _SOURCE_MASK,
            target=(code & _TARGET_MASK) >> 6,
            piece=Piece((code & _PIECE_MASK) >> 12),
            promoted=Piece(promoted) if promoted else None,
            capture=bool(code & _CAPTURE_FLAG),
            double_push=bool(code & _DOUBLE_FLAG),
            enpassant=bool(code & _ENPASSANT_FLAG),
            castling=bool(code & _CASTLING_FLAG),
        )

    def uci(self) -> str:
        """Long algebraic notation, e.g. e2e4 or e7e8q."""
        suffix = self.promoted.symbol.lower() if self.promoted is not None else ""
        return f"{square_name(self.source)}{square_name(self.target)}{suffix}"


def _as_move(move: Union[Move, int]) -> Move:
    return move if isinstance(move, Move) else Move.decode(int(move))


def format_move_list(moves: Iterable[Union[Move, int]]) -> str:
    """Tabular listing of moves and their flags."""
    listed = [_as_move(move) for move in moves]
    lines = ["\n    move    piece   capture   double    enpassant    castling\n\n"]
    for move in listed:
        promo = move.promoted.symbol if move.promoted is not None else " "
        flags = (
            int(move.capture),
            int(move.double_push),
            int(move.enpassant),
            int(move.castling),
        )
        lines.append(
            f"    {square_name(move.source)}{square_name(move.target)}{promo}"
            f"   {move.piece.symbol}       "
            + "         ".join(str(flag) for flag in flags)
            + "\n"
        )
    lines.append(f"\n\n    Total number of moves: {len(listed)}\n\n")
    return "".join(lines)


def print_move_list(moves: Iterable[Union[Move, int]]) -> None:
    """Print the move listing."""
    print(format_move_list(moves), end="")