"""Board position, pseudo-legal move generation and move making."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, List, Optional, Tuple, Union

from .bitboard import (
    MASK64,
    Side,
    get_bit,
    get_ls1b_index,
    iter_squares,
    parse_square,
    pop_bit,
    set_bit,
    square_name,
)
from .magic import AttackTables
from .moves import PIECE_SYMBOLS, Move, MoveFlag, Piece

# Castling rights kept after a piece leaves or lands on each square.
CASTLING_RIGHTS = (
    7, 15, 15, 15, 3, 15, 15, 11,
    15, 15, 15, 15, 15, 15, 15, 15,
    15, 15, 15, 15, 15, 15, 15, 15,
    15, 15, 15, 15, 15, 15, 15, 15,
    15, 15, 15, 15, 15, 15, 15, 15,
    15, 15, 15, 15, 15, 15, 15, 15,
    15, 15, 15, 15, 15, 15, 15, 15,
    13, 15, 15, 15, 12, 15, 15, 14,
)

_CASTLE_BITS = {"K": 1, "Q": 2, "k": 4, "q": 8}

_WHITE_PIECES = tuple(Piece(i) for i in range(6))
_BLACK_PIECES = tuple(Piece(i) for i in range(6, 12))

_ROOK_CASTLE_JUMPS = {
    62: (Piece.WHITE_ROOK, 63, 61),
    58: (Piece.WHITE_ROOK, 56, 59),
    6: (Piece.BLACK_ROOK, 7, 5),
    2: (Piece.BLACK_ROOK, 0, 3),
}


@lru_cache(maxsize=1)
def _default_tables() -> AttackTables:
    return AttackTables()


@dataclass(frozen=True)
class BoardState:
    """A saved copy of everything make_move changes."""

    bitboards: Tuple[int, ...]
    occupancies: Tuple[int, ...]
    side: Side
    enpassant: Optional[int]
    castle: int


class Board:
    """A chess position held as twelve piece bitboards."""

    def __init__(self, tables: Optional[AttackTables] = None) -> None:
        self.tables = tables if tables is not None else _default_tables()
        self.bitboards: List[int] = [0] * 12
        self._occupancies: List[int] = [0, 0, 0]
        self.side: Side = Side.WHITE
        self.enpassant: Optional[int] = None
        self.castle: int = 0
        self._stack: List[BoardState] = []

    # ------------------------------------------------------------------ setup

    def add_piece(self, piece: Union[Piece, int], file: int, rank: int) -> None:
        """Place a piece on a file (0 = a) and rank (0 = first rank)."""
        if not (0 <= file < 8 and 0 <= rank < 8):
            raise ValueError(f"file and rank must be in 0..7, got {file}, {rank}")
        piece = Piece(piece)
        self.bitboards[piece] = set_bit(self.bitboards[piece], (7 - rank) * 8 + file)
        self._update_occupancies()

    def parse_fen(self, fen: str) -> None:
        """Load a position from a FEN string."""
        fields = fen.split()
        if not fields:
            raise ValueError("empty FEN string")
        placement = fields[0]
        side_field = fields[1] if len(fields) > 1 else "w"
        castle_field = fields[2] if len(fields) > 2 else "-"
        enpassant_field = fields[3] if len(fields) > 3 else "-"

        rows = placement.split("/")
        if len(rows) != 8:
            raise ValueError(f"FEN placement needs 8 ranks, got {len(rows)}")
        bitboards = [0] * 12
        for rank, row in enumerate(rows):
            file = 0
            for char in row:
                if char.isdigit():
                    file += int(char)
                elif char in PIECE_SYMBOLS:
                    if file >= 8:
                        raise ValueError(f"too many squares in rank {8 - rank}")
                    piece = Piece.from_symbol(char)
                    bitboards[piece] = set_bit(bitboards[piece], rank * 8 + file)
                    file += 1
                else:
                    raise ValueError(f"unexpected character in FEN: {char!r}")
            if file != 8:
                raise ValueError(f"rank {8 - rank} covers {file} squares, not 8")

        castle = 0
        for char in castle_field:
            castle |= _CASTLE_BITS.get(char, 0)

        enpassant = None if enpassant_field == "-" else parse_square(enpassant_field)

        self.bitboards = bitboards
        self.side = Side.WHITE if side_field == "w" else Side.BLACK
        self.castle = castle
        self.enpassant = enpassant
        self._update_occupancies()

    def _update_occupancies(self) -> None:
        white = 0
        for piece in _WHITE_PIECES:
            white |= self.bitboards[piece]
        black = 0
        for piece in _BLACK_PIECES:
            black |= self.bitboards[piece]
        self._occupancies = [white, black, white | black]

    def occupancies(self) -> Tuple[int, int, int]:
        """White, black and combined occupancy bitboards."""
        return tuple(self._occupancies)

    # ---------------------------------------------------------------- display

    def _piece_at(self, square: int) -> Optional[Piece]:
        for piece in Piece:
            if get_bit(self.bitboards[piece], square):
                return piece
        return None

    def render(self) -> str:
        """Text diagram of the position with side, en passant and castling."""
        lines = ["\n"]
        for rank in range(8):
            cells = []
            for file in range(8):
                piece = self._piece_at(rank * 8 + file)
                cells.append(f" {piece.symbol if piece is not None else '.'}")
            lines.append(f"  {8 - rank} {''.join(cells)}\n")
        lines.append("\n     a b c d e f g h\n\n")
        lines.append(f"     Side:     {'white' if self.side is Side.WHITE else 'black'}\n")
        enpassant = square_name(self.enpassant) if self.enpassant is not None else "no"
        lines.append(f"     Enpassant:   {enpassant}\n")
        castling = "".join(
            char if self.castle & bit else "-" for char, bit in _CASTLE_BITS.items()
        )
        lines.append(f"     Castling:  {castling}\n\n")
        return "".join(lines)

    def plot(self) -> None:
        """Print the position diagram."""
        print(self.render(), end="")

    # ------------------------------------------------------------ copy stack

    def copy_board(self) -> None:
        """Push the current state onto the copy stack."""
        self._stack.append(
            BoardState(
                bitboards=tuple(self.bitboards),
                occupancies=tuple(self._occupancies),
                side=self.side,
                enpassant=self.enpassant,
                castle=self.castle,
            )
        )

    def take_back(self) -> None:
        """Restore the most recently saved state and drop it from the stack."""
        if not self._stack:
            raise IndexError("take_back with an empty copy stack")
        state = self._stack.pop()
        self.bitboards = list(state.bitboards)
        self._occupancies = list(state.occupancies)
        self.side = state.side
        self.enpassant = state.enpassant
        self.castle = state.castle

    def clear_copy(self) -> None:
        """Drop the most recently saved state without restoring it."""
        if not self._stack:
            raise IndexError("clear_copy with an empty copy stack")
        self._stack.pop()

    def stack_size(self) -> int:
        """Number of saved states."""
        return len(self._stack)

    # --------------------------------------------------------------- attacks

    def is_square_attacked(self, square: int, side: Union[Side, int]) -> bool:
        """Whether any piece of the given side attacks the square."""
        side = Side(side)
        tables = self.tables
        boards = self.bitboards
        both = self._occupancies[Side.BOTH]
        white = side is Side.WHITE

        if white and tables.pawn_attacks(Side.BLACK, square) & boards[Piece.WHITE_PAWN]:
            return True
        if not white and tables.pawn_attacks(Side.WHITE, square) & boards[Piece.BLACK_PAWN]:
            return True

        def own(white_piece: Piece, black_piece: Piece) -> int:
            return boards[white_piece] if white else boards[black_piece]

        return bool(
            tables.knight_attacks(square) & own(Piece.WHITE_KNIGHT, Piece.BLACK_KNIGHT)
            or tables.bishop_attacks(square, both) & own(Piece.WHITE_BISHOP, Piece.BLACK_BISHOP)
            or tables.rook_attacks(square, both) & own(Piece.WHITE_ROOK, Piece.BLACK_ROOK)
            or tables.queen_attacks(square, both) & own(Piece.WHITE_QUEEN, Piece.BLACK_QUEEN)
            or tables.king_attacks(square) & own(Piece.WHITE_KING, Piece.BLACK_KING)
        )

    # ------------------------------------------------------- move generation

    def generate_moves(self) -> List[Move]:
        """All pseudo-legal moves for the side to move."""
        white = self.side is Side.WHITE
        pieces = _WHITE_PIECES if white else _BLACK_PIECES
        tables = self.tables
        both = self._occupancies[Side.BOTH]
        moves: List[Move] = []
        for piece in pieces:
            kind = piece % 6
            if kind == 0:
                moves.extend(self._pawn_moves())
                continue
            if kind == 5:
                moves.extend(self._castling_moves())
                attack = tables.king_attacks
            elif kind == 1:
                attack = tables.knight_attacks
            elif kind == 2:
                attack = lambda sq: tables.bishop_attacks(sq, both)  # noqa: E731
            elif kind == 3:
                attack = lambda sq: tables.rook_attacks(sq, both)  # noqa: E731
            else:
                attack = lambda sq: tables.queen_attacks(sq, both)  # noqa: E731
            moves.extend(self._piece_moves(piece, attack))
        return moves

    def _piece_moves(self, piece: Piece, attack) -> Iterator[Move]:
        own = self._occupancies[self.side]
        enemy = self._occupancies[self.side.opponent]
        for source in iter_squares(self.bitboards[piece]):
            for target in iter_squares(attack(source) & ~own & MASK64):
                yield Move(source, target, piece, capture=get_bit(enemy, target))

    def _pawn_moves(self) -> Iterator[Move]:
        side = self.side
        white = side is Side.WHITE
        if white:
            piece, step = Piece.WHITE_PAWN, -8
            promotion_rank, start_rank = range(8, 16), range(48, 56)
            promotions = (Piece.WHITE_QUEEN, Piece.WHITE_ROOK, Piece.WHITE_BISHOP, Piece.WHITE_KNIGHT)
        else:
            piece, step = Piece.BLACK_PAWN, 8
            promotion_rank, start_rank = range(48, 56), range(8, 16)
            promotions = (Piece.BLACK_QUEEN, Piece.BLACK_ROOK, Piece.BLACK_BISHOP, Piece.BLACK_KNIGHT)
        both = self._occupancies[Side.BOTH]
        enemy = self._occupancies[side.opponent]

        for source in iter_squares(self.bitboards[piece]):
            target = source + step
            if 0 <= target < 64 and not get_bit(both, target):
                if source in promotion_rank:
                    for promoted in promotions:
                        yield Move(source, target, piece, promoted=promoted)
                else:
                    yield Move(source, target, piece)
                    if source in start_rank and not get_bit(both, target + step):
                        yield Move(source, target + step, piece, double_push=True)

            attacks = self.tables.pawn_attacks(side, source)
            for target in iter_squares(attacks & enemy):
                if source in promotion_rank:
                    for promoted in promotions:
                        yield Move(source, target, piece, promoted=promoted, capture=True)
                else:
                    yield Move(source, target, piece, capture=True)

            if self.enpassant is not None and get_bit(attacks, self.enpassant):
                yield Move(source, self.enpassant, piece, capture=True, enpassant=True)

    def _castling_moves(self) -> Iterator[Move]:
        both = self._occupancies[Side.BOTH]

        def empty(*squares: int) -> bool:
            return not any(get_bit(both, sq) for sq in squares)

        def safe(enemy: Side, *squares: int) -> bool:
            return not any(self.is_square_attacked(sq, enemy) for sq in squares)

        if self.side is Side.WHITE:
            king = Piece.WHITE_KING
            if self.castle & 1 and empty(61, 62) and safe(Side.BLACK, 60, 61):
                yield Move(60, 62, king, castling=True)
            if self.castle & 2 and empty(57, 58, 59) and safe(Side.BLACK, 60, 59):
                yield Move(60, 58, king, castling=True)
        else:
            king = Piece.BLACK_KING
            if self.castle & 4 and empty(5, 6) and safe(Side.WHITE, 4, 5):
                yield Move(4, 6, king, castling=True)
            if self.castle & 8 and empty(1, 2, 3) and safe(Side.WHITE, 3, 4):
                yield Move(4, 2, king, castling=True)

    # ------------------------------------------------------------ make move

    def make_move(
        self, move: Union[Move, int], move_flag: MoveFlag = MoveFlag.ALL_MOVES
    ) -> bool:
        """Play a move; return False and leave the position unchanged if illegal."""
        if not isinstance(move, Move):
            move = Move.decode(int(move))
        if MoveFlag(move_flag) is MoveFlag.ONLY_CAPTURES:
            if not move.capture:
                return False
            return self.make_move(move, MoveFlag.ALL_MOVES)

        self.copy_board()
        boards = self.bitboards
        side = self.side
        source, target, piece = move.source, move.target, move.piece

        boards[piece] = set_bit(pop_bit(boards[piece], source), target)

        if move.capture:
            for victim in (_BLACK_PIECES if side is Side.WHITE else _WHITE_PIECES):
                if get_bit(boards[victim], target):
                    boards[victim] = pop_bit(boards[victim], target)
                    break

        if move.promoted is not None:
            pawn = Piece.WHITE_PAWN if side is Side.WHITE else Piece.BLACK_PAWN
            boards[pawn] = pop_bit(boards[pawn], target)
            boards[move.promoted] = set_bit(boards[move.promoted], target)

        if move.enpassant:
            if side is Side.WHITE:
                boards[Piece.BLACK_PAWN] = pop_bit(boards[Piece.BLACK_PAWN], target + 8)
            else:
                boards[Piece.WHITE_PAWN] = pop_bit(boards[Piece.WHITE_PAWN], target - 8)

        self.enpassant = None
        if move.double_push:
            self.enpassant = target + 8 if side is Side.WHITE else target - 8

        if move.castling and target in _ROOK_CASTLE_JUMPS:
            rook, rook_from, rook_to = _ROOK_CASTLE_JUMPS[target]
            boards[rook] = set_bit(pop_bit(boards[rook], rook_from), rook_to)

        self.castle &= CASTLING_RIGHTS[source]
        self.castle &= CASTLING_RIGHTS[target]

        self._update_occupancies()
        self.side = side.opponent

        king = boards[Piece.WHITE_KING if side is Side.WHITE else Piece.BLACK_KING]
        if king and self.is_square_attacked(get_ls1b_index(king), self.side):
            self.take_back()
            return False
        self.clear_copy()
        return True