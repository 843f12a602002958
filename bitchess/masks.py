"""Attack masks for leaper and slider pieces, computed from first principles."""

from __future__ import annotations

from .bitboard import MASK64, iter_squares

NOT_A_FILE = 18374403900871474942
NOT_H_FILE = 9187201950435737471
NOT_HG_FILE = 4557430888798830399
NOT_AB_FILE = 18229723555195321596


def _shl(bitboard: int, amount: int) -> int:
    return (bitboard << amount) & MASK64


def mask_pawn_attacks(side: int, square: int) -> int:
    """Squares attacked by a pawn; side 0 is white, otherwise black."""
    bitboard = 1 << square
    attacks = 0
    if not side:
        for shifted, guard in ((bitboard >> 7, NOT_A_FILE), (bitboard >> 9, NOT_H_FILE)):
            if shifted & guard:
                attacks |= shifted
    else:
        for shifted, guard in ((_shl(bitboard, 7), NOT_H_FILE), (_shl(bitboard, 9), NOT_A_FILE)):
            if shifted & guard:
                attacks |= shifted
    return attacks


def mask_knight_attacks(square: int) -> int:
    """Squares attacked by a knight."""
    bitboard = 1 << square
    candidates = (
        (bitboard >> 17, NOT_H_FILE),
        (bitboard >> 15, NOT_A_FILE),
        (bitboard >> 10, NOT_HG_FILE),
        (bitboard >> 6, NOT_AB_FILE),
        (_shl(bitboard, 17), NOT_A_FILE),
        (_shl(bitboard, 15), NOT_H_FILE),
        (_shl(bitboard, 10), NOT_AB_FILE),
        (_shl(bitboard, 6), NOT_HG_FILE),
    )
    attacks = 0
    for shifted, guard in candidates:
        if shifted & guard:
            attacks |= shifted
    return attacks


def mask_king_attacks(square: int) -> int:
    """Squares attacked by a king."""
    bitboard = 1 << square
    candidates = (
        (bitboard >> 8, MASK64),
        (bitboard >> 9, NOT_H_FILE),
        (bitboard >> 7, NOT_A_FILE),
        (bitboard >> 1, NOT_H_FILE),
        (_shl(bitboard, 8), MASK64),
        (_shl(bitboard, 9), NOT_A_FILE),
        (_shl(bitboard, 7), NOT_H_FILE),
        (_shl(bitboard, 1), NOT_A_FILE),
    )
    attacks = 0
    for shifted, guard in candidates:
        if shifted & guard:
            attacks |= shifted
    return attacks


_DIAGONALS = ((1, 1), (-1, 1), (1, -1), (-1, -1))
_ORTHOGONALS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def _relevant_mask(square: int, directions) -> int:
    rank, file = divmod(square, 8)
    attacks = 0
    for dr, df in directions:
        r, f = rank + dr, file + df
        # Edge squares never block further travel, so they are left out.
        while (1 <= r <= 6 or dr == 0) and (1 <= f <= 6 or df == 0):
            attacks |= 1 << (r * 8 + f)
            r += dr
            f += df
    return attacks


def _slide(square: int, block: int, directions) -> int:
    rank, file = divmod(square, 8)
    attacks = 0
    for dr, df in directions:
        r, f = rank + dr, file + df
        while 0 <= r <= 7 and 0 <= f <= 7:
            bit = 1 << (r * 8 + f)
            attacks |= bit
            if bit & block:
                break
            r += dr
            f += df
    return attacks


def mask_bishop_attacks(square: int) -> int:
    """Relevant occupancy squares for a bishop, board edges excluded."""
    return _relevant_mask(square, _DIAGONALS)


def mask_rook_attacks(square: int) -> int:
    """Relevant occupancy squares for a rook, board edges excluded."""
    return _relevant_mask(square, _ORTHOGONALS)


def rook_attacks_on_the_fly(square: int, block: int) -> int:
    """Rook attacks given blockers, including the first blocker on each ray."""
    return _slide(square, block, _ORTHOGONALS)


def bishop_attacks_on_the_fly(square: int, block: int) -> int:
    """Bishop attacks given blockers, including the first blocker on each ray."""
    return _slide(square, block, _DIAGONALS)


def set_occupancy(index: int, bits_in_mask: int, attack_mask: int) -> int:
    """The occupancy subset of attack_mask selected by the bits of index."""
    occupancy = 0
    for count, square in enumerate(iter_squares(attack_mask)):
        if count >= bits_in_mask:
            break
        if index & (1 << count):
            occupancy |= 1 << square
    return occupancy