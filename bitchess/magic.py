"""Magic-bitboard attack tables for leaper and slider pieces."""

from __future__ import annotations

import random
from functools import lru_cache
from typing import Optional, Sequence

from .bitboard import MASK64, count_bits, random_uint64_fewbits
from .masks import (
    bishop_attacks_on_the_fly,
    mask_bishop_attacks,
    mask_king_attacks,
    mask_knight_attacks,
    mask_pawn_attacks,
    mask_rook_attacks,
    rook_attacks_on_the_fly,
    set_occupancy,
)

BISHOP_RELEVANT_BITS = (
    6, 5, 5, 5, 5, 5, 5, 6,
    5, 5, 5, 5, 5, 5, 5, 5,
    5, 5, 7, 7, 7, 7, 5, 5,
    5, 5, 7, 9, 9, 7, 5, 5,
    5, 5, 7, 9, 9, 7, 5, 5,
    5, 5, 7, 7, 7, 7, 5, 5,
    5, 5, 5, 5, 5, 5, 5, 5,
    6, 5, 5, 5, 5, 5, 5, 6,
)

ROOK_RELEVANT_BITS = (
    12, 11, 11, 11, 11, 11, 11, 12,
    11, 10, 10, 10, 10, 10, 10, 11,
    11, 10, 10, 10, 10, 10, 10, 11,
    11, 10, 10, 10, 10, 10, 10, 11,
    11, 10, 10, 10, 10, 10, 10, 11,
    11, 10, 10, 10, 10, 10, 10, 11,
    11, 10, 10, 10, 10, 10, 10, 11,
    12, 11, 11, 11, 11, 11, 11, 12,
)

_MAX_ATTEMPTS = 100_000_000
_TOP_BYTE = 0xFF00000000000000
_SEARCH_SEED = 1

# Precomputed magics; squares marked None are searched for on first use.
_KNOWN_ROOK_MAGICS = (
    0x8A80104000800020, 0x140002000100040, 0x2801880A0017001, None,
    0x200020010080420, 0x3001C0002010008, 0x8480008002000100, 0x2080088004402900,
    0x800098204000, 0x2024401000200040, 0x100802000801000, 0x120800800801000,
    0x208808088000400, 0x2802200800400, 0x2200800100020080, 0x801000060821100,
    0x80044006422000, 0x100808020004000, 0x12108A0010204200, 0x140848010000802,
    0x481828014002800, 0x8094004002004100, 0x4010040010010802, 0x20008806104,
    0x100400080208000, 0x2040002120081000, 0x21200680100081, 0x20100080080080,
    0x2000A00200410, 0x20080800400, 0x80088400100102, 0x80004600042881,
    0x4040008040800020, 0x440003000200801, 0x4200011004500, 0x188020010100100,
    0x14800401802800, 0x2080040080800200, 0x124080204001001, 0x200046502000484,
    0x480400080088020, 0x1000422010034000, 0x30200100110040, 0x100021010009,
    0x2002080100110004, 0x202008004008002, 0x20020004010100, None,
    0x101002200408200, 0x40802000401080, None, 0x2060820C0120200,
    0x1001004080100, 0x20C020080040080, 0x2935610830022400, 0x44440041009200,
    0x280001040802101, None, 0x80C0084100102001, 0x4024081001000421,
    0x20030A0244872, 0x12001008414402, 0x2006104900A0804, 0x1004081002402,
)

_KNOWN_BISHOP_MAGICS = (
    0x40040844404084, 0x2004208A004208, 0x10190041080202, 0x108060845042010,
    0x581104180800210, 0x2112080446200010, None, 0x3C0808410220200,
    0x4050404440404, 0x21001420088, 0x24D0080801082102, 0x1020A0A020400,
    0x40308200402, 0x4011002100800, 0x401484104104005, None,
    0x400210C3880100, 0x404022024108200, 0x810018200204102, 0x4002801A02003,
    0x85040820080400, 0x810102C808880400, 0xE900410884800, 0x8002020480840102,
    0x220200865090201, 0x2010100A02021202, 0x152048408022401, 0x20080002081110,
    0x4001001021004000, 0x800040400A011002, 0xE4004081011002, 0x1C004001012080,
    0x8004200962A00220, 0x8422100208500202, 0x2000402200300C08, 0x8646020080080080,
    0x80020A0200100808, 0x2010004880111000, 0x623000A080011400, 0x42008C0340209202,
    None, 0x400408A884001800, 0x110400A6080400, 0x1840060A44020800,
    0x90080104000041, 0x201011000808101, 0x1A2208080504F080, 0x8012020600211212,
    0x500861011240000, 0x180806108200800, 0x4000020E01040044, 0x300000261044000A,
    0x802241102020002, 0x20906061210001, 0x5A84841004010310, 0x4010801011C04,
    0xA010109502200, 0x4A02012000, 0x500201010098B028, 0x8040002811040900,
    0x28000010020204, 0x6000020202D0240, 0x8918844842082200, 0x4010011029020020,
)


def _mask(square: int, bishop: bool) -> int:
    return mask_bishop_attacks(square) if bishop else mask_rook_attacks(square)


def _on_the_fly(square: int, block: int, bishop: bool) -> int:
    if bishop:
        return bishop_attacks_on_the_fly(square, block)
    return rook_attacks_on_the_fly(square, block)


def _relevant_bits(square: int, bishop: bool) -> int:
    return (BISHOP_RELEVANT_BITS if bishop else ROOK_RELEVANT_BITS)[square]


def _enumerate(square: int, bits: int, bishop: bool):
    mask = _mask(square, bishop)
    occupancies = tuple(set_occupancy(i, bits, mask) for i in range(1 << bits))
    attacks = tuple(_on_the_fly(square, occ, bishop) for occ in occupancies)
    return mask, occupancies, attacks


@lru_cache(maxsize=None)
def _variations(square: int, bishop: bool):
    return _enumerate(square, count_bits(_mask(square, bishop)), bishop)


@lru_cache(maxsize=None)
def _slider_table(square: int, bishop: bool, magic: int) -> Optional[tuple]:
    """Attack table indexed by magic index, or None if the magic collides."""
    _, occupancies, attacks = _variations(square, bishop)
    bits = _relevant_bits(square, bishop)
    shift = 64 - bits
    table: list = [None] * (1 << bits)
    for occupancy, attack in zip(occupancies, attacks):
        index = ((occupancy * magic) & MASK64) >> shift
        current = table[index]
        if current is None:
            table[index] = attack
        elif current != attack:
            return None
    return tuple(0 if entry is None else entry for entry in table)


def find_magic_number(
    square: int,
    relevant_bits: int,
    bishop: bool,
    rng: Optional[random.Random] = None,
) -> int:
    """Search for a magic number mapping every occupancy of square without collision."""
    if not 0 <= square < 64:
        raise ValueError(f"square out of range: {square}")
    mask = _mask(square, bool(bishop))
    if relevant_bits == count_bits(mask):
        _, occupancies, attacks = _variations(square, bool(bishop))
    else:
        _, occupancies, attacks = _enumerate(square, relevant_bits, bool(bishop))
    shift = 64 - relevant_bits
    for _ in range(_MAX_ATTEMPTS):
        magic = random_uint64_fewbits(rng)
        if count_bits((mask * magic) & _TOP_BYTE) < 6:
            continue
        used: dict = {}
        for occupancy, attack in zip(occupancies, attacks):
            index = ((occupancy * magic) & MASK64) >> shift
            if used.setdefault(index, attack) != attack:
                break
        else:
            return magic
    raise RuntimeError(f"no magic number found for square {square}")


def find_magic_numbers(rng: Optional[random.Random] = None) -> tuple[list[int], list[int]]:
    """Search magic numbers for every square: (rook magics, bishop magics)."""
    rook = [find_magic_number(sq, ROOK_RELEVANT_BITS[sq], False, rng) for sq in range(64)]
    bishop = [find_magic_number(sq, BISHOP_RELEVANT_BITS[sq], True, rng) for sq in range(64)]
    return rook, bishop


def _search(square: int, bishop: bool) -> int:
    return find_magic_number(
        square, _relevant_bits(square, bishop), bishop, random.Random(_SEARCH_SEED + square)
    )


@lru_cache(maxsize=None)
def _default_magics(bishop: bool) -> tuple[int, ...]:
    known = _KNOWN_BISHOP_MAGICS if bishop else _KNOWN_ROOK_MAGICS
    resolved = []
    for square, magic in enumerate(known):
        if magic is None or _slider_table(square, bishop, magic) is None:
            magic = _search(square, bishop)
        resolved.append(magic)
    return tuple(resolved)


def _resolve(magics: Optional[Sequence[Optional[int]]], bishop: bool) -> tuple[int, ...]:
    if magics is None:
        return _default_magics(bishop)
    values = tuple(magics)
    if len(values) != 64:
        raise ValueError(f"expected 64 magic numbers, got {len(values)}")
    return tuple(
        _search(square, bishop) if magic is None else int(magic) & MASK64
        for square, magic in enumerate(values)
    )


_PAWN_ATTACKS = tuple(tuple(mask_pawn_attacks(side, sq) for sq in range(64)) for side in (0, 1))
_KNIGHT_ATTACKS = tuple(mask_knight_attacks(sq) for sq in range(64))
_KING_ATTACKS = tuple(mask_king_attacks(sq) for sq in range(64))


class AttackTables:
    """Precomputed attack lookups for every piece type and square."""

    def __init__(
        self,
        rook_magics: Optional[Sequence[Optional[int]]] = None,
        bishop_magics: Optional[Sequence[Optional[int]]] = None,
    ) -> None:
        self.rook_magics = _resolve(rook_magics, False)
        self.bishop_magics = _resolve(bishop_magics, True)
        self._rook = tuple(self._slider(sq, False, m) for sq, m in enumerate(self.rook_magics))
        self._bishop = tuple(
            self._slider(sq, True, m) for sq, m in enumerate(self.bishop_magics)
        )

    @staticmethod
    def _slider(square: int, bishop: bool, magic: int):
        table = _slider_table(square, bishop, magic)
        if table is None:
            kind = "bishop" if bishop else "rook"
            raise ValueError(f"{kind} magic {magic:#x} collides on square {square}")
        _, shift = _mask(square, bishop), 64 - _relevant_bits(square, bishop)
        return _mask(square, bishop), magic, shift, table

    def pawn_attacks(self, side: int, square: int) -> int:
        """Squares attacked by a pawn of the given side (0 white, 1 black)."""
        if side not in (0, 1):
            raise ValueError(f"pawn side must be white or black, got {side}")
        return _PAWN_ATTACKS[side][square]

    def knight_attacks(self, square: int) -> int:
        """Squares attacked by a knight."""
        return _KNIGHT_ATTACKS[square]

    def king_attacks(self, square: int) -> int:
        """Squares attacked by a king."""
        return _KING_ATTACKS[square]

    def bishop_attacks(self, square: int, occupancy: int) -> int:
        """Bishop attacks for the given board occupancy."""
        mask, magic, shift, table = self._bishop[square]
        return table[(((occupancy & mask) * magic) & MASK64) >> shift]

    def rook_attacks(self, square: int, occupancy: int) -> int:
        """Rook attacks for the given board occupancy."""
        mask, magic, shift, table = self._rook[square]
        return table[(((occupancy & mask) * magic) & MASK64) >> shift]

    def queen_attacks(self, square: int, occupancy: int) -> int:
        """Queen attacks: the union of bishop and rook attacks."""
        return self.bishop_attacks(square, occupancy) | self.rook_attacks(square, occupancy)