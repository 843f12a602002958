"""Bitboard primitives: bit manipulation, square naming and display."""

from __future__ import annotations

import random
from enum import IntEnum
from typing import Iterator, Optional

MASK64 = 0xFFFFFFFFFFFFFFFF

FILES = "abcdefgh"


class Side(IntEnum):
    """Colour to move; BOTH indexes the combined occupancy."""

    WHITE = 0
    BLACK = 1
    BOTH = 2

    @property
    def opponent(self) -> "Side":
        if self is Side.BOTH:
            raise ValueError("BOTH has no opponent")
        return Side(self ^ 1)


def set_bit(bitboard: int, square: int) -> int:
    """Return the bitboard with the given square set."""
    return bitboard | (1 << square)


def get_bit(bitboard: int, square: int) -> bool:
    """Return whether the given square is set."""
    return bool(bitboard & (1 << square))


def pop_bit(bitboard: int, square: int) -> int:
    """Return the bitboard with the given square cleared."""
    return bitboard & ~(1 << square) & MASK64


def count_bits(bitboard: int) -> int:
    """Number of set bits."""
    count = 0
    while bitboard:
        bitboard &= bitboard - 1
        count += 1
    return count


def get_ls1b_index(bitboard: int) -> int:
    """Index of the least significant set bit; 64 for an empty bitboard."""
    if not bitboard:
        return 64
    return (bitboard & -bitboard).bit_length() - 1


def iter_squares(bitboard: int) -> Iterator[int]:
    """Yield the set squares from least to most significant."""
    while bitboard:
        lowest = bitboard & -bitboard
        yield lowest.bit_length() - 1
        bitboard ^= lowest


def random_uint64(rng: Optional[random.Random] = None) -> int:
    """A 64-bit random number assembled from four 16-bit draws."""
    source = rng if rng is not None else random
    u1, u2, u3, u4 = (source.getrandbits(16) for _ in range(4))
    return u1 | (u2 << 16) | (u3 << 32) | (u4 << 48)


def random_uint64_fewbits(rng: Optional[random.Random] = None) -> int:
    """A sparse 64-bit random number: the AND of three random draws."""
    return random_uint64(rng) & random_uint64(rng) & random_uint64(rng)


def square_name(square: int) -> str:
    """Algebraic name of a square, with a8 as square 0 and h1 as 63."""
    if not 0 <= square < 64:
        raise ValueError(f"square out of range: {square}")
    rank, file = divmod(square, 8)
    return f"{FILES[file]}{8 - rank}"


def parse_square(name: str) -> int:
    """Square index of an algebraic name such as 'e4'."""
    if len(name) != 2 or name[0] not in FILES or name[1] not in "12345678":
        raise ValueError(f"invalid square name: {name!r}")
    file = FILES.index(name[0])
    rank = 8 - int(name[1])
    return rank * 8 + file


def format_bitboard(bitboard: int) -> str:
    """Text diagram of a bitboard, rank 8 at the top."""
    lines = ["\n"]
    for rank in range(8):
        bits = "".join(
            f" {1 if get_bit(bitboard, rank * 8 + file) else 0}" for file in range(8)
        )
        lines.append(f"  {8 - rank} {bits}\n")
    lines.append("\n     a b c d e f g h\n\n")
    lines.append(f"     Bitboard: {bitboard}\n\n")
    return "".join(lines)


def print_bitboard(bitboard: int) -> None:
    """Print the diagram of a bitboard."""
    print(format_bitboard(bitboard), end="")