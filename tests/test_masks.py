import pytest

from bitchess.bitboard import count_bits, get_bit, parse_square, set_bit
from bitchess.masks import (
    NOT_A_FILE,
    NOT_H_FILE,
    bishop_attacks_on_the_fly,
    mask_bishop_attacks,
    mask_king_attacks,
    mask_knight_attacks,
    mask_pawn_attacks,
    mask_rook_attacks,
    rook_attacks_on_the_fly,
    set_occupancy,
)

ROOK_RELEVANT_BITS = [
    12, 11, 11, 11, 11, 11, 11, 12,
    11, 10, 10, 10, 10, 10, 10, 11,
    11, 10, 10, 10, 10, 10, 10, 11,
    11, 10, 10, 10, 10, 10, 10, 11,
    11, 10, 10, 10, 10, 10, 10, 11,
    11, 10, 10, 10, 10, 10, 10, 11,
    11, 10, 10, 10, 10, 10, 10, 11,
    12, 11, 11, 11, 11, 11, 11, 12,
]

BISHOP_RELEVANT_BITS = [
    6, 5, 5, 5, 5, 5, 5, 6,
    5, 5, 5, 5, 5, 5, 5, 5,
    5, 5, 7, 7, 7, 7, 5, 5,
    5, 5, 7, 9, 9, 7, 5, 5,
    5, 5, 7, 9, 9, 7, 5, 5,
    5, 5, 7, 7, 7, 7, 5, 5,
    5, 5, 5, 5, 5, 5, 5, 5,
    6, 5, 5, 5, 5, 5, 5, 6,
]

SQUARES = range(64)


@pytest.mark.parametrize("square", SQUARES)
def test_rook_mask_size_matches_relevant_bits(square):
    assert count_bits(mask_rook_attacks(square)) == ROOK_RELEVANT_BITS[square]


@pytest.mark.parametrize("square", SQUARES)
def test_bishop_mask_size_matches_relevant_bits(square):
    assert count_bits(mask_bishop_attacks(square)) == BISHOP_RELEVANT_BITS[square]


@pytest.mark.parametrize("square", SQUARES)
def test_masks_are_subsets_of_empty_board_attacks(square):
    rook_mask = mask_rook_attacks(square)
    bishop_mask = mask_bishop_attacks(square)
    assert rook_attacks_on_the_fly(square, 0) & rook_mask == rook_mask
    assert bishop_attacks_on_the_fly(square, 0) & bishop_mask == bishop_mask
    assert not get_bit(rook_mask | bishop_mask, square)


def test_pawn_attacks_mirror_between_colours():
    for source in SQUARES:
        for target in SQUARES:
            assert get_bit(mask_pawn_attacks(0, source), target) == get_bit(
                mask_pawn_attacks(1, target), source
            )


def test_white_pawn_attacks_diagonally_forward():
    attacks = mask_pawn_attacks(0, parse_square("e4"))
    expected = set_bit(set_bit(0, parse_square("d5")), parse_square("f5"))
    assert attacks == expected


def test_pawn_attacks_do_not_wrap_files():
    for square in SQUARES:
        file = square % 8
        if file == 0:
            assert mask_pawn_attacks(0, square) & ~NOT_H_FILE == 0
            assert mask_pawn_attacks(1, square) & ~NOT_H_FILE == 0
        if file == 7:
            assert mask_pawn_attacks(0, square) & ~NOT_A_FILE == 0
            assert mask_pawn_attacks(1, square) & ~NOT_A_FILE == 0


@pytest.mark.parametrize("mask", [mask_knight_attacks, mask_king_attacks])
def test_leaper_attacks_are_symmetric(mask):
    for source in SQUARES:
        for target in SQUARES:
            assert get_bit(mask(source), target) == get_bit(mask(target), source)


@pytest.mark.parametrize("mask", [mask_knight_attacks, mask_king_attacks])
def test_leaper_attacks_stay_on_board(mask):
    for square in SQUARES:
        attacks = mask(square)
        assert attacks < 2**64
        assert not get_bit(attacks, square)


@pytest.mark.parametrize(
    "attacks", [rook_attacks_on_the_fly, bishop_attacks_on_the_fly]
)
def test_slider_empty_board_attacks_are_symmetric(attacks):
    for source in SQUARES:
        for target in SQUARES:
            assert get_bit(attacks(source, 0), target) == get_bit(
                attacks(target, 0), source
            )


def test_rook_ray_stops_at_blocker():
    a8, a7, a6, a5 = (parse_square(n) for n in ("a8", "a7", "a6", "a5"))
    block = set_bit(0, a6)
    attacks = rook_attacks_on_the_fly(a8, block)
    assert get_bit(attacks, a7)
    assert get_bit(attacks, a6)
    assert not get_bit(attacks, a5)


def test_bishop_ray_stops_at_blocker():
    d4, e5, f6, g7 = (parse_square(n) for n in ("d4", "e5", "f6", "g7"))
    block = set_bit(0, f6)
    attacks = bishop_attacks_on_the_fly(d4, block)
    assert get_bit(attacks, e5)
    assert get_bit(attacks, f6)
    assert not get_bit(attacks, g7)


@pytest.mark.parametrize("square", [0, 27, 36, 63])
def test_set_occupancy_enumerates_all_subsets(square):
    mask = mask_bishop_attacks(square)
    bits = count_bits(mask)
    subsets = {set_occupancy(index, bits, mask) for index in range(1 << bits)}
    assert len(subsets) == 1 << bits
    assert all(subset & ~mask == 0 for subset in subsets)
    assert set_occupancy(0, bits, mask) == 0
    assert set_occupancy((1 << bits) - 1, bits, mask) == mask