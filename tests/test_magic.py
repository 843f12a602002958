import random

import pytest

from bitchess.bitboard import count_bits, get_bit, parse_square, set_bit
from bitchess.magic import (
    BISHOP_RELEVANT_BITS,
    ROOK_RELEVANT_BITS,
    AttackTables,
    find_magic_number,
)
from bitchess.masks import (
    bishop_attacks_on_the_fly,
    mask_bishop_attacks,
    mask_king_attacks,
    mask_knight_attacks,
    mask_pawn_attacks,
    mask_rook_attacks,
    rook_attacks_on_the_fly,
    set_occupancy,
)


@pytest.fixture(scope="module")
def tables():
    return AttackTables()


@pytest.fixture(scope="module")
def blockers():
    occupancy = 0
    for name in ("c5", "f2", "g7", "b2", "g5", "e2", "e7"):
        occupancy = set_bit(occupancy, parse_square(name))
    return occupancy


def test_leaper_tables_match_masks(tables):
    for square in range(64):
        assert tables.knight_attacks(square) == mask_knight_attacks(square)
        assert tables.king_attacks(square) == mask_king_attacks(square)
        assert tables.pawn_attacks(0, square) == mask_pawn_attacks(0, square)
        assert tables.pawn_attacks(1, square) == mask_pawn_attacks(1, square)


def test_pawn_attacks_rejects_both(tables):
    with pytest.raises(ValueError):
        tables.pawn_attacks(2, 10)


def test_sliders_match_on_the_fly_for_random_occupancies(tables):
    rng = random.Random(42)
    for square in range(64):
        for _ in range(10):
            occupancy = rng.getrandbits(64)
            assert tables.rook_attacks(square, occupancy) == rook_attacks_on_the_fly(
                square, occupancy
            )
            assert tables.bishop_attacks(square, occupancy) == bishop_attacks_on_the_fly(
                square, occupancy
            )


def test_rook_from_e5_stops_at_blockers(tables, blockers):
    attacks = tables.rook_attacks(parse_square("e5"), blockers)
    assert attacks == rook_attacks_on_the_fly(parse_square("e5"), blockers)
    assert get_bit(attacks, parse_square("e7"))
    assert not get_bit(attacks, parse_square("e8"))
    assert get_bit(attacks, parse_square("c5"))
    assert not get_bit(attacks, parse_square("b5"))


def test_bishop_from_d4_matches_on_the_fly(tables, blockers):
    square = parse_square("d4")
    assert tables.bishop_attacks(square, blockers) == bishop_attacks_on_the_fly(square, blockers)


def test_queen_is_union_of_bishop_and_rook(tables, blockers):
    square = parse_square("e5")
    assert tables.queen_attacks(square, blockers) == (
        tables.bishop_attacks(square, blockers) | tables.rook_attacks(square, blockers)
    )


def test_empty_board_rook_sees_fourteen_squares(tables):
    for square in range(64):
        assert count_bits(tables.rook_attacks(square, 0)) == 14


def test_resolved_magics_are_complete(tables):
    assert len(tables.rook_magics) == 64
    assert len(tables.bishop_magics) == 64
    assert all(tables.rook_magics)
    assert all(tables.bishop_magics)


def test_wrong_number_of_magics_rejected():
    with pytest.raises(ValueError):
        AttackTables(rook_magics=[1] * 63)


def test_colliding_magic_rejected(tables):
    magics = list(tables.rook_magics)
    magics[0] = 1
    with pytest.raises(ValueError):
        AttackTables(rook_magics=magics)


def test_found_bishop_magic_builds_correct_table(tables):
    magic = find_magic_number(0, BISHOP_RELEVANT_BITS[0], True, random.Random(3))
    magics = list(tables.bishop_magics)
    magics[0] = magic
    custom = AttackTables(bishop_magics=magics)
    assert custom.bishop_magics[0] == magic
    mask = mask_bishop_attacks(0)
    bits = count_bits(mask)
    for index in range(1 << bits):
        occupancy = set_occupancy(index, bits, mask)
        assert custom.bishop_attacks(0, occupancy) == bishop_attacks_on_the_fly(0, occupancy)


def test_found_rook_magic_passes_top_byte_filter():
    square = parse_square("e4")
    magic = find_magic_number(square, ROOK_RELEVANT_BITS[square], False, random.Random(5))
    mask = mask_rook_attacks(square)
    assert count_bits((mask * magic) & 0xFF00000000000000) >= 6


def test_find_magic_number_is_deterministic_for_seed():
    first = find_magic_number(9, BISHOP_RELEVANT_BITS[9], True, random.Random(11))
    second = find_magic_number(9, BISHOP_RELEVANT_BITS[9], True, random.Random(11))
    assert first == second


def test_find_magic_number_rejects_bad_square():
    with pytest.raises(ValueError):
        find_magic_number(64, 10, False, random.Random(1))