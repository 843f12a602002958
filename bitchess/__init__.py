"""Bitboard chess move generation, magic-number attack tables and perft counting."""

__version__ = "0.1.0"