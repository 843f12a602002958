"""Perft: count leaf positions of the move tree to check the move generator."""

from __future__ import annotations

import argparse
import time
from typing import List, Optional, Sequence, Tuple

from .board import Board
from .moves import Move, MoveFlag, print_move_list

EMPTY_BOARD = "8/8/8/8/8/8/8/8 w - - "
START_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 "
TRICKY_POSITION = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1 "
KILLER_POSITION = "rnbqkb1r/pp1p1pPp/8/2p1pP2/1P1P4/3P3P/P1P1P3/RNBQKBNR w KQkq e6 0 1"
CMK_POSITION = "r2q1rk1/ppp2ppp/2n1bn2/2b1p3/3pP3/3P1NPP/PPP1NPB1/R1BQ1RK1 b - - 0 9 "
KIWIPETE_POSITION = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - "


def _legal_children(board: Board, moves: List[Move]):
    """Yield each legal move with the board set to the resulting position.

    The position is restored after the consumer resumes the generator.
    """
    for move in moves:
        board.copy_board()
        if not board.make_move(move, MoveFlag.ALL_MOVES):
            board.clear_copy()
            continue
        try:
            yield move
        finally:
            board.take_back()


def perft(board: Board, depth: int) -> int:
    """Number of positions reached after exactly depth legal moves."""
    if depth < 0:
        raise ValueError(f"depth must not be negative, got {depth}")
    if depth == 0:
        return 1
    return sum(
        perft(board, depth - 1) for _ in _legal_children(board, board.generate_moves())
    )


def perft_divide(board: Board, depth: int) -> List[Tuple[Move, int]]:
    """Leaf counts below each legal root move, in generation order."""
    if depth < 1:
        raise ValueError(f"divide depth must be at least 1, got {depth}")
    return [
        (move, perft(board, depth - 1))
        for move in _legal_children(board, board.generate_moves())
    ]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a performance test on a FEN position and print the results."""
    parser = argparse.ArgumentParser(
        prog="bitchess-perft", description="Count move-tree leaves of a position."
    )
    parser.add_argument("fen", nargs="?", default=START_POSITION, help="position in FEN")
    parser.add_argument("-d", "--depth", type=int, default=4, help="search depth")
    args = parser.parse_args(argv)
    if args.depth < 1:
        parser.error("depth must be at least 1")

    print("\n     Performance test\n")
    board = Board()
    board.parse_fen(args.fen)
    print_move_list(board.generate_moves())

    start = time.perf_counter()
    nodes = 0
    for move, count in perft_divide(board, args.depth):
        nodes += count
        print(f"{move.uci()}:  {count}")
    elapsed_ms = int((time.perf_counter() - start) * 1000)

    print(f"\n    Depth: {args.depth}")
    print(f"    Nodes: {nodes}")
    print(f"     Time: {elapsed_ms}\n")
    print(f"Stack size : {board.stack_size()}")
    return 0