# bitchess

A chess move generator built on 64-bit bitboards. Rook and bishop attacks come
from magic-number lookup tables. Moves are generated pseudo-legally, and moves
that would leave the mover's king in check are rejected when they are made. A
perft driver counts leaf positions so the generator can be checked against
known results.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

`bitchess-perft` runs a performance test on a position. It prints the
pseudo-legal moves of the position as a table, then the node count under each
legal root move, then the depth, the total number of nodes, the time taken in
milliseconds and the size of the board's copy stack.

```
bitchess-perft
bitchess-perft "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - " --depth 3
bitchess-perft --help
```

- `fen` (positional, optional): the position as a FEN string. It defaults to
  the standard starting position.
- `-d`, `--depth`: search depth, at least 1. It defaults to 4.

## Library use

```python
from bitchess.board import Board
from bitchess.moves import MoveFlag
from bitchess.perft import START_POSITION, perft, perft_divide

board = Board()
board.parse_fen(START_POSITION)
board.plot()

for move in board.generate_moves():      # pseudo-legal Move objects
    board.copy_board()
    if board.make_move(move, MoveFlag.ALL_MOVES):
        print(move.uci())
        board.take_back()
    else:
        board.clear_copy()

print(perft(board, 3))                    # 8902
for move, nodes in perft_divide(board, 2):
    print(move.uci(), nodes)
```

### `bitchess.board`

`Board` holds twelve piece bitboards plus the side to move, the en passant
square and the castling rights.

- `parse_fen(fen)` loads a position and raises `ValueError` for a malformed
  placement field.
- `add_piece(piece, file, rank)` places a single piece.
- `occupancies()` returns the white, black and combined occupancy bitboards.
- `render()` returns a text diagram and `plot()` prints it.
- `is_square_attacked(square, side)` reports whether a side attacks a square.
- `generate_moves()` returns the list of pseudo-legal moves.
- `make_move(move, move_flag)` plays a move. It returns `False` and leaves the
  position unchanged if the move would leave the king in check. With
  `MoveFlag.ONLY_CAPTURES` it refuses anything that is not a capture.
- `copy_board()`, `take_back()`, `clear_copy()` and `stack_size()` manage a
  stack of saved `BoardState` snapshots.

A `Board` builds its attack tables on first use and shares them between
instances. You can also pass your own `AttackTables`.

### `bitchess.moves`

- `Piece` lists the twelve piece kinds and `MoveFlag` the two move modes.
- `Move` is a frozen dataclass. `Move.encode()` and `Move.decode()` convert it
  to and from the packed 24-bit integer form, and `Move.uci()` gives long
  algebraic notation such as `e7e8q`.
- `format_move_list()` and `print_move_list()` produce a table of moves and
  their flags.

### `bitchess.perft`

- `perft(board, depth)` counts the positions reached after exactly `depth`
  legal moves.
- `perft_divide(board, depth)` returns `(move, count)` pairs for each legal
  root move.
- The module defines the named FEN positions `EMPTY_BOARD`, `START_POSITION`,
  `TRICKY_POSITION`, `KILLER_POSITION`, `CMK_POSITION` and
  `KIWIPETE_POSITION`.

### Lower-level modules

- `bitchess.bitboard` holds the bit helpers `set_bit`, `get_bit`, `pop_bit`,
  `count_bits`, `get_ls1b_index` and `iter_squares`. It also has
  `square_name`, `parse_square`, `format_bitboard`, `print_bitboard`, the
  random helpers `random_uint64` and `random_uint64_fewbits`, and `Side`.
- `bitchess.masks` builds the leaper attack masks and the relevant-occupancy
  masks for sliders. It also has `rook_attacks_on_the_fly`,
  `bishop_attacks_on_the_fly` and `set_occupancy`.
- `bitchess.magic` holds `AttackTables`, `find_magic_number` and
  `find_magic_numbers`. Built-in magic numbers are used where available. Any
  square without one is found with a seeded search the first time the tables
  are built.

Squares are numbered from 0 at a8 to 63 at h1.

## What it does not do

The package generates and makes moves and counts perft nodes, and that is all.
It has no position evaluation and no search for a best move. It does not speak
an engine protocol, and it offers no way to play a game against it.