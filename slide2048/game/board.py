#!/usr/bin/env python3
"""
Grid logic for slide2048.
Pure functions over square boards: rotation, row sliding, and tile spawning.
Boards are lists of rows; 0 marks an empty cell.
"""

import numpy as np

def empty_grid(size):
    """Create a size x size board with no tiles."""
    return [[0 for _ in range(size)] for _ in range(size)]

def clone_grid(grid):
    """Copy a board row by row."""
    return [list(row) for row in grid]

def rotate_grid(grid, times=1):
    """Rotate the board clockwise by the given number of quarter turns."""
    times %= 4
    if times == 0:
        return clone_grid(grid)
    # rot90 turns counter-clockwise for positive k
    return np.rot90(np.array(grid, dtype=np.int64), -times).tolist()

def rotate_coord(r, c, n, times=1):
    """
    Map a cell through the same clockwise quarter turns as rotate_grid.
    One turn sends (r, c) to (c, n - 1 - r).
    """
    for _ in range(times % 4):
        r, c = c, n - 1 - r
    return r, c

def slide_row(row):
    """
    Slide a row to the left and merge equal neighbours once.

    Returns (new_row, merged_values, score_gain, sources) where sources holds
    one (source_col, dest_col, value, merged_value) tuple per tile of the
    original row; merged_value is None for tiles that did not merge.
    """
    tiles = [(col, value) for col, value in enumerate(row) if value != 0]
    new_row = []
    merged = []
    sources = []
    score_gain = 0

    i = 0
    while i < len(tiles):
        col, value = tiles[i]
        dest = len(new_row)
        if i + 1 < len(tiles) and tiles[i + 1][1] == value:
            merged_val = value * 2
            new_row.append(merged_val)
            merged.append(merged_val)
            score_gain += merged_val
            sources.append((col, dest, value, merged_val))
            sources.append((tiles[i + 1][0], dest, value, merged_val))
            i += 2  # the right-hand tile is consumed
        else:
            new_row.append(value)
            sources.append((col, dest, value, None))
            i += 1

    new_row += [0] * (len(row) - len(new_row))
    return new_row, merged, score_gain, sources

def empty_cells(grid):
    """List (row, col) pairs of empty cells in row-major order."""
    return [(i, j) for i, row in enumerate(grid) for j, value in enumerate(row) if value == 0]

def add_random_tile(grid, rng, four_probability=0.1):
    """
    Add a random tile (2 or 4) to an empty cell on the board.
    Returns (row, col, value), or None when the board is full.
    """
    empty = empty_cells(grid)
    if not empty:
        return None
    index = min(int(rng.next_float() * len(empty)), len(empty) - 1)
    i, j = empty[index]
    value = 2 if rng.next_float() < 1.0 - four_probability else 4
    grid[i][j] = value
    return i, j, value

def can_move(grid):
    """Check if any valid moves remain."""
    size = len(grid)
    for i in range(size):
        for j in range(size):
            if grid[i][j] == 0:
                return True
            if i < size - 1 and grid[i][j] == grid[i+1][j]:
                return True
            if j < size - 1 and grid[i][j] == grid[i][j+1]:
                return True
    return False

def max_tile(grid):
    """Highest tile on the board (0 for an empty board)."""
    return max((value for row in grid for value in row), default=0)

def is_valid_tile(value):
    """True for 0 or a power of two >= 2."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return value == 0 or (value >= 2 and value & (value - 1) == 0)
