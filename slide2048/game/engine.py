#!/usr/bin/env python3
"""
Game engine for slide2048.
Owns the board, score, win/lose status and undo history, and turns a
direction into a fully computed MoveResult. The engine performs no I/O;
callers persist and animate after a move returns.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from . import board
from .rng import DefaultRandom
from ..utils import config


class GameState(str, Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value):
        """Accept a Direction or a case-insensitive direction name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Unknown direction: {value!r}")


# Clockwise quarter turns that make each direction a slide to the left
ROTATIONS = {
    Direction.LEFT: 0,
    Direction.UP: 3,
    Direction.RIGHT: 2,
    Direction.DOWN: 1,
}


@dataclass(frozen=True)
class HistorySnapshot:
    grid: Tuple[Tuple[int, ...], ...]
    score: int
    game_state: GameState
    won_before: bool

    def to_dict(self):
        return {
            "grid": [list(row) for row in self.grid],
            "score": self.score,
            "gameState": self.game_state.value,
            "wonBefore": self.won_before,
        }


@dataclass(frozen=True)
class TileMovement:
    from_cell: Tuple[int, int]
    to_cell: Tuple[int, int]
    value: int
    merged: bool
    merged_value: Optional[int] = None

    def to_dict(self):
        data = {
            "from": {"r": self.from_cell[0], "c": self.from_cell[1]},
            "to": {"r": self.to_cell[0], "c": self.to_cell[1]},
            "value": self.value,
            "merged": self.merged,
        }
        if self.merged:
            data["mergedValue"] = self.merged_value
        return data


@dataclass(frozen=True)
class NewTile:
    r: int
    c: int
    value: int

    def to_dict(self):
        return {"r": self.r, "c": self.c, "value": self.value}


@dataclass(frozen=True)
class MoveResult:
    moved: bool
    movements: Tuple[TileMovement, ...]
    merged_tiles: Tuple[int, ...]
    new_tile: Optional[NewTile]
    score_gain: int
    game_state: GameState

    def to_dict(self):
        return {
            "moved": self.moved,
            "movements": [m.to_dict() for m in self.movements],
            "mergedTiles": list(self.merged_tiles),
            "newTile": self.new_tile.to_dict() if self.new_tile else None,
            "scoreGain": self.score_gain,
            "gameState": self.game_state.value,
        }


def _int_field(data, key):
    """Non-negative integer field; absent or null means 0."""
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{key} must be a non-negative integer, got {value!r}")
    return value


def _flag_field(data, key):
    """Boolean field; absent or null means False."""
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean, got {value!r}")
    return value


class GameEngine:
    """
    Single-game state machine.

    Mutated only through init, move, undo, continue_game and deserialize.
    Each of those either commits completely or leaves the engine untouched.
    """

    def __init__(self, size=None, random_source=None, win_tile=None, history_limit=None,
                 four_probability=None):
        self.size = size if size is not None else config.GRID_SIZE
        self.rng = random_source if random_source is not None else DefaultRandom(config.RANDOM_SEED)
        self.win_tile = win_tile if win_tile is not None else config.WIN_TILE
        self.history_limit = history_limit if history_limit is not None else config.HISTORY_LIMIT
        self.four_probability = (four_probability if four_probability is not None
                                 else config.FOUR_PROBABILITY)

        self.grid = board.empty_grid(self.size)
        self.score = 0
        self.best_score = 0
        self._history = deque(maxlen=self.history_limit)
        self.game_state = GameState.PLAYING
        self.won_before = False
        self.move_id = 0

    # ---------------- lifecycle ----------------

    def init(self, size=None):
        """Start a new game with two random tiles."""
        if size is not None:
            self.size = size
        self.grid = board.empty_grid(self.size)
        self.score = 0
        self._history.clear()
        self.game_state = GameState.PLAYING
        self.won_before = False
        self.move_id = 0
        self.add_random_tile()
        self.add_random_tile()
        return self

    def add_random_tile(self):
        """Spawn a 2 (or sometimes a 4) on an empty cell; None when the board is full."""
        placed = board.add_random_tile(self.grid, self.rng, self.four_probability)
        if placed is None:
            return None
        return NewTile(*placed)

    # ---------------- history ----------------

    @property
    def history(self):
        """Snapshots oldest first."""
        return tuple(self._history)

    def _snapshot(self):
        return HistorySnapshot(
            grid=tuple(tuple(row) for row in self.grid),
            score=self.score,
            game_state=self.game_state,
            won_before=self.won_before,
        )

    def can_undo(self):
        return len(self._history) > 0

    def undo(self):
        """Restore the state captured before the last move. False when there is nothing to undo."""
        if not self._history:
            return False
        prev = self._history.pop()
        self.grid = [list(row) for row in prev.grid]
        self.score = prev.score
        self.game_state = prev.game_state
        self.won_before = prev.won_before
        return True

    # ---------------- moves ----------------

    def move(self, direction):
        """
        Apply a move in the given direction.
        Returns a MoveResult, or None when the move is rejected or changes nothing.
        """
        direction = Direction.parse(direction)
        if self.game_state == GameState.LOST:
            return None
        if self.game_state == GameState.WON and not self.won_before:
            return None

        snapshot = self._snapshot()

        rot = ROTATIONS[direction]
        work_grid = board.rotate_grid(self.grid, rot)

        moved = False
        total_gain = 0
        all_merged = []
        tile_moves = []

        for r in range(self.size):
            new_row, merged, gain, sources = board.slide_row(work_grid[r])
            if new_row != work_grid[r]:
                moved = True
            for src_col, dest_col, value, merged_value in sources:
                tile_moves.append((r, src_col, dest_col, value, merged_value))
            work_grid[r] = new_row
            total_gain += gain
            all_merged.extend(merged)

        if not moved:
            return None

        unrot = (4 - rot) % 4
        work_grid = board.rotate_grid(work_grid, unrot)

        movements = []
        for r, src_col, dest_col, value, merged_value in tile_moves:
            movements.append(TileMovement(
                from_cell=board.rotate_coord(r, src_col, self.size, unrot),
                to_cell=board.rotate_coord(r, dest_col, self.size, unrot),
                value=value,
                merged=merged_value is not None,
                merged_value=merged_value,
            ))

        # Commit
        self._history.append(snapshot)
        self.grid = work_grid
        self.score += total_gain
        self.move_id += 1
        if self.score > self.best_score:
            self.best_score = self.score

        new_tile = self.add_random_tile()

        has_won = (any(value >= self.win_tile for value in all_merged)
                   or board.max_tile(self.grid) >= self.win_tile)
        if has_won and not self.won_before:
            self.game_state = GameState.WON

        # Runs after the win check, so a winning move that jams the board ends LOST
        if not board.can_move(self.grid):
            self.game_state = GameState.LOST

        return MoveResult(
            moved=True,
            movements=tuple(movements),
            merged_tiles=tuple(all_merged),
            new_tile=new_tile,
            score_gain=total_gain,
            game_state=self.game_state,
        )

    def continue_game(self):
        """Keep playing after a win; ignored in any other state."""
        if self.game_state == GameState.WON:
            self.won_before = True
            self.game_state = GameState.PLAYING

    # ---------------- queries ----------------

    def can_move(self):
        return board.can_move(self.grid)

    def get_max_tile(self):
        return board.max_tile(self.grid)

    def empty_cells(self):
        return board.empty_cells(self.grid)

    # ---------------- persistence ----------------

    def serialize(self):
        """Plain-data copy of the game suitable for JSON storage."""
        return {
            "grid": board.clone_grid(self.grid),
            "score": self.score,
            "bestScore": self.best_score,
            "history": [snap.to_dict() for snap in self._history],
            "gameState": self.game_state.value,
            "wonBefore": self.won_before,
            "moveId": self.move_id,
        }

    def deserialize(self, data):
        """
        Restore a game produced by serialize().

        Only the grid is required; other fields fall back to fresh-game
        defaults so older saves still load. Returns False, leaving the current
        game untouched, when the data cannot describe a board of this size.
        """
        if not isinstance(data, dict) or not data.get("grid"):
            return False

        grid = self._parse_grid(data["grid"])
        if grid is None:
            return False

        try:
            game_state = GameState(data.get("gameState") or GameState.PLAYING.value)
            history = []
            for entry in data.get("history") or []:
                snap_grid = self._parse_grid(entry.get("grid"))
                if snap_grid is None:
                    return False
                history.append(HistorySnapshot(
                    grid=tuple(tuple(row) for row in snap_grid),
                    score=_int_field(entry, "score"),
                    game_state=GameState(entry.get("gameState") or GameState.PLAYING.value),
                    won_before=_flag_field(entry, "wonBefore"),
                ))
            score = _int_field(data, "score")
            best_score = _int_field(data, "bestScore")
            move_id = _int_field(data, "moveId")
            won_before = _flag_field(data, "wonBefore")
        except (AttributeError, TypeError, ValueError):
            return False

        self.grid = grid
        self.score = score
        self.best_score = best_score
        self._history = deque(history, maxlen=self.history_limit)
        self.game_state = game_state
        self.won_before = won_before
        self.move_id = move_id
        return True

    def _parse_grid(self, raw):
        if not isinstance(raw, (list, tuple)) or len(raw) != self.size:
            return None
        grid = []
        for row in raw:
            if not isinstance(row, (list, tuple)) or len(row) != self.size:
                return None
            if not all(board.is_valid_tile(value) for value in row):
                return None
            grid.append(list(row))
        return grid
