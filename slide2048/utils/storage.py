#!/usr/bin/env python3
"""
Persistence for slide2048.
Stores the game in progress, the best score and play statistics.
Every operation is best-effort: a failed read yields defaults and a failed
write is reported and dropped, never raised into the game.
"""

import os
import json
import tempfile

from . import config

def default_stats():
    """Fresh statistics record."""
    return {
        "gamesPlayed": 0,
        "gamesWon": 0,
        "bestTile": 0,
        "totalPlayTime": 0,  # in seconds
    }

def format_duration(seconds):
    """Format a duration in seconds to a human-readable string."""
    if seconds < 60:
        return f"{int(seconds)} seconds"
    elif seconds < 3600:
        minutes = int(seconds / 60)
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    elif seconds < 86400:
        hours = int(seconds / 3600)
        minutes = int((seconds % 3600) / 60)
        return f"{hours} hour{'s' if hours != 1 else ''} {minutes} minute{'s' if minutes != 1 else ''}"
    else:
        days = int(seconds / 86400)
        hours = int((seconds % 86400) / 3600)
        return f"{days} day{'s' if days != 1 else ''} {hours} hour{'s' if hours != 1 else ''}"


class BaseStore:
    """
    Key/value contract shared by the stores.
    Subclasses implement _get, _set and _delete.
    """

    def _get(self, name):
        raise NotImplementedError

    def _set(self, name, value):
        raise NotImplementedError

    def _delete(self, name):
        raise NotImplementedError

    # Game state
    def get_game_state(self):
        return self._get("state")

    def set_game_state(self, state):
        return self._set("state", state)

    def clear_game_state(self):
        return self._delete("state")

    # Best score
    def get_best_score(self):
        value = self._get("bestScore")
        return value if isinstance(value, int) and not isinstance(value, bool) else 0

    def set_best_score(self, score):
        return self._set("bestScore", score)

    # Statistics
    def get_stats(self):
        stats = default_stats()
        stored = self._get("stats")
        if isinstance(stored, dict):
            for key in stats:
                value = stored.get(key)
                # Counters that are missing or not numbers keep their default
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    stats[key] = value
        return stats

    def set_stats(self, stats):
        return self._set("stats", stats)

    def update_stats(self, **updates):
        stats = self.get_stats()
        stats.update(updates)
        self.set_stats(stats)
        return stats


class MemoryStore(BaseStore):
    """In-process store; values are kept as JSON text so callers never share objects with it."""

    def __init__(self):
        self._data = {}

    def _get(self, name):
        raw = self._data.get(name)
        return json.loads(raw) if raw is not None else None

    def _set(self, name, value):
        self._data[name] = json.dumps(value)
        return True

    def _delete(self, name):
        self._data.pop(name, None)
        return True


class JsonFileStore(BaseStore):
    """One JSON file per key inside a directory."""

    def __init__(self, directory=None, prefix=None):
        self.directory = directory if directory is not None else config.STATE_DIR
        self.prefix = prefix if prefix is not None else config.STORAGE_PREFIX

    def _path(self, name):
        return os.path.join(self.directory, f"{self.prefix}{name}.json")

    def _get(self, name):
        path = self._path(name)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            print(f"Error loading {path}: {e}")
            return None

    def _set(self, name, value):
        path = self._path(name)
        tmp_path = None
        try:
            os.makedirs(self.directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f)
            os.replace(tmp_path, path)
            return True
        except (OSError, TypeError, ValueError) as e:
            print(f"Error saving {path}: {e}")
            if tmp_path is not None and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass
            return False

    def _delete(self, name):
        path = self._path(name)
        try:
            if os.path.exists(path):
                os.remove(path)
            return True
        except OSError as e:
            print(f"Error deleting {path}: {e}")
            return False
