#!/usr/bin/env python3
"""
Game session for slide2048.
Connects one engine to a store: resumes saved games, persists after every
change and keeps play statistics. Data flows one way; the engine computes a
result and each subscriber (statistics, persistence, clients) reacts to it
on its own.
"""

from .engine import GameEngine, GameState

def record_stats(result, session):
    """Count wins and finished games."""
    if result.game_state == GameState.WON:
        session.record_win()
    elif result.game_state == GameState.LOST:
        session.record_played()

def save_game(result, session):
    session.save()

class GameSession:
    def __init__(self, store, engine=None):
        self.store = store
        self.engine = engine if engine is not None else GameEngine()
        self._subscribers = [save_game, record_stats]

    def subscribe(self, callback):
        """Register callback(result, session) to run after each committed move."""
        self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self, result):
        # A failing subscriber must not keep the others from seeing the move
        for callback in list(self._subscribers):
            try:
                callback(result, self)
            except Exception as e:
                print(f"Error in move subscriber {getattr(callback, '__name__', callback)!r}: {e}")

    # ---------------- lifecycle ----------------

    def load(self):
        """Resume the saved game if there is a usable one, else start fresh. Returns True on resume."""
        best_score = self.store.get_best_score()
        self.engine.best_score = best_score

        saved = self.store.get_game_state()
        if saved and self.engine.deserialize(saved):
            self.engine.best_score = max(best_score, self.engine.best_score)
            return True

        self.engine.init()
        self.engine.best_score = best_score
        return False

    def new_game(self):
        """Abandon the current game (counting it as played if it had moves) and start over."""
        if self.engine.move_id > 0:
            self.record_played()
        self.engine.init()
        self.engine.best_score = self.store.get_best_score()
        self.save()

    def save(self):
        self.store.set_game_state(self.engine.serialize())
        self.store.set_best_score(self.engine.best_score)

    # ---------------- actions ----------------

    def move(self, direction):
        """Play one move. Returns the MoveResult, or None when nothing happened (nothing is saved then)."""
        result = self.engine.move(direction)
        if result is None:
            return None

        self._notify(result)
        return result

    def undo(self):
        if not self.engine.undo():
            return False
        self.save()
        return True

    def continue_game(self):
        if self.engine.game_state != GameState.WON:
            return False
        self.engine.continue_game()
        self.save()
        return True

    def tick(self, seconds=1):
        """Add play time; only counted while the game is being played."""
        if self.engine.game_state != GameState.PLAYING:
            return False
        stats = self.store.get_stats()
        stats["totalPlayTime"] += seconds
        self.store.set_stats(stats)
        return True

    # ---------------- statistics ----------------

    def record_win(self):
        stats = self.store.get_stats()
        stats["gamesWon"] += 1
        stats["bestTile"] = max(stats["bestTile"], self.engine.get_max_tile())
        self.store.set_stats(stats)

    def record_played(self):
        stats = self.store.get_stats()
        stats["gamesPlayed"] += 1
        stats["bestTile"] = max(stats["bestTile"], self.engine.get_max_tile())
        self.store.set_stats(stats)

    def stats(self):
        return self.store.get_stats()

    def snapshot(self):
        """Client view of the game: the serialized state plus a few derived fields."""
        data = self.engine.serialize()
        data["maxTile"] = self.engine.get_max_tile()
        data["canUndo"] = self.engine.can_undo()
        data["size"] = self.engine.size
        return data
