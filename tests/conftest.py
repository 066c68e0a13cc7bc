import pytest

from slide2048.game.engine import GameEngine
from slide2048.game.rng import SequenceRandom
from slide2048.utils.storage import MemoryStore


@pytest.fixture
def make_engine():
    """Engine with a fixed board; spawns default to the first empty cell as a 2."""
    def factory(grid, rng_values=(0.0,), **kwargs):
        engine = GameEngine(size=len(grid), random_source=SequenceRandom(rng_values), **kwargs)
        engine.grid = [list(row) for row in grid]
        return engine
    return factory


@pytest.fixture
def store():
    return MemoryStore()
