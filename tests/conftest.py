import pytest

from pest_empire.engine import PestControlGame
from pest_empire.storage import MemorySaveStore


class StubRng:
    """
    Deterministic stand-in for numpy's RandomState.
    random() pops queued rolls, then returns ``default``; randint() returns its low bound.
    """

    def __init__(self, rolls=None, default=0.99):
        self.rolls = list(rolls or [])
        self.default = default

    def random(self):
        if self.rolls:
            return self.rolls.pop(0)
        return self.default

    def randint(self, low, high=None):
        if high is None:
            return 0
        return low


@pytest.fixture
def rng():
    return StubRng()


@pytest.fixture
def game(rng):
    """New game with no random events and no lucky rolls."""
    g = PestControlGame(rng=rng, event_catalog=[])
    g.new_game()
    return g


@pytest.fixture
def saved_game(rng):
    g = PestControlGame(rng=rng, storage=MemorySaveStore(), event_catalog=[])
    g.new_game()
    return g
