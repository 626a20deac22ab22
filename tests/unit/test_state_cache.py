"""Unit tests for StateCache."""

from stardew_bot.state_cache import StateCache


class TestStateCache:
    """Test the single-slot snapshot cache."""

    def test_empty_before_first_update(self):
        """latest() is None until something is pushed."""
        assert StateCache().latest() is None

    def test_update_overwrites(self):
        """Each update replaces the previous snapshot wholesale."""
        cache = StateCache()
        cache.update({"player": {"money": 100}, "time": {"day": 1}})
        cache.update({"player": {"money": 200}})

        assert cache.latest() == {"player": {"money": 200}}
