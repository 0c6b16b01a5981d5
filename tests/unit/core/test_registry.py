import logging
from unittest.mock import MagicMock

from swrcache.core.registry import CacheRegistry


def test_register_returns_the_cache_and_keeps_order():
    registry = CacheRegistry()
    first, second = MagicMock(), MagicMock()

    assert registry.register(first) is first
    assert registry.register(second) is second
    assert len(registry) == 2
    assert list(registry) == [first, second]


def test_clear_all_clears_in_registration_order():
    registry = CacheRegistry()
    manager = MagicMock()
    registry.register(manager.first)
    registry.register(manager.second)
    registry.register(manager.third)

    registry.clear_all()

    assert [c[0] for c in manager.mock_calls] == ["first.clear", "second.clear", "third.clear"]


def test_clear_all_isolates_failures(caplog):
    registry = CacheRegistry()
    broken = MagicMock()
    broken.name = "broken-cache"
    broken.clear.side_effect = OSError("disk full")
    healthy = MagicMock()
    registry.register(broken)
    registry.register(healthy)

    with caplog.at_level(logging.ERROR):
        registry.clear_all()

    broken.clear.assert_called_once()
    healthy.clear.assert_called_once()
    assert "Failed to clear cache 'broken-cache'" in caplog.text


def test_clear_all_on_empty_registry():
    CacheRegistry().clear_all()


def test_registry_is_never_reset_by_clearing():
    registry = CacheRegistry()
    registry.register(MagicMock())
    registry.clear_all()
    registry.clear_all()
    assert len(registry) == 1
