import asyncio
import logging
from typing import get_type_hints

import pytest

import swrcache
from swrcache.core.context import CacheContext
from swrcache.core.passthrough import PassthroughCache
from swrcache.domain.exceptions import CacheConfigError
from swrcache.domain.models.options import CacheSettings


class VersionedProducer:
    def __init__(self):
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return {"version": self.calls}


# --- Disabled mode ---

@pytest.mark.parametrize("policy", ["swr", "memo"])
def test_disabled_mode_always_calls_producer(disabled_context: CacheContext, policy):
    producer = VersionedProducer()
    cached = getattr(disabled_context, policy)(producer, name=f"disabled-{policy}")

    async def scenario():
        return [await cached() for _ in range(5)]

    results = asyncio.run(scenario())

    assert isinstance(cached, PassthroughCache)
    assert [r["version"] for r in results] == [1, 2, 3, 4, 5]
    assert producer.calls == 5


@pytest.mark.parametrize("policy", ["swr", "memo"])
def test_disabled_mode_clear_is_a_noop(disabled_context: CacheContext, policy):
    cached = getattr(disabled_context, policy)(VersionedProducer(), name=f"disabled-clear-{policy}")
    cached.clear()


def test_disabled_mode_registers_nothing_and_writes_nothing(disabled_context: CacheContext, cache_dir):
    cached = disabled_context.memo(VersionedProducer(), name="disabled-nothing")
    asyncio.run(cached())

    assert len(disabled_context.registry) == 0
    assert not cache_dir.exists()
    disabled_context.clear_all_caches()


# --- Registration and global clear ---

def test_caches_are_registered_in_creation_order(context: CacheContext):
    first = context.swr(VersionedProducer(), name="registered-swr")
    second = context.memo(VersionedProducer(), name="registered-memo")
    assert list(context.registry) == [first, second]


def test_clear_all_caches_clears_every_cache(context: CacheContext):
    swr_producer, memo_producer = VersionedProducer(), VersionedProducer()
    cached_swr = context.swr(swr_producer, name="clear-all-swr")
    cached_memo = context.memo(memo_producer, name="clear-all-memo")

    async def call_both():
        return await cached_swr(), await cached_memo()

    assert asyncio.run(call_both()) == ({"version": 1}, {"version": 1})
    context.clear_all_caches()
    # Fresh data after the clear, never the pre-clear value
    assert asyncio.run(call_both()) == ({"version": 2}, {"version": 2})
    assert swr_producer.calls == 2
    assert memo_producer.calls == 2


def test_clear_all_caches_survives_a_failing_cache(context: CacheContext, mocker, caplog):
    first = context.memo(VersionedProducer(), name="failing")
    producer = VersionedProducer()
    second = context.memo(producer, name="healthy")
    asyncio.run(second())
    mocker.patch.object(first, "clear", side_effect=RuntimeError("boom"))

    with caplog.at_level(logging.ERROR):
        context.clear_all_caches()

    assert asyncio.run(second()) == {"version": 2}
    assert "boom" in caplog.text


# --- Options validation ---

@pytest.mark.parametrize("bad_name", ["", "  ", ".", "..", "a/b", "a\\b", None])
def test_invalid_names_are_rejected(context: CacheContext, bad_name):
    with pytest.raises(CacheConfigError):
        context.memo(VersionedProducer(), name=bad_name)
    with pytest.raises(CacheConfigError):
        context.swr(VersionedProducer(), name=bad_name)


def test_negative_limits_are_rejected(context: CacheContext):
    with pytest.raises(CacheConfigError):
        context.swr(VersionedProducer(), name="negative", max_entries=-1)
    with pytest.raises(CacheConfigError):
        context.memo(VersionedProducer(), name="negative-ttl", ttl=-1)


def test_invalid_options_are_rejected_even_when_disabled(disabled_context: CacheContext):
    with pytest.raises(CacheConfigError):
        disabled_context.memo(VersionedProducer(), name="")


def test_duplicate_names_log_a_warning(context: CacheContext, caplog):
    context.memo(VersionedProducer(), name="shared")
    with caplog.at_level(logging.WARNING):
        context.swr(VersionedProducer(), name="shared")
    assert "already in use" in caplog.text


def test_invalid_time_window_is_rejected(cache_dir):
    with pytest.raises(CacheConfigError):
        CacheSettings(cache_dir=cache_dir, min_time_to_stale=60, max_time_to_live=60)
    with pytest.raises(CacheConfigError):
        CacheSettings(cache_dir=cache_dir, min_time_to_stale=-1, max_time_to_live=60)


# --- Package-level API ---

def test_package_api_uses_the_default_context(context: CacheContext):
    swrcache.set_default_context(context)
    producer = VersionedProducer()
    cached = swrcache.memo(producer, name="api-memo")

    asyncio.run(cached())
    swrcache.clear_all_caches()
    assert asyncio.run(cached()) == {"version": 2}
    assert swrcache.get_default_context() is context
    assert list(context.registry) == [cached]


def test_package_api_decorator(context: CacheContext):
    swrcache.set_default_context(context)

    @swrcache.swr(name="api-swr")
    async def fetch_config():
        return {"feature": True}

    assert asyncio.run(fetch_config()) == {"feature": True}
    assert len(context.registry) == 1


def test_default_context_is_built_from_configuration(monkeypatch, tmp_path):
    monkeypatch.setenv("SWRCACHE_DIR", str(tmp_path / "from-env"))
    monkeypatch.setenv("SWRCACHE_ENABLED", "false")

    default = swrcache.get_default_context()

    assert default.settings.cache_dir == tmp_path / "from-env"
    assert default.settings.enabled is False
    assert swrcache.get_default_context() is default


@pytest.mark.parametrize("name", ["swr", "memo"])
def test_package_api_signatures_match_the_context(name):
    from swrcache import api

    assert get_type_hints(getattr(api, name)) == get_type_hints(getattr(CacheContext, name))
