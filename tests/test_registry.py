import logging

import pytest

from src.core.config import Settings
from src.crawlers.adapters.hardcoded import HardcodedFeedSource
from src.crawlers.pipeline.errors import RegistryFrozenError
from src.crawlers.registry import SourceRegistry
from src.crawlers.sources import build_source_registry


class ImpostorSource(HardcodedFeedSource):
    title = "Impostor"
    description = "Registered second with a colliding id"
    link = "http://example.com/impostor"


def test_get_returns_registered_adapter():
    registry = SourceRegistry()
    source = HardcodedFeedSource()
    assert registry.register(source) is True
    assert registry.get(source.id) is source


def test_get_unknown_id_returns_none():
    registry = SourceRegistry()
    registry.register(HardcodedFeedSource())
    assert registry.get("nonexistent") is None


def test_first_registration_wins(caplog):
    registry = SourceRegistry()
    first = HardcodedFeedSource()
    second = ImpostorSource()

    registry.register(first)
    with caplog.at_level(logging.WARNING):
        assert registry.register(second) is False

    found = registry.get(first.id)
    assert found is first
    assert found.title == HardcodedFeedSource.title
    assert found.link == HardcodedFeedSource.link
    assert registry.list_ids() == [first.id]
    assert "already registered" in caplog.text


def test_frozen_registry_rejects_registration():
    registry = SourceRegistry().freeze()
    with pytest.raises(RegistryFrozenError):
        registry.register(HardcodedFeedSource())
    assert len(registry) == 0


def test_default_registry_lists_sources_in_registration_order():
    registry = build_source_registry(Settings(_env_file=None))

    assert registry.frozen
    assert registry.list_ids() == ["my-hardcoded-feed", "xinwenlianbo", "renminribao"]
    for source_id in registry.list_ids():
        assert registry.get(source_id) is not None
        assert source_id in registry


def test_default_registry_applies_fetch_settings():
    registry = build_source_registry(
        Settings(
            _env_file=None,
            rmrb_max_concurrency=4,
            xwlb_serial_fetch=False,
            xwlb_max_concurrency=1,
            fetch_timeout_seconds=12.0,
        )
    )

    rmrb = registry.get("renminribao")
    xwlb = registry.get("xinwenlianbo")
    assert rmrb.max_concurrency == 4
    assert rmrb.fetch_timeout == 12.0
    assert xwlb.serial is False
    assert xwlb.max_concurrency == 1
