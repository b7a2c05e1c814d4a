import logging

from src.crawlers.adapters.base import BaseSourceAdapter
from src.crawlers.pipeline.errors import RegistryFrozenError

logger = logging.getLogger(__name__)


class SourceRegistry:
    """Source id -> adapter. Filled during startup, then frozen and only read."""

    def __init__(self) -> None:
        self._sources: dict[str, BaseSourceAdapter] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, adapter: BaseSourceAdapter) -> bool:
        if self._frozen:
            raise RegistryFrozenError(f"Registry is frozen, cannot register {adapter.id!r}")
        if adapter.id in self._sources:
            logger.warning("Source %r is already registered, skipping duplicate", adapter.id)
            return False
        self._sources[adapter.id] = adapter
        logger.info("Registered source: %s", adapter.id)
        return True

    def freeze(self) -> "SourceRegistry":
        self._frozen = True
        return self

    def get(self, source_id: str) -> BaseSourceAdapter | None:
        return self._sources.get(source_id)

    def list_ids(self) -> list[str]:
        return list(self._sources)

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._sources

    def __len__(self) -> int:
        return len(self._sources)
