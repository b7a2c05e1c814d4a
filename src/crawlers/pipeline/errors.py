class FetchError(RuntimeError):
    """A single document fetch failed (transport error, timeout or HTTP status)."""

    def __init__(self, url: str, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class FeedGenerationError(RuntimeError):
    """Raised when an adapter cannot produce any meaningful feed."""


class RegistryFrozenError(RuntimeError):
    """Raised when a source is registered after startup has finished."""
