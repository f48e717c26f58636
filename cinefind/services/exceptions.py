"""Domain-specific exceptions."""

DEFAULT_FETCH_FAILURE = "Failed to fetch movies"


class ServiceError(Exception):
    pass


class MetadataError(ServiceError):
    """Raised when the movie metadata provider cannot serve a listing."""

    def __init__(self, message: str = DEFAULT_FETCH_FAILURE) -> None:
        super().__init__(message)
        self.message = message


class FetchError(MetadataError):
    """Network failure, non-success HTTP status or an unreadable body."""

    def __init__(self, message: str = DEFAULT_FETCH_FAILURE, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderError(MetadataError):
    """The provider answered but flagged the request as failed."""


class TrendingStoreError(ServiceError):
    pass
