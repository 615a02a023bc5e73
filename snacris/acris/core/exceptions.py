"""Custom exception hierarchy."""

from __future__ import annotations

from collections.abc import Sequence


class AcrisError(Exception):
    """Base exception for all library errors."""

    pass


class ConfigurationError(AcrisError, ValueError):
    """Programming or configuration defect.

    Raised for unknown dataset names, non-positive batch or page sizes and
    unsupported projections. Never retried and never wrapped.
    """

    pass


class ValidationError(AcrisError, ValueError):
    """Caller-supplied input is unusable (missing required field, bad value)."""

    def __init__(self, message: str, fields: Sequence[str] | None = None) -> None:
        super().__init__(message)
        self.fields = list(fields or [])


class ProviderError(AcrisError):
    """Failed to fetch from the external data API.

    The message is dataset-scoped and uniform; the underlying transport
    error is logged, not attached.
    """

    def __init__(
        self,
        message: str,
        dataset: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.dataset = dataset
        self.status_code = status_code


class MalformedQueryError(ProviderError):
    """The data API rejected the generated query (HTTP 400)."""

    def __init__(self, message: str, dataset: str | None = None) -> None:
        super().__init__(message, dataset=dataset, status_code=400)


class RateLimitError(ProviderError):
    """Data API rate limit exceeded."""

    def __init__(self, message: str, dataset: str | None = None, retry_after: int = 60) -> None:
        super().__init__(message, dataset=dataset, status_code=429)
        self.retry_after = retry_after


class NotFoundError(AcrisError):
    """The query executed successfully but matched no rows."""

    def __init__(self, message: str, dataset: str | None = None) -> None:
        super().__init__(message)
        self.dataset = dataset


class CrossReferenceError(AcrisError):
    """A mandatory cross-reference stage failed.

    Attributes:
        stage: "anchor" when fetching anchor identifiers failed,
            "cross_reference" when restricting a filter dataset failed
        datasets: Names of the dataset pair involved
    """

    def __init__(self, message: str, stage: str, datasets: Sequence[str]) -> None:
        super().__init__(message)
        self.stage = stage
        self.datasets = tuple(datasets)
