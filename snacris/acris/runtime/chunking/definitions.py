"""Batching and pagination policy structures.

This module defines the data structures used to describe how identifier
collections are split into batches and how a single request is paged,
plus the pure pagination step function the executor folds over.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...config import DEFAULT_BATCH_SIZE, DEFAULT_PAGE_SIZE
from ...core.exceptions import ConfigurationError


@dataclass(frozen=True)
class PagePolicy:
    """Pagination policy for dataset requests.

    Attributes:
        page_size: Rows requested per page (`$limit`)
        max_pages: Maximum pages fetched per request (None = until exhausted)
    """

    page_size: int = DEFAULT_PAGE_SIZE
    max_pages: int | None = None

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ConfigurationError(f"page_size must be positive, got {self.page_size}")
        if self.max_pages is not None and self.max_pages <= 0:
            raise ConfigurationError(f"max_pages must be positive, got {self.max_pages}")


@dataclass(frozen=True)
class BatchPolicy:
    """Batching policy for identifier-membership requests.

    Attributes:
        batch_size: Maximum identifiers per `IN (...)` clause
    """

    batch_size: int = DEFAULT_BATCH_SIZE

    def __post_init__(self) -> None:
        if isinstance(self.batch_size, bool) or not isinstance(self.batch_size, int):
            raise ConfigurationError(f"batch_size must be an integer, got {self.batch_size!r}")
        if self.batch_size <= 0:
            raise ConfigurationError(f"batch_size must be positive, got {self.batch_size}")


@dataclass(frozen=True)
class IdentifierBatch:
    """One contiguous slice of an identifier collection.

    Attributes:
        identifiers: Batch members, in input order
        batch_index: Zero-based index of this batch in the overall plan
    """

    identifiers: tuple[str, ...]
    batch_index: int = 0

    def __len__(self) -> int:
        return len(self.identifiers)


@dataclass(frozen=True)
class PageStep:
    """Outcome of absorbing one page.

    Attributes:
        next_offset: Offset for the following page
        has_more: Whether another page should be requested
    """

    next_offset: int
    has_more: bool


def next_page(offset: int, rows_returned: int, page_size: int) -> PageStep:
    """Compute the next pagination step from the page just fetched.

    An empty page stops pagination. A full page advances the offset by the
    page size and continues; a short page is absorbed and then stops.

    Args:
        offset: Offset of the page just fetched
        rows_returned: Number of rows that page returned
        page_size: Rows requested for that page

    Returns:
        PageStep for the next iteration
    """
    if rows_returned == 0:
        return PageStep(next_offset=offset, has_more=False)
    return PageStep(next_offset=offset + page_size, has_more=rows_returned >= page_size)


@dataclass
class PageResult:
    """Result of paginated execution.

    Attributes:
        data: Aggregated rows or identifiers
        requests_issued: Number of page requests sent
        descriptors: Number of request descriptors executed
        total_rows: Raw rows returned across all pages (before deduplication)
    """

    data: Any
    requests_issued: int = 0
    descriptors: int = 0
    total_rows: int = 0
