"""Paged execution of request descriptors.

This module provides the PageExecutor class that walks each request
descriptor page by page, absorbs returned rows into a caller-owned
accumulator and stops on an empty or short page.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from time import perf_counter
from typing import Any, Protocol

from ...query.soql import SoqlRequest
from .definitions import PagePolicy, PageResult, next_page
from .telemetry import log_page_completed, log_pagination_complete


class Accumulator(Protocol):
    def absorb(self, rows: list[dict[str, Any]]) -> None: ...

    def result(self) -> Any: ...


class RowAccumulator:
    """Concatenates rows in arrival order."""

    def __init__(self) -> None:
        self._rows: list[dict[str, Any]] = []

    def absorb(self, rows: list[dict[str, Any]]) -> None:
        self._rows.extend(rows)

    def result(self) -> list[dict[str, Any]]:
        return self._rows


class IdentifierAccumulator:
    """Collects unique identifiers, keeping first-seen order."""

    def __init__(self, column: str = "document_id") -> None:
        self._column = column
        self._seen: dict[str, None] = {}

    def absorb(self, rows: list[dict[str, Any]]) -> None:
        for row in rows:
            identifier = row.get(self._column)
            if identifier is not None:
                self._seen.setdefault(identifier, None)

    def result(self) -> list[str]:
        return list(self._seen)


class PageExecutor:
    """Executes request descriptors page by page.

    Pages of one descriptor are fetched strictly sequentially since each
    offset depends on the size of the page before it. Descriptors are
    executed one after another and share the caller's accumulator.
    """

    def __init__(self, policy: PagePolicy | None = None) -> None:
        """Initialize page executor.

        Args:
            policy: Pagination policy (default: 1000 rows per page)
        """
        self._policy = policy or PagePolicy()

    @property
    def page_size(self) -> int:
        return self._policy.page_size

    async def execute(
        self,
        *,
        requests: Sequence[SoqlRequest],
        fetch_page: Callable[[SoqlRequest], Awaitable[list[dict[str, Any]]]],
        accumulator: Accumulator,
    ) -> PageResult:
        """Execute every request descriptor and aggregate their rows.

        Args:
            requests: Request descriptors (e.g. one per identifier batch)
            fetch_page: Async function that fetches one page for a request
            accumulator: Owner of the aggregated data for this call

        Returns:
            PageResult wrapping accumulator.result()
        """
        result = PageResult(data=None)

        for request in requests:
            result.descriptors += 1
            # A caller-specified limit overrides the policy page size
            page_size = request.limit or self._policy.page_size
            offset = request.offset or 0
            pages = 0

            while True:
                page_request = request.with_page(page_size, offset)
                page_start = perf_counter()
                rows = await fetch_page(page_request)
                result.requests_issued += 1
                pages += 1

                log_page_completed(
                    dataset=request.dataset,
                    offset=offset,
                    rows_returned=len(rows),
                    latency_ms=(perf_counter() - page_start) * 1000.0,
                )

                if rows:
                    accumulator.absorb(rows)
                    result.total_rows += len(rows)

                step = next_page(offset, len(rows), page_size)
                if not step.has_more:
                    break
                if self._policy.max_pages is not None and pages >= self._policy.max_pages:
                    break
                offset = step.next_offset

        result.data = accumulator.result()

        if requests:
            log_pagination_complete(dataset=requests[0].dataset, result=result)

        return result
