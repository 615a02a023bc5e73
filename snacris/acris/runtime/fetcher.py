"""Paginated dataset fetcher.

The DatasetFetcher executes request descriptors against the open-data API
and aggregates the result as rows, unique document ids or a single count.
Transport failures are normalized here into dataset-scoped errors; the raw
aiohttp error is logged and never handed to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from ..config import DEFAULT_BATCH_SIZE, RECORDS_BATCH_SIZE
from ..core.enums import Projection
from ..core.exceptions import (
    MalformedQueryError,
    NotFoundError,
    ProviderError,
    RateLimitError,
)
from ..datasets import DatasetDescriptor, get_dataset
from ..query.soql import SoqlRequest, build_request
from .chunking import (
    BatchPlanner,
    BatchPolicy,
    IdentifierAccumulator,
    PageExecutor,
    PagePolicy,
    RowAccumulator,
)
from .chunking.telemetry import log_fetch_error
from .rest import HTTPClient

logger = logging.getLogger(__name__)

Row = dict[str, Any]


@dataclass(frozen=True)
class DatasetResult:
    """Outcome of a bulk fetch for one dataset.

    A failed fetch carries no rows and `failed=True`, which keeps it
    distinguishable from a fetch that matched nothing.
    """

    dataset: str
    rows: tuple[Row, ...] = field(default_factory=tuple)
    failed: bool = False

    @classmethod
    def success(cls, dataset: str, rows: Iterable[Row]) -> DatasetResult:
        return cls(dataset=dataset, rows=tuple(rows))

    @classmethod
    def failure(cls, dataset: str) -> DatasetResult:
        return cls(dataset=dataset, failed=True)

    def rows_for(self, document_id: str, column: str = "document_id") -> list[Row]:
        """Return the rows belonging to one document id."""
        return [row for row in self.rows if row.get(column) == document_id]

    def grouped(self, column: str = "document_id") -> dict[str, list[Row]]:
        """Group rows by document id in a single pass, keeping row order."""
        groups: dict[str, list[Row]] = {}
        for row in self.rows:
            groups.setdefault(row.get(column), []).append(row)
        return groups

    def __len__(self) -> int:
        return len(self.rows)


def _retry_after(error: aiohttp.ClientResponseError) -> int:
    value = (error.headers or {}).get("Retry-After")
    try:
        return int(value) if value is not None else 60
    except ValueError:
        return 60


class DatasetFetcher:
    """Fetches ACRIS datasets page by page.

    Example:
        >>> async with DatasetFetcher() as fetcher:
        ...     ids = await fetcher.fetch_document_ids(
        ...         "real_property_legals", {"borough": "1", "block": "100"}
        ...     )
    """

    def __init__(
        self,
        client: HTTPClient | None = None,
        *,
        page_policy: PagePolicy | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        records_batch_size: int = RECORDS_BATCH_SIZE,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: HTTP client (a new one is created and owned when omitted)
            page_policy: Pagination policy (default: 1000 rows per page)
            batch_size: Identifiers per batch for cross-reference id queries
            records_batch_size: Identifiers per batch for full-record queries

        Raises:
            ConfigurationError: If a batch or page size is not positive
        """
        self._owns_client = client is None
        self._client = client or HTTPClient()
        self._executor = PageExecutor(page_policy)
        self._id_planner = BatchPlanner(BatchPolicy(batch_size=batch_size))
        self._records_planner = BatchPlanner(BatchPolicy(batch_size=records_batch_size))

    @property
    def client(self) -> HTTPClient:
        return self._client

    async def get_page(self, request: SoqlRequest) -> list[Row]:
        """Fetch a single page for a request descriptor.

        Raises:
            MalformedQueryError: If the API rejected the query (HTTP 400)
            RateLimitError: If the API rate limit was hit (HTTP 429)
            ProviderError: On any other transport failure, an undecodable body
                or an unexpected payload
        """
        try:
            payload = await self._client.get(request.url)
        except aiohttp.ClientResponseError as e:
            log_fetch_error(
                dataset=request.dataset,
                error_type=type(e).__name__,
                error_message=e.message,
                status_code=e.status,
            )
            if e.status == 400:
                raise MalformedQueryError(
                    f"Malformed query to {request.dataset}", dataset=request.dataset
                ) from None
            if e.status == 429:
                raise RateLimitError(
                    f"Rate limit exceeded for {request.dataset}",
                    dataset=request.dataset,
                    retry_after=_retry_after(e),
                ) from None
            raise ProviderError(
                f"Failed to fetch from {request.dataset}",
                dataset=request.dataset,
                status_code=e.status,
            ) from None
        # ValueError covers a body that is not valid JSON
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            log_fetch_error(
                dataset=request.dataset,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise ProviderError(
                f"Failed to fetch from {request.dataset}", dataset=request.dataset
            ) from None

        if not isinstance(payload, list):
            log_fetch_error(
                dataset=request.dataset,
                error_type="UnexpectedPayload",
                error_message=f"expected a JSON array, got {type(payload).__name__}",
            )
            raise ProviderError(f"Failed to fetch from {request.dataset}", dataset=request.dataset)
        return payload

    async def execute_rows(self, requests: Sequence[SoqlRequest]) -> list[Row]:
        """Paginate every descriptor and concatenate the rows."""
        result = await self._executor.execute(
            requests=requests, fetch_page=self.get_page, accumulator=RowAccumulator()
        )
        return result.data

    async def execute_identifiers(
        self, requests: Sequence[SoqlRequest], column: str = "document_id"
    ) -> list[str]:
        """Paginate every descriptor and collect unique identifiers."""
        result = await self._executor.execute(
            requests=requests,
            fetch_page=self.get_page,
            accumulator=IdentifierAccumulator(column),
        )
        return result.data

    async def fetch_records(
        self,
        dataset: str | DatasetDescriptor,
        criteria: Mapping[str, Any] | None = None,
        *,
        projection: Projection | str | Sequence[str] | None = Projection.ALL,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Row]:
        """Fetch every row matching the criteria.

        Args:
            dataset: Dataset name or descriptor
            criteria: Filter criteria (None or no recognized keys matches all)
            projection: Columns to return
            limit: Page size override
            offset: Starting offset

        Returns:
            All matching rows, in page order

        Raises:
            NotFoundError: If no rows matched
        """
        descriptor = get_dataset(dataset)
        request = build_request(
            descriptor, descriptor.build_predicates(criteria), projection, limit, offset
        )
        rows = await self.execute_rows([request])
        if not rows:
            raise NotFoundError(f"No records found in {descriptor.name}", dataset=descriptor.name)
        return rows

    async def fetch_record_count(
        self, dataset: str | DatasetDescriptor, criteria: Mapping[str, Any] | None = None
    ) -> int:
        """Count the rows matching the criteria.

        Raises:
            NotFoundError: If the API returned no count
            ProviderError: If the count is not a number
        """
        descriptor = get_dataset(dataset)
        request = build_request(descriptor, descriptor.build_predicates(criteria), Projection.COUNT)
        payload = await self.get_page(request)
        if not payload or "count" not in payload[0]:
            raise NotFoundError(f"No count returned by {descriptor.name}", dataset=descriptor.name)
        try:
            return int(payload[0]["count"])
        except (TypeError, ValueError):
            raise ProviderError(
                f"Invalid count returned by {descriptor.name}", dataset=descriptor.name
            ) from None

    async def fetch_document_ids(
        self, dataset: str | DatasetDescriptor, criteria: Mapping[str, Any] | None = None
    ) -> list[str]:
        """Fetch the unique document ids matching the criteria.

        Raises:
            NotFoundError: If no document ids matched
        """
        descriptor = get_dataset(dataset)
        request = build_request(
            descriptor, descriptor.build_predicates(criteria), Projection.DOCUMENT_ID
        )
        ids = await self.execute_identifiers([request], descriptor.id_column)
        if not ids:
            raise NotFoundError(f"No document ids found in {descriptor.name}", dataset=descriptor.name)
        return ids

    async def fetch_document_ids_cross_ref(
        self,
        dataset: str | DatasetDescriptor,
        criteria: Mapping[str, Any] | None,
        document_ids: Iterable[str],
    ) -> list[str]:
        """Restrict a document-id set to those also matching this dataset's criteria.

        Args:
            dataset: Dataset name or descriptor
            criteria: This dataset's own filter criteria
            document_ids: Identifiers produced by another dataset

        Returns:
            Unique matching document ids; empty when document_ids is empty

        Raises:
            NotFoundError: If none of the identifiers matched
            ValidationError: If document_ids is not a collection
        """
        descriptor = get_dataset(dataset)
        requests = self._id_planner.plan(
            descriptor, descriptor.build_predicates(criteria), document_ids
        )
        if not requests:
            return []
        ids = await self.execute_identifiers(requests, descriptor.id_column)
        if not ids:
            raise NotFoundError(
                f"No cross-referenced document ids found in {descriptor.name}",
                dataset=descriptor.name,
            )
        return ids

    async def fetch_records_by_document_ids(
        self,
        dataset: str | DatasetDescriptor,
        document_ids: Iterable[str],
        criteria: Mapping[str, Any] | None = None,
    ) -> DatasetResult:
        """Fetch full rows for a document-id set.

        Failures are absorbed: the result is marked failed instead of raising,
        so one unavailable dataset does not abort a multi-dataset assembly.

        Raises:
            ValidationError: If document_ids is not a collection
        """
        descriptor = get_dataset(dataset)
        requests = self._records_planner.plan(
            descriptor, descriptor.build_predicates(criteria), document_ids, Projection.ALL
        )
        if not requests:
            return DatasetResult.success(descriptor.name, [])
        try:
            rows = await self.execute_rows(requests)
        except ProviderError as e:
            logger.warning(
                "dataset_unavailable",
                extra={"dataset": descriptor.name, "status_code": e.status_code},
            )
            return DatasetResult.failure(descriptor.name)
        return DatasetResult.success(descriptor.name, rows)

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self._client.close()

    async def __aenter__(self) -> DatasetFetcher:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
