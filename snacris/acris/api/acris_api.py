"""Ergonomic AcrisAPI facade for ACRIS searches.

The AcrisAPI wraps a DatasetFetcher and a CrossReferenceOrchestrator,
offering one method per search form plus per-dataset access through
DatasetAPI handles.

Architecture:
    - DatasetAPI: per-dataset operations (records, count, document ids,
      cross-referenced ids, bulk records by id)
    - AcrisAPI: search-form entry points built on predefined pipelines
    - Fetcher injection allows testing with fake HTTP clients
    - Context manager pattern ensures the HTTP session is closed
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..core.enums import DatasetKind, Projection, PropertyType
from ..datasets import DatasetDescriptor, dataset_for, get_dataset
from ..models import CompositeRecord
from ..runtime.cross_reference import (
    DOCUMENT_TYPE_PIPELINE,
    PARCEL_PIPELINE,
    PARTY_NAME_PIPELINE,
    REEL_PAGE_PIPELINE,
    UCC_FED_LIEN_PIPELINE,
    Criteria,
    CrossReferenceOrchestrator,
    CrossReferencePipeline,
)
from ..runtime.fetcher import DatasetFetcher, DatasetResult

logger = logging.getLogger(__name__)


class DatasetAPI:
    """Operations bound to one ACRIS dataset."""

    def __init__(self, descriptor: DatasetDescriptor, fetcher: DatasetFetcher) -> None:
        self.descriptor = descriptor
        self._fetcher = fetcher

    @property
    def name(self) -> str:
        return self.descriptor.name

    async def fetch_records(
        self,
        criteria: Mapping[str, Any] | None = None,
        *,
        projection: Projection | str | Sequence[str] | None = Projection.ALL,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[dict[str, Any]]:
        return await self._fetcher.fetch_records(
            self.descriptor, criteria, projection=projection, limit=limit, offset=offset
        )

    async def fetch_record_count(self, criteria: Mapping[str, Any] | None = None) -> int:
        return await self._fetcher.fetch_record_count(self.descriptor, criteria)

    async def fetch_document_ids(self, criteria: Mapping[str, Any] | None = None) -> list[str]:
        return await self._fetcher.fetch_document_ids(self.descriptor, criteria)

    async def fetch_document_ids_cross_ref(
        self, criteria: Mapping[str, Any] | None, document_ids: Iterable[str]
    ) -> list[str]:
        return await self._fetcher.fetch_document_ids_cross_ref(
            self.descriptor, criteria, document_ids
        )

    async def fetch_records_by_document_ids(
        self, document_ids: Iterable[str], criteria: Mapping[str, Any] | None = None
    ) -> DatasetResult:
        return await self._fetcher.fetch_records_by_document_ids(
            self.descriptor, document_ids, criteria
        )

    def __repr__(self) -> str:
        return f"DatasetAPI({self.name!r})"


class AcrisAPI:
    """High-level facade for ACRIS dataset searches.

    Example:
        >>> async with AcrisAPI() as api:
        ...     records = await api.search_parcel(borough="1", block="100", lot="25")
        ...     for record in records:
        ...         print(record.document_id, len(record.master_records))
    """

    def __init__(self, *, fetcher: DatasetFetcher | None = None) -> None:
        """Initialize the AcrisAPI.

        Args:
            fetcher: Optional DatasetFetcher (creates one with its own HTTP
                session if not provided)
        """
        self._owns_fetcher = fetcher is None
        self._fetcher = fetcher or DatasetFetcher()
        self._orchestrator = CrossReferenceOrchestrator(self._fetcher)
        self._closed = False

    @property
    def fetcher(self) -> DatasetFetcher:
        return self._fetcher

    def dataset(
        self,
        name: str | PropertyType | DatasetDescriptor,
        kind: DatasetKind | str | None = None,
    ) -> DatasetAPI:
        """Return a DatasetAPI by dataset name, or by property type and kind.

        Raises:
            ConfigurationError: If the dataset is not registered
        """
        if kind is not None:
            descriptor = dataset_for(name, kind)
        else:
            descriptor = get_dataset(name)
        return DatasetAPI(descriptor, self._fetcher)

    async def cross_reference(
        self, pipeline: CrossReferencePipeline, criteria: Criteria | None
    ) -> list[CompositeRecord]:
        """Run an arbitrary cross-reference pipeline."""
        return await self._orchestrator.run(pipeline, criteria)

    async def search_ucc_fed_lien_number(
        self, ucc_lien_file_number: str, borough: str | int | None
    ) -> list[CompositeRecord]:
        """Personal property search by UCC / federal lien file number and borough."""
        return await self._orchestrator.run(
            UCC_FED_LIEN_PIPELINE,
            {
                DatasetKind.MASTER: {"ucc_lien_file_number": ucc_lien_file_number},
                DatasetKind.LEGALS: {"borough": borough},
            },
        )

    async def search_reel_page(
        self,
        reel_yr: str | int,
        reel_nbr: str | int,
        reel_pg: str | int,
        borough: str | int | None,
    ) -> list[CompositeRecord]:
        """Real property search by recording reel year, reel number, page and borough."""
        return await self._orchestrator.run(
            REEL_PAGE_PIPELINE,
            {
                DatasetKind.MASTER: {"reel_yr": reel_yr, "reel_nbr": reel_nbr, "reel_pg": reel_pg},
                DatasetKind.LEGALS: {"borough": borough},
            },
        )

    async def search_parcel(
        self,
        borough: str | int,
        block: str | int,
        lot: str | int,
        master_criteria: Mapping[str, Any] | None = None,
    ) -> list[CompositeRecord]:
        """Real property search by borough/block/lot, optionally narrowed by document filters."""
        return await self._orchestrator.run(
            PARCEL_PIPELINE,
            {
                DatasetKind.LEGALS: {"borough": borough, "block": block, "lot": lot},
                DatasetKind.MASTER: master_criteria or {},
            },
        )

    async def search_party_name(
        self,
        name: str,
        *,
        party_type: str | None = None,
        master_criteria: Mapping[str, Any] | None = None,
        borough: str | int | None = None,
    ) -> list[CompositeRecord]:
        """Real property search by party name.

        Args:
            name: Party name (substring, case-insensitive)
            party_type: Optional party type code
            master_criteria: Optional document filters (doc_type, document_date_start/end)
            borough: Optional borough restriction
        """
        parties: dict[str, Any] = {"name": name}
        if party_type is not None:
            parties["party_type"] = party_type
        return await self._orchestrator.run(
            PARTY_NAME_PIPELINE,
            {
                DatasetKind.MASTER: master_criteria or {},
                DatasetKind.PARTIES: parties,
                DatasetKind.LEGALS: {"borough": borough} if borough is not None else {},
            },
        )

    async def search_document_type(
        self,
        doc_type: str | Sequence[str],
        *,
        document_date_start: str | None = None,
        document_date_end: str | None = None,
        borough: str | int | None = None,
    ) -> list[CompositeRecord]:
        """Real property search by document type, optionally within a date range and borough.

        Args:
            doc_type: One document type code, a comma-separated list or a sequence
            document_date_start: Inclusive range start (applied with document_date_end)
            document_date_end: Inclusive range end
            borough: Optional borough restriction
        """
        master: dict[str, Any] = {"doc_type": doc_type}
        if document_date_start is not None and document_date_end is not None:
            master["document_date_start"] = document_date_start
            master["document_date_end"] = document_date_end
        return await self._orchestrator.run(
            DOCUMENT_TYPE_PIPELINE,
            {
                DatasetKind.MASTER: master,
                DatasetKind.LEGALS: {"borough": borough} if borough is not None else {},
            },
        )

    async def search_transaction_number(
        self,
        transaction_number: str,
        property_type: PropertyType = PropertyType.REAL,
    ) -> list[CompositeRecord]:
        """Search all datasets of a family by transaction number (document-id prefix)."""
        return await self._orchestrator.fetch_by_transaction_number(
            transaction_number, property_type
        )

    async def close(self) -> None:
        """Close the API and clean up resources."""
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing AcrisAPI")
        if self._owns_fetcher:
            await self._fetcher.close()

    async def __aenter__(self) -> AcrisAPI:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
