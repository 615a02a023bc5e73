"""Cross-reference orchestration across ACRIS datasets.

A pipeline names an anchor dataset and one or more filter datasets within a
property family. The orchestrator:

1. validates that every required filter field is present,
2. fetches unique document ids from the anchor,
3. restricts that id set through each filter dataset in turn (batched
   `document_id IN (...)` queries), skipping filters with no predicates and
   short-circuiting on an empty set,
4. fans out one bulk full-record fetch per participating dataset,
5. groups the rows into one CompositeRecord per final document id.

Failures in steps 2 and 3 abort the call with a CrossReferenceError naming
the stage and dataset pair. Failures in step 4 are absorbed per dataset and
reported through `CompositeRecord.unavailable_datasets`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..core.enums import DatasetKind, PropertyType
from ..core.exceptions import (
    CrossReferenceError,
    NotFoundError,
    ProviderError,
    ValidationError,
)
from ..datasets import DatasetDescriptor, dataset_for
from ..models import CompositeRecord
from ..query.predicates import is_blank
from .fetcher import DatasetFetcher, DatasetResult

logger = logging.getLogger(__name__)

ASSEMBLY_ORDER = (
    DatasetKind.MASTER,
    DatasetKind.PARTIES,
    DatasetKind.LEGALS,
    DatasetKind.REFERENCES,
    DatasetKind.REMARKS,
)

Criteria = Mapping[DatasetKind | str, Mapping[str, Any] | None]


@dataclass(frozen=True)
class CrossReferenceStep:
    """One dataset taking part in a pipeline, with its mandatory criteria keys."""

    kind: DatasetKind
    required_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class CrossReferencePipeline:
    """Anchor/filter dataset chain for one search form.

    Attributes:
        name: Pipeline name used in logs
        property_type: Dataset family every step belongs to
        anchor: Dataset whose criteria produce the initial document-id set
        filters: Datasets that successively restrict the id set
        assemble: Datasets whose full rows make up each composite record
    """

    name: str
    property_type: PropertyType
    anchor: CrossReferenceStep
    filters: tuple[CrossReferenceStep, ...] = ()
    assemble: tuple[DatasetKind, ...] = ASSEMBLY_ORDER

    @property
    def steps(self) -> tuple[CrossReferenceStep, ...]:
        return (self.anchor, *self.filters)

    def dataset(self, kind: DatasetKind) -> DatasetDescriptor:
        return dataset_for(self.property_type, kind)

    def normalize(self, criteria: Criteria | None) -> dict[DatasetKind, Mapping[str, Any]]:
        """Key criteria by DatasetKind.

        Raises:
            ValidationError: If a key is not a dataset kind or a value is not a mapping
        """
        normalized: dict[DatasetKind, Mapping[str, Any]] = {}
        for key, value in (criteria or {}).items():
            try:
                kind = DatasetKind(key)
            except ValueError:
                raise ValidationError(f"Unknown dataset kind in criteria: {key!r}") from None
            if value is not None and not isinstance(value, Mapping):
                raise ValidationError(f"Criteria for {kind.value} must be a mapping")
            normalized[kind] = value or {}
        return normalized

    def validate(self, criteria: Mapping[DatasetKind, Mapping[str, Any]]) -> None:
        """Check that every required field of every step is present.

        The anchor must also render at least one predicate, otherwise the
        anchor query would walk its entire dataset.

        Raises:
            ValidationError: Listing each missing field as "<kind>.<field>"
        """
        missing = [
            f"{step.kind.value}.{key}"
            for step in self.steps
            for key in step.required_fields
            if is_blank(criteria.get(step.kind, {}).get(key))
        ]
        if missing:
            raise ValidationError(
                f"Missing required search fields for {self.name}: {', '.join(missing)}",
                fields=missing,
            )
        anchor = self.dataset(self.anchor.kind)
        if not anchor.build_predicates(criteria.get(self.anchor.kind)):
            raise ValidationError(
                f"{self.name} needs at least one filter on {anchor.name}",
                fields=[self.anchor.kind.value],
            )


UCC_FED_LIEN_PIPELINE = CrossReferencePipeline(
    name="ucc_fed_lien_number",
    property_type=PropertyType.PERSONAL,
    anchor=CrossReferenceStep(DatasetKind.MASTER, ("ucc_lien_file_number",)),
    filters=(CrossReferenceStep(DatasetKind.LEGALS, ("borough",)),),
)

REEL_PAGE_PIPELINE = CrossReferencePipeline(
    name="reel_page",
    property_type=PropertyType.REAL,
    anchor=CrossReferenceStep(DatasetKind.MASTER, ("reel_yr", "reel_nbr", "reel_pg")),
    filters=(CrossReferenceStep(DatasetKind.LEGALS, ("borough",)),),
)

PARCEL_PIPELINE = CrossReferencePipeline(
    name="parcel",
    property_type=PropertyType.REAL,
    anchor=CrossReferenceStep(DatasetKind.LEGALS, ("borough", "block", "lot")),
    filters=(CrossReferenceStep(DatasetKind.MASTER),),
)

PARTY_NAME_PIPELINE = CrossReferencePipeline(
    name="party_name",
    property_type=PropertyType.REAL,
    anchor=CrossReferenceStep(DatasetKind.PARTIES, ("name",)),
    filters=(
        CrossReferenceStep(DatasetKind.MASTER),
        CrossReferenceStep(DatasetKind.LEGALS),
    ),
)

DOCUMENT_TYPE_PIPELINE = CrossReferencePipeline(
    name="document_type",
    property_type=PropertyType.REAL,
    anchor=CrossReferenceStep(DatasetKind.MASTER, ("doc_type",)),
    filters=(CrossReferenceStep(DatasetKind.LEGALS),),
)


def assemble_composites(
    document_ids: Sequence[str], results: Sequence[DatasetResult], kinds: Sequence[DatasetKind]
) -> list[CompositeRecord]:
    """Group per-dataset rows into one composite record per document id.

    Args:
        document_ids: Final identifier set, in output order
        results: One result per entry of kinds
        kinds: Dataset kind of each result

    Returns:
        Composite records; a dataset with no rows for an id contributes []
    """
    unavailable = [result.dataset for result in results if result.failed]
    grouped = [(f"{kind.value}_records", result.grouped()) for kind, result in zip(kinds, results)]
    return [
        CompositeRecord(
            document_id=document_id,
            unavailable_datasets=unavailable,
            **{field: groups.get(document_id, []) for field, groups in grouped},
        )
        for document_id in document_ids
    ]


class CrossReferenceOrchestrator:
    """Runs cross-reference pipelines on top of a DatasetFetcher."""

    def __init__(self, fetcher: DatasetFetcher) -> None:
        self._fetcher = fetcher

    async def run(
        self, pipeline: CrossReferencePipeline, criteria: Criteria | None
    ) -> list[CompositeRecord]:
        """Execute a pipeline end to end.

        Args:
            pipeline: Anchor/filter chain to run
            criteria: Filter criteria per dataset kind, e.g.
                {"master": {"ucc_lien_file_number": "12345"}, "legals": {"borough": "1"}}

        Returns:
            One CompositeRecord per final document id (empty when nothing matched)

        Raises:
            ValidationError: If a required field is missing
            CrossReferenceError: If the anchor or a cross-reference stage failed
        """
        by_kind = pipeline.normalize(criteria)
        pipeline.validate(by_kind)

        document_ids = await self._fetch_anchor(pipeline, by_kind)

        previous = pipeline.dataset(pipeline.anchor.kind)
        for step in pipeline.filters:
            if not document_ids:
                break
            dataset = pipeline.dataset(step.kind)
            step_criteria = by_kind.get(step.kind)
            # Filter steps with no predicates are skipped
            if not dataset.build_predicates(step_criteria):
                self._log_stage(pipeline, "skipped", dataset.name, len(document_ids))
                continue
            document_ids = await self._cross_reference(
                pipeline, previous, dataset, step_criteria, document_ids
            )
            previous = dataset

        if not document_ids:
            self._log_stage(pipeline, "short_circuit", previous.name, 0)
            return []

        return await self.assemble(pipeline.property_type, document_ids, pipeline.assemble)

    async def assemble(
        self,
        property_type: PropertyType,
        document_ids: Sequence[str],
        kinds: Sequence[DatasetKind] = ASSEMBLY_ORDER,
    ) -> list[CompositeRecord]:
        """Fetch full rows from every dataset concurrently and group them by id."""
        if not document_ids:
            return []
        datasets = [dataset_for(property_type, kind) for kind in kinds]
        results = await asyncio.gather(
            *(
                self._fetcher.fetch_records_by_document_ids(dataset, document_ids)
                for dataset in datasets
            )
        )
        for result in results:
            self._log_stage(None, "assemble", result.dataset, len(result), failed=result.failed)
        return assemble_composites(document_ids, results, kinds)

    async def fetch_by_transaction_number(
        self,
        transaction_number: str,
        property_type: PropertyType = PropertyType.REAL,
        kinds: Sequence[DatasetKind] = ASSEMBLY_ORDER,
    ) -> list[CompositeRecord]:
        """Search every dataset by document-id prefix and group the union.

        No cross-reference is performed. A dataset that matched nothing
        contributes no rows; a dataset that failed is reported unavailable.

        Raises:
            ValidationError: If transaction_number is blank
        """
        if is_blank(transaction_number):
            raise ValidationError(
                "transaction_number is required", fields=["transaction_number"]
            )
        criteria = {"transaction_number": transaction_number}
        datasets = [dataset_for(property_type, kind) for kind in kinds]
        results = await asyncio.gather(
            *(self._fetch_tolerant(dataset, criteria) for dataset in datasets)
        )

        document_ids: dict[str, None] = {}
        for result in results:
            for row in result.rows:
                identifier = row.get("document_id")
                if identifier is not None:
                    document_ids.setdefault(identifier, None)

        return assemble_composites(list(document_ids), results, kinds)

    async def _fetch_tolerant(
        self, dataset: DatasetDescriptor, criteria: Mapping[str, Any]
    ) -> DatasetResult:
        try:
            rows = await self._fetcher.fetch_records(dataset, criteria)
        except NotFoundError:
            return DatasetResult.success(dataset.name, [])
        except ProviderError:
            return DatasetResult.failure(dataset.name)
        return DatasetResult.success(dataset.name, rows)

    async def _fetch_anchor(
        self,
        pipeline: CrossReferencePipeline,
        criteria: Mapping[DatasetKind, Mapping[str, Any]],
    ) -> list[str]:
        anchor = pipeline.dataset(pipeline.anchor.kind)
        try:
            document_ids = await self._fetcher.fetch_document_ids(
                anchor, criteria.get(pipeline.anchor.kind)
            )
        except NotFoundError:
            document_ids = []
        except ProviderError as e:
            pair = [anchor.name]
            if pipeline.filters:
                pair.append(pipeline.dataset(pipeline.filters[0].kind).name)
            raise CrossReferenceError(
                f"Failed to fetch from {anchor.name}", stage="anchor", datasets=pair
            ) from e

        self._log_stage(pipeline, "anchor", anchor.name, len(document_ids))
        return document_ids

    async def _cross_reference(
        self,
        pipeline: CrossReferencePipeline,
        source: DatasetDescriptor,
        dataset: DatasetDescriptor,
        criteria: Mapping[str, Any] | None,
        document_ids: Sequence[str],
    ) -> list[str]:
        try:
            restricted = await self._fetcher.fetch_document_ids_cross_ref(
                dataset, criteria, document_ids
            )
        except NotFoundError:
            restricted = []
        except ProviderError as e:
            raise CrossReferenceError(
                f"Failed to cross-reference {source.name} with {dataset.name}",
                stage="cross_reference",
                datasets=[source.name, dataset.name],
            ) from e

        self._log_stage(pipeline, "cross_reference", dataset.name, len(restricted))
        return restricted

    @staticmethod
    def _log_stage(
        pipeline: CrossReferencePipeline | None,
        stage: str,
        dataset: str,
        count: int,
        failed: bool = False,
    ) -> None:
        logger.info(
            "cross_reference_stage",
            extra={
                "pipeline": pipeline.name if pipeline else None,
                "stage": stage,
                "dataset": dataset,
                "count": count,
                "failed": failed,
            },
        )
