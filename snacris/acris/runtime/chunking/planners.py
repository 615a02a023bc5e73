"""Batch planning for identifier-membership requests.

This module provides the BatchPlanner class that splits a large identifier
collection into bounded batches and folds each batch into a request as an
`IN (...)` membership condition, keeping every generated URL within the
external API's safe length.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

from ...config import DEFAULT_BATCH_SIZE
from ...core.enums import Projection
from ...core.exceptions import ValidationError
from ...query.predicates import FilterExpression, membership_predicate
from ...query.soql import SoqlRequest, build_request
from .definitions import BatchPolicy, IdentifierBatch
from .telemetry import log_batch_plan

if TYPE_CHECKING:
    from ...datasets.base import DatasetDescriptor


def _as_identifier_list(identifiers: Iterable[str]) -> list[str]:
    if isinstance(identifiers, (str, bytes, Mapping)) or not isinstance(identifiers, Iterable):
        raise ValidationError(
            f"identifiers must be a collection of strings, got {type(identifiers).__name__}"
        )
    return [str(identifier) for identifier in identifiers]


class BatchPlanner:
    """Plans identifier batches for cross-reference requests.

    The planner takes an identifier collection and a batch policy, then
    partitions the collection into contiguous, non-overlapping batches
    that preserve input order. The last batch may be smaller.
    """

    def __init__(self, policy: BatchPolicy | None = None) -> None:
        """Initialize batch planner.

        Args:
            policy: Batching policy (default: 500 identifiers per batch)
        """
        self._policy = policy or BatchPolicy()

    @property
    def batch_size(self) -> int:
        return self._policy.batch_size

    def partition(self, identifiers: Iterable[str]) -> list[IdentifierBatch]:
        """Split identifiers into ordered batches.

        Raises:
            ValidationError: If identifiers is not a collection
        """
        items = _as_identifier_list(identifiers)
        size = self._policy.batch_size
        return [
            IdentifierBatch(identifiers=tuple(items[start : start + size]), batch_index=index)
            for index, start in enumerate(range(0, len(items), size))
        ]

    def plan(
        self,
        dataset: DatasetDescriptor,
        where: FilterExpression | None,
        identifiers: Iterable[str],
        projection: Projection | str | Sequence[str] | None = Projection.DOCUMENT_ID,
    ) -> list[SoqlRequest]:
        """Build one request per batch.

        Each request carries the base filter expression plus
        `<id_column> IN (batch members)`.

        Args:
            dataset: Target dataset descriptor
            where: Base filter expression
            identifiers: Full identifier collection
            projection: Projection for every batch request

        Returns:
            Ordered list of request descriptors, one per batch
        """
        batches = self.partition(identifiers)
        base = build_request(dataset, where, projection)
        requests = [
            base.and_where(membership_predicate(dataset.id_column, batch.identifiers))
            for batch in batches
        ]

        log_batch_plan(
            dataset=dataset.name,
            total_identifiers=sum(len(batch) for batch in batches),
            total_batches=len(requests),
            batch_size=self._policy.batch_size,
        )

        return requests


def plan_batches(
    dataset: DatasetDescriptor,
    where: FilterExpression | None,
    identifiers: Iterable[str],
    batch_size: int = DEFAULT_BATCH_SIZE,
    projection: Projection | str | Sequence[str] | None = Projection.DOCUMENT_ID,
) -> list[SoqlRequest]:
    """Convenience wrapper around BatchPlanner.plan.

    Raises:
        ConfigurationError: If batch_size is not a positive integer
        ValidationError: If identifiers is not a collection
    """
    planner = BatchPlanner(BatchPolicy(batch_size=batch_size))
    return planner.plan(dataset, where, identifiers, projection)
