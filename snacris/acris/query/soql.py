"""SoQL request descriptors.

A SoqlRequest is the fully formed, immutable description of one GET
against an open-data endpoint: projection, filter expression and an
optional page window. Rendering is deterministic so identical inputs
always produce byte-identical URLs.

URL shape:
    <endpoint>?[$select=<proj>&][$where=<predicates>][&$limit=<n>][&$offset=<n>]
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING
from urllib.parse import quote, urlencode

from ..core.enums import Projection
from ..core.exceptions import ConfigurationError
from .predicates import FilterExpression

if TYPE_CHECKING:
    from ..datasets.base import DatasetDescriptor

COUNT_SELECT = "count(*)"

# Characters kept literal in the query string; everything else is percent-encoded
_SAFE_CHARS = "$(),*"


def render_select(projection: Projection | str | Sequence[str] | None) -> str | None:
    """Render a projection as a `$select` value (None means all columns).

    Raises:
        ConfigurationError: If the projection is empty or of an unsupported type
    """
    if projection is None:
        return None
    if isinstance(projection, str) and not isinstance(projection, Projection):
        try:
            projection = Projection(projection)
        except ValueError:
            field = projection.strip()
            if not field:
                raise ConfigurationError("projection field name must be non-empty") from None
            return field

    if isinstance(projection, Projection):
        if projection is Projection.ALL:
            return None
        if projection is Projection.COUNT:
            return COUNT_SELECT
        return projection.value

    if isinstance(projection, Sequence):
        fields = [str(f).strip() for f in projection if str(f).strip()]
        if not fields:
            raise ConfigurationError("projection field list must be non-empty")
        return ",".join(fields)

    raise ConfigurationError(f"Unsupported projection: {projection!r}")


@dataclass(frozen=True)
class SoqlRequest:
    """Request descriptor for one dataset query.

    Attributes:
        dataset: Dataset name (used in logs and error messages)
        endpoint: Dataset endpoint URL
        where: Filter expression (empty means match all)
        select: Rendered `$select` value, None for all columns
        limit: Page size (`$limit`), omitted when None
        offset: Page offset (`$offset`), omitted when None
    """

    dataset: str
    endpoint: str
    where: FilterExpression = FilterExpression()
    select: str | None = None
    limit: int | None = None
    offset: int | None = None

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit <= 0:
            raise ConfigurationError(f"limit must be positive, got {self.limit}")
        if self.offset is not None and self.offset < 0:
            raise ConfigurationError(f"offset must be non-negative, got {self.offset}")
        # An aggregate has no page window
        if self.is_count and (self.limit is not None or self.offset is not None):
            object.__setattr__(self, "limit", None)
            object.__setattr__(self, "offset", None)

    @property
    def is_count(self) -> bool:
        return self.select == COUNT_SELECT

    def and_where(self, *predicates: str) -> SoqlRequest:
        """Return a copy constrained by additional predicates."""
        return replace(self, where=self.where.and_(*predicates))

    def with_page(self, limit: int | None, offset: int | None) -> SoqlRequest:
        """Return a copy with the given page window (ignored for counts)."""
        if self.is_count:
            return self
        return replace(self, limit=limit, offset=offset)

    def query_pairs(self) -> list[tuple[str, str]]:
        pairs: list[tuple[str, str]] = []
        if self.select is not None:
            pairs.append(("$select", self.select))
        if self.where:
            pairs.append(("$where", self.where.render()))
        if self.limit is not None:
            pairs.append(("$limit", str(self.limit)))
        if self.offset is not None:
            pairs.append(("$offset", str(self.offset)))
        return pairs

    @property
    def url(self) -> str:
        pairs = self.query_pairs()
        if not pairs:
            return self.endpoint
        return f"{self.endpoint}?{urlencode(pairs, quote_via=quote, safe=_SAFE_CHARS)}"

    def __str__(self) -> str:
        return self.url


def build_request(
    dataset: DatasetDescriptor,
    where: FilterExpression | None = None,
    projection: Projection | str | Sequence[str] | None = Projection.ALL,
    limit: int | None = None,
    offset: int | None = None,
) -> SoqlRequest:
    """Assemble a request descriptor for a dataset.

    Args:
        dataset: Target dataset descriptor
        where: Filter expression (None or empty means match all)
        projection: Projection.ALL, Projection.COUNT, Projection.DOCUMENT_ID,
            an explicit field name or a list of field names
        limit: Optional `$limit`
        offset: Optional `$offset`

    Returns:
        SoqlRequest; count projections never carry a page window
    """
    return SoqlRequest(
        dataset=dataset.name,
        endpoint=dataset.endpoint,
        where=where or FilterExpression(),
        select=render_select(projection),
        limit=limit,
        offset=offset,
    )
