"""Core enumerations shared by the query builder, fetcher and orchestrator.

Key Types:
    - PropertyType: Real vs Personal property dataset families
    - DatasetKind: The five sub-datasets of each property family
    - MatchKind: Comparison form used when rendering a filter predicate
    - Projection: Named `$select` options understood by the request assembler
"""

from enum import Enum


class PropertyType(str, Enum):
    """ACRIS dataset family."""

    REAL = "real_property"
    PERSONAL = "personal_property"


class DatasetKind(str, Enum):
    """Sub-dataset within a property family.

    All five kinds share `document_id` as the cross-dataset join key.
    """

    MASTER = "master"
    LEGALS = "legals"
    PARTIES = "parties"
    REFERENCES = "references"
    REMARKS = "remarks"

    @property
    def records_key(self) -> str:
        """Key used for this dataset's rows in a serialized composite record."""
        return f"{self.value}Records"


class MatchKind(str, Enum):
    """Comparison form for a recognized filter attribute."""

    EXACT = "exact"
    PREFIX = "prefix"
    SUBSTRING = "substring"
    RANGE = "range"
    IN = "in"


class Projection(str, Enum):
    """Named `$select` options.

    Explicit field names (a string or a sequence of strings) are accepted
    wherever a Projection is, and are rendered verbatim.
    """

    ALL = "records"
    COUNT = "countAll"
    DOCUMENT_ID = "document_id"
