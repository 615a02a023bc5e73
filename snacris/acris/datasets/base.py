"""Dataset descriptor definition."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..config import resolve_endpoint
from ..core.enums import DatasetKind, MatchKind, PropertyType
from ..query.predicates import FilterExpression, FilterField, build_predicates


@dataclass(frozen=True)
class DatasetDescriptor:
    """One queryable ACRIS dataset.

    Attributes:
        name: Dispatch key (e.g. "real_property_master")
        property_type: Dataset family
        kind: Sub-dataset kind
        endpoint: JSON endpoint URL
        fields: Ordered filter vocabulary
        id_column: Cross-dataset join key column
    """

    name: str
    property_type: PropertyType
    kind: DatasetKind
    endpoint: str
    fields: tuple[FilterField, ...]
    id_column: str = "document_id"

    @classmethod
    def define(
        cls, property_type: PropertyType, kind: DatasetKind, fields: tuple[FilterField, ...]
    ) -> DatasetDescriptor:
        """Create a descriptor whose name and endpoint derive from its family and kind."""
        name = f"{property_type.value}_{kind.value}"
        return cls(
            name=name,
            property_type=property_type,
            kind=kind,
            endpoint=resolve_endpoint(name),
            fields=fields,
        )

    @property
    def vocabulary(self) -> dict[str, MatchKind]:
        """Map of recognized criteria key to comparison form."""
        return {key: f.match for f in self.fields for key in f.criteria_keys}

    def recognizes(self, key: str) -> bool:
        return key in self.vocabulary

    def build_predicates(self, criteria: Mapping[str, Any] | None) -> FilterExpression:
        """Render this dataset's filter expression for criteria."""
        return build_predicates(self.fields, criteria)

    def __str__(self) -> str:
        return self.name
