"""Dataset descriptor registry.

Every ACRIS dataset is a DatasetDescriptor registered once at import time.
Lookups go through this table; there is no per-dataset branching anywhere
else in the library.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.enums import DatasetKind, PropertyType
from ..core.exceptions import ConfigurationError
from ..query.predicates import FilterExpression
from . import personal_property, real_property
from .base import DatasetDescriptor

DATASETS: dict[str, DatasetDescriptor] = {
    descriptor.name: descriptor
    for descriptor in (*real_property.DATASETS, *personal_property.DATASETS)
}

_BY_FAMILY: dict[tuple[PropertyType, DatasetKind], DatasetDescriptor] = {
    (descriptor.property_type, descriptor.kind): descriptor for descriptor in DATASETS.values()
}


def get_dataset(name: str | DatasetDescriptor) -> DatasetDescriptor:
    """Look up a dataset by name.

    Raises:
        ConfigurationError: If no dataset with that name is registered
    """
    if isinstance(name, DatasetDescriptor):
        return name
    try:
        return DATASETS[name]
    except KeyError:
        raise ConfigurationError(f"Unknown ACRIS dataset: {name!r}") from None


def dataset_for(property_type: PropertyType | str, kind: DatasetKind | str) -> DatasetDescriptor:
    """Look up a dataset by property family and sub-dataset kind."""
    try:
        key = (PropertyType(property_type), DatasetKind(kind))
    except ValueError:
        raise ConfigurationError(
            f"Unknown ACRIS dataset: {property_type!r}/{kind!r}"
        ) from None
    return _BY_FAMILY[key]


def list_datasets(property_type: PropertyType | None = None) -> list[DatasetDescriptor]:
    """Return registered datasets, optionally restricted to one family."""
    return [
        descriptor
        for descriptor in DATASETS.values()
        if property_type is None or descriptor.property_type == property_type
    ]


def build_filter_expression(
    criteria: Mapping[str, Any] | None, dataset: str | DatasetDescriptor
) -> FilterExpression:
    """Translate filter criteria into the dataset's filter expression."""
    return get_dataset(dataset).build_predicates(criteria)


__all__ = [
    "DATASETS",
    "DatasetDescriptor",
    "get_dataset",
    "dataset_for",
    "list_datasets",
    "build_filter_expression",
]
