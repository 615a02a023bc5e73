"""Composite record model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import DatasetKind


class CompositeRecord(BaseModel):
    """One document id with the matching rows from every participating dataset.

    Serializes with the camelCase keys used by API consumers
    (`masterRecords`, `partiesRecords`, ..., `unavailableDatasets`).
    """

    document_id: str = Field(..., min_length=1)
    master_records: list[dict[str, Any]] = Field(default_factory=list, alias="masterRecords")
    parties_records: list[dict[str, Any]] = Field(default_factory=list, alias="partiesRecords")
    legals_records: list[dict[str, Any]] = Field(default_factory=list, alias="legalsRecords")
    references_records: list[dict[str, Any]] = Field(
        default_factory=list, alias="referencesRecords"
    )
    remarks_records: list[dict[str, Any]] = Field(default_factory=list, alias="remarksRecords")
    unavailable_datasets: list[str] = Field(default_factory=list, alias="unavailableDatasets")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def records_for(self, kind: DatasetKind | str) -> list[dict[str, Any]]:
        """Return the rows contributed by one sub-dataset kind."""
        return getattr(self, f"{DatasetKind(kind).value}_records")

    @property
    def is_complete(self) -> bool:
        """True when every participating dataset was fetched successfully."""
        return not self.unavailable_datasets

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
