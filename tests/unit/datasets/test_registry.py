"""Unit tests for the dataset descriptor registry."""

from __future__ import annotations

import pytest

from snacris.acris.config import resolve_endpoint
from snacris.acris.core import ConfigurationError, DatasetKind, MatchKind, PropertyType
from snacris.acris.datasets import (
    DATASETS,
    build_filter_expression,
    dataset_for,
    get_dataset,
    list_datasets,
)


def test_ten_datasets_registered():
    assert len(DATASETS) == 10
    assert len(list_datasets(PropertyType.REAL)) == 5
    assert len(list_datasets(PropertyType.PERSONAL)) == 5


def test_lookup_by_family_and_kind():
    descriptor = dataset_for("personal_property", "master")
    assert descriptor.name == "personal_property_master"
    assert descriptor is get_dataset("personal_property_master")
    assert descriptor.endpoint.endswith("/sv7x-dduq.json")


def test_unknown_dataset_is_configuration_error():
    with pytest.raises(ConfigurationError):
        get_dataset("real_property_unknown")
    with pytest.raises(ConfigurationError):
        dataset_for("real_property", "ledger")
    with pytest.raises(ConfigurationError):
        resolve_endpoint("nope")


def test_vocabulary_comparison_forms():
    master = dataset_for(PropertyType.REAL, DatasetKind.MASTER)
    vocabulary = master.vocabulary
    assert vocabulary["doc_type"] is MatchKind.IN
    assert vocabulary["document_date_start"] is MatchKind.RANGE
    assert vocabulary["transaction_number"] is MatchKind.PREFIX
    assert master.recognizes("reel_pg")
    assert not master.recognizes("borough")


def test_same_criteria_differ_per_dataset():
    criteria = {"borough": "3", "ucc_lien_file_number": "12345", "name": "SMITH"}
    assert build_filter_expression(criteria, "personal_property_master").render() == "file_nbr='12345'"
    assert build_filter_expression(criteria, "personal_property_legals").render() == "borough=3"
    assert build_filter_expression(criteria, "real_property_parties").render() == "name like '%SMITH%'"


def test_recorded_date_range_targets_datetime_column():
    expression = build_filter_expression(
        {"recorded_date_start": "2021-01-01", "recorded_date_end": "2021-06-30"},
        "real_property_master",
    )
    assert expression.render() == "recorded_datetime between '2021-01-01' and '2021-06-30'"
