"""Real property dataset descriptors."""

from __future__ import annotations

from ..core.enums import DatasetKind, MatchKind, PropertyType
from ..query.predicates import FilterField
from .base import DatasetDescriptor
from .common import (
    BLOCK,
    BOROUGH,
    DOC_TYPE,
    DOCUMENT_ID,
    GOOD_THROUGH_DATE,
    LOT,
    PARTY_FIELDS,
    RECORD_TYPE,
    REMARK_FIELDS,
    TRANSACTION_NUMBER,
)

MASTER = DatasetDescriptor.define(
    PropertyType.REAL,
    DatasetKind.MASTER,
    (
        DOCUMENT_ID,
        TRANSACTION_NUMBER,
        RECORD_TYPE,
        FilterField("crfn"),
        FilterField("recorded_borough"),
        DOC_TYPE,
        FilterField("document_date", MatchKind.RANGE),
        FilterField("recorded_date", MatchKind.RANGE, column="recorded_datetime"),
        FilterField("document_amt"),
        FilterField("recorded_datetime"),
        FilterField("modified_date"),
        FilterField("reel_yr"),
        FilterField("reel_nbr"),
        FilterField("reel_pg"),
        FilterField("percent_trans"),
        GOOD_THROUGH_DATE,
    ),
)

LEGALS = DatasetDescriptor.define(
    PropertyType.REAL,
    DatasetKind.LEGALS,
    (
        DOCUMENT_ID,
        TRANSACTION_NUMBER,
        RECORD_TYPE,
        BOROUGH,
        BLOCK,
        LOT,
        FilterField("easement"),
        FilterField("partial_lot"),
        FilterField("air_rights"),
        FilterField("subterranean_rights"),
        FilterField("property_type"),
        FilterField("street_number"),
        FilterField("street_name"),
        FilterField("unit"),
        GOOD_THROUGH_DATE,
    ),
)

PARTIES = DatasetDescriptor.define(PropertyType.REAL, DatasetKind.PARTIES, PARTY_FIELDS)

REFERENCES = DatasetDescriptor.define(
    PropertyType.REAL,
    DatasetKind.REFERENCES,
    (
        DOCUMENT_ID,
        TRANSACTION_NUMBER,
        RECORD_TYPE,
        # The trailing underscore is the dataset's actual column name
        FilterField("reference_by_crfn_"),
        FilterField("reference_by_doc_id"),
        FilterField("reference_by_reel_year"),
        FilterField("reference_by_reel_borough"),
        FilterField("reference_by_reel_nbr"),
        FilterField("reference_by_reel_page"),
        GOOD_THROUGH_DATE,
    ),
)

REMARKS = DatasetDescriptor.define(PropertyType.REAL, DatasetKind.REMARKS, REMARK_FIELDS)

DATASETS = (MASTER, LEGALS, PARTIES, REFERENCES, REMARKS)
