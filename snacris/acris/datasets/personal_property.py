"""Personal property (UCC and federal lien) dataset descriptors."""

from __future__ import annotations

from ..core.enums import DatasetKind, PropertyType
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
    PropertyType.PERSONAL,
    DatasetKind.MASTER,
    (
        DOCUMENT_ID,
        TRANSACTION_NUMBER,
        RECORD_TYPE,
        FilterField("crfn"),
        FilterField("recorded_borough"),
        DOC_TYPE,
        FilterField("document_amt"),
        FilterField("recorded_datetime"),
        FilterField("ucc_collateral"),
        FilterField("fedtax_serial_nbr"),
        FilterField("fedtax_assessment_date"),
        FilterField("rpttl_nbr"),
        FilterField("modified_date"),
        FilterField("reel_yr"),
        FilterField("reel_nbr"),
        FilterField("reel_pg"),
        FilterField("file_nbr"),
        # Search-form name for the UCC / federal lien file number
        FilterField("ucc_lien_file_number", column="file_nbr"),
        GOOD_THROUGH_DATE,
    ),
)

LEGALS = DatasetDescriptor.define(
    PropertyType.PERSONAL,
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
        FilterField("addr_unit"),
        GOOD_THROUGH_DATE,
    ),
)

PARTIES = DatasetDescriptor.define(PropertyType.PERSONAL, DatasetKind.PARTIES, PARTY_FIELDS)

REFERENCES = DatasetDescriptor.define(
    PropertyType.PERSONAL,
    DatasetKind.REFERENCES,
    (
        DOCUMENT_ID,
        TRANSACTION_NUMBER,
        RECORD_TYPE,
        FilterField("crfn"),
        FilterField("doc_id_ref"),
        FilterField("file_nbr"),
        GOOD_THROUGH_DATE,
    ),
)

REMARKS = DatasetDescriptor.define(PropertyType.PERSONAL, DatasetKind.REMARKS, REMARK_FIELDS)

DATASETS = (MASTER, LEGALS, PARTIES, REFERENCES, REMARKS)
