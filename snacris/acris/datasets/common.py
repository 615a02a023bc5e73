"""Filter fields shared by every ACRIS dataset."""

from __future__ import annotations

from ..core.enums import MatchKind
from ..query.predicates import FilterField

DOCUMENT_ID = FilterField("document_id", case_insensitive=True)
# Transaction numbers are the leading characters of a document id
TRANSACTION_NUMBER = FilterField("transaction_number", MatchKind.PREFIX, column="document_id")
RECORD_TYPE = FilterField("record_type")
GOOD_THROUGH_DATE = FilterField("good_through_date")

DOC_TYPE = FilterField("doc_type", MatchKind.IN)

BOROUGH = FilterField("borough", numeric=True)
BLOCK = FilterField("block", numeric=True)
LOT = FilterField("lot", numeric=True)

PARTY_FIELDS = (
    DOCUMENT_ID,
    TRANSACTION_NUMBER,
    RECORD_TYPE,
    FilterField("party_type"),
    FilterField("name", MatchKind.SUBSTRING, uppercase=True),
    FilterField("address_1"),
    FilterField("address_2"),
    FilterField("country"),
    FilterField("city"),
    FilterField("state"),
    FilterField("zip"),
    GOOD_THROUGH_DATE,
)

REMARK_FIELDS = (
    DOCUMENT_ID,
    TRANSACTION_NUMBER,
    RECORD_TYPE,
    FilterField("sequence_number", numeric=True),
    FilterField("remark_text"),
    GOOD_THROUGH_DATE,
)
