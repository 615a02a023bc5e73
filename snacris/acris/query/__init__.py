"""SoQL query construction: predicate rendering and request assembly."""

from .predicates import (
    FilterExpression,
    FilterField,
    build_predicates,
    escape_literal,
    membership_predicate,
    quote_literal,
)
from .soql import COUNT_SELECT, SoqlRequest, build_request, render_select

__all__ = [
    "FilterField",
    "FilterExpression",
    "build_predicates",
    "escape_literal",
    "quote_literal",
    "membership_predicate",
    "SoqlRequest",
    "build_request",
    "render_select",
    "COUNT_SELECT",
]
