"""Filter predicate rendering for SoQL `$where` clauses.

This module turns caller-supplied filter criteria into dataset-native
boolean predicates. Each recognized attribute is described by a FilterField
that knows its comparison form; the dataset descriptors hold an ordered
tuple of fields and render them in declaration order.

Architecture:
    - FilterField: one attribute of a dataset's filter vocabulary
    - FilterExpression: immutable, ordered list of predicates joined with AND
    - quote_literal / membership_predicate: shared literal helpers

Every string value is rendered as a single-quoted literal with embedded
single quotes doubled, so no caller value can terminate the literal.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ..core.enums import MatchKind
from ..core.exceptions import ValidationError

_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")


def escape_literal(value: Any) -> str:
    """Double every single quote in the text form of value."""
    return str(value).replace("'", "''")


def quote_literal(value: Any) -> str:
    """Render value as a single-quoted SoQL string literal."""
    return f"'{escape_literal(value)}'"


def membership_predicate(column: str, values: Iterable[Any]) -> str:
    """Render `column IN ('v1', 'v2', ...)`."""
    return f"{column} IN ({', '.join(quote_literal(v) for v in values)})"


def is_blank(value: Any) -> bool:
    """Whether a criteria value counts as "not supplied"."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return not any(not is_blank(v) for v in value)
    return False


def split_values(value: Any) -> list[str]:
    """Normalize a comma-separated string or a collection into trimmed values."""
    if isinstance(value, str):
        parts: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        parts = value
    else:
        parts = [value]
    return [str(part).strip() for part in parts if not is_blank(part)]


@dataclass(frozen=True)
class FilterField:
    """One recognized filter attribute.

    Attributes:
        key: Incoming criteria key. Range fields read `<key>_start` and `<key>_end`.
        match: Comparison form used to render the predicate
        column: Dataset column, when it differs from the key
        numeric: Render values unquoted; non-numeric input is rejected
        case_insensitive: Compare with `upper(column)=upper('value')`
        uppercase: Upper-case the value before rendering
    """

    key: str
    match: MatchKind = MatchKind.EXACT
    column: str | None = None
    numeric: bool = False
    case_insensitive: bool = False
    uppercase: bool = False

    @property
    def target(self) -> str:
        return self.column or self.key

    @property
    def criteria_keys(self) -> tuple[str, ...]:
        """Criteria keys this field consumes."""
        if self.match is MatchKind.RANGE:
            return (f"{self.key}_start", f"{self.key}_end")
        return (self.key,)

    def render(self, criteria: Mapping[str, Any]) -> str | None:
        """Render this field's predicate, or None if criteria does not supply it."""
        if self.match is MatchKind.RANGE:
            start = criteria.get(f"{self.key}_start")
            end = criteria.get(f"{self.key}_end")
            # Half-open ranges are ignored like any other absent key
            if is_blank(start) or is_blank(end):
                return None
            return f"{self.target} between {self._literal(start)} and {self._literal(end)}"

        value = criteria.get(self.key)
        if is_blank(value):
            return None

        if self.match is MatchKind.IN or isinstance(value, (list, tuple, set, frozenset)):
            values = split_values(value)
            if self.numeric:
                return f"{self.target} IN ({', '.join(self._literal(v) for v in values)})"
            return membership_predicate(self.target, (self._text(v) for v in values))

        if self.match is MatchKind.PREFIX:
            return f"{self.target} LIKE '{escape_literal(self._text(value))}%'"
        if self.match is MatchKind.SUBSTRING:
            return f"{self.target} like '%{escape_literal(self._text(value))}%'"
        if self.case_insensitive:
            return f"upper({self.target})=upper({self._literal(value)})"
        return f"{self.target}={self._literal(value)}"

    def _text(self, value: Any) -> str:
        text = str(value).strip()
        return text.upper() if self.uppercase else text

    def _literal(self, value: Any) -> str:
        if not self.numeric:
            return quote_literal(self._text(value))
        if isinstance(value, bool):
            raise ValidationError(f"{self.key} must be numeric", fields=[self.key])
        if isinstance(value, (int, float)):
            return str(value)
        text = str(value).strip()
        if not _NUMBER_RE.match(text):
            raise ValidationError(f"{self.key} must be numeric, got {text!r}", fields=[self.key])
        return text


@dataclass(frozen=True)
class FilterExpression:
    """Ordered predicates joined with AND. Empty means "match all"."""

    predicates: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.predicates)

    def __len__(self) -> int:
        return len(self.predicates)

    def and_(self, *predicates: str) -> FilterExpression:
        """Return a new expression with predicates appended."""
        return FilterExpression(self.predicates + tuple(p for p in predicates if p))

    def render(self) -> str:
        return " AND ".join(self.predicates)


def build_predicates(
    fields: Iterable[FilterField], criteria: Mapping[str, Any] | None
) -> FilterExpression:
    """Render every field supplied by criteria, in field declaration order.

    Keys in criteria that no field consumes are ignored.

    Args:
        fields: Ordered filter vocabulary of a dataset
        criteria: Caller filter criteria (None is treated as empty)

    Returns:
        FilterExpression (empty when nothing recognized was supplied)

    Raises:
        ValidationError: If criteria is not a mapping or a numeric field
            receives a non-numeric value
    """
    if criteria is None:
        return FilterExpression()
    if not isinstance(criteria, Mapping):
        raise ValidationError(
            f"filter criteria must be a mapping, got {type(criteria).__name__}"
        )

    predicates = []
    for field in fields:
        predicate = field.render(criteria)
        if predicate is not None:
            predicates.append(predicate)
    return FilterExpression(tuple(predicates))
