"""
utils/sql.py
------------
Builders for the dynamic parts of repository queries.

Both builders are pure functions: they return clause text that only ever
contains quoted column names and positional placeholders, plus the list of
values to bind. User-supplied values are never written into the SQL text.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from utils.errors import BadRequestError, EmptyPayloadError, InvalidRangeError, UnknownFilterError

# Placeholder styles: "dollar" -> $1, $2 (libpq/asyncpg), "format" -> %s (psycopg2)
PARAMSTYLES = ("dollar", "format")

# Filter operators understood by build_filter_clause
CONTAINS = "contains"
GTE = "gte"
LTE = "lte"
POSITIVE = "positive"

_FALSY_STRINGS = frozenset({"", "false", "0", "no", "off"})


@dataclass(frozen=True)
class UpdateClause:
    """SET clause text and the values bound to its placeholders, in order."""
    set_clause: str
    values: list


@dataclass(frozen=True)
class FilterClause:
    """
    WHERE fragment (without the keyword) and its bound values.

    Attributes:
        where_clause: Predicates joined with AND; empty when nothing applies.
        values: Values aligned with the placeholders in `where_clause`.
        ignored: Filter keys that were not recognized and were skipped.
    """
    where_clause: str
    values: list
    ignored: tuple = ()


@dataclass(frozen=True)
class FilterRule:
    """How one filter key maps to a predicate on a column."""
    column: str
    operator: str


@dataclass(frozen=True)
class FilterConfig:
    """
    The filters a resource accepts.

    Attributes:
        rules: Allow-list of filter keys, each mapped to its FilterRule.
        ranges: (min_key, max_key) pairs that must satisfy min <= max.
    """
    rules: Mapping[str, FilterRule]
    ranges: tuple = field(default_factory=tuple)


def quote_ident(name: str) -> str:
    """Quote a column name as a PostgreSQL identifier."""
    return '"' + name.replace('"', '""') + '"'


def placeholder(paramstyle: str, index: int) -> str:
    """
    Render the placeholder for the `index`-th bound value (1-based).

    Raises:
        ValueError: If the paramstyle is not supported.
    """
    if paramstyle == "dollar":
        return f"${index}"
    if paramstyle == "format":
        return "%s"
    raise ValueError(f"Unsupported paramstyle: {paramstyle!r}")


def build_update_clause(
    payload: Mapping[str, Any],
    field_translation: Optional[Mapping[str, str]] = None,
    *,
    paramstyle: str = "dollar",
    start: int = 1,
) -> UpdateClause:
    """
    Build the SET clause of a partial UPDATE.

    Args:
        payload: {logical_name: new_value} for the fields to change.
        field_translation: {logical_name: column_name} for names that differ
            from their column. Names not listed are used as-is.
        paramstyle: Placeholder style of the driver that will run the query.
        start: Index of the first placeholder.

    Returns:
        UpdateClause, e.g. for {"numEmployees": 5, "name": "Acme"} and
        {"numEmployees": "num_employees"}:
        set_clause='"num_employees"=$1, "name"=$2', values=[5, "Acme"]

    Raises:
        EmptyPayloadError: If the payload has no keys.
    """
    if not payload:
        raise EmptyPayloadError("No data")

    translation = field_translation or {}
    cols = [
        f"{quote_ident(translation.get(key, key))}={placeholder(paramstyle, idx)}"
        for idx, key in enumerate(payload, start=start)
    ]
    return UpdateClause(set_clause=", ".join(cols), values=list(payload.values()))


def build_filter_clause(
    filters: Mapping[str, Any],
    config: FilterConfig,
    *,
    paramstyle: str = "dollar",
    start: int = 1,
    strict: bool = False,
) -> FilterClause:
    """
    Build a WHERE fragment from query-string style filters.

    Keys are handled in the order they appear in `filters`. Keys missing from
    `config.rules` are skipped and reported in `FilterClause.ignored`, or
    rejected when `strict` is set.

    Raises:
        InvalidRangeError: If a configured min bound exceeds its max bound.
        UnknownFilterError: In strict mode, for a key not in `config.rules`.
        BadRequestError: If a bound filter isn't an integer.
    """
    unknown = tuple(key for key in filters if key not in config.rules)
    if unknown and strict:
        raise UnknownFilterError(f"Unknown filter(s): {', '.join(unknown)}")

    for min_key, max_key in config.ranges:
        if min_key in filters and max_key in filters:
            if _to_int(min_key, filters[min_key]) > _to_int(max_key, filters[max_key]):
                raise InvalidRangeError(f"{min_key} can't be greater than {max_key}")

    fragments: list[str] = []
    values: list = []
    for key, value in filters.items():
        rule = config.rules.get(key)
        if rule is None:
            continue
        column = quote_ident(rule.column)

        if rule.operator == POSITIVE:
            if _is_truthy(value):
                fragments.append(f"{column} > 0")
            continue

        ph = placeholder(paramstyle, start + len(values))
        if rule.operator == CONTAINS:
            fragments.append(f"{column} LIKE {ph}")
            values.append(f"%{_escape_like(str(value))}%")
        elif rule.operator == GTE:
            fragments.append(f"{column} >= {ph}")
            values.append(_to_int(key, value))
        elif rule.operator == LTE:
            fragments.append(f"{column} <= {ph}")
            values.append(_to_int(key, value))
        else:
            raise ValueError(f"Unsupported filter operator: {rule.operator!r}")

    return FilterClause(where_clause=" AND ".join(fragments), values=values, ignored=unknown)


def _to_int(key: str, value: Any) -> int:
    # int() would truncate 2.5 to 2 and widen the bound
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise BadRequestError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise BadRequestError(f"{key} must be an integer") from None


def _is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSY_STRINGS
    return bool(value)


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so the text matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
