"""
Query language for EntityStore lookups

A query is an AND of constraints. Each constraint is a small frozen
dataclass and `matches()` is the single function that evaluates them.
Mongo-style filter dicts can be parsed into the same structure with
`Query.from_dict`.

Example:
    query = (
        Query()
        .equals("status", "available")
        .between("price", gte=10, lte=50)
        .search("denim")
    )
    products = store.find(query)

Author: Thriftly
Date: 2026-10-19
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union


# Fields searched by a full-text constraint
TEXT_SEARCH_FIELDS: Tuple[str, ...] = ("title", "description", "brand", "tags")

MISSING = object()


@dataclass(frozen=True)
class Equals:
    """Strict equality; for list fields, membership also matches"""
    field: str
    value: Any


@dataclass(frozen=True)
class NotEquals:
    """Excludes entities whose field equals `value`"""
    field: str
    value: Any


@dataclass(frozen=True)
class Range:
    """Inclusive numeric range; either bound may be omitted"""
    field: str
    gte: Optional[float] = None
    lte: Optional[float] = None


@dataclass(frozen=True)
class Pattern:
    """Regular expression searched against the field's string value"""
    field: str
    regex: re.Pattern


@dataclass(frozen=True)
class FullText:
    """Case-insensitive substring match against any of `fields`"""
    term: str
    fields: Tuple[str, ...] = TEXT_SEARCH_FIELDS


Constraint = Union[Equals, NotEquals, Range, Pattern, FullText]


def get_field(entity: Any, path: str) -> Any:
    """
    Read a (possibly dotted) field from a model or dict

    Returns the MISSING sentinel when any segment is absent.
    """
    value = entity
    for part in path.split("."):
        if value is None:
            return MISSING
        if isinstance(value, dict):
            value = value.get(part, MISSING)
        else:
            value = getattr(value, part, MISSING)
        if value is MISSING:
            return MISSING
    return value


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _is_absent(value: Any) -> bool:
    return value is MISSING or value is None


def matches(constraint: Constraint, entity: Any) -> bool:
    """Evaluate one constraint against one entity"""
    if isinstance(constraint, FullText):
        term = constraint.term.lower()
        for name in constraint.fields:
            value = get_field(entity, name)
            if _is_absent(value):
                continue
            values = value if isinstance(value, (list, tuple)) else [value]
            if any(term in str(_plain(v)).lower() for v in values):
                return True
        return False

    value = get_field(entity, constraint.field)

    if isinstance(constraint, Equals):
        expected = _plain(constraint.value)
        if _is_absent(value):
            return expected is None
        if isinstance(value, (list, tuple)):
            if isinstance(expected, (list, tuple)):
                return [_plain(v) for v in value] == list(expected)
            return expected in [_plain(v) for v in value]
        return _plain(value) == expected

    if isinstance(constraint, NotEquals):
        if _is_absent(value):
            return False
        return _plain(value) != _plain(constraint.value)

    if isinstance(constraint, Range):
        if _is_absent(value):
            return False
        if constraint.gte is not None and value < constraint.gte:
            return False
        if constraint.lte is not None and value > constraint.lte:
            return False
        return True

    if isinstance(constraint, Pattern):
        if _is_absent(value):
            return False
        return constraint.regex.search(str(_plain(value))) is not None

    raise TypeError(f"Unsupported constraint: {constraint!r}")


@dataclass(frozen=True)
class Query:
    """Immutable conjunction of constraints, built fluently"""
    constraints: Tuple[Constraint, ...] = ()

    def where(self, constraint: Constraint) -> "Query":
        return Query(self.constraints + (constraint,))

    def equals(self, field_name: str, value: Any) -> "Query":
        return self.where(Equals(field_name, value))

    def not_equals(self, field_name: str, value: Any) -> "Query":
        return self.where(NotEquals(field_name, value))

    def between(self, field_name: str, gte: Optional[float] = None, lte: Optional[float] = None) -> "Query":
        return self.where(Range(field_name, gte=gte, lte=lte))

    def pattern(self, field_name: str, regex: Union[str, re.Pattern], ignore_case: bool = True) -> "Query":
        if isinstance(regex, str):
            regex = re.compile(regex, re.IGNORECASE if ignore_case else 0)
        return self.where(Pattern(field_name, regex))

    def search(self, term: str, fields: Tuple[str, ...] = TEXT_SEARCH_FIELDS) -> "Query":
        return self.where(FullText(term, fields))

    def matches(self, entity: Any) -> bool:
        return all(matches(constraint, entity) for constraint in self.constraints)

    @classmethod
    def from_dict(cls, filter_doc: dict) -> "Query":
        """
        Parse a Mongo-style filter dict

        Supported shapes:
            {"field": value}                       -> Equals
            {"field": re.compile(...)}             -> Pattern
            {"field": {"$gte": a, "$lte": b}}      -> Range
            {"field": {"$ne": value}}              -> NotEquals
            {"$text": {"$search": "term"}}         -> FullText
        The key "_id" is accepted as an alias of "id".
        """
        query = cls()
        for key, value in filter_doc.items():
            if key == "$text":
                if not isinstance(value, dict) or not isinstance(value.get("$search"), str):
                    raise ValueError("'$text' requires a string '$search' term")
                query = query.search(value["$search"])
                continue

            name = "id" if key == "_id" else key

            if isinstance(value, re.Pattern):
                query = query.pattern(name, value)
            elif isinstance(value, dict) and value and all(k.startswith("$") for k in value):
                unknown = set(value) - {"$gte", "$lte", "$ne"}
                if unknown:
                    raise ValueError(f"Unsupported operators for '{key}': {sorted(unknown)}")
                if "$ne" in value:
                    query = query.not_equals(name, value["$ne"])
                if "$gte" in value or "$lte" in value:
                    query = query.between(name, gte=value.get("$gte"), lte=value.get("$lte"))
            else:
                query = query.equals(name, value)
        return query


QueryLike = Union[Query, dict, None]


def as_query(query: QueryLike) -> Query:
    """Accept a Query, a Mongo-style dict or None (match everything)"""
    if query is None:
        return Query()
    if isinstance(query, Query):
        return query
    if isinstance(query, dict):
        return Query.from_dict(query)
    raise TypeError(f"Expected Query or dict, got {type(query).__name__}")
