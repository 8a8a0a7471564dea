"""
Sort & pagination pipeline

Sorting and paginating are separate steps so callers can sort without
paginating (dashboards) or paginate an already ordered list.

Author: Thriftly
Date: 2026-10-19
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from thriftly.core.exceptions import ValidationError
from thriftly.domain.query import get_field, MISSING

ASCENDING = "asc"
DESCENDING = "desc"

DEFAULT_SORT = "newest"

# Named sort options accepted by the browse endpoint -> (field, direction)
SORT_OPTIONS: Dict[str, Tuple[str, str]] = {
    "newest": ("created_at", DESCENDING),
    "oldest": ("created_at", ASCENDING),
    "price_low": ("price", ASCENDING),
    "price_high": ("price", DESCENDING),
    "popular": ("views", DESCENDING),
}


def resolve_sort(sort_by: Optional[str]) -> Tuple[str, str]:
    """Map a named sort option to (field, direction); unknown names fall back to newest"""
    return SORT_OPTIONS.get(sort_by or DEFAULT_SORT, SORT_OPTIONS[DEFAULT_SORT])


def sort_entities(
    items: Sequence[Any],
    key: str = "created_at",
    direction: str = DESCENDING,
) -> List[Any]:
    """
    Stable sort by a field

    Items comparing equal keep their relative order in both directions.
    Items without a value for `key` go last.
    """
    if direction not in (ASCENDING, DESCENDING):
        raise ValidationError(f"Invalid sort direction '{direction}'")

    present = []
    missing = []
    for item in items:
        value = get_field(item, key)
        if value is MISSING or value is None:
            missing.append(item)
        else:
            present.append(item)

    ordered = sorted(present, key=lambda item: get_field(item, key), reverse=direction == DESCENDING)
    return ordered + missing


@dataclass
class Page:
    """One page window of an ordered result set"""
    items: List[Any] = field(default_factory=list)
    total: int = 0
    current_page: int = 1
    page_size: int = 12

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def paginate(items: Sequence[Any], page: int = 1, page_size: int = 12) -> Page:
    """
    Slice the 1-indexed `page` out of `items`

    Pages below 1 are treated as page 1. Pages past the end are empty.

    Raises:
        ValidationError if page_size < 1
    """
    if page_size < 1:
        raise ValidationError("page_size must be at least 1")

    page = max(1, page)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        total=len(items),
        current_page=page,
        page_size=page_size,
    )
