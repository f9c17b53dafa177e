import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .schemas import ListingQuery


@dataclass(frozen=True)
class PagePlan:
    ids: List[int]
    total: int
    page: int
    page_count: int


def text_key(value: Optional[str]):
    # case-insensitive first, raw text keeps "apple" and "Apple" in a fixed order
    value = value or ""
    return (value.casefold(), value)


def _value_key(field: str, value):
    if field == "name":
        return text_key(value)
    # missing dates sort before every real one
    return (value is not None, value)


def order_ids(keys: Iterable[Tuple[int, object]], field: str, order: str) -> List[int]:
    """Order (id, value) pairs by value in `order`, ties by id ascending."""
    by_id = sorted(keys, key=lambda kv: kv[0])
    # stable sort, so equal values keep the ascending id order even when reversed
    by_id.sort(key=lambda kv: _value_key(field, kv[1]), reverse=(order == "desc"))
    return [rid for rid, _ in by_id]


def plan_page(keys: Iterable[Tuple[int, object]], query: ListingQuery, page: int) -> PagePlan:
    ordered = order_ids(keys, query.sort_field, query.sort_order)
    total = len(ordered)

    if query.page_size is None:
        return PagePlan(ids=ordered, total=total, page=1, page_count=1 if total else 0)

    page = max(page, 1)
    size = query.page_size
    start = (page - 1) * size
    return PagePlan(
        ids=ordered[start:start + size],
        total=total,
        page=page,
        page_count=math.ceil(total / size),
    )
