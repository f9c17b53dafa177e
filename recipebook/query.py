"""Normalize raw listing parameters into a `ListingQuery`.

Nothing here fails a request: any value that is missing or not one of the
accepted choices falls back to its default.
"""
from typing import Any, Mapping

from .errors import InvalidParameter
from .schemas import ListingQuery

SORT_FIELDS = ("name", "date_added")
SORT_ORDERS = ("asc", "desc")
# displayCount choice -> page size, None meaning unbounded
DISPLAY_COUNTS = {"20": 20, "30": 30, "all": None}
TRUTHY = ("1", "true", "yes", "on")

DEFAULTS = ListingQuery()


def _choice(name: str, raw: Any, choices) -> str:
    if raw is None:
        raise InvalidParameter(name, raw)
    value = str(raw).strip().lower()
    if value not in choices:
        raise InvalidParameter(name, raw)
    return value


def _or_default(parse, default):
    try:
        return parse()
    except InvalidParameter:
        return default


def normalize_query(params: Mapping[str, Any]) -> ListingQuery:
    sort_field = _or_default(
        lambda: _choice("sortField", params.get("sortField"), SORT_FIELDS),
        DEFAULTS.sort_field,
    )
    sort_order = _or_default(
        lambda: _choice("sortOrder", params.get("sortOrder"), SORT_ORDERS),
        DEFAULTS.sort_order,
    )
    page_size = _or_default(
        lambda: DISPLAY_COUNTS[
            _choice("displayCount", params.get("displayCount"), DISPLAY_COUNTS)
        ],
        DEFAULTS.page_size,
    )
    search = params.get("search")
    search = search.strip() if isinstance(search, str) else ""
    marked = params.get("marked")
    marked_only = isinstance(marked, str) and marked.strip().lower() in TRUTHY

    return ListingQuery(
        sort_field=sort_field,
        sort_order=sort_order,
        page_size=page_size,
        search=search,
        marked_only=marked_only,
    )


def normalize_page(raw: Any) -> int:
    """Return `raw` as a page number, or 1 when it is not a positive integer."""
    if isinstance(raw, bool):
        return 1
    try:
        page = int(str(raw).strip())
    except (TypeError, ValueError):
        return 1
    return page if page > 0 else 1
