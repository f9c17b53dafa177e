import logging
from typing import Any, Mapping

from sqlalchemy.orm import Session

from .assembler import assemble_recipes
from .db import translates_store_errors
from .paging import plan_page
from .query import normalize_page, normalize_query
from .schemas import ListingQuery, QueryEcho, RecipeListing
from .search import SqlRecipeCorpus, resolve_match_keys

logger = logging.getLogger(__name__)


def echo(query: ListingQuery) -> QueryEcho:
    return QueryEcho(
        sortField=query.sort_field,
        sortOrder=query.sort_order,
        displayCount=query.display_count,
        search=query.search,
        marked=query.marked_only,
    )


@translates_store_errors
def run_listing(db: Session, query: ListingQuery, page: int) -> RecipeListing:
    corpus = SqlRecipeCorpus(db, marked_only=query.marked_only)
    keys = resolve_match_keys(corpus, query.search, query.sort_field)
    plan = plan_page(keys, query, page)
    items = assemble_recipes(db, plan.ids)
    logger.debug(
        "listing %s page=%d -> %d of %d", query.model_dump(), plan.page, len(items), plan.total
    )
    return RecipeListing(
        items=items,
        total=plan.total,
        page=plan.page,
        page_count=plan.page_count,
        query=echo(query),
    )


def list_recipes(db: Session, params: Mapping[str, Any]) -> RecipeListing:
    """Run the recipe listing for raw request parameters."""
    return run_listing(db, normalize_query(params), normalize_page(params.get("page")))
