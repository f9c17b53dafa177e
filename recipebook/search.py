from typing import List, Protocol, Set, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from . import models

SortKey = Tuple[int, object]


class RecipeCorpus(Protocol):
    """Read access to the recipes a listing is drawn from.

    Matches come back as (id, value of `field`) pairs so they can be ordered
    without another round trip.
    """

    def all_keys(self, field: str) -> List[SortKey]: ...

    def keys_matching(self, term: str, field: str) -> List[SortKey]: ...


class SqlRecipeCorpus:
    def __init__(self, db: Session, marked_only: bool = False):
        self.db = db
        self.marked_only = marked_only

    def _keys(self, field, *criteria):
        column = getattr(models.Recipe, field)
        stmt = select(models.Recipe.id, column).where(*criteria)
        if self.marked_only:
            stmt = stmt.where(models.Recipe.marked.is_(True))
        return [(rid, value) for rid, value in self.db.execute(stmt)]

    def all_keys(self, field):
        return self._keys(field)

    def keys_matching(self, term, field):
        needle = term.lower()
        return self._keys(
            field,
            or_(
                func.lower(models.Recipe.name).contains(needle, autoescape=True),
                func.lower(models.Recipe.ingredients).contains(needle, autoescape=True),
            ),
        )


def resolve_match_keys(corpus: RecipeCorpus, term: str, field: str) -> List[SortKey]:
    """(id, `field`) pairs of recipes whose name or ingredients contain `term`, ignoring case.

    An empty term matches every recipe.
    """
    term = (term or "").strip()
    if not term:
        return corpus.all_keys(field)
    return corpus.keys_matching(term, field)


def resolve_matches(corpus: RecipeCorpus, term: str) -> Set[int]:
    return {rid for rid, _ in resolve_match_keys(corpus, term, "name")}
