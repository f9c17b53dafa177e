from typing import Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from . import models
from .assembler import assemble_recipes
from .db import translates_store_errors
from .errors import CookbookNotFound
from .paging import text_key
from .schemas import CookbookView

CookbookRow = Tuple[Optional[str], str, int]


def order_cookbook_recipes(rows: Iterable[CookbookRow]) -> List[int]:
    """Order (classification name, recipe name, id) rows and return the ids.

    Classification name leads, recipes without one come first.
    """
    return [
        rid
        for _, _, rid in sorted(
            rows, key=lambda row: (text_key(row[0]), text_key(row[1]), row[2])
        )
    ]


@translates_store_errors
def get_cookbook_listing(db: Session, cookbook_id: int) -> CookbookView:
    cookbook = db.get(models.Cookbook, cookbook_id)
    if cookbook is None:
        raise CookbookNotFound(cookbook_id)

    rows = db.execute(
        select(models.Classification.name, models.Recipe.name, models.Recipe.id)
        .join(models.CookbookRecipe, models.CookbookRecipe.recipe_id == models.Recipe.id)
        .outerjoin(models.Classification, models.Classification.id == models.Recipe.classification_id)
        .where(models.CookbookRecipe.cookbook_id == cookbook_id)
    ).all()

    ids = order_cookbook_recipes(tuple(row) for row in rows)
    return CookbookView(
        id=cookbook.id, name=cookbook.name, recipes=assemble_recipes(db, ids)
    )
