import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from . import models
from .db import translates_store_errors
from .errors import RecipeNotFound
from .paging import text_key
from .schemas import RecipeView

logger = logging.getLogger(__name__)

# classification and source ride on the recipe query as joins
EAGER_OPTIONS = (
    joinedload(models.Recipe.classification),
    joinedload(models.Recipe.source),
)

# view field -> (link table, link column naming the entity, entity model).
# Each is one SELECT over the link table for the whole slice.
COLLECTIONS = {
    "meals": (models.RecipeMeal, models.RecipeMeal.meal_id, models.Meal),
    "preparations": (models.RecipePreparation, models.RecipePreparation.preparation_id, models.Preparation),
    "courses": (models.RecipeCourse, models.RecipeCourse.course_id, models.Course),
}


def related_names(db: Session, ids: Sequence[int], link, fk, model) -> Dict[int, List[str]]:
    rows = db.execute(
        select(link.recipe_id, model.name)
        .join(model, model.id == fk)
        .where(link.recipe_id.in_(ids))
    )
    names = defaultdict(list)
    for rid, name in rows:
        names[rid].append(name)
    for found in names.values():
        found.sort(key=text_key)
    return names


def to_view(recipe: models.Recipe, related: Dict[str, Dict[int, List[str]]]) -> RecipeView:
    return RecipeView(
        id=recipe.id,
        name=recipe.name,
        ingredients=recipe.ingredients or "",
        instructions=recipe.instructions or "",
        notes=recipe.notes or "",
        servings=recipe.servings,
        calories=recipe.calories,
        fat=recipe.fat,
        cholesterol=recipe.cholesterol,
        sodium=recipe.sodium,
        protein=recipe.protein,
        date_added=recipe.date_added,
        marked=bool(recipe.marked),
        classification=recipe.classification.name if recipe.classification else None,
        source=recipe.source.name if recipe.source else None,
        meals=related["meals"].get(recipe.id, []),
        preparations=related["preparations"].get(recipe.id, []),
        courses=related["courses"].get(recipe.id, []),
    )


@translates_store_errors
def assemble_recipes(db: Session, ids: Sequence[int]) -> List[RecipeView]:
    """Load the recipes for `ids` with their related names, in the order given.

    Four statements whatever the slice size. Ids without a row are skipped.
    """
    ids = list(ids)
    if not ids:
        return []
    rows = db.execute(
        select(models.Recipe).options(*EAGER_OPTIONS).where(models.Recipe.id.in_(ids))
    ).unique().scalars()
    by_id = {r.id: r for r in rows}
    related = {
        field: related_names(db, ids, link, fk, model)
        for field, (link, fk, model) in COLLECTIONS.items()
    }
    logger.debug("assembled %d of %d requested recipes", len(by_id), len(ids))
    return [to_view(by_id[rid], related) for rid in ids if rid in by_id]


def get_recipe_view(db: Session, recipe_id: int) -> RecipeView:
    views = assemble_recipes(db, [recipe_id])
    if not views:
        raise RecipeNotFound(recipe_id)
    return views[0]
