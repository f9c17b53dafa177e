from sqlalchemy import func, select
from sqlalchemy.orm import Session

from . import models, schemas
from .assembler import assemble_recipes
from .db import translates_store_errors
from .errors import EntityNotFound, UnknownEntityKind
from .paging import order_ids

# kind -> (entity model, link table, column on the link table naming the entity)
# Classification and Source are referenced from the recipe row itself.
ENTITY_KINDS = {
    "classifications": (models.Classification, models.Recipe, models.Recipe.classification_id),
    "sources": (models.Source, models.Recipe, models.Recipe.source_id),
    "meals": (models.Meal, models.RecipeMeal, models.RecipeMeal.meal_id),
    "preparations": (models.Preparation, models.RecipePreparation, models.RecipePreparation.preparation_id),
    "courses": (models.Course, models.RecipeCourse, models.RecipeCourse.course_id),
    "cookbooks": (models.Cookbook, models.CookbookRecipe, models.CookbookRecipe.cookbook_id),
}


def _kind(kind: str):
    try:
        return ENTITY_KINDS[kind]
    except KeyError:
        raise UnknownEntityKind(kind) from None


def _recipe_id_column(link):
    return link.id if link is models.Recipe else link.recipe_id


@translates_store_errors
def list_entities(db: Session, kind: str):
    model, link, fk = _kind(kind)
    counts = (
        select(fk.label("entity_id"), func.count(_recipe_id_column(link)).label("recipe_count"))
        .where(fk.is_not(None))
        .group_by(fk)
        .subquery()
    )
    rows = db.execute(
        select(model.id, model.name, func.coalesce(counts.c.recipe_count, 0))
        .outerjoin(counts, counts.c.entity_id == model.id)
    ).all()
    ordered = order_ids(((rid, name) for rid, name, _ in rows), "name", "asc")
    by_id = {rid: (name, count) for rid, name, count in rows}
    return [
        schemas.EntitySummary(id=rid, name=by_id[rid][0], recipe_count=by_id[rid][1])
        for rid in ordered
    ]


@translates_store_errors
def get_entity_listing(db: Session, kind: str, entity_id: int) -> schemas.EntityListing:
    model, link, fk = _kind(kind)
    entity = db.get(model, entity_id)
    if entity is None:
        raise EntityNotFound(model.__name__, entity_id)

    recipe_id = _recipe_id_column(link)
    stmt = select(models.Recipe.id, models.Recipe.name).where(fk == entity_id)
    if link is not models.Recipe:
        stmt = stmt.join(link, recipe_id == models.Recipe.id)
    keys = db.execute(stmt).all()

    ids = order_ids((tuple(k) for k in keys), "name", "asc")
    return schemas.EntityListing(
        kind=kind, id=entity.id, name=entity.name, recipes=assemble_recipes(db, ids)
    )
