# flake8: noqa
import sys
from datetime import datetime, timedelta
from pathlib import Path

# Ensure project root is on sys.path so `recipebook` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

import pytest
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recipebook import models
from recipebook.db import Base, create_store_engine

BASE_DATE = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def engine():
    # StaticPool so the same in-memory database is shared across sessions
    engine = create_store_engine("sqlite://", timeout=5, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def statements(engine):
    """Record every SQL statement sent to the in-memory database."""
    seen = []

    def record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement)

    event.listen(engine, "before_cursor_execute", record)
    yield seen
    event.remove(engine, "before_cursor_execute", record)


@pytest.fixture
def add_recipe(db):
    """Insert a recipe, creating named related entities on first use."""
    lookups = {}

    def named(model, name):
        key = (model, name)
        if key not in lookups:
            obj = model(name=name)
            db.add(obj)
            lookups[key] = obj
        return lookups[key]

    def add(name, ingredients="", day=0, classification=None, source=None,
            meals=(), preparations=(), courses=(), cookbooks=(), **fields):
        recipe = models.Recipe(
            name=name,
            ingredients=ingredients,
            date_added=fields.pop("date_added", BASE_DATE + timedelta(days=day)),
            **fields,
        )
        if classification:
            recipe.classification = named(models.Classification, classification)
        if source:
            recipe.source = named(models.Source, source)
        recipe.meals = [named(models.Meal, n) for n in meals]
        recipe.preparations = [named(models.Preparation, n) for n in preparations]
        recipe.courses = [named(models.Course, n) for n in courses]
        for title in cookbooks:
            named(models.Cookbook, title).recipes.append(recipe)
        db.add(recipe)
        db.commit()
        return recipe

    add.named = named
    return add
