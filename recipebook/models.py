from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .db import Base


class Classification(Base):
    __tablename__ = "classifications"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)


class Source(Base):
    __tablename__ = "sources"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)


class Meal(Base):
    __tablename__ = "meals"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)


class Preparation(Base):
    __tablename__ = "preparations"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)


class Course(Base):
    __tablename__ = "courses"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)


class RecipeMeal(Base):
    __tablename__ = "recipe_meals"
    id = Column(Integer, primary_key=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    meal_id = Column(Integer, ForeignKey("meals.id", ondelete="CASCADE"), nullable=False, index=True)
    __table_args__ = (UniqueConstraint("recipe_id", "meal_id", name="uq_recipe_meal"),)


class RecipePreparation(Base):
    __tablename__ = "recipe_preparations"
    id = Column(Integer, primary_key=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    preparation_id = Column(Integer, ForeignKey("preparations.id", ondelete="CASCADE"), nullable=False, index=True)
    __table_args__ = (UniqueConstraint("recipe_id", "preparation_id", name="uq_recipe_preparation"),)


class RecipeCourse(Base):
    __tablename__ = "recipe_courses"
    id = Column(Integer, primary_key=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    __table_args__ = (UniqueConstraint("recipe_id", "course_id", name="uq_recipe_course"),)


class CookbookRecipe(Base):
    __tablename__ = "cookbook_recipes"
    id = Column(Integer, primary_key=True)
    cookbook_id = Column(Integer, ForeignKey("cookbooks.id", ondelete="CASCADE"), nullable=False, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    __table_args__ = (UniqueConstraint("cookbook_id", "recipe_id", name="uq_cookbook_recipe"),)


class Recipe(Base):
    __tablename__ = "recipes"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    ingredients = Column(Text, nullable=False, default="")
    instructions = Column(Text, nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    servings = Column(Integer, nullable=True)
    calories = Column(Float, nullable=True)
    fat = Column(Float, nullable=True)
    cholesterol = Column(Float, nullable=True)
    sodium = Column(Float, nullable=True)
    protein = Column(Float, nullable=True)
    date_added = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    marked = Column(Boolean, nullable=False, default=False)
    classification_id = Column(Integer, ForeignKey("classifications.id"), nullable=True, index=True)
    source_id = Column(Integer, ForeignKey("sources.id"), nullable=True, index=True)

    classification = relationship("Classification")
    source = relationship("Source")
    meals = relationship("Meal", secondary="recipe_meals")
    preparations = relationship("Preparation", secondary="recipe_preparations")
    courses = relationship("Course", secondary="recipe_courses")

    def __repr__(self):
        return f"<Recipe(id={self.id}, name={self.name})>"


class Cookbook(Base):
    __tablename__ = "cookbooks"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)

    recipes = relationship("Recipe", secondary="cookbook_recipes")
