from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SortField = Literal["name", "date_added"]
SortOrder = Literal["asc", "desc"]


class ListingQuery(BaseModel):
    """Normalized sort/filter/paging parameters of a listing request."""

    model_config = ConfigDict(frozen=True)

    sort_field: SortField = "date_added"
    sort_order: SortOrder = "desc"
    # None means every match on a single page
    page_size: Optional[int] = Field(default=30, gt=0)
    search: str = ""
    marked_only: bool = False

    @property
    def display_count(self) -> str:
        return "all" if self.page_size is None else str(self.page_size)


class RecipeView(BaseModel):
    id: int
    name: str = Field(..., json_schema_extra={"example": "Tomato Soup"})
    ingredients: str = Field(
        "", json_schema_extra={"example": "4 tomatoes\n1 bunch basil"}
    )
    instructions: str = ""
    notes: str = ""
    servings: Optional[int] = None
    calories: Optional[float] = None
    fat: Optional[float] = None
    cholesterol: Optional[float] = None
    sodium: Optional[float] = None
    protein: Optional[float] = None
    date_added: datetime
    marked: bool = False
    classification: Optional[str] = None
    source: Optional[str] = None
    meals: List[str] = Field(default_factory=list)
    preparations: List[str] = Field(default_factory=list)
    courses: List[str] = Field(default_factory=list)


class QueryEcho(BaseModel):
    sortField: SortField
    sortOrder: SortOrder
    displayCount: str
    search: str
    marked: bool


class RecipeListing(BaseModel):
    items: List[RecipeView]
    total: int
    page: int
    page_count: int
    query: QueryEcho


class EntitySummary(BaseModel):
    id: int
    name: str
    recipe_count: int = 0


class EntityListing(BaseModel):
    kind: str
    id: int
    name: str
    recipes: List[RecipeView]


class CookbookView(BaseModel):
    id: int
    name: str
    recipes: List[RecipeView]
