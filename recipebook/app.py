import logging
import sys
from contextlib import asynccontextmanager
from typing import List

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import crud, schemas
from .assembler import get_recipe_view
from .config import settings
from .cookbooks import get_cookbook_listing
from .db import SessionLocal, init_db
from .errors import EntityNotFound, StoreUnavailable, UnknownEntityKind
from .listing import list_recipes

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize DB once at startup
    init_db()
    yield


app = FastAPI(title="Recipe Book API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@app.exception_handler(EntityNotFound)
def entity_not_found(request: Request, e: EntityNotFound):
    logger.info("%s %s: %s", request.method, request.url.path, e)
    return JSONResponse(status_code=404, content={"detail": str(e)})


@app.exception_handler(UnknownEntityKind)
def unknown_kind(request: Request, e: UnknownEntityKind):
    logger.info("%s %s: %s", request.method, request.url.path, e)
    return JSONResponse(status_code=404, content={"detail": str(e)})


@app.exception_handler(StoreUnavailable)
def store_unavailable(request: Request, e: StoreUnavailable):
    headers = {"Retry-After": "5"} if e.retryable else None
    return JSONResponse(status_code=503, content={"detail": e.reason}, headers=headers)


def link_header(request: Request, page: int, page_count: int) -> str:
    def link(n, rel):
        return f'<{request.url.include_query_params(page=n)}>; rel="{rel}"'

    links = []
    if page_count:
        links.append(link(1, "first"))
    if 1 < page <= page_count + 1:
        links.append(link(page - 1, "prev"))
    if page < page_count:
        links.append(link(page + 1, "next"))
    if page_count:
        links.append(link(page_count, "last"))
    return ", ".join(links)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/recipes", response_model=schemas.RecipeListing)
def api_list_recipes(request: Request, response: Response, db: Session = Depends(get_db)):
    listing = list_recipes(db, request.query_params)
    links = link_header(request, listing.page, listing.page_count)
    if links:
        response.headers["Link"] = links
    return listing


@app.get("/api/recipes/{recipe_id}", response_model=schemas.RecipeView)
def api_get_recipe(recipe_id: int, db: Session = Depends(get_db)):
    return get_recipe_view(db, recipe_id)


@app.get("/api/cookbooks/{cookbook_id}", response_model=schemas.CookbookView)
def api_get_cookbook(cookbook_id: int, db: Session = Depends(get_db)):
    return get_cookbook_listing(db, cookbook_id)


@app.get("/api/{kind}", response_model=List[schemas.EntitySummary])
def api_list_entities(kind: str, db: Session = Depends(get_db)):
    return crud.list_entities(db, kind)


@app.get("/api/{kind}/{entity_id}", response_model=schemas.EntityListing)
def api_get_entity(kind: str, entity_id: int, db: Session = Depends(get_db)):
    return crud.get_entity_listing(db, kind, entity_id)
