# flake8: noqa

import logging
from contextlib import asynccontextmanager
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, FastAPI, Path, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from . import crud, schemas
from .config import settings
from .db import init_db
from .deps import get_current_user, get_db
from .errors import Unauthenticated, register_error_handlers
from .logging_config import configure_logging
from .security import create_token

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    # Initialize DB once at startup
    init_db()
    logger.info("Cookbook API started (%s)", settings.environment)
    yield


app = FastAPI(title="Cookbook API", lifespan=lifespan)
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"status": "ok"}


# --- auth ---

auth = APIRouter(prefix="/auth", tags=["auth"])


@auth.post("/signup", status_code=201, response_model=schemas.AuthResponse)
def signup(payload: schemas.SignupRequest, db: Session = Depends(get_db)):
    user = crud.create_user(db, payload.email, payload.password)
    return {"token": create_token(user), "user": user}


@auth.post("/login", response_model=schemas.AuthResponse)
def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)):
    user = crud.authenticate_user(db, payload.email, payload.password)
    if user is None:
        # same answer for unknown email and wrong password
        logger.info("Failed login attempt")
        raise Unauthenticated("Invalid email or password.")
    logger.info("User %s logged in", user.id)
    return {"token": create_token(user), "user": user}


@auth.get("/me", response_model=schemas.MeResponse)
def me(user: schemas.CurrentUser = Depends(get_current_user)):
    return {"user": user}


# --- recipes ---

recipes = APIRouter(prefix="/recipes", tags=["recipes"])
# ids past the 64-bit range never reach the database
RecipeId = Annotated[int, Path(ge=1, le=2 ** 63 - 1)]


@recipes.post("", status_code=201, response_model=schemas.RecipeResponse)
def create_recipe(
    payload: schemas.RecipeIn,
    user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"data": crud.create_recipe(db, user.id, payload)}


@recipes.get("", response_model=schemas.RecipeListResponse)
def list_recipes(
    user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"data": crud.list_recipes(db, user.id)}


@recipes.get("/search", response_model=schemas.RecipeListResponse)
def search_recipes(
    name: Optional[str] = None,
    tags: Optional[str] = None,
    user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"data": crud.search_recipes(db, user.id, name=name, tags=tags)}


@recipes.get("/{recipe_id}", response_model=schemas.RecipeResponse)
def read_recipe(
    recipe_id: RecipeId,
    user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"data": crud.read_recipe(db, user.id, recipe_id)}


@recipes.put("/{recipe_id}", response_model=schemas.RecipeResponse)
def update_recipe(
    recipe_id: RecipeId,
    payload: schemas.RecipeIn,
    user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"data": crud.update_recipe(db, user.id, recipe_id, payload)}


@recipes.delete("/{recipe_id}", status_code=204)
def delete_recipe(
    recipe_id: RecipeId,
    user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    crud.delete_recipe(db, user.id, recipe_id)
    return Response(status_code=204)


app.include_router(auth)
app.include_router(recipes)
