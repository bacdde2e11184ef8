import logging
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from . import models, schemas
from .errors import Conflict, Forbidden, Internal, NotFound
from .normalize import normalize_tags, parse_tag_filter
from .security import hash_password, verify_password

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session):
    """Commit the block as one transaction, or roll all of it back."""
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Transaction rolled back")
        raise Internal("Database error") from exc
    except Exception:
        db.rollback()
        raise


# --- users ---

def get_user(db: Session, user_id: int):
    return db.get(models.User, user_id)


def get_user_by_email(db: Session, email: str):
    return db.scalar(select(models.User).where(models.User.email == email))


def create_user(db: Session, email: str, password: str):
    if get_user_by_email(db, email) is not None:
        raise Conflict("User already exists with this email.")
    user = models.User(email=email, hashed_password=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with another signup for the same address
        db.rollback()
        raise Conflict("User already exists with this email.")
    db.refresh(user)
    logger.info("User %s signed up", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str):
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


# --- tags ---

def _find_tag(db: Session, name: str):
    return db.scalar(select(models.Tag).where(models.Tag.name == name))


def get_or_create_tag(db: Session, name: str):
    """Return the tag called ``name``, creating it if needed.

    The unique constraint on ``tags.name`` decides concurrent creates: the
    insert runs in a savepoint and a conflict means another request created
    the tag first, so it is looked up once more.
    """
    tag = _find_tag(db, name)
    if tag is not None:
        return tag
    # pending recipe rows must fail on their own, not as a tag conflict
    db.flush()
    try:
        with db.begin_nested():
            tag = models.Tag(name=name)
            db.add(tag)
    except IntegrityError:
        logger.info("Tag %r was created concurrently, resolving again", name)
        tag = _find_tag(db, name)
        if tag is None:
            raise Internal(f"Could not resolve tag {name!r}")
        return tag
    logger.info("Created tag %r", name)
    return tag


def resolve_tags(db: Session, names: Optional[List[str]]):
    return [get_or_create_tag(db, n) for n in normalize_tags(names)]


# --- recipes ---

def _ingredients(payload: schemas.RecipeIn):
    return [
        models.Ingredient(name=i.name, measure=i.measure)
        for i in payload.ingredients or []
    ]


def _steps(payload: schemas.RecipeIn):
    # order values are stored as submitted, never renumbered
    return [
        models.Step(order=s.order, description=s.description)
        for s in payload.steps or []
    ]


def get_recipe(db: Session, recipe_id: int):
    """Load a recipe with its owner, ingredients, steps and tags."""
    stmt = (
        select(models.Recipe)
        .where(models.Recipe.id == recipe_id)
        .options(
            joinedload(models.Recipe.owner),
            selectinload(models.Recipe.ingredients),
            selectinload(models.Recipe.steps),
            selectinload(models.Recipe.tags),
        )
        .execution_options(populate_existing=True)
    )
    return db.scalar(stmt)


def can_read(recipe, user_id: int) -> bool:
    return bool(recipe.is_public) or recipe.owner_id == user_id


def read_recipe(db: Session, requester_id: int, recipe_id: int):
    recipe = get_recipe(db, recipe_id)
    if recipe is None:
        raise NotFound("Recipe not found")
    # private recipes of other users answer 403, not 404
    if not can_read(recipe, requester_id):
        raise Forbidden(
            "Forbidden: You do not have permission to view this recipe")
    return recipe


def _owned_recipe(db: Session, requester_id: int, recipe_id: int,
                  action: str):
    recipe = db.get(models.Recipe, recipe_id)
    if recipe is None:
        raise NotFound("Recipe not found")
    if recipe.owner_id != requester_id:
        raise Forbidden(f"Forbidden: You can only {action} your own recipes")
    return recipe


def create_recipe(db: Session, owner_id: int, payload: schemas.RecipeIn):
    with atomic(db):
        recipe = models.Recipe(
            name=payload.name,
            description=payload.description,
            image_url=payload.image_url,
            is_public=bool(payload.is_public),
            owner_id=owner_id,
        )
        recipe.ingredients = _ingredients(payload)
        recipe.steps = _steps(payload)
        recipe.tags = resolve_tags(db, payload.tags)
        db.add(recipe)
    logger.info("User %s created recipe %s", owner_id, recipe.id)
    return get_recipe(db, recipe.id)


def update_recipe(db: Session, requester_id: int, recipe_id: int,
                  payload: schemas.RecipeIn):
    recipe = _owned_recipe(db, requester_id, recipe_id, "update")
    with atomic(db):
        recipe.name = payload.name
        recipe.description = payload.description
        recipe.image_url = payload.image_url
        if payload.is_public is not None:
            recipe.is_public = payload.is_public
        # full replace; delete-orphan removes the previous rows on flush
        recipe.ingredients = _ingredients(payload)
        recipe.steps = _steps(payload)
        recipe.tags = resolve_tags(db, payload.tags)
        recipe.updated_at = models.utcnow()
    logger.info("User %s updated recipe %s", requester_id, recipe_id)
    return get_recipe(db, recipe_id)


def delete_recipe(db: Session, requester_id: int, recipe_id: int) -> None:
    recipe = _owned_recipe(db, requester_id, recipe_id, "delete")
    with atomic(db):
        db.delete(recipe)
    logger.info("User %s deleted recipe %s", requester_id, recipe_id)


def search_filters(owner_id: int, name: Optional[str] = None,
                   tags: Optional[str] = None) -> list:
    """Build WHERE clauses for a recipe search.

    Only the owner's recipes are searched. ``name`` is a case-insensitive
    substring; ``tags`` is comma-separated and a recipe must carry every
    listed tag.
    """
    clauses = [models.Recipe.owner_id == owner_id]
    if name and name.strip():
        clauses.append(
            models.Recipe.name.icontains(name.strip(), autoescape=True))
    for tag in parse_tag_filter(tags):
        clauses.append(models.Recipe.tags.any(models.Tag.name == tag))
    return clauses


def _summaries(db: Session, clauses: list):
    ingredient_count = (
        select(func.count(models.Ingredient.id))
        .where(models.Ingredient.recipe_id == models.Recipe.id)
        .correlate(models.Recipe)
        .scalar_subquery()
    )
    step_count = (
        select(func.count(models.Step.id))
        .where(models.Step.recipe_id == models.Recipe.id)
        .correlate(models.Recipe)
        .scalar_subquery()
    )
    stmt = (
        select(models.Recipe, ingredient_count, step_count)
        .where(*clauses)
        .options(selectinload(models.Recipe.tags))
        .order_by(models.Recipe.created_at.desc(), models.Recipe.id.desc())
    )
    return [
        schemas.RecipeSummary.build(recipe, ingredients, steps)
        for recipe, ingredients, steps in db.execute(stmt).all()
    ]


def list_recipes(db: Session, owner_id: int):
    return _summaries(db, [models.Recipe.owner_id == owner_id])


def search_recipes(db: Session, owner_id: int, name: Optional[str] = None,
                   tags: Optional[str] = None):
    return _summaries(db, search_filters(owner_id, name, tags))
