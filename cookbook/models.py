from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, String, Table, Text,
)
from sqlalchemy.orm import relationship

from .db import Base


def utcnow():
    return datetime.now(timezone.utc)


recipe_tags = Table(
    "recipe_tags",
    Base.metadata,
    Column("recipe_id", Integer,
           ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer,
           ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow,
                        nullable=False)

    recipes = relationship("Recipe", back_populates="owner",
                           cascade="all, delete-orphan",
                           passive_deletes=True)


class Recipe(Base):
    __tablename__ = "recipes"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), index=True, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(2048), nullable=True)
    is_public = Column(Boolean, default=False, nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"),
                      index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow,
                        nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow,
                        onupdate=utcnow, nullable=False)

    owner = relationship("User", back_populates="recipes")
    # ingredients keep insertion order, steps render by their order value
    ingredients = relationship("Ingredient", back_populates="recipe",
                               cascade="all, delete-orphan",
                               order_by="Ingredient.id")
    steps = relationship("Step", back_populates="recipe",
                         cascade="all, delete-orphan",
                         order_by="Step.order")
    tags = relationship("Tag", secondary=recipe_tags,
                        back_populates="recipes", order_by="Tag.name")


class Ingredient(Base):
    __tablename__ = "ingredients"
    id = Column(Integer, primary_key=True, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"),
                       index=True, nullable=False)
    name = Column(String(200), nullable=False)
    measure = Column(String(100), nullable=False)

    recipe = relationship("Recipe", back_populates="ingredients")


class Step(Base):
    __tablename__ = "steps"
    id = Column(Integer, primary_key=True, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"),
                       index=True, nullable=False)
    order = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)

    recipe = relationship("Recipe", back_populates="steps")


class Tag(Base):
    __tablename__ = "tags"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, index=True, nullable=False)

    recipes = relationship("Recipe", secondary=recipe_tags,
                           back_populates="tags")
