from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import (
    AnyHttpUrl, BaseModel, ConfigDict, EmailStr, Field, StringConstraints,
    TypeAdapter, ValidationError, field_validator,
)
from pydantic.alias_generators import to_camel

# non-blank after trimming; the trimmed value is what gets stored
Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
# column limits, see models.py
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1,
                                        max_length=200)]
Measure = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1,
                                           max_length=100)]
# tags may be blank here; normalization drops them later
TagText = Annotated[str, StringConstraints(min_length=1, max_length=100)]
IMAGE_URL_MAX = 2048
# Integer columns are 32-bit on Postgres
INT_MAX = 2 ** 31 - 1

_url = TypeAdapter(AnyHttpUrl)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- auth ---

class SignupRequest(CamelModel):
    email: EmailStr = Field(..., json_schema_extra={"example": "a@b.com"})
    password: str = Field(..., min_length=6)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(CamelModel):
    id: int
    email: str


class AuthResponse(CamelModel):
    token: str
    user: UserOut


class CurrentUser(UserOut):
    """Identity the authorization gate hands to protected routes."""


class MeResponse(CamelModel):
    user: UserOut


# --- recipes: input ---

class IngredientIn(CamelModel):
    name: Name = Field(..., json_schema_extra={"example": "Salt"})
    measure: Measure = Field(..., json_schema_extra={"example": "1tsp"})


class StepIn(CamelModel):
    order: int = Field(..., ge=1, le=INT_MAX, json_schema_extra={"example": 1})
    description: Text = Field(..., json_schema_extra={"example": "Boil"})


class RecipeIn(CamelModel):
    name: Name = Field(..., json_schema_extra={"example": "Soup"})
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_public: Optional[bool] = None
    ingredients: Optional[List[IngredientIn]] = Field(default_factory=list)
    steps: Optional[List[StepIn]] = Field(default_factory=list)
    tags: Optional[List[TagText]] = Field(
        default_factory=list,
        json_schema_extra={"example": ["easy", "dinner"]},
    )

    @field_validator("image_url")
    @classmethod
    def check_image_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if len(v) > IMAGE_URL_MAX:
            raise ValueError(
                f"Image URL must be at most {IMAGE_URL_MAX} characters.")
        try:
            _url.validate_python(v)
        except ValidationError:
            raise ValueError("Image URL must be a valid URL.")
        return v

    @field_validator("ingredients", "steps", "tags")
    @classmethod
    def none_is_empty(cls, v):
        return v if v is not None else []


# --- recipes: output ---

class IngredientOut(CamelModel):
    id: int
    name: str
    measure: str


class StepOut(CamelModel):
    id: int
    order: int
    description: str


class TagOut(CamelModel):
    id: int
    name: str


class RecipeBase(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_public: bool
    owner_id: int
    created_at: datetime
    updated_at: datetime
    tags: List[TagOut] = []


class Recipe(RecipeBase):
    owner: UserOut
    ingredients: List[IngredientOut] = []
    steps: List[StepOut] = []


class RecipeCounts(CamelModel):
    ingredients: int
    steps: int


class RecipeSummary(RecipeBase):
    counts: RecipeCounts

    @classmethod
    def build(cls, recipe, ingredients: int, steps: int) -> "RecipeSummary":
        base = RecipeBase.model_validate(recipe)
        return cls(**base.model_dump(),
                   counts=RecipeCounts(ingredients=ingredients, steps=steps))


class RecipeResponse(CamelModel):
    data: Recipe


class RecipeListResponse(CamelModel):
    data: List[RecipeSummary]
