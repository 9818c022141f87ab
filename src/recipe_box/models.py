from __future__ import annotations
from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from recipe_box.case import snake_to_camel
from recipe_box.form import empty_or_str, nan_to_none

Number = Union[int, float]


class WireModel(BaseModel):
    """Attributes are snake_case, form state and inbound payloads are lowerCamelCase."""

    model_config = ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, extra="ignore")


class IngredientForm(WireModel):
    id: Optional[int] = None
    ingredient: Optional[str] = None
    quantity: Optional[Number] = None
    units: Optional[str] = None
    preparation: Optional[str] = None

    @field_validator("ingredient", "units", "preparation", mode="before")
    @classmethod
    def blank_text_is_none(cls, v: Any) -> Any:
        return empty_or_str(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def nan_quantity_is_none(cls, v: Any) -> Any:
        return nan_to_none(v)


class StepForm(WireModel):
    id: Optional[int] = None
    ordinal: int = 0
    instruction: Optional[str] = None

    @field_validator("instruction", mode="before")
    @classmethod
    def blank_instruction_is_none(cls, v: Any) -> Any:
        return empty_or_str(v)


class RecipeForm(WireModel):
    id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    inactive_time: Optional[int] = None
    yield_quantity: Optional[Number] = None
    yield_units: Optional[str] = None
    ingredients: list[IngredientForm] = Field(default_factory=list)
    steps: list[StepForm] = Field(default_factory=list)

    @field_validator("title", "description", "yield_units", mode="before")
    @classmethod
    def blank_text_is_none(cls, v: Any) -> Any:
        return empty_or_str(v)

    @field_validator("prep_time", "cook_time", "inactive_time", "yield_quantity", mode="before")
    @classmethod
    def nan_number_is_none(cls, v: Any) -> Any:
        return nan_to_none(v)

    def to_form_state(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class User(WireModel):
    id: int
    name: str


Author = User


class IngredientResponse(WireModel):
    id: Optional[int] = None
    ingredient: str
    quantity: Number
    units: str
    preparation: Optional[str] = None


class StepResponse(WireModel):
    id: Optional[int] = None
    ordinal: int
    instruction: str


class RecipeResponse(WireModel):
    id: int
    title: str
    description: Optional[str] = None
    author: Optional[Author] = None
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    inactive_time: Optional[int] = None
    yield_quantity: Number
    yield_units: str
    ingredients: list[IngredientResponse] = Field(default_factory=list)
    steps: list[StepResponse] = Field(default_factory=list)

    def sorted_steps(self) -> list[StepResponse]:
        return sorted(self.steps, key=lambda s: s.ordinal)


class NewUser(WireModel):
    username: str
    password: str
    name: str


class TokenResponse(WireModel):
    token: str


class AuthUser(BaseModel):
    username: str
    token: str
