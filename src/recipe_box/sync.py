from __future__ import annotations
import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, Union
from pydantic import ValidationError as PydanticValidationError
from recipe_box.case import camel_keys, snake_to_camel
from recipe_box.client import SessionClient
from recipe_box.fields import FieldArray, OrdinalList
from recipe_box.form import strip_empty
from recipe_box.models import IngredientForm, RecipeForm, RecipeResponse, StepForm

logger = logging.getLogger(__name__)

FormState = Union[RecipeForm, Mapping[str, Any]]


class ValidationError(Exception):
    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


def _positive(value: Any) -> bool:
    return value is not None and value > 0


def validate_recipe(form: RecipeForm) -> list[str]:
    errors: list[str] = []
    if not form.title:
        errors.append("Title is required.")
    for label, value in (
        ("Prep time", form.prep_time),
        ("Cook time", form.cook_time),
        ("Inactive time", form.inactive_time),
    ):
        if value is not None and value < 0:
            errors.append(f"{label} cannot be negative.")
    if not _positive(form.yield_quantity):
        errors.append("Yield quantity must be a positive number.")
    if not form.yield_units:
        errors.append("Yield units are required.")
    for i, ingredient in enumerate(form.ingredients, start=1):
        if not ingredient.ingredient:
            errors.append(f"Ingredient {i}: name is required.")
        if not _positive(ingredient.quantity):
            errors.append(f"Ingredient {i}: quantity must be a positive number.")
        if not ingredient.units:
            errors.append(f"Ingredient {i}: units are required.")
    for i, step in enumerate(sorted(form.steps, key=lambda s: s.ordinal), start=1):
        if not step.instruction:
            errors.append(f"Step {i}: instruction is required.")
    return errors


def _field_label(loc: tuple) -> str:
    return ".".join(snake_to_camel(p) if isinstance(p, str) else str(p + 1) for p in loc)


def form_from_state(state: Mapping[str, Any]) -> RecipeForm:
    """Build a RecipeForm, reporting values of the wrong type as ValidationError."""
    try:
        return RecipeForm.model_validate(state)
    except PydanticValidationError as e:
        raise ValidationError([f"{_field_label(err['loc'])}: {err['msg']}" for err in e.errors()]) from e


def _as_form(form: FormState) -> RecipeForm:
    if isinstance(form, RecipeForm):
        return form
    return form_from_state(form)


class RecipeEditSession:
    """One recipe being edited: the detail fields plus its two child lists."""

    def __init__(self, form: RecipeForm | None = None):
        form = form or RecipeForm()
        self.details = form.model_copy(update={"ingredients": [], "steps": []})
        self.ingredients: FieldArray[IngredientForm] = FieldArray(
            i.model_copy() for i in form.ingredients
        )
        self.steps: OrdinalList[StepForm] = OrdinalList(s.model_copy() for s in form.steps)

    @property
    def recipe_id(self) -> Optional[int]:
        return self.details.id

    def add_ingredient(self, ingredient: IngredientForm | None = None) -> IngredientForm:
        ingredient = ingredient or IngredientForm()
        self.ingredients.append(ingredient)
        return ingredient

    def remove_ingredient(self, index: int) -> IngredientForm:
        return self.ingredients.remove(index)

    def add_step(self, instruction: str | None = None) -> StepForm:
        step = StepForm(instruction=instruction)
        self.steps.append(step)
        return step

    def remove_last_step(self) -> StepForm:
        return self.steps.remove_last()

    def remove_step(self, position: int) -> StepForm:
        return self.steps.remove_at(position)

    def snapshot(self) -> RecipeForm:
        return self.details.model_copy(
            update={
                "ingredients": [i.model_copy() for i in self.ingredients],
                "steps": [s.model_copy() for s in self.steps],
            }
        )


class RecipeSyncService:
    def __init__(self, client: SessionClient, on_saved: Optional[Callable[[int], None]] = None):
        self.client = client
        self.on_saved = on_saved

    def to_wire_payload(self, form: FormState) -> dict[str, Any]:
        """Project form state onto the wire: drop empty fields, snake_case keys."""
        state = _as_form(form).to_form_state()
        return self.client.encode_outbound(strip_empty(state))

    def from_wire_response(self, wire: Mapping[str, Any]) -> RecipeForm:
        return RecipeForm.model_validate(camel_keys(wire))

    def edit(self, form: RecipeForm | None = None) -> RecipeEditSession:
        return RecipeEditSession(form)

    async def submit(self, form: FormState) -> int:
        recipe = _as_form(form)
        errors = validate_recipe(recipe)
        if errors:
            raise ValidationError(errors)

        payload = self.to_wire_payload(recipe)
        if recipe.id is not None:
            data = await self.client.update_recipe(recipe.id, payload)
        else:
            data = await self.client.create_recipe(payload)
        saved = RecipeResponse.model_validate(data)
        logger.info("Saved recipe %s", saved.id)
        if self.on_saved is not None:
            self.on_saved(saved.id)
        return saved.id

    async def fetch(self, recipe_id: int) -> RecipeForm:
        return self.from_wire_response(await self.client.get_recipe(recipe_id))

    async def fetch_detail(self, recipe_id: int) -> RecipeResponse:
        return RecipeResponse.model_validate(await self.client.get_recipe(recipe_id))

    async def fetch_all(self) -> list[RecipeResponse]:
        return await self.client.get_recipes()
