from __future__ import annotations
from typing import Union
from recipe_box.models import IngredientForm, IngredientResponse, RecipeResponse


def format_duration(seconds: int) -> str:
    return f"{seconds} seconds"


def format_quantity(value: float) -> str:
    return f"{value:g}"


def format_ingredient(ingredient: Union[IngredientResponse, IngredientForm]) -> str:
    text = f"{format_quantity(ingredient.quantity)} {ingredient.units} {ingredient.ingredient}"
    if ingredient.preparation:
        text += f", {ingredient.preparation}"
    return text


def format_meta(recipe: RecipeResponse) -> list[tuple[str, str]]:
    rows: list[tuple[str, str]] = []
    if recipe.author is not None:
        rows.append(("Author", recipe.author.name))
    for label, value in (
        ("Prep Time", recipe.prep_time),
        ("Cook Time", recipe.cook_time),
        ("Inactive Time", recipe.inactive_time),
    ):
        if value is not None:
            rows.append((label, format_duration(value)))
    rows.append(("Yields", f"{format_quantity(recipe.yield_quantity)} {recipe.yield_units}"))
    return rows


def format_recipe(recipe: RecipeResponse) -> str:
    lines: list[str] = [recipe.title, "=" * len(recipe.title)]
    if recipe.description:
        lines.append(recipe.description)
    lines.append("")
    for label, value in format_meta(recipe):
        lines.append(f"{label}: {value}")

    lines.append("\nIngredients")
    lines.append("-----------")
    for ingredient in recipe.ingredients:
        lines.append(f"• {format_ingredient(ingredient)}")

    lines.append("\nSteps")
    lines.append("-----")
    for i, step in enumerate(recipe.sorted_steps(), start=1):
        lines.append(f"{i}. {step.instruction}")

    return "\n".join(lines).strip()
