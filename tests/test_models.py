from recipe_box.models import (
    AuthUser, IngredientForm, RecipeForm, RecipeResponse, StepForm, TokenResponse
)

NAN = float("nan")


def test_form_accepts_camel_case_state():
    form = RecipeForm.model_validate({"title": "Soup", "prepTime": 300, "yieldUnits": "bowls"})
    assert form.prep_time == 300
    assert form.yield_units == "bowls"


def test_form_accepts_field_names():
    form = RecipeForm(title="Soup", cook_time=60)
    assert form.cook_time == 60


def test_blank_text_becomes_none():
    form = RecipeForm.model_validate({"title": "", "description": "  ", "yieldUnits": ""})
    assert form.title is None
    assert form.description is None
    assert form.yield_units is None


def test_nan_numbers_become_none():
    form = RecipeForm.model_validate({"prepTime": NAN, "yieldQuantity": NAN})
    assert form.prep_time is None
    assert form.yield_quantity is None
    assert IngredientForm(quantity=NAN).quantity is None


def test_integer_quantities_stay_integers():
    assert IngredientForm(quantity=2).quantity == 2
    assert isinstance(IngredientForm(quantity=2).quantity, int)
    assert IngredientForm(quantity=1.5).quantity == 1.5


def test_to_form_state_uses_camel_case():
    form = RecipeForm(title="Soup", yield_quantity=4, steps=[StepForm(ordinal=0, instruction="Boil")])
    state = form.to_form_state()
    assert state["yieldQuantity"] == 4
    assert state["steps"] == [{"id": None, "ordinal": 0, "instruction": "Boil"}]


def test_form_ignores_author():
    form = RecipeForm.model_validate({"title": "Soup", "author": {"id": 1, "name": "Ann"}})
    assert "author" not in form.to_form_state()


def test_recipe_response_sorted_steps():
    recipe = RecipeResponse.model_validate(
        {
            "id": 1,
            "title": "Soup",
            "yieldQuantity": 2,
            "yieldUnits": "bowls",
            "steps": [
                {"ordinal": 2, "instruction": "Serve"},
                {"ordinal": 0, "instruction": "Chop"},
                {"ordinal": 1, "instruction": "Boil"},
            ],
        }
    )
    assert [s.instruction for s in recipe.sorted_steps()] == ["Chop", "Boil", "Serve"]
    assert recipe.author is None


def test_auth_user_json_roundtrip():
    user = AuthUser(username="ann", token="abc")
    assert AuthUser.model_validate_json(user.model_dump_json()) == user


def test_token_response():
    assert TokenResponse.model_validate({"token": "t"}).token == "t"
