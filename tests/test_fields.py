import pytest
from recipe_box.fields import FieldArray, OrdinalList
from recipe_box.models import IngredientForm, StepForm


def steps(*pairs):
    return [StepForm(ordinal=o, instruction=text) for o, text in pairs]


def instructions(lst):
    return [s.instruction for s in lst]


def test_append_only_renders_in_insertion_order():
    lst = OrdinalList()
    for text in ["Chop", "Boil", "Serve"]:
        lst.append(StepForm(instruction=text))
    assert instructions(lst) == ["Chop", "Boil", "Serve"]
    assert lst.ordinals() == [0, 1, 2]


def test_append_assigns_ordinal_from_length():
    lst = OrdinalList(steps((0, "Chop")))
    step = StepForm(ordinal=99, instruction="Boil")
    lst.append(step)
    assert step.ordinal == 1


def test_loaded_steps_render_by_ordinal():
    lst = OrdinalList(steps((0, "Chop"), (2, "Serve"), (1, "Boil")))
    assert instructions(lst) == ["Chop", "Boil", "Serve"]


def test_loaded_gaps_are_closed():
    lst = OrdinalList(steps((3, "Serve"), (0, "Chop")))
    assert lst.ordinals() == [0, 1]
    lst.append(StepForm(instruction="Eat"))
    assert instructions(lst) == ["Chop", "Serve", "Eat"]
    assert lst.ordinals() == [0, 1, 2]


def test_remove_last_drops_highest_ordinal():
    lst = OrdinalList(steps((1, "Boil"), (0, "Chop"), (2, "Serve")))
    removed = lst.remove_last()
    assert removed.instruction == "Serve"
    assert instructions(lst) == ["Chop", "Boil"]
    lst.append(StepForm(instruction="Eat"))
    assert instructions(lst) == ["Chop", "Boil", "Eat"]
    assert lst.ordinals() == [0, 1, 2]


def test_remove_last_on_empty_raises():
    with pytest.raises(IndexError):
        OrdinalList().remove_last()


def test_remove_at_renumbers_remaining_entries():
    lst = OrdinalList(steps((0, "Chop"), (1, "Boil"), (2, "Serve")))
    removed = lst.remove_at(1)
    assert removed.instruction == "Boil"
    assert instructions(lst) == ["Chop", "Serve"]
    assert lst.ordinals() == [0, 1]


def test_remove_at_out_of_range_raises():
    lst = OrdinalList(steps((0, "Chop")))
    with pytest.raises(IndexError):
        lst.remove_at(1)


def test_keys_are_never_reused():
    lst = OrdinalList()
    first = lst.append(StepForm(instruction="Chop"))
    lst.remove_last()
    second = lst.append(StepForm(instruction="Boil"))
    assert first.key != second.key


def test_keys_are_stable_across_removals():
    lst = OrdinalList(steps((0, "Chop"), (1, "Boil"), (2, "Serve")))
    serve_key = lst.entries()[2].key
    lst.remove_at(0)
    assert lst.find(serve_key).value.instruction == "Serve"
    assert lst.find(serve_key).value.ordinal == 1


def test_field_array_keeps_insertion_order():
    arr = FieldArray([IngredientForm(ingredient="salt"), IngredientForm(ingredient="leek")])
    arr.append(IngredientForm(ingredient="water"))
    removed = arr.remove(0)
    assert removed.ingredient == "salt"
    assert [i.ingredient for i in arr] == ["leek", "water"]
    assert len(arr) == 2


def test_field_array_remove_out_of_range():
    with pytest.raises(IndexError):
        FieldArray().remove(0)


def test_find_unknown_key_returns_none():
    assert FieldArray().find(7) is None
