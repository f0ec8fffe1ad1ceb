from __future__ import annotations

import pytest
from pydantic import BaseModel, Field

from formparams.backends import PydanticSchema, error_messages
from formparams.exceptions import UnknownFieldError
from formparams.form_validation import (
    FormValidationController,
    apply_field_result,
    initial_state,
    reconcile,
    use_form_validation,
)
from formparams.typing.models import Control, FormControls, FormValidationState


class Address(BaseModel):
    street: str
    city: str


class Shipping(BaseModel):
    address: Address
    tags: list[str]


class Signup(BaseModel):
    name: str = Field(
        min_length=3,
        max_length=6,
        json_schema_extra=error_messages(too_small="Too short", too_big="Too long"),
    )
    favorites: list[str]
    nickname: str | None = None


def _controls(name: str = "abcd", *checked: str) -> FormControls:
    controls = [Control(name="name", value=name)]
    controls.extend(
        Control(name="favorites", value=food, type="checkbox", checked=food in checked)
        for food in ("Pizza", "Tacos", "Sushi")
    )
    return FormControls(controls=controls)


def test_initial_state_lists_untouched_fields() -> None:
    state = initial_state(PydanticSchema(Signup))

    assert state.success is False
    assert list(state.field) == ["name", "favorites", "nickname"]
    assert state.field["name"].touched is False
    assert state.field["name"].success is False
    assert state.field["name"].required is True
    assert state.field["nickname"].required is False


def test_reconcile_marks_server_errors_touched() -> None:
    state = reconcile(initial_state(PydanticSchema(Signup)), {"favorites": "Required", "name": None})

    assert state.field["favorites"].touched is True
    assert state.field["favorites"].error == "Required"
    assert state.field["favorites"].success is False
    assert state.field["name"].touched is False
    assert state.field["name"].success is True
    assert state.success is False


def test_apply_field_result_recomputes_form_success() -> None:
    state = reconcile(initial_state(PydanticSchema(Signup)), {"favorites": "Required"})

    state = apply_field_result(state, "favorites", value=["Pizza"], error=None)

    assert state.field["favorites"].value == ["Pizza"]
    assert state.field["favorites"].touched is True
    assert state.success is True


def test_validate_reports_field_error() -> None:
    controller = use_form_validation(Signup)

    state = controller.validate("name", "ab")

    assert state.field["name"].touched is True
    assert state.field["name"].success is False
    assert state.field["name"].error == "Too short"
    assert state.field["name"].value == "ab"
    assert state.field["favorites"].touched is False
    assert state.success is False
    assert controller.validation is state


def test_validate_ignores_errors_of_other_fields() -> None:
    controller = use_form_validation(Signup)

    state = controller.validate("name", "abcd")

    assert state.field["name"].success is True
    assert state.field["name"].error is None
    assert state.field["favorites"].error is None


def test_validate_empty_value_is_required_error() -> None:
    controller = use_form_validation(Signup)

    state = controller.validate("name", "")

    assert state.field["name"].error == "Required"
    assert state.field["name"].value is None


def test_revalidate_skips_untouched_fields() -> None:
    controller = use_form_validation(Signup)
    before = controller.validation

    assert controller.revalidate("name", "ab") is before
    assert controller.validation.field["name"].touched is False


def test_revalidate_updates_touched_fields() -> None:
    controller = use_form_validation(Signup)
    controller.validate("name", "ab")

    state = controller.revalidate("name", "abcdefg")
    assert state.field["name"].error == "Too long"

    state = controller.revalidate("name", "abcd")
    assert state.field["name"].success is True


def test_validate_array_field_reads_checked_controls() -> None:
    controller = use_form_validation(Signup, form=_controls("abcd", "Pizza", "Sushi"))

    state = controller.validate("favorites", "Pizza")

    assert state.field["favorites"].success is True
    assert state.field["favorites"].value == ["Pizza", "Sushi"]


def test_validate_array_field_without_checked_controls() -> None:
    controller = use_form_validation(Signup, form=_controls("abcd"))

    state = controller.validate("favorites")

    assert state.field["favorites"].error == "Required"


def test_validate_reads_bound_form_when_value_missing() -> None:
    controller = FormValidationController(Signup)
    controller.bind_form(_controls("abcdefgh"))

    state = controller.validate("name")

    assert state.field["name"].error == "Too long"
    assert controller.form_ref.current is not None


def test_form_success_once_every_field_succeeds() -> None:
    controller = use_form_validation(Signup, {"favorites": "Required"}, form=_controls("abcd", "Tacos"))

    assert controller.validation.success is False

    state = controller.validate("favorites")

    assert state.success is True
    assert all(field.success for field in state.field.values())


def test_server_errors_seed_state() -> None:
    controller = use_form_validation(Signup, {"favorites": "Required", "name": None})

    assert controller.validation.field["favorites"].error == "Required"
    assert controller.validation.field["favorites"].touched is True
    assert controller.validation.field["name"].success is True


def test_subscribe_and_unsubscribe() -> None:
    controller = use_form_validation(Signup)
    seen: list[FormValidationState] = []
    unsubscribe = controller.subscribe(seen.append)

    controller.validate("name", "ab")
    unsubscribe()
    controller.validate("name", "abcd")

    assert len(seen) == 1
    assert seen[0].field["name"].error == "Too short"


def test_failing_listener_does_not_block_others() -> None:
    controller = use_form_validation(Signup)
    seen: list[FormValidationState] = []

    def _broken(_state: FormValidationState) -> None:
        raise RuntimeError("boom")

    controller.subscribe(_broken)
    controller.subscribe(seen.append)

    state = controller.validate("name", "abcd")

    assert seen == [state]
    assert controller.validation.field["name"].success is True


def test_unknown_field_raises() -> None:
    controller = use_form_validation(Signup)

    with pytest.raises(UnknownFieldError):
        controller.validate("missing", "x")
    with pytest.raises(UnknownFieldError):
        controller.revalidate("missing", "x")


def test_validate_reads_bracketed_and_dotted_controls() -> None:
    form = FormControls(
        controls=[
            Control(name="address.street", value="Main"),
            Control(name="address.city", value="Paris"),
            Control(name="tags[]", value="x", type="checkbox", checked=True),
            Control(name="tags[]", value="y", type="checkbox"),
        ],
    )
    controller = use_form_validation(Shipping, form=form)

    controller.validate("tags", "x")
    state = controller.validate("address")

    assert state.field["tags"].value == ["x"]
    assert state.field["address"].value == {"street": "Main", "city": "Paris"}
    assert state.success is True


def test_validate_nested_object_reports_missing_child() -> None:
    form = FormControls(controls=[Control(name="address.street", value="Main")])
    controller = use_form_validation(Shipping, form=form)

    state = controller.validate("address")

    assert state.field["address"].error == "Required"
