from __future__ import annotations

import pytest
from pydantic import ValidationError

from formparams.typing.enums import FieldKind, InputType
from formparams.typing.models import (
    Control,
    FieldTypeDescriptor,
    FormControls,
    InputProps,
    ValidationOutcome,
)


def test_validation_outcome_requires_matching_payload() -> None:
    assert ValidationOutcome(success=True, data={"a": 1}).errors is None
    assert ValidationOutcome(success=False, errors={"a": "Required"}).data is None

    with pytest.raises(ValidationError, match="must carry data"):
        ValidationOutcome(success=True, errors={"a": "Required"})
    with pytest.raises(ValidationError, match="must carry errors"):
        ValidationOutcome(success=False, data={"a": 1})


def test_descriptor_unwrap_and_required() -> None:
    leaf = FieldTypeDescriptor(kind=FieldKind.STRING)
    wrapped = FieldTypeDescriptor(
        kind=FieldKind.OPTIONAL,
        inner=FieldTypeDescriptor(kind=FieldKind.DEFAULT, inner=leaf, default="z"),
    )

    assert wrapped.unwrap() is leaf
    assert wrapped.is_required is False
    assert leaf.is_required is True


def test_descriptor_child_follows_arrays_and_objects() -> None:
    city = FieldTypeDescriptor(kind=FieldKind.STRING)
    address = FieldTypeDescriptor(kind=FieldKind.OBJECT, fields={"city": city})
    addresses = FieldTypeDescriptor(kind=FieldKind.ARRAY, inner=address)

    assert addresses.child(0) is address
    assert address.child("city") is city
    assert address.child(0) is None
    assert city.child("x") is None


def test_input_props_attrs_use_html_names() -> None:
    props = InputProps(type=InputType.TEXT, name="a", required=True, min_length=5)

    assert props.to_attrs() == {"type": "text", "name": "a", "required": True, "minLength": 5}


def test_form_controls_collect_checked_and_text_values() -> None:
    form = FormControls(
        controls=[
            Control(name="foods", value="Pizza", type="checkbox", checked=True),
            Control(name="foods", value="Tacos", type="checkbox"),
            Control(name="foods", value=["Sushi", "Ramen"], type="select-multiple"),
            Control(name="name", value="Ada"),
        ],
    )

    assert form.entries_for("foods") == [("foods", "Pizza"), ("foods", "Sushi"), ("foods", "Ramen")]
    assert form.entries_for("name") == [("name", "Ada")]
    assert form.entries_for("missing") == []


def test_form_controls_collect_nested_and_bracketed_names() -> None:
    form = FormControls(
        controls=[
            Control(name="address.street", value="Main"),
            Control(name="address.city", value="Paris"),
            Control(name="addressee", value="Ada"),
            Control(name="tags[]", value="x", type="checkbox", checked=True),
            Control(name="tags[]", value="y", type="checkbox"),
        ],
    )

    assert form.entries_for("address") == [("address.street", "Main"), ("address.city", "Paris")]
    assert form.entries_for("tags") == [("tags[]", "x")]
