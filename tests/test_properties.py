"""
Unit tests for property discovery.
"""
from typing import List

import pytest

from endpoints_schema import CollectionResponse, FieldType, UnsupportedTypeError
from endpoints_schema.descriptors import TypeKind, describe
from endpoints_schema.properties import properties_of

from tests.sample_types import (
    Account,
    IntBox,
    Page,
    Parameterized,
    RequiredProperties,
    Widget,
)


def by_name(type_):
    return {prop.name: prop for prop in properties_of(describe(type_))}


def test_declaration_order_is_kept():
    names = [prop.name for prop in properties_of(describe(RequiredProperties))]
    assert names[:3] == ["undefined", "api_property_undefined", "api_property_required"]


def test_type_variables_are_substituted():
    props = by_name(Parameterized[int])
    assert props["foo"].type == describe(int)
    assert props["next"].type == describe(Parameterized[int])


def test_inherited_type_arguments_are_substituted():
    assert by_name(IntBox)["content"].type == describe(int)


def test_api_property_renames():
    props = by_name(CollectionResponse[str])
    assert list(props) == ["items", "nextPageToken"]
    assert props["items"].type == describe(List[str])


def test_pydantic_model_properties():
    props = by_name(Account)
    assert "internal_note" not in props
    assert props["account_id"].resolved_required is True
    assert props["display_name"].resolved_required is False
    assert props["display_name"].description == "Name shown to other users"
    assert props["balance"].type.primitive_type is FieldType.INT64
    assert props["tags"].type.kind is TypeKind.ARRAY
    assert props["colour"].type.kind is TypeKind.ENUM


def test_concrete_pydantic_generic_properties():
    props = by_name(Page[int])
    assert props["entries"].type == describe(List[int])
    assert props["total"].resolved_required is None


def test_plain_class_properties():
    props = by_name(Widget)
    assert set(props) == {"label", "size"}
    assert props["size"].resolved_required is True


def test_unresolvable_annotations_are_rejected():
    class Dangling:
        value: "DoesNotExist"  # noqa: F821

    with pytest.raises(UnsupportedTypeError, match="cannot resolve annotations"):
        properties_of(describe(Dangling))
