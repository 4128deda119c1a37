"""
Unit tests for type descriptors.
"""
import datetime
from typing import Any, Dict, FrozenSet, List, Literal, Optional, Sequence, Set, Tuple, Union

import pytest

from endpoints_schema import CollectionResponse, FieldType, Float32, Int16, Int64
from endpoints_schema.descriptors import ANY_TYPE, TypeDescriptor, TypeKind, describe

from tests.sample_types import (
    K,
    T,
    Account,
    Colour,
    IntBox,
    MyMap,
    MySubMap,
    Page,
    Parameterized,
    SampleEnum,
    Tags,
)


@pytest.mark.parametrize("annotation,name,wire", [
    (bool, "Boolean", FieldType.BOOLEAN),
    (int, "Integer", FieldType.INT32),
    (Int16, "Short", FieldType.INT32),
    (Int64, "Long", FieldType.INT64),
    (float, "Double", FieldType.DOUBLE),
    (Float32, "Float", FieldType.FLOAT),
    (str, "String", FieldType.STRING),
    (bytes, "Bytes", FieldType.STRING),
    (datetime.datetime, "DateTime", FieldType.STRING),
])
def test_primitives(annotation, name, wire):
    descriptor = describe(annotation)
    assert descriptor.kind is TypeKind.PRIMITIVE
    assert descriptor.simple_name == name
    assert descriptor.primitive_type is wire


def test_enum_subclassing_str_is_an_enum():
    assert describe(Colour).kind is TypeKind.ENUM
    assert describe(SampleEnum).simple_name == "SampleEnum"


@pytest.mark.parametrize("annotation", [Any, object, T, Union[int, str], Literal["a"]])
def test_any(annotation):
    assert describe(annotation) is ANY_TYPE


@pytest.mark.parametrize("annotation,element", [
    (List[int], "Integer"),
    (list[str], "String"),
    (Sequence[SampleEnum], "SampleEnum"),
    (Set[float], "Double"),
    (FrozenSet[bool], "Boolean"),
    (Tuple[int, ...], "Integer"),
    (tuple[int, int], "Integer"),
    (Tags, "String"),
])
def test_arrays(annotation, element):
    descriptor = describe(annotation)
    assert descriptor.kind is TypeKind.ARRAY
    assert descriptor.element.simple_name == element
    assert descriptor.simple_name == f"{element}Collection"


def test_raw_and_heterogeneous_arrays_hold_any():
    assert describe(list).element is ANY_TYPE
    assert describe(Tuple[int, str]).element is ANY_TYPE


def test_maps():
    descriptor = describe(Dict[str, SampleEnum])
    assert descriptor.kind is TypeKind.MAP
    assert descriptor.key_type == describe(str)
    assert descriptor.value_type == describe(SampleEnum)
    assert descriptor.simple_name == "Map_String_SampleEnum"


def test_map_subclasses_inherit_arguments():
    assert describe(MyMap) == describe(Dict[str, str])
    assert describe(MySubMap).value_type == describe(str)
    assert describe(Dict[K, int]).key_type is ANY_TYPE


def test_optional():
    descriptor = describe(Optional[SampleEnum])
    assert descriptor.kind is TypeKind.OPTIONAL
    assert descriptor.inner == describe(SampleEnum)
    assert describe(SampleEnum | None) == descriptor
    assert descriptor.simple_name == "SampleEnum"


def test_double_optional():
    # typing collapses Optional[Optional[X]], so nesting is explicit
    descriptor = TypeDescriptor.optional_of(Optional[str])
    assert descriptor.inner.kind is TypeKind.OPTIONAL
    assert descriptor.inner.inner == describe(str)
    assert descriptor != describe(Optional[str])


def test_generic_naming():
    assert describe(Parameterized[int]).simple_name == "Parameterized_Integer"
    assert describe(Parameterized[List[str]]).simple_name == "Parameterized_StringCollection"
    assert describe(CollectionResponse[Parameterized[int]]).simple_name == "CollectionResponse_Parameterized_Integer"


def test_unbound_generic_is_raw():
    assert describe(Parameterized[T]) == describe(Parameterized)
    assert describe(Parameterized).simple_name == "Parameterized"


def test_generic_subclass_is_named_after_itself():
    assert describe(IntBox).simple_name == "IntBox"
    assert describe(IntBox).kind is TypeKind.OBJECT


def test_pydantic_models():
    assert describe(Account).kind is TypeKind.OBJECT
    page = describe(Page[int])
    assert page.raw is Page
    assert page.simple_name == "Page_Integer"
    assert page == describe(Page[int])


def test_annotated_is_stripped():
    from typing import Annotated

    assert describe(Annotated[int, "meta"]) == describe(int)


def test_descriptor_accessors_check_kind():
    with pytest.raises(AttributeError):
        describe(int).element
    with pytest.raises(AttributeError):
        describe(List[int]).primitive_type
