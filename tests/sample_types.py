"""Types shared by the test modules (module level so annotations resolve)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, ClassVar, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from endpoints_schema import (
    ApiProperty,
    Int16,
    Int64,
    NonNull,
    Nullable,
    Transformer,
    api_enum,
    api_resource,
    api_transformer,
)

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


@api_enum(names={"VALUE2": "value_2"})
class SampleEnum(Enum):
    VALUE1 = 1
    VALUE2 = 2


@api_enum(descriptions={"RED": "The colour red"})
class Colour(str, Enum):
    RED = "red"
    GREEN = "green"


class Parameterized(Generic[T]):
    foo: T
    next: Parameterized[T]
    test_enum: SampleEnum


class ParameterizedShortTransformer(Transformer[Parameterized[Int16], Parameterized[str]]):
    def transform_to(self, value):
        return Parameterized()

    def transform_from(self, value):
        return Parameterized()


class SelfReferencingObject:
    foo: SelfReferencingObject


class Left:
    right: Right


class Right:
    left: Left


@dataclass
class EnumValue:
    value: SampleEnum


@dataclass
class RequiredProperties:
    undefined: str
    api_property_undefined: Annotated[str, ApiProperty()]
    api_property_required: Annotated[str, ApiProperty(required=True)]
    api_property_not_required: Annotated[str, ApiProperty(required=False)]
    nullable: Annotated[str, Nullable]
    nonnull: Annotated[str, NonNull]
    priority1: Annotated[str, ApiProperty(required=True), Nullable]
    priority2: Annotated[str, NonNull, Nullable]
    priority3: Annotated[str, ApiProperty(required=False), NonNull]


class MyMap(dict[str, str]):
    pass


class MySubMap(MyMap):
    pass


class Tags(list[str]):
    pass


class Money:
    def __init__(self, cents: int):
        self.cents = cents


@api_transformer
class MoneyTransformer(Transformer[Money, str]):
    def transform_to(self, value: Money) -> str:
        return f"{value.cents / 100:.2f}"

    def transform_from(self, value: str) -> Money:
        return Money(round(float(value) * 100))


@dataclass
class Invoice:
    total: Money
    lines: dict[str, Money]


@api_resource(description="A customer account")
class Account(BaseModel):
    account_id: Annotated[str, NonNull]
    display_name: Optional[str] = Field(default=None, description="Name shown to other users")
    balance: Int64 = 0
    tags: list[str] = []
    colour: Colour = Colour.RED
    internal_note: Annotated[str, ApiProperty(ignored=True)] = ""


class Page(BaseModel, Generic[T]):
    entries: list[T]
    total: int


class Widget:
    registry: ClassVar[dict[str, Widget]] = {}
    label: str
    _secret: str

    @property
    def size(self) -> Annotated[int, NonNull]:
        return 1

    @property
    def untyped(self):
        return None


class Box(Generic[T]):
    content: T


class IntBox(Box[int]):
    pass


class Node:
    children: dict[str, Node]
    weights: Optional[list[float]]


@dataclass
class Holder:
    data: dict[str, int]


@dataclass
class Parent:
    child: Child
    bad: dict[int, str]


@dataclass
class Child:
    parent: Parent
