"""
Declarative markers consumed when describing properties, enums and resources.

Property markers are attached with ``typing.Annotated``::

    nickname: Annotated[str, ApiProperty(name="nickName"), Nullable]
"""
from dataclasses import dataclass
from typing import Callable, Mapping, NewType, Optional, TypeVar

Int16 = NewType("Int16", int)
Int64 = NewType("Int64", int)
Float32 = NewType("Float32", float)

_C = TypeVar("_C", bound=type)


@dataclass(frozen=True)
class ApiProperty:
    """Per-property overrides."""
    name: Optional[str] = None
    required: Optional[bool] = None
    description: Optional[str] = None
    ignored: bool = False


class NullabilityMarker:
    def __init__(self, label: str):
        self.label = label

    def __repr__(self) -> str:
        return self.label


Nullable = NullabilityMarker("Nullable")
NonNull = NullabilityMarker("NonNull")


def api_enum(
    *,
    names: Optional[Mapping[str, str]] = None,
    descriptions: Optional[Mapping[str, str]] = None,
) -> Callable[[_C], _C]:
    """Declares wire names and descriptions for enum constants, keyed by member name."""
    def decorate(cls: _C) -> _C:
        cls.__api_enum_names__ = dict(names or {})
        cls.__api_enum_descriptions__ = dict(descriptions or {})
        return cls
    return decorate


def api_resource(*, description: Optional[str] = None) -> Callable[[_C], _C]:
    """Attaches a schema description to a class."""
    def decorate(cls: _C) -> _C:
        cls.__api_description__ = description
        return cls
    return decorate


def enum_wire_names(enum_cls: type) -> dict[str, str]:
    return dict(enum_cls.__dict__.get("__api_enum_names__", {}))


def enum_descriptions(enum_cls: type) -> dict[str, str]:
    return dict(enum_cls.__dict__.get("__api_enum_descriptions__", {}))


def resource_description(cls: object) -> Optional[str]:
    if not isinstance(cls, type):
        return None
    return cls.__dict__.get("__api_description__")
