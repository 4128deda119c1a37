"""
Collects the declared properties of an object type together with their
declarative markers (``ApiProperty``, ``Nullable``, ``NonNull``).
"""
import dataclasses
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Iterable, Optional, Union, get_args, get_origin, get_type_hints
import types

from pydantic import BaseModel

from .descriptors import TypeDescriptor, TypeKind, describe, substitute, type_bindings
from .exceptions import UnsupportedTypeError
from .metadata import ApiProperty, NonNull, Nullable


@dataclass(frozen=True)
class PropertyDescriptor:
    name: str
    type: TypeDescriptor
    required: Optional[bool] = None  # explicit ApiProperty override
    nullable: bool = False
    non_null: bool = False
    description: Optional[str] = None

    @property
    def resolved_required(self) -> Optional[bool]:
        """Explicit override, then NonNull, then Nullable; unspecified otherwise."""
        if self.required is not None:
            return self.required
        if self.non_null:
            return True
        if self.nullable:
            return False
        return None


def properties_of(descriptor: TypeDescriptor) -> list[PropertyDescriptor]:
    """Returns the wire properties of an object type in declaration order."""
    source = descriptor.source
    if isinstance(source, type) and issubclass(source, BaseModel):
        return _model_properties(source)

    raw = descriptor.raw
    bindings = type_bindings(descriptor)
    hints = _resolved_hints(raw, raw)

    if dataclasses.is_dataclass(raw):
        names: Iterable[str] = [f.name for f in dataclasses.fields(raw)]
    else:
        names = [name for name, hint in hints.items() if get_origin(hint) is not ClassVar and hint is not ClassVar]

    collected: dict[str, PropertyDescriptor] = {}
    for name in names:
        if name.startswith("_") or name not in hints:
            continue
        _add(collected, _build_property(name, substitute(hints[name], bindings)))

    if not dataclasses.is_dataclass(raw):
        for name, accessor in _declared_properties(raw):
            returns = _resolved_hints(accessor.fget, raw).get("return")
            if returns is None:
                continue
            _add(collected, _build_property(name, substitute(returns, bindings)))
    return list(collected.values())


def _model_properties(model: type[BaseModel]) -> list[PropertyDescriptor]:
    collected: dict[str, PropertyDescriptor] = {}
    for name, info in model.model_fields.items():
        prop = _build_property(info.alias or name, info.annotation, info.metadata, info.description)
        _add(collected, prop)
    return list(collected.values())


def _add(collected: dict[str, PropertyDescriptor], prop: Optional[PropertyDescriptor]) -> None:
    if prop is not None:
        collected[prop.name] = prop


def _declared_properties(raw: type) -> list[tuple[str, property]]:
    found: dict[str, property] = {}
    for klass in reversed(raw.__mro__):
        if klass is object:
            continue
        for name, member in vars(klass).items():
            if isinstance(member, property) and not name.startswith("_") and member.fget is not None:
                found[name] = member
    return list(found.items())


def _resolved_hints(target: Any, owner: type) -> dict[str, Any]:
    try:
        return get_type_hints(target, include_extras=True)
    except (NameError, TypeError) as exc:
        raise UnsupportedTypeError(owner, f"cannot resolve annotations: {exc}") from exc


def _build_property(
    name: str,
    hint: Any,
    markers: Iterable[Any] = (),
    description: Optional[str] = None,
) -> Optional[PropertyDescriptor]:
    markers = [*markers, *_markers_of(hint)]
    overrides = next((marker for marker in markers if isinstance(marker, ApiProperty)), ApiProperty())
    if overrides.ignored:
        return None

    type_ = describe(hint)
    return PropertyDescriptor(
        name=overrides.name or name,
        type=type_,
        required=overrides.required,
        nullable=type_.kind is TypeKind.OPTIONAL or any(marker is Nullable for marker in markers),
        non_null=any(marker is NonNull for marker in markers),
        description=overrides.description or description,
    )


def _markers_of(hint: Any) -> list[Any]:
    origin = get_origin(hint)
    if origin is Annotated:
        _, *metadata = get_args(hint)
        return metadata
    if origin is Union or origin is types.UnionType:
        return [marker for member in get_args(hint) for marker in _markers_of(member)]
    return []
