"""
Type descriptors: the only place that introspects Python annotations.

``describe`` turns an annotation (``int``, ``list[Foo]``, ``dict[str, Bar]``,
``Box[int] | None``, a pydantic model, an Enum ...) into an immutable
``TypeDescriptor`` that the schema repository classifies. Descriptors compare
and hash by their canonical ``type_key``, so independently described
annotations of the same type are interchangeable.
"""
import collections.abc as abc
import datetime
import decimal
import types
import uuid
from enum import Enum
from typing import Annotated, Any, NewType, TypeVar, Union, get_args, get_origin

from .metadata import Float32, Int16, Int64
from .models.common import FieldType


class TypeKind(str, Enum):
    PRIMITIVE = "primitive"
    ENUM = "enum"
    OBJECT = "object"
    ARRAY = "array"
    MAP = "map"
    OPTIONAL = "optional"
    ANY = "any"


# Display name and wire kind for scalar types.
PRIMITIVES: dict[Any, tuple[str, FieldType]] = {
    bool: ("Boolean", FieldType.BOOLEAN),
    int: ("Integer", FieldType.INT32),
    Int16: ("Short", FieldType.INT32),
    Int64: ("Long", FieldType.INT64),
    float: ("Double", FieldType.DOUBLE),
    Float32: ("Float", FieldType.FLOAT),
    str: ("String", FieldType.STRING),
    bytes: ("Bytes", FieldType.STRING),
    datetime.datetime: ("DateTime", FieldType.STRING),
    datetime.date: ("Date", FieldType.STRING),
    datetime.time: ("Time", FieldType.STRING),
    decimal.Decimal: ("Decimal", FieldType.STRING),
    uuid.UUID: ("UUID", FieldType.STRING),
}

_ARRAY_ORIGINS = (
    abc.Iterable,
    abc.Collection,
    abc.Sequence,
    abc.MutableSequence,
    abc.Set,
    abc.MutableSet,
)
_ARRAY_CLASSES = (list, tuple, set, frozenset, abc.Sequence, abc.Set)


class TypeDescriptor:
    """Canonical, immutable view of a type."""

    __slots__ = ("kind", "raw", "args", "source", "type_key", "simple_name")

    def __init__(self, kind: TypeKind, raw: Any = None, args: tuple["TypeDescriptor", ...] = (), source: Any = None):
        self.kind = kind
        self.raw = raw
        self.args = tuple(args)
        self.source = raw if source is None else source
        self.type_key = self._compute_key()
        self.simple_name = self._compute_simple_name()

    @classmethod
    def optional_of(cls, inner: Any) -> "TypeDescriptor":
        """Wraps a type in one level of optionality, even if it is already optional."""
        return cls(TypeKind.OPTIONAL, None, (describe(inner),))

    @property
    def inner(self) -> "TypeDescriptor":
        return self._arg(TypeKind.OPTIONAL, 0)

    @property
    def element(self) -> "TypeDescriptor":
        return self._arg(TypeKind.ARRAY, 0)

    @property
    def key_type(self) -> "TypeDescriptor":
        return self._arg(TypeKind.MAP, 0)

    @property
    def value_type(self) -> "TypeDescriptor":
        return self._arg(TypeKind.MAP, 1)

    @property
    def primitive_type(self) -> FieldType:
        if self.kind is not TypeKind.PRIMITIVE:
            raise AttributeError(f"{self.simple_name} is not a primitive type")
        return PRIMITIVES[self.raw][1]

    def _arg(self, kind: TypeKind, index: int) -> "TypeDescriptor":
        if self.kind is not kind:
            raise AttributeError(f"{self.simple_name} is not a {kind.value} type")
        return self.args[index]

    def _compute_key(self) -> str:
        if self.kind is TypeKind.ANY:
            return "any"
        if self.kind is TypeKind.ARRAY:
            return f"array[{self.element.type_key}]"
        if self.kind is TypeKind.MAP:
            return f"map[{self.key_type.type_key},{self.value_type.type_key}]"
        if self.kind is TypeKind.OPTIONAL:
            return f"optional[{self.inner.type_key}]"
        key = f"{getattr(self.raw, '__module__', '')}.{getattr(self.raw, '__qualname__', repr(self.raw))}"
        if self.args:
            key += "[" + ",".join(arg.type_key for arg in self.args) + "]"
        return key

    def _compute_simple_name(self) -> str:
        if self.kind is TypeKind.ANY:
            return "Any"
        if self.kind is TypeKind.PRIMITIVE:
            return PRIMITIVES[self.raw][0]
        if self.kind is TypeKind.ARRAY:
            return f"{self.element.simple_name}Collection"
        if self.kind is TypeKind.MAP:
            return f"Map_{self.key_type.simple_name}_{self.value_type.simple_name}"
        if self.kind is TypeKind.OPTIONAL:
            return self.inner.simple_name
        return "_".join([self.raw.__name__, *(arg.simple_name for arg in self.args)])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeDescriptor):
            return NotImplemented
        return self.type_key == other.type_key

    def __hash__(self) -> int:
        return hash(self.type_key)

    def __repr__(self) -> str:
        return f"TypeDescriptor({self.kind.value}, {self.type_key})"


ANY_TYPE = TypeDescriptor(TypeKind.ANY)


def describe(annotation: Any) -> TypeDescriptor:
    """Builds the descriptor for an annotation; unrecognised constructs describe as ``any``."""
    if isinstance(annotation, TypeDescriptor):
        return annotation
    if annotation is Any or annotation is object or isinstance(annotation, TypeVar):
        return ANY_TYPE

    origin = get_origin(annotation)
    if origin is Annotated:
        return describe(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        return _describe_union(get_args(annotation))
    if origin is None:
        return _describe_class(annotation)
    return _describe_subscription(annotation, origin, get_args(annotation))


def _describe_union(members: tuple[Any, ...]) -> TypeDescriptor:
    present = [member for member in members if member is not type(None)]
    if len(present) == 1 and len(present) < len(members):
        return TypeDescriptor(TypeKind.OPTIONAL, None, (describe(present[0]),))
    # Heterogeneous unions have no single wire shape.
    return ANY_TYPE


def _describe_class(annotation: Any) -> TypeDescriptor:
    if annotation in PRIMITIVES:
        return TypeDescriptor(TypeKind.PRIMITIVE, annotation)
    if isinstance(annotation, NewType):
        return describe(annotation.__supertype__)
    if not isinstance(annotation, type):
        return ANY_TYPE
    if issubclass(annotation, Enum):
        return TypeDescriptor(TypeKind.ENUM, annotation)
    for base in annotation.__mro__[1:]:
        if base in PRIMITIVES:
            return TypeDescriptor(TypeKind.PRIMITIVE, base)

    generic_metadata = getattr(annotation, "__pydantic_generic_metadata__", None)
    if generic_metadata and generic_metadata.get("origin") is not None:
        return _describe_generic_object(generic_metadata["origin"], generic_metadata["args"], annotation)

    if issubclass(annotation, abc.Mapping):
        key, value = _inherited_arguments(annotation, abc.Mapping, 2)
        return TypeDescriptor(TypeKind.MAP, annotation, (describe(key), describe(value)))
    if issubclass(annotation, _ARRAY_CLASSES):
        (element,) = _inherited_arguments(annotation, abc.Iterable, 1)
        return TypeDescriptor(TypeKind.ARRAY, annotation, (describe(element),))
    return TypeDescriptor(TypeKind.OBJECT, annotation)


def _describe_subscription(annotation: Any, origin: Any, args: tuple[Any, ...]) -> TypeDescriptor:
    if not isinstance(origin, type):
        # Literal, Callable, ClassVar and friends
        return ANY_TYPE
    if issubclass(origin, abc.Mapping):
        key, value = args if len(args) == 2 else (Any, Any)
        return TypeDescriptor(TypeKind.MAP, origin, (describe(key), describe(value)), annotation)
    if origin is tuple:
        element = args[0] if args and (len(set(args) - {Ellipsis}) == 1) else Any
        return TypeDescriptor(TypeKind.ARRAY, origin, (describe(element),), annotation)
    if origin in _ARRAY_ORIGINS or issubclass(origin, _ARRAY_CLASSES):
        return TypeDescriptor(TypeKind.ARRAY, origin, (describe(args[0] if args else Any),), annotation)
    if issubclass(origin, Enum):
        return TypeDescriptor(TypeKind.ENUM, origin)
    return _describe_generic_object(origin, args, annotation)


def _describe_generic_object(origin: type, args: tuple[Any, ...], source: Any) -> TypeDescriptor:
    if all(isinstance(arg, TypeVar) for arg in args):
        return TypeDescriptor(TypeKind.OBJECT, origin, (), source)
    return TypeDescriptor(TypeKind.OBJECT, origin, tuple(describe(arg) for arg in args), source)


def _inherited_arguments(cls: type, generic_base: type, count: int) -> tuple[Any, ...]:
    """Finds the arguments a class binds on a parameterized container base, e.g. ``class Tags(list[str])``."""
    for klass in cls.__mro__:
        for base in klass.__dict__.get("__orig_bases__", ()):
            base_origin = get_origin(base)
            if isinstance(base_origin, type) and issubclass(base_origin, generic_base):
                base_args = get_args(base)
                if len(base_args) == count:
                    return base_args
    return (Any,) * count


def type_bindings(descriptor: TypeDescriptor) -> dict[TypeVar, Any]:
    """Maps the type variables visible in a class to the annotations bound to them."""
    raw = descriptor.raw
    bindings: dict[TypeVar, Any] = {}
    source_args = get_args(descriptor.source)
    for parameter, argument in zip(getattr(raw, "__parameters__", ()), source_args):
        bindings[parameter] = argument

    for klass in getattr(raw, "__mro__", ()):
        for base in klass.__dict__.get("__orig_bases__", ()):
            base_origin = get_origin(base)
            for parameter, argument in zip(getattr(base_origin, "__parameters__", ()), get_args(base)):
                bindings.setdefault(parameter, substitute(argument, bindings))
    return bindings


def substitute(hint: Any, bindings: dict[TypeVar, Any]) -> Any:
    """Replaces bound type variables inside an annotation."""
    if isinstance(hint, TypeVar):
        return bindings.get(hint, hint)
    parameters = getattr(hint, "__parameters__", ())
    if parameters and get_origin(hint) is not None and any(p in bindings for p in parameters):
        return hint[tuple(bindings.get(p, p) for p in parameters)]
    return hint
