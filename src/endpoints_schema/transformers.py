"""
Transformers substitute a different wire type for a source type.

A transformer declares its source and target types through its
parameterized base::

    class MoneyTransformer(Transformer[Money, str]):
        def transform_to(self, value: Money) -> str: ...
        def transform_from(self, value: str) -> Money: ...

Schemas are then derived (and named) from the target type.
"""
import abc
from typing import Any, Generic, Iterable, Optional, TypeVar, Union, get_args, get_origin

import structlog

from .descriptors import TypeDescriptor, describe
from .exceptions import TransformerConfigurationError

logger = structlog.get_logger(__name__)

S = TypeVar("S")
T = TypeVar("T")
_C = TypeVar("_C", bound=type)


class Transformer(abc.ABC, Generic[S, T]):
    """Bidirectional mapping between a source type ``S`` and its wire type ``T``."""

    @abc.abstractmethod
    def transform_to(self, value: S) -> T:
        ...

    @abc.abstractmethod
    def transform_from(self, value: T) -> S:
        ...

    @classmethod
    def type_arguments(cls) -> tuple[Any, Any]:
        for klass in cls.__mro__:
            for base in klass.__dict__.get("__orig_bases__", ()):
                if get_origin(base) is Transformer:
                    source, target = get_args(base)
                    if isinstance(source, TypeVar) or isinstance(target, TypeVar):
                        break
                    return source, target
        raise TransformerConfigurationError(cls, "must subclass Transformer[Source, Target] with concrete types")

    @classmethod
    def source_type(cls) -> TypeDescriptor:
        return describe(cls.type_arguments()[0])

    @classmethod
    def target_type(cls) -> TypeDescriptor:
        return describe(cls.type_arguments()[1])


TransformerLike = Union[Transformer, type[Transformer]]


def api_transformer(transformer: _C) -> _C:
    """Transformer class decorator: binds the transformer to its source class in every API."""
    source = describe(transformer.type_arguments()[0])
    if not isinstance(source.raw, type):
        raise TransformerConfigurationError(transformer, "source type must be a class")
    declared = source.raw.__dict__.get("__api_transformers__", ())
    try:
        source.raw.__api_transformers__ = (*declared, transformer)
    except TypeError as exc:
        raise TransformerConfigurationError(transformer, "source type must be a user-defined class") from exc
    return transformer


class TransformerRegistry:
    """Source type -> transformer lookup for one API configuration."""

    def __init__(self, transformers: Iterable[TransformerLike] = ()):
        self._by_source: dict[str, Transformer] = {}
        for transformer in transformers:
            self.register(transformer)

    def register(self, transformer: TransformerLike) -> None:
        instance = transformer() if isinstance(transformer, type) else transformer
        if not isinstance(instance, Transformer):
            raise TransformerConfigurationError(transformer, "is not a Transformer")
        source = instance.source_type()
        self._by_source[source.type_key] = instance
        logger.debug(
            "Registered transformer.",
            transformer=type(instance).__name__,
            source=source.simple_name,
            target=instance.target_type().simple_name,
        )

    def transformer_for(self, type_: Any) -> Optional[Transformer]:
        descriptor = describe(type_)
        registered = self._by_source.get(descriptor.type_key)
        if registered is not None:
            return registered
        if isinstance(descriptor.raw, type):
            for declared in descriptor.raw.__dict__.get("__api_transformers__", ()):
                if declared.source_type() == descriptor:
                    return declared()
        return None

    def target_for(self, type_: Any) -> Optional[TypeDescriptor]:
        transformer = self.transformer_for(type_)
        return transformer.target_type() if transformer is not None else None

    def __len__(self) -> int:
        return len(self._by_source)

    def __contains__(self, type_: Any) -> bool:
        return self.transformer_for(type_) is not None
