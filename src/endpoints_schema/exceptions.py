"""
Exceptions raised while deriving schemas.
"""
from typing import Any


class SchemaError(Exception):
    """Base class for all schema derivation errors."""
    pass


class UnsupportedTypeError(SchemaError, ValueError):
    """Raised when a type cannot be represented as a standalone schema,
    e.g. a primitive root type or a map keyed by a non-string type."""
    def __init__(self, type_: Any, reason: str):
        super().__init__(f"Unsupported type {type_!r}: {reason}")
        self.type_ = type_
        self.reason = reason


class TransformerConfigurationError(SchemaError):
    """Raised when a transformer does not declare its source and target types."""
    def __init__(self, transformer: Any, message: str):
        super().__init__(f"Invalid transformer {transformer!r}: {message}")
        self.transformer = transformer
