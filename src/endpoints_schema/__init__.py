"""Endpoints Schema - derives discovery-document schemas from Python types.

Given a type annotation (dataclasses, pydantic models, plain annotated
classes, generics, enums, mappings and collections) the schema repository
produces canonical, de-duplicated, named Schema objects scoped to an API.
"""

__version__ = "0.1.0"

from .config import Config, SchemaFlags
from .exceptions import SchemaError, TransformerConfigurationError, UnsupportedTypeError
from .metadata import (
    ApiProperty,
    Float32,
    Int16,
    Int64,
    NonNull,
    Nullable,
    api_enum,
    api_resource,
)
from .models import ANY_SCHEMA, MAP_SCHEMA, ApiConfig, ApiKey, Field, FieldType, Schema, SchemaReference
from .responses import CollectionResponse
from .schema_gen import SchemaRepository
from .transformers import Transformer, TransformerRegistry, api_transformer

__all__ = [
    "ANY_SCHEMA",
    "MAP_SCHEMA",
    "ApiConfig",
    "ApiKey",
    "ApiProperty",
    "CollectionResponse",
    "Config",
    "Field",
    "FieldType",
    "Float32",
    "Int16",
    "Int64",
    "NonNull",
    "Nullable",
    "Schema",
    "SchemaError",
    "SchemaFlags",
    "SchemaReference",
    "SchemaRepository",
    "Transformer",
    "TransformerConfigurationError",
    "TransformerRegistry",
    "UnsupportedTypeError",
    "api_enum",
    "api_resource",
    "api_transformer",
]
