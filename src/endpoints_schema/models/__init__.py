"""
Pydantic models for Endpoints Schema.
"""
from .common import ApiKey, BasePydanticModel, FieldType
from .schema import (
    ANY_SCHEMA,
    ARRAY_UNUSED_MSG,
    MAP_SCHEMA,
    MAP_UNUSED_MSG,
    Field,
    Schema,
    SchemaReference,
)
from ..api_config import ApiConfig

__all__ = [
    "ANY_SCHEMA",
    "ARRAY_UNUSED_MSG",
    "ApiConfig",
    "ApiKey",
    "BasePydanticModel",
    "Field",
    "FieldType",
    "MAP_SCHEMA",
    "MAP_UNUSED_MSG",
    "Schema",
    "SchemaReference",
]
