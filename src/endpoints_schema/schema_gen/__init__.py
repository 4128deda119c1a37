"""
Schema generation for Endpoints Schema.

The repository derives Schema objects from types; the discovery writer
renders them as the JSON-Schema-like fragments embedded in an API
discovery document.
"""

from .discovery_writer import write_field, write_schema, write_schemas
from .schema_repository import SchemaRepository

__all__ = [
    "SchemaRepository",
    "write_field",
    "write_schema",
    "write_schemas",
]
