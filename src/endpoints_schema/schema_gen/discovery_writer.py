"""
Renders Schema objects as discovery-document JSON.
"""
from typing import TYPE_CHECKING, Any, Dict

import structlog

from ..exceptions import SchemaError
from ..models import ANY_SCHEMA, MAP_SCHEMA, ApiKey, Field, FieldType, Schema

if TYPE_CHECKING:
    from .schema_repository import SchemaRepository

logger = structlog.get_logger(__name__)

_SCALAR_JSON: Dict[FieldType, Dict[str, str]] = {
    FieldType.BOOLEAN: {"type": "boolean"},
    FieldType.INT32: {"type": "integer", "format": "int32"},
    FieldType.INT64: {"type": "string", "format": "int64"},
    FieldType.FLOAT: {"type": "number", "format": "float"},
    FieldType.DOUBLE: {"type": "number", "format": "double"},
    FieldType.STRING: {"type": "string"},
}


def write_field(field: Field) -> Dict[str, Any]:
    """
    Raises:
        SchemaError: If an object or enum field references a schema that is
            not registered in its API.
    """
    if field.array_item_schema is not None:
        node: Dict[str, Any] = {"type": "array", "items": write_field(field.array_item_schema)}
    elif field.schema_reference is not None:
        target = field.schema_reference.get()
        if target is None:
            raise SchemaError(f"field '{field.name}' references unregistered schema {field.schema_reference!r}")
        if target is ANY_SCHEMA:
            node = {"type": "any"}
        else:
            node = {"$ref": target.name}
    else:
        node = dict(_SCALAR_JSON[field.type])
    if field.required:
        node["required"] = True
    return node


def write_schema(schema: Schema) -> Dict[str, Any]:
    node: Dict[str, Any] = {"id": schema.name, "type": schema.type}
    if schema.description:
        node["description"] = schema.description
    if schema.fields:
        node["properties"] = {name: write_field(field) for name, field in schema.fields.items()}
    if schema.enum_values:
        node["enum"] = list(schema.enum_values)
        node["enumDescriptions"] = list(schema.enum_descriptions)
    if schema.map_value_schema is not None:
        node["additionalProperties"] = write_field(schema.map_value_schema)
    return node


def write_schemas(repository: "SchemaRepository", api_key: ApiKey) -> Dict[str, Dict[str, Any]]:
    """Every schema registered for an API keyed by name, plus JsonMap when referenced."""
    schemas = repository.get_all_schemas(api_key)
    written: Dict[str, Dict[str, Any]] = {}
    for schema in schemas:
        if schema.name in written:
            logger.warning(
                "Schema name collision; later schema replaces earlier one.", schema_name=schema.name, api=str(api_key)
            )
        written[schema.name] = write_schema(schema)
    if any(_references(schema, MAP_SCHEMA.name) for schema in schemas):
        written[MAP_SCHEMA.name] = write_schema(MAP_SCHEMA)
    return written


def _references(schema: Schema, name: str) -> bool:
    fields = list(schema.fields.values())
    if schema.map_value_schema is not None:
        fields.append(schema.map_value_schema)
    while fields:
        field = fields.pop()
        if field.array_item_schema is not None:
            fields.append(field.array_item_schema)
        if field.schema_reference is not None:
            target = field.schema_reference.get()
            if target is not None and target.name == name:
                return True
    return False
