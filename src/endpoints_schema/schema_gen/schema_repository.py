"""
Schema repository: derives canonical, de-duplicated schemas for types and
caches them per API namespace.

Derivation classifies a (normalized) type as any / enum / map / array /
object. Object, map and collection schemas reserve their cache slot with a
placeholder before nested types are derived, so self-referential and
mutually-referential types resolve to a reference instead of recursing
forever.
"""
import threading
from typing import Any, Callable, Optional

import structlog

from ..api_config import ApiConfig
from ..config import SchemaFlags
from ..descriptors import TypeDescriptor, TypeKind, describe
from ..exceptions import UnsupportedTypeError
from ..metadata import enum_descriptions, enum_wire_names, resource_description
from ..models import (
    ANY_SCHEMA,
    ARRAY_UNUSED_MSG,
    MAP_SCHEMA,
    MAP_UNUSED_MSG,
    ApiKey,
    Field,
    FieldType,
    Schema,
    SchemaReference,
)
from ..properties import properties_of

logger = structlog.get_logger(__name__)

_SCALAR_KINDS = (TypeKind.PRIMITIVE, TypeKind.ENUM, TypeKind.OBJECT)


class _Namespace:
    """Schemas of one API, keyed by canonical type key in insertion order."""

    __slots__ = ("lock", "schemas", "names")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.schemas: dict[str, Schema] = {}
        self.names: dict[str, str] = {}


class SchemaRepository:
    """Process-wide schema cache shared by all API configurations."""

    def __init__(self, flags: Optional[SchemaFlags] = None):
        self.flags = flags or SchemaFlags()
        self.logger = logger.bind(component="SchemaRepository")
        self._namespaces: dict[ApiKey, _Namespace] = {}
        self._lock = threading.Lock()

    def get_or_add(self, type_: Any, api_config: ApiConfig, flags: Optional[SchemaFlags] = None) -> Schema:
        """
        Returns the schema for a type in an API, deriving and caching it (and
        every schema it references) on first use.

        Args:
            type_: A type annotation or TypeDescriptor.
            api_config: The API whose namespace and transformers apply.
            flags: Policy flags for this call; defaults to the repository's flags.

        Raises:
            UnsupportedTypeError: For primitive roots, optionals wrapping anything
                but a scalar, enum or object, and maps with non-string keys when
                unsupported key types are not ignored.
        """
        descriptor = describe(type_)
        flags = flags or self.flags
        namespace = self._namespace(api_config.api_key)
        with namespace.lock:
            schema_keys = set(namespace.schemas)
            names = set(namespace.names)
            try:
                return self._get_or_create(descriptor, api_config, namespace, flags)
            except Exception:
                # Schemas finished during this call may reference a rolled-back one.
                for key in set(namespace.schemas) - schema_keys:
                    del namespace.schemas[key]
                for name in set(namespace.names) - names:
                    del namespace.names[name]
                raise

    def get(self, type_: Any, api_config: ApiConfig, flags: Optional[SchemaFlags] = None) -> Optional[Schema]:
        """
        Cache lookup only; never derives. The any and JsonMap sentinels resolve
        directly, the latter decided with the given flags (default: the
        repository's), which should be the ones the schema was derived with.
        """
        flags = flags or self.flags
        descriptor = self._normalize(describe(type_), api_config)
        if descriptor.kind is TypeKind.ANY:
            return ANY_SCHEMA

        schema = None
        namespace = self._namespaces.get(api_config.api_key.without_root())
        if namespace is not None:
            with namespace.lock:
                schema = namespace.schemas.get(descriptor.type_key)
        if schema is None and descriptor.kind is TypeKind.MAP and self._uses_json_map(descriptor, api_config, flags):
            return MAP_SCHEMA
        return schema

    def get_all_schemas(self, api_key: ApiKey) -> list[Schema]:
        """All schemas registered for an API, in insertion order."""
        namespace = self._namespaces.get(api_key.without_root())
        if namespace is None:
            return []
        with namespace.lock:
            return list(namespace.schemas.values())

    def type_key(self, type_: Any, api_config: ApiConfig) -> str:
        """Canonical cache key of a type after optional unwrapping and transformers."""
        return self._normalize(describe(type_), api_config).type_key

    def _namespace(self, api_key: ApiKey) -> _Namespace:
        key = api_key.without_root()
        with self._lock:
            namespace = self._namespaces.get(key)
            if namespace is None:
                namespace = self._namespaces[key] = _Namespace()
            return namespace

    def _normalize(self, descriptor: TypeDescriptor, api_config: ApiConfig) -> TypeDescriptor:
        if descriptor.kind is TypeKind.OPTIONAL:
            inner = descriptor.inner
            if inner.kind not in _SCALAR_KINDS:
                raise UnsupportedTypeError(
                    descriptor, f"optional may only wrap a scalar, enum or object type, not {inner.kind.value}"
                )
            descriptor = inner
        return self._apply_transformers(descriptor, api_config)

    def _apply_transformers(self, descriptor: TypeDescriptor, api_config: ApiConfig) -> TypeDescriptor:
        seen = {descriptor.type_key}
        while (target := api_config.transformers.target_for(descriptor)) is not None:
            if target.type_key in seen:
                break
            seen.add(target.type_key)
            descriptor = target
        return descriptor

    def _field_type(self, descriptor: TypeDescriptor, api_config: ApiConfig) -> TypeDescriptor:
        """Normalization for nested positions, where any optional is simply unwrapped."""
        while descriptor.kind is TypeKind.OPTIONAL:
            descriptor = descriptor.inner
        return self._apply_transformers(descriptor, api_config)

    def _get_or_create(
        self, descriptor: TypeDescriptor, api_config: ApiConfig, namespace: _Namespace, flags: SchemaFlags
    ) -> Schema:
        descriptor = self._normalize(descriptor, api_config)
        kind = descriptor.kind
        if kind is TypeKind.ANY:
            return ANY_SCHEMA
        if kind is TypeKind.PRIMITIVE:
            raise UnsupportedTypeError(
                descriptor, "primitive types may only appear as fields, array items or map values"
            )
        if kind is TypeKind.MAP:
            if self._uses_json_map(descriptor, api_config, flags):
                self.logger.debug("Falling back to JsonMap schema.", type=descriptor.simple_name)
                return MAP_SCHEMA
            key = self._field_type(descriptor.key_type, api_config)
            if not self._is_string_key(key):
                raise UnsupportedTypeError(descriptor, f"map keys must be string-compatible, not {key.simple_name}")

        existing = namespace.schemas.get(descriptor.type_key)
        if existing is not None:
            return existing

        self.logger.debug("Deriving schema.", type=descriptor.simple_name, kind=kind.value, api=str(api_config.api_key))
        if kind is TypeKind.ENUM:
            schema = self._create_enum_schema(descriptor, flags)
            namespace.schemas[descriptor.type_key] = schema
            self._check_name(namespace, descriptor, schema)
            return schema
        if kind is TypeKind.MAP:
            return self._derive(descriptor, api_config, namespace, flags, self._create_map_schema)
        if kind is TypeKind.ARRAY:
            return self._derive(descriptor, api_config, namespace, flags, self._create_collection_schema)
        return self._derive(descriptor, api_config, namespace, flags, self._create_object_schema)

    def _derive(
        self,
        descriptor: TypeDescriptor,
        api_config: ApiConfig,
        namespace: _Namespace,
        flags: SchemaFlags,
        build: Callable[[TypeDescriptor, ApiConfig, _Namespace, SchemaFlags], Schema],
    ) -> Schema:
        key = descriptor.type_key
        # Placeholder: re-entrant lookups of this type while its fields are
        # being built find the slot and stop there.
        namespace.schemas[key] = Schema(name=descriptor.simple_name, type="object")
        schema = build(descriptor, api_config, namespace, flags)
        namespace.schemas[key] = schema
        self._check_name(namespace, descriptor, schema)
        return schema

    def _check_name(self, namespace: _Namespace, descriptor: TypeDescriptor, schema: Schema) -> None:
        owner = namespace.names.setdefault(schema.name, descriptor.type_key)
        if owner != descriptor.type_key:
            self.logger.warning(
                "Schema name collision.", schema_name=schema.name, existing_type=owner, new_type=descriptor.type_key
            )

    def _create_enum_schema(self, descriptor: TypeDescriptor, flags: SchemaFlags) -> Schema:
        enum_cls = descriptor.raw
        wire_names = enum_wire_names(enum_cls) if flags.use_declared_enum_naming else {}
        descriptions = enum_descriptions(enum_cls)
        members = list(enum_cls)
        return Schema(
            name=descriptor.simple_name,
            type="string",
            description=resource_description(enum_cls),
            enum_values=tuple(wire_names.get(member.name, member.name) for member in members),
            enum_descriptions=tuple(descriptions.get(member.name, "") for member in members),
        )

    def _create_collection_schema(
        self, descriptor: TypeDescriptor, api_config: ApiConfig, namespace: _Namespace, flags: SchemaFlags
    ) -> Schema:
        items = self._build_field("items", descriptor, api_config, namespace, flags)
        return Schema(name=descriptor.simple_name, type="object", fields={"items": items})

    def _create_object_schema(
        self, descriptor: TypeDescriptor, api_config: ApiConfig, namespace: _Namespace, flags: SchemaFlags
    ) -> Schema:
        fields: dict[str, Field] = {}
        for prop in properties_of(descriptor):
            fields[prop.name] = self._build_field(
                prop.name, prop.type, api_config, namespace, flags, required=prop.resolved_required
            )
        return Schema(
            name=descriptor.simple_name,
            type="object",
            description=resource_description(descriptor.raw),
            fields=fields,
        )

    def _create_map_schema(
        self, descriptor: TypeDescriptor, api_config: ApiConfig, namespace: _Namespace, flags: SchemaFlags
    ) -> Schema:
        key = self._field_type(descriptor.key_type, api_config)
        value = self._field_type(descriptor.value_type, api_config)
        value_field = self._build_field(MAP_UNUSED_MSG, value, api_config, namespace, flags)
        description = None
        if value_field.schema_reference is not None:
            description = f"A collection of name / {value.simple_name} pairs"
        return Schema(
            name=f"Map_{key.simple_name}_{value.simple_name}",
            type="object",
            description=description,
            map_value_schema=value_field,
        )

    def _build_field(
        self,
        name: str,
        type_: TypeDescriptor,
        api_config: ApiConfig,
        namespace: _Namespace,
        flags: SchemaFlags,
        required: Optional[bool] = None,
    ) -> Field:
        descriptor = self._field_type(type_, api_config)
        kind = descriptor.kind
        if kind is TypeKind.PRIMITIVE:
            return Field(name=name, type=descriptor.primitive_type, required=required)
        if kind is TypeKind.ARRAY:
            item = self._build_field(ARRAY_UNUSED_MSG, descriptor.element, api_config, namespace, flags)
            return Field(name=name, type=FieldType.ARRAY, required=required, array_item_schema=item)

        # Registers the nested schema in this API; cycles stop at the placeholder.
        self._get_or_create(descriptor, api_config, namespace, flags)
        return Field(
            name=name,
            type=FieldType.ENUM if kind is TypeKind.ENUM else FieldType.OBJECT,
            required=required,
            schema_reference=SchemaReference(self, api_config, descriptor, flags),
        )

    def _uses_json_map(self, descriptor: TypeDescriptor, api_config: ApiConfig, flags: SchemaFlags) -> bool:
        if flags.force_json_map_schema:
            return True
        key = self._field_type(descriptor.key_type, api_config)
        value = self._field_type(descriptor.value_type, api_config)
        if key.kind is TypeKind.ANY or value.kind is TypeKind.ANY:
            # raw or unbound parameters
            return True
        if not self._is_string_key(key) and flags.ignore_unsupported_key_types:
            return True
        return not self._is_supported_map_value(value, api_config, flags)

    def _is_supported_map_value(self, value: TypeDescriptor, api_config: ApiConfig, flags: SchemaFlags) -> bool:
        if value.kind in _SCALAR_KINDS:
            return True
        if value.kind is TypeKind.MAP:
            return not self._uses_json_map(value, api_config, flags)
        if value.kind is TypeKind.ARRAY and flags.support_array_values:
            return self._field_type(value.element, api_config).kind in _SCALAR_KINDS
        return False

    @staticmethod
    def _is_string_key(key: TypeDescriptor) -> bool:
        if key.kind is TypeKind.ENUM:
            return True
        return key.kind is TypeKind.PRIMITIVE and key.primitive_type is FieldType.STRING
