"""Immutable output model: schemas, fields and deferred schema references."""
from typing import TYPE_CHECKING, Any, Optional

from pydantic import Field as ModelField, model_validator

from ..descriptors import TypeDescriptor, describe
from .common import BasePydanticModel, FieldType

if TYPE_CHECKING:
    from ..api_config import ApiConfig
    from ..config import SchemaFlags
    from ..schema_gen.schema_repository import SchemaRepository

ARRAY_UNUSED_MSG = "unused for array items"
MAP_UNUSED_MSG = "unused for map values"

_REFERENCE_TYPES = (FieldType.OBJECT, FieldType.ENUM)


class SchemaReference:
    """Lazy pointer to the schema of a type within one API.

    A reference remembers the flags its schema was derived with, so a map
    that fell back to the JsonMap schema resolves to it again. Two references
    are equal when they resolve to the same canonical type in the same API
    namespace, however they were constructed.
    """

    __slots__ = ("repository", "api_config", "type", "flags")

    def __init__(
        self,
        repository: "SchemaRepository",
        api_config: "ApiConfig",
        type_: Any,
        flags: Optional["SchemaFlags"] = None,
    ):
        self.repository = repository
        self.api_config = api_config
        self.type: TypeDescriptor = describe(type_)
        self.flags = flags

    @classmethod
    def create(
        cls,
        repository: "SchemaRepository",
        api_config: "ApiConfig",
        type_: Any,
        flags: Optional["SchemaFlags"] = None,
    ) -> "SchemaReference":
        return cls(repository, api_config, type_, flags)

    def get(self) -> Optional["Schema"]:
        return self.repository.get(self.type, self.api_config, self.flags)

    def _identity(self) -> tuple[str, Any]:
        return (
            self.repository.type_key(self.type, self.api_config),
            self.api_config.api_key.without_root(),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemaReference):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        return f"SchemaReference({self.type.simple_name}, api={self.api_config.api_key})"


class Field(BasePydanticModel):
    name: str
    type: FieldType
    required: Optional[bool] = None
    schema_reference: Optional[SchemaReference] = None
    array_item_schema: Optional["Field"] = None

    @property
    def is_required(self) -> bool:
        return bool(self.required)

    @model_validator(mode="after")
    def check_shape(self) -> "Field":
        if (self.schema_reference is not None) != (self.type in _REFERENCE_TYPES):
            raise ValueError(f"field '{self.name}': schema_reference is required for, and only for, object and enum fields")
        if (self.array_item_schema is not None) != (self.type == FieldType.ARRAY):
            raise ValueError(f"field '{self.name}': array_item_schema is required for, and only for, array fields")
        return self


class Schema(BasePydanticModel):
    name: str
    type: str
    description: Optional[str] = None
    fields: dict[str, Field] = ModelField(default_factory=dict)
    enum_values: tuple[str, ...] = ()
    enum_descriptions: tuple[str, ...] = ()
    map_value_schema: Optional[Field] = None

    @model_validator(mode="after")
    def check_shape(self) -> "Schema":
        shapes = [bool(self.fields), bool(self.enum_values), self.map_value_schema is not None]
        if sum(shapes) > 1:
            raise ValueError(f"schema '{self.name}' mixes object, enum and map shapes")
        if len(self.enum_values) != len(self.enum_descriptions):
            raise ValueError(f"schema '{self.name}' needs one description per enum value")
        return self

    @property
    def is_enum(self) -> bool:
        return bool(self.enum_values)

    @property
    def is_map(self) -> bool:
        return self.map_value_schema is not None


ANY_SCHEMA = Schema(name="_any", type="any")
MAP_SCHEMA = Schema(name="JsonMap", type="object")
