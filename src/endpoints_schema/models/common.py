from enum import Enum
from typing import Optional

from pydantic import BaseModel


class BasePydanticModel(BaseModel):
    model_config = {
        "extra": "forbid",
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": True,
    }

class FieldType(str, Enum):
    BOOLEAN = "boolean"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    ENUM = "enum"
    OBJECT = "object"
    ARRAY = "array"

class ApiKey(BasePydanticModel):
    """Identifies an API namespace; schemas are grouped per key without root."""
    name: str
    version: str
    root: Optional[str] = None

    def without_root(self) -> "ApiKey":
        if self.root is None:
            return self
        return ApiKey(name=self.name, version=self.version)

    def __str__(self) -> str:
        return f"{self.name}:{self.version}"
