"""Per-API configuration consumed by the schema repository."""
from typing import Any, Iterable

from pydantic import Field

from .models.common import ApiKey, BasePydanticModel
from .transformers import TransformerRegistry


class ApiConfig(BasePydanticModel):
    api_key: ApiKey
    transformers: TransformerRegistry = Field(default_factory=TransformerRegistry)
    description: str | None = None

    @classmethod
    def create(
        cls,
        name: str,
        version: str,
        transformers: Iterable[Any] = (),
        root: str | None = None,
        description: str | None = None,
    ) -> "ApiConfig":
        return cls(
            api_key=ApiKey(name=name, version=version, root=root),
            transformers=TransformerRegistry(transformers),
            description=description,
        )
