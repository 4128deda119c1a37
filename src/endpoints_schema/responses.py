"""Paged collection wrapper returned by list-style API methods."""
from __future__ import annotations

from typing import Annotated, Generic, Optional, Sequence, TypeVar

from .metadata import ApiProperty

T = TypeVar("T")


class CollectionResponse(Generic[T]):
    """A page of items plus the token for requesting the next page."""

    items: list[T]
    next_page_token: Annotated[str, ApiProperty(name="nextPageToken")]

    def __init__(self, items: Optional[Sequence[T]] = None, next_page_token: Optional[str] = None):
        self.items = list(items or [])
        self.next_page_token = next_page_token

    def __repr__(self) -> str:
        return f"CollectionResponse(items={len(self.items)}, next_page_token={self.next_page_token!r})"
