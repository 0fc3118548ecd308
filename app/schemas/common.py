from typing import Generic, TypeVar

from pydantic import BaseModel

ItemT = TypeVar("ItemT")


class ListResponse(BaseModel, Generic[ItemT]):
    items: list[ItemT]
    count: int
    limit: int
    offset: int
