from pydantic import BaseModel
from typing import Generic, List, TypeVar

T = TypeVar("T")


# Paginated list envelope (data + page info)
class Page(BaseModel, Generic[T]):
    data: List[T]
    current_page: int
    per_page: int
    total: int
    last_page: int


class MessageResponse(BaseModel):
    message: str
