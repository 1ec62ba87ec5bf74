from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


# ===== User Response =====
class UserResponse(BaseModel):
    """User response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    age: Optional[int] = None
    is_active: bool
    created_at: datetime


# ===== Article Response =====
class ArticleResponse(BaseModel):
    """Article response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    body: Optional[str] = None
    author_id: Optional[int] = None
    views: int
    published: bool
    created_at: datetime
