from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Relationship, SQLModel

from pagequery.collections import register_collection


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ===== User =====
@register_collection
class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=200)
    email: str = Field(max_length=320, unique=True)
    age: Optional[int] = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    # Relationships
    articles: list["Article"] = Relationship(back_populates="author")


# ===== Article =====
@register_collection
class Article(SQLModel, table=True):
    __tablename__ = "articles"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=300)
    body: Optional[str] = None
    author_id: Optional[int] = Field(default=None, foreign_key="users.id")
    views: int = Field(default=0)
    published: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    # Relationships
    author: Optional[User] = Relationship(back_populates="articles")
