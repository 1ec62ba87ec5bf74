"""Lookup of table models by collection name.

Populated at import time by `register_collection`; read-only afterwards.
"""

from typing import Optional, Type, TypeVar

from sqlmodel import SQLModel

from pagequery.exceptions import UnknownCollectionError

ModelType = TypeVar("ModelType", bound=Type[SQLModel])

_collections: dict[str, Type[SQLModel]] = {}


def register_collection(model: ModelType, name: Optional[str] = None) -> ModelType:
    """Register a table model under `name` (defaults to its table name).

    Usable as a class decorator.
    """
    key = name or model.__tablename__
    existing = _collections.get(key)
    if existing is not None and existing is not model:
        raise ValueError(f"Collection {key!r} is already registered to {existing.__name__}")
    _collections[key] = model
    return model


def get_collection(name: str) -> Type[SQLModel]:
    try:
        return _collections[name]
    except KeyError:
        raise UnknownCollectionError(name) from None


def registered_collections() -> list[str]:
    return sorted(_collections)
