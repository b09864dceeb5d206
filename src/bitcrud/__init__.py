"""
bitcrud: generic CRUD controllers for FastAPI and SQLModel.
"""

from .crud import (
    Crud,
    DeleteBody,
    FindManyBody,
    FindOneBody,
    FindPageBody,
    UpdateBody,
    crud_router,
    mix,
    query,
    set_body,
    tx_next,
)

__version__ = "1.0.0"

__all__ = [
    "Crud",
    "DeleteBody",
    "FindManyBody",
    "FindOneBody",
    "FindPageBody",
    "UpdateBody",
    "crud_router",
    "mix",
    "query",
    "set_body",
    "tx_next",
]
