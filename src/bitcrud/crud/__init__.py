"""
Generic CRUD layer.

Pattern:
    class UserController(Crud[User]):
        model = User

        async def find_one(self, request, db):
            mix(request, set_body(NameBody), query(by_name))
            return await super().find_one(request, db)

    app.include_router(crud_router(UserController(), prefix="/user"))
"""

from . import base_crud
from .bodies import (
    DeleteBody,
    FindManyBody,
    FindOneBody,
    FindPageBody,
    Pagination,
    UpdateBody,
    WhereBody,
)
from .controller import Crud
from .envelope import Written
from .errors import (
    BodyBindError,
    CrudError,
    DatabaseError,
    MissingWhereClauseError,
    RecordNotFoundError,
    TxRollbackError,
)
from .mix import MixConfig, get_mix, mix, query, set_body, tx_next
from .router import crud_router

__all__ = [
    "base_crud",
    # Bodies
    "DeleteBody",
    "FindManyBody",
    "FindOneBody",
    "FindPageBody",
    "Pagination",
    "UpdateBody",
    "WhereBody",
    # Controller
    "Crud",
    "Written",
    "crud_router",
    # Mix
    "MixConfig",
    "get_mix",
    "mix",
    "query",
    "set_body",
    "tx_next",
    # Errors
    "BodyBindError",
    "CrudError",
    "DatabaseError",
    "MissingWhereClauseError",
    "RecordNotFoundError",
    "TxRollbackError",
]
