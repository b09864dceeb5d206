"""
Errors raised by CRUD handlers.

Every error carries the HTTP status and the message rendered into the
failure envelope.
"""

from fastapi import status


class CrudError(Exception):
    """Base class for errors rendered as {"error": 1, "msg": ...}."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg


class BodyBindError(CrudError):
    """The request body could not be decoded into the active body schema."""

    status_code = status.HTTP_400_BAD_REQUEST


class MissingWhereClauseError(CrudError):
    """Update or delete without any predicate."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, msg: str = "WHERE conditions required"):
        super().__init__(msg)


class RecordNotFoundError(CrudError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, msg: str = "record not found"):
        super().__init__(msg)


class TxRollbackError(CrudError):
    """A transaction hook vetoed the write; the message is the hook's own."""

    status_code = status.HTTP_400_BAD_REQUEST


class DatabaseError(CrudError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
