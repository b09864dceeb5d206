"""
Example controllers for the users table.

UserController serves the defaults. UserMixController shows each kind of
override: a custom body field feeding a query filter, a fixed id filter,
and transaction hooks that veto every write.
"""

import logging

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..crud import (
    Crud,
    DeleteBody,
    FindOneBody,
    UpdateBody,
    mix,
    query,
    set_body,
    tx_next,
)
from .models import User

logger = logging.getLogger(__name__)

ROLLBACK_MESSAGE = "an abnormal rollback occurred"


class NameFindOneBody(FindOneBody):
    name: str


class NameUpdateBody(UpdateBody):
    name: str


class NameDeleteBody(DeleteBody):
    name: str


def by_name(stmt, body):
    return stmt.where(User.name == body.name)


def abnormal_rollback(db: AsyncSession, subject) -> Exception:
    logger.info(f"Vetoing write | Subject: {subject!r}")
    return Exception(ROLLBACK_MESSAGE)


class UserController(Crud[User]):
    model = User
    name = "user"


class UserMixController(UserController):
    name = "user-mix"

    async def find_one(self, request: Request, db: AsyncSession):
        mix(
            request,
            set_body(NameFindOneBody),
            query(by_name),
        )
        return await super().find_one(request, db)

    async def find_many(self, request: Request, db: AsyncSession):
        mix(
            request,
            query(lambda stmt, body: stmt.where(User.id.in_([5, 6]))),
        )
        return await super().find_many(request, db)

    async def create(self, request: Request, db: AsyncSession):
        mix(
            request,
            tx_next(abnormal_rollback),
        )
        return await super().create(request, db)

    async def update(self, request: Request, db: AsyncSession):
        mix(
            request,
            set_body(NameUpdateBody),
            query(by_name),
            tx_next(abnormal_rollback),
        )
        return await super().update(request, db)

    async def delete(self, request: Request, db: AsyncSession):
        mix(
            request,
            set_body(NameDeleteBody),
            query(by_name),
            tx_next(abnormal_rollback),
        )
        return await super().delete(request, db)
