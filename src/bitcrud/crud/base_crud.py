"""
Base CRUD operations as plain functions.

Statement construction (body conditions, mix transforms) happens in the
controller; these functions only execute the finished statement against a
session. None of them commits: transaction boundaries belong to the caller.
"""
from typing import Any, List, Optional, Tuple, TypeVar

from sqlalchemy import Delete, Select, Update, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from ..core.decorators import handle_database_exceptions

ModelType = TypeVar("ModelType", bound=SQLModel)


@handle_database_exceptions("find_one")
async def find_one(db: AsyncSession, stmt: Select) -> Optional[ModelType]:
    """
    Find the first record selected by stmt.

    Args:
        db: Database session
        stmt: SELECT statement, already filtered and ordered

    Returns:
        Model instance or None if not found
    """
    result = await db.execute(stmt.limit(1))
    return result.scalars().first()


@handle_database_exceptions("find_all")
async def find_all(db: AsyncSession, stmt: Select) -> List[ModelType]:
    """
    Find all records selected by stmt.

    Args:
        db: Database session
        stmt: SELECT statement, already filtered and ordered

    Returns:
        List of model instances
    """
    result = await db.execute(stmt)
    return list(result.scalars().all())


@handle_database_exceptions("count")
async def count(db: AsyncSession, stmt: Select) -> int:
    """
    Count records selected by stmt, ignoring its ordering and paging.
    """
    subquery = stmt.order_by(None).limit(None).offset(None).subquery()
    result = await db.execute(select(func.count()).select_from(subquery))
    return result.scalar_one()


async def find_paginated(
    db: AsyncSession,
    stmt: Select,
    *,
    offset: int,
    limit: int,
) -> Tuple[List[ModelType], int]:
    """
    Find one page of records and the total count.

    Args:
        db: Database session
        stmt: SELECT statement, already filtered and ordered
        offset: Number of records to skip
        limit: Page size

    Returns:
        Tuple of (list of records, total count)
    """
    total = await count(db, stmt)
    items = await find_all(db, stmt.offset(offset).limit(limit))
    return items, total


@handle_database_exceptions("create")
async def create(db: AsyncSession, db_obj: ModelType) -> ModelType:
    """
    Insert a record and flush it so its primary key is assigned.

    Args:
        db: Database session
        db_obj: Validated model instance

    Returns:
        The flushed model instance
    """
    db.add(db_obj)
    await db.flush()
    return db_obj


@handle_database_exceptions("update")
async def update(db: AsyncSession, stmt: Update) -> int:
    """
    Execute a bulk UPDATE.

    Returns:
        Number of matched rows
    """
    result = await db.execute(stmt.execution_options(synchronize_session=False))
    return result.rowcount


@handle_database_exceptions("delete")
async def delete(db: AsyncSession, stmt: Delete) -> int:
    """
    Execute a bulk DELETE.

    Returns:
        Number of deleted rows
    """
    result = await db.execute(stmt.execution_options(synchronize_session=False))
    return result.rowcount


def has_where(stmt: Any) -> bool:
    """True if stmt carries at least one WHERE criterion."""
    return stmt.whereclause is not None
