"""
Generic CRUD controller.

Provides default find/create/update/delete handlers for one table model.
Subclasses override a handler, call `mix(...)` to customize it for the
current request and delegate to the default implementation.
"""
import json
import logging
from contextlib import asynccontextmanager
from typing import Annotated, Any, Dict, Generic, Optional, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from ..core.logging_config import CrudLogger
from . import base_crud
from .bodies import DeleteBody, FindManyBody, FindOneBody, FindPageBody, Pagination, UpdateBody
from .conditions import build_order, build_where, get_column, known_fields
from .envelope import Written
from .errors import BodyBindError, MissingWhereClauseError, RecordNotFoundError, TxRollbackError
from .mix import get_mix

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(item) for item in error["loc"])
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(parts)


class Crud(Generic[ModelType]):
    """
    Generic controller providing the default CRUD handlers.

    Usage:
        class UserController(Crud[User]):
            model = User

    Every handler takes the request and a session and returns either the
    data to render or `Written` for a committed write. Failures are raised
    as CrudError subclasses.
    """

    model: Type[ModelType] = None
    name: Optional[str] = None

    def __init__(self, model: Optional[Type[ModelType]] = None, *, name: Optional[str] = None):
        if model is not None:
            self.model = model
        if self.model is None:
            raise ValueError(f"{type(self).__name__} has no model configured")
        self.name = name or self.name or self.model.__tablename__
        self.log = CrudLogger(self.name)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    async def payload(self, request: Request) -> Dict[str, Any]:
        """Decode the raw request body; an empty body is an empty object."""
        raw = await request.body()
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise BodyBindError(f"invalid JSON body: {e}")
        if not isinstance(data, dict):
            raise BodyBindError("request body must be a JSON object")
        return data

    async def bind(self, request: Request, default: Type[BaseModel], operation: str) -> BaseModel:
        """Validate the request body against the mixed-in schema or default."""
        schema = get_mix(request).body or default
        payload = await self.payload(request)
        try:
            return schema.model_validate(payload)
        except ValidationError as e:
            message = _validation_message(e)
            self.log.body_rejected(self.name, operation, message)
            raise BodyBindError(message)

    def validate_updates(self, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Check update keys against the table and coerce values to field types."""
        fields = self.model.model_fields
        cleaned = {}
        for key, value in updates.items():
            get_column(self.model, key)
            annotation = Any
            if key in fields:
                # Field constraints (ge, max_length, ...) live in metadata
                annotation, metadata = fields[key].annotation, fields[key].metadata
                if metadata:
                    annotation = Annotated[(annotation, *metadata)]
            try:
                cleaned[key] = TypeAdapter(annotation).validate_python(value)
            except ValidationError as e:
                raise BodyBindError(f"updates.{key}: {e.errors()[0]['msg']}")
        return cleaned

    # ------------------------------------------------------------------
    # Statements and transactions
    # ------------------------------------------------------------------

    def where(self, request: Request, stmt: Any, body: BaseModel) -> Any:
        """Apply body conditions, then the mixed-in query transforms."""
        stmt = stmt.where(*build_where(self.model, getattr(body, "where", [])))
        return get_mix(request).apply_queries(stmt, body)

    def select(self, request: Request, body: BaseModel) -> Any:
        stmt = self.where(request, select(self.model), body)
        return stmt.order_by(*build_order(self.model, getattr(body, "order", {})))

    @asynccontextmanager
    async def transaction(self, db: AsyncSession, operation: str):
        """Commit when the block completes, roll back on any error."""
        try:
            yield
            await db.commit()
        except Exception:
            await db.rollback()
            logger.debug(f"Transaction rolled back | Resource: {self.name} | Operation: {operation}")
            raise

    async def tx_next(self, request: Request, db: AsyncSession, operation: str, subject: Any) -> None:
        """Run the mixed-in hook; a failure aborts the enclosing transaction."""
        error = await get_mix(request).run_tx_next(db, subject)
        if error is not None:
            reason = str(error) or type(error).__name__
            self.log.operation_rolled_back(self.name, operation, reason)
            raise TxRollbackError(reason)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def find_one(self, request: Request, db: AsyncSession) -> ModelType:
        body = await self.bind(request, FindOneBody, "find_one")
        record = await base_crud.find_one(db, self.select(request, body))
        if record is None:
            raise RecordNotFoundError()
        return record

    async def find_many(self, request: Request, db: AsyncSession) -> list:
        body = await self.bind(request, FindManyBody, "find_many")
        return await base_crud.find_all(db, self.select(request, body))

    async def find_page(self, request: Request, db: AsyncSession) -> Dict[str, Any]:
        body = await self.bind(request, FindPageBody, "find_page")
        page = getattr(body, "page", None) or Pagination()
        items, total = await base_crud.find_paginated(
            db,
            self.select(request, body),
            offset=page.offset,
            limit=page.limit,
        )
        return {"lists": items, "total": total}

    async def create(self, request: Request, db: AsyncSession) -> Written:
        body = await self.bind(request, self.model, "create")
        if isinstance(body, self.model):
            record = body
        else:
            values = body.model_dump(include=set(known_fields(self.model)))
            try:
                record = self.model.model_validate(values)
            except ValidationError as e:
                raise BodyBindError(_validation_message(e))

        async with self.transaction(db, "create"):
            await base_crud.create(db, record)
            await self.tx_next(request, db, "create", record)

        self.log.operation_committed(self.name, "create", 1)
        return Written(affected=1)

    async def update(self, request: Request, db: AsyncSession) -> Written:
        body = await self.bind(request, UpdateBody, "update")
        updates = getattr(body, "updates", None)
        if not updates:
            raise BodyBindError("updates: field required")
        updates = self.validate_updates(updates)

        stmt = self.where(request, update(self.model), body)
        if not base_crud.has_where(stmt):
            raise MissingWhereClauseError()
        stmt = stmt.values(**updates)

        async with self.transaction(db, "update"):
            affected = await base_crud.update(db, stmt)
            await self.tx_next(request, db, "update", updates)

        self.log.operation_committed(self.name, "update", affected)
        return Written(affected=affected)

    async def delete(self, request: Request, db: AsyncSession) -> Written:
        body = await self.bind(request, DeleteBody, "delete")

        stmt = self.where(request, delete(self.model), body)
        if not base_crud.has_where(stmt):
            raise MissingWhereClauseError()

        async with self.transaction(db, "delete"):
            affected = await base_crud.delete(db, stmt)
            await self.tx_next(request, db, "delete", body)

        self.log.operation_committed(self.name, "delete", affected)
        return Written(affected=affected)
