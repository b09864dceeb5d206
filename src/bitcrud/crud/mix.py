"""
Mix: per-request overrides of the default CRUD behavior.

A controller method calls `mix(request, ...)` before delegating to the
default handler:

    async def update(self, request, db):
        mix(
            request,
            set_body(NameUpdateBody),
            query(lambda stmt, body: stmt.where(User.name == body.name)),
            tx_next(check_quota),
        )
        return await super().update(request, db)

The configuration lives on `request.state` and dies with the request.
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Type, Union

from fastapi import Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

# Statement transform: (Select | Update | Delete, bound body) -> statement
QueryFn = Callable[[Any, BaseModel], Any]

# Transaction hook: (session, subject) -> None | Exception, sync or async.
# Returning an exception or raising one rolls the transaction back.
TxHookResult = Optional[BaseException]
TxHook = Callable[[AsyncSession, Any], Union[TxHookResult, Awaitable[TxHookResult]]]

Option = Callable[["MixConfig"], None]

_STATE_KEY = "crud_mix"


@dataclass
class MixConfig:
    """Request-scoped overrides applied by the default CRUD handlers."""

    body: Optional[Type[BaseModel]] = None
    queries: List[QueryFn] = field(default_factory=list)
    tx_next: Optional[TxHook] = None

    def apply_queries(self, stmt: Any, body: BaseModel) -> Any:
        """Thread stmt through every registered transform, in order."""
        for fn in self.queries:
            stmt = fn(stmt, body)
        return stmt

    async def run_tx_next(self, db: AsyncSession, subject: Any) -> TxHookResult:
        """
        Run the transaction hook.

        Returns:
            None when the write may be committed, otherwise the exception
            describing why it must be rolled back
        """
        if self.tx_next is None:
            return None
        try:
            result = self.tx_next(db, subject)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            return e
        if result is not None and not isinstance(result, BaseException):
            raise TypeError(
                f"transaction hook must return None or an exception, got {type(result).__name__}"
            )
        return result


def set_body(model: Type[BaseModel]) -> Option:
    """Decode the request body into model instead of the default body."""

    def option(config: MixConfig) -> None:
        config.body = model

    return option


def query(fn: QueryFn) -> Option:
    """Narrow the statement; fn receives the statement and the bound body."""

    def option(config: MixConfig) -> None:
        config.queries.append(fn)

    return option


def tx_next(fn: TxHook) -> Option:
    """Run fn inside the write transaction, after the write itself."""

    def option(config: MixConfig) -> None:
        config.tx_next = fn

    return option


def mix(request: Request, *options: Option) -> MixConfig:
    """Build a fresh MixConfig from options and attach it to the request."""
    config = MixConfig()
    for option in options:
        option(config)
    setattr(request.state, _STATE_KEY, config)
    return config


def get_mix(request: Request) -> MixConfig:
    """Return the request's MixConfig, or an empty one if mix was never called."""
    return getattr(request.state, _STATE_KEY, None) or MixConfig()
