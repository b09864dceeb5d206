"""
Router factory exposing a controller's handlers as POST endpoints.

    {prefix}/r/find/one   {prefix}/r/find/many   {prefix}/r/find/page
    {prefix}/w/create     {prefix}/w/update      {prefix}/w/delete
"""

import logging
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_session
from . import envelope
from .controller import Crud
from .errors import CrudError, DatabaseError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MSG = "internal server error"

ROUTES = (
    ("/r/find/one", "find_one"),
    ("/r/find/many", "find_many"),
    ("/r/find/page", "find_page"),
    ("/w/create", "create"),
    ("/w/update", "update"),
    ("/w/delete", "delete"),
)


def _endpoint(controller: Crud, handler_name: str) -> Callable:
    async def endpoint(
        request: Request,
        db: AsyncSession = Depends(get_session),
    ) -> JSONResponse:
        handler = getattr(controller, handler_name)
        try:
            data = await handler(request, db)
        except CrudError as e:
            logger.debug(f"{controller.name}.{handler_name} failed: {e.msg}")
            return envelope.failure(e.msg, e.status_code)
        except SQLAlchemyError as e:
            await db.rollback()
            error = DatabaseError(str(getattr(e, "orig", None) or e))
            controller.log.error_occurred(controller.name, handler_name, error.msg)
            return envelope.failure(error.msg, error.status_code)
        except Exception as e:
            await db.rollback()
            controller.log.error_occurred(controller.name, handler_name, f"{type(e).__name__}: {e}")
            logger.exception(f"Unhandled error in {controller.name}.{handler_name}")
            return envelope.failure(INTERNAL_ERROR_MSG, status.HTTP_500_INTERNAL_SERVER_ERROR)
        return envelope.success(data)

    endpoint.__name__ = f"{controller.name}_{handler_name}".replace("-", "_")
    return endpoint


def crud_router(
    controller: Crud,
    prefix: str = "",
    tags: Optional[List[str]] = None,
) -> APIRouter:
    """
    Build an APIRouter with the six CRUD endpoints of controller.

    Args:
        controller: Controller instance whose handlers serve the routes
        prefix: Path prefix, e.g. "/user"
        tags: OpenAPI tags (defaults to the controller name)

    Returns:
        APIRouter ready to be included in the application
    """
    router = APIRouter(prefix=prefix, tags=tags or [controller.name])
    for path, handler_name in ROUTES:
        router.add_api_route(
            path,
            _endpoint(controller, handler_name),
            methods=["POST"],
            response_class=JSONResponse,
        )
    return router
