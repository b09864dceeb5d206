"""
Uniform JSON envelope returned by every CRUD endpoint.

    read success:  {"data": ..., "error": 0}
    write success: {"error": 0, "msg": "ok"}
    failure:       {"error": 1, "msg": "..."}
"""

from datetime import datetime
from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..core.schema_base import serialize_datetime

OK_MSG = "ok"


class Written(BaseModel):
    """Result of a committed write; rendered without a data payload."""

    affected: int = 0


def encode(data: Any) -> Any:
    """Convert records (SQLModel instances), lists and dicts to JSON-safe values."""
    return jsonable_encoder(data, custom_encoder={datetime: serialize_datetime})


def success(data: Any) -> JSONResponse:
    if isinstance(data, Written):
        return JSONResponse({"error": 0, "msg": OK_MSG})
    return JSONResponse({"data": encode(data), "error": 0})


def failure(msg: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    return JSONResponse({"error": 1, "msg": msg}, status_code=status_code)
