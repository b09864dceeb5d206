"""
Translation of body `where` / `order` payloads into SQLAlchemy clauses.

A condition is a `[field, operator, value]` triple, for example
`["age", ">=", 30]` or `["id", "in", [5, 6]]`. The null checks take no
value: `["department", "is null"]`.
"""

import operator
from typing import Any, Callable, Dict, List, Literal, Sequence, Tuple, Type

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.sql.elements import ColumnElement

from .errors import BodyBindError

Condition = Tuple[str, str, Any]
Conditions = List[List[Any]]
Orders = Dict[str, Literal["asc", "desc"]]

_OPERATORS: Dict[str, Callable[[Any, Any], ColumnElement]] = {
    "=": operator.eq,
    "!=": operator.ne,
    "<>": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "in": lambda column, value: column.in_(value),
    "not in": lambda column, value: column.not_in(value),
    "like": lambda column, value: column.like(value),
    "not like": lambda column, value: column.not_like(value),
    "is null": lambda column, _: column.is_(None),
    "is not null": lambda column, _: column.is_not(None),
}

_NULLARY = {"is null", "is not null"}
_SEQUENCE = {"in", "not in"}

OPERATORS = frozenset(_OPERATORS)


def parse_condition(raw: Sequence[Any]) -> Condition:
    """
    Normalize one raw condition into a (field, operator, value) triple.

    Raises:
        ValueError: malformed condition (used inside pydantic validators)
    """
    if not isinstance(raw, (list, tuple)) or len(raw) not in (2, 3):
        raise ValueError(f"condition must be [field, operator, value], got {raw!r}")

    field, op = raw[0], raw[1]
    if not isinstance(field, str) or not isinstance(op, str):
        raise ValueError(f"condition field and operator must be strings, got {raw!r}")

    op = op.strip().lower()
    if op not in _OPERATORS:
        raise ValueError(f"unsupported operator {op!r}")

    if op in _NULLARY:
        return field, op, None

    if len(raw) != 3:
        raise ValueError(f"operator {op!r} requires a value")

    value = raw[2]
    if op in _SEQUENCE and not isinstance(value, (list, tuple)):
        raise ValueError(f"operator {op!r} requires a list value")

    return field, op, value


def get_column(model: Type[Any], field: str):
    """Return the mapped column attribute for field, or fail the body."""
    if field not in sa_inspect(model).columns:
        raise BodyBindError(f"unknown field {field!r}")
    return getattr(model, field)


def build_where(model: Type[Any], conditions: Conditions) -> List[ColumnElement]:
    """Build the list of WHERE clauses for model from body conditions."""
    clauses = []
    for raw in conditions:
        try:
            field, op, value = parse_condition(raw)
        except ValueError as e:
            raise BodyBindError(str(e))
        clauses.append(_OPERATORS[op](get_column(model, field), value))
    return clauses


def build_order(model: Type[Any], orders: Orders) -> List[ColumnElement]:
    """
    Build ORDER BY clauses, in the order the fields were given.

    An empty mapping orders by primary key ascending.
    """
    if not orders:
        return [column.asc() for column in sa_inspect(model).primary_key]

    clauses = []
    for field, direction in orders.items():
        column = get_column(model, field)
        clauses.append(column.desc() if direction == "desc" else column.asc())
    return clauses


def known_fields(model: Type[Any]) -> List[str]:
    """Names of the mapped columns of model, in declaration order."""
    return list(sa_inspect(model).columns.keys())
