from __future__ import annotations

from typing import Callable, Dict, Optional

from smartflow.models.types import ConditionOperator as Op
from smartflow.rules.values import ListVal, Value

Predicate = Callable[[Value, Value], bool]


def _equals(a: Value, b: Value) -> bool:
    return a.text() == b.text()


def _contains(a: Value, b: Value) -> bool:
    if isinstance(a, ListVal):
        return b.text() in a.items
    return b.text() in a.text()


def _numeric(cmp: Callable[[float, float], bool]) -> Predicate:
    def check(a: Value, b: Value) -> bool:
        x, y = a.number(), b.number()
        if x is None or y is None:
            return False
        return cmp(x, y)
    return check


def _member(a: Value, b: Value) -> Optional[bool]:
    if not isinstance(b, ListVal):
        return None
    return a.text() in b.items


def _in(a: Value, b: Value) -> bool:
    return _member(a, b) is True


def _not_in(a: Value, b: Value) -> bool:
    return _member(a, b) is False


OPERATORS: Dict[Op, Predicate] = {
    Op.EQUALS: _equals,
    Op.NOT_EQUALS: lambda a, b: not _equals(a, b),
    Op.CONTAINS: _contains,
    Op.NOT_CONTAINS: lambda a, b: not _contains(a, b),
    Op.IS_EMPTY: lambda a, _b: a.empty(),
    Op.IS_NOT_EMPTY: lambda a, _b: not a.empty(),
    Op.GREATER_THAN: _numeric(lambda x, y: x > y),
    Op.LESS_THAN: _numeric(lambda x, y: x < y),
    Op.GREATER_THAN_OR_EQUAL: _numeric(lambda x, y: x >= y),
    Op.LESS_THAN_OR_EQUAL: _numeric(lambda x, y: x <= y),
    # operand must be a list; anything else fails both ways
    Op.IN: _in,
    Op.NOT_IN: _not_in,
    Op.STARTS_WITH: lambda a, b: a.text().startswith(b.text()),
    Op.ENDS_WITH: lambda a, b: a.text().endswith(b.text()),
}
