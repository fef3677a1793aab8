from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from smartflow.errors import ConditionSyntaxError
from smartflow.models.conditions import ConditionGroup

ConditionsLike = Union[ConditionGroup, Mapping[str, Any], str, None]


def parse_conditions(text: Optional[str]) -> Optional[ConditionGroup]:
    """Parse a stored conditions blob. Empty / None means unconditional."""
    if not text:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConditionSyntaxError(f"conditions are not valid JSON: {e}") from e
    if data is None:
        return None
    try:
        return ConditionGroup.model_validate(data)
    except ValidationError as e:
        raise ConditionSyntaxError(f"conditions do not describe a condition group: {e}") from e


def serialize_conditions(group: Optional[ConditionGroup]) -> Optional[str]:
    if group is None:
        return None
    return json.dumps(to_document(group), separators=(",", ":"))


def to_document(group: ConditionGroup) -> dict:
    rules = [r.model_dump(exclude_none=True) for r in group.rules]
    return {"operator": group.operator, "rules": rules}


def coerce_conditions(obj: ConditionsLike) -> Optional[ConditionGroup]:
    """Accept any stored/authored form of a condition group."""
    if obj is None or isinstance(obj, ConditionGroup):
        return obj
    if isinstance(obj, str):
        return parse_conditions(obj)
    try:
        return ConditionGroup.model_validate(obj)
    except ValidationError as e:
        raise ConditionSyntaxError(f"conditions do not describe a condition group: {e}") from e
