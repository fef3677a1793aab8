from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

# Rules are loaded as they were stored. A rule with a missing or mistyped
# field/operator still loads, and only that rule evaluates to false.
class ConditionRule(BaseModel):
    field: Optional[Any] = None      # answer key, dot notation for nested answers
    operator: Optional[Any] = None   # left as-is so unknown operators still load
    value: Optional[Any] = None      # unused by isEmpty / isNotEmpty

class ConditionGroup(BaseModel):
    operator: Any = "and"
    rules: List[ConditionRule] = Field(default_factory=list)

    @field_validator("rules", mode="before")
    @classmethod
    def _tolerate_rules(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            # a non-object entry becomes an empty rule, which is false
            return [r if isinstance(r, (dict, ConditionRule)) else {} for r in v]
        return v
