from __future__ import annotations

from typing import List, Optional, Set

from pydantic import BaseModel

from smartflow.errors import ConditionSyntaxError
from smartflow.flow.visibility import available_fields
from smartflow.models.conditions import ConditionGroup
from smartflow.models.template import Conditions, Template
from smartflow.models.types import ConditionOperator, GroupOperator, needs_value
from smartflow.rules.serde import coerce_conditions


class Issue(BaseModel):
    screen: str
    field: Optional[str] = None     # None: the screen's own conditions
    rule_index: Optional[int] = None
    code: str
    message: str

    def describe(self) -> str:
        where = self.screen if self.field is None else f"{self.screen}/{self.field}"
        if self.rule_index is not None:
            where += f" rule #{self.rule_index + 1}"
        return f"{where}: [{self.code}] {self.message}"


def _check_group(
    conditions: Conditions,
    reachable: Set[str],
    screen: str,
    field: Optional[str],
) -> List[Issue]:
    try:
        group: Optional[ConditionGroup] = coerce_conditions(conditions)
    except ConditionSyntaxError as e:
        return [Issue(screen=screen, field=field, code="unparseable-conditions", message=str(e))]
    if group is None:
        return []

    issues: List[Issue] = []

    def add(code: str, message: str, rule_index: Optional[int] = None) -> None:
        issues.append(
            Issue(screen=screen, field=field, rule_index=rule_index, code=code, message=message)
        )

    if group.operator not in [g.value for g in GroupOperator]:
        add("bad-group-operator", f"group operator must be 'and' or 'or', got {group.operator!r}")

    for i, rule in enumerate(group.rules):
        if not isinstance(rule.field, str) or not rule.field.strip():
            add("missing-field", "rule does not name a field", i)
        elif rule.field not in reachable and rule.field.split(".")[0] not in reachable:
            add("unreachable-field", f"{rule.field!r} is not answered before this point", i)

        op = ConditionOperator.lookup(rule.operator)
        if op is None:
            add("unknown-operator", f"unknown operator {rule.operator!r}", i)
        elif needs_value(op) and rule.value is None:
            add("missing-value", f"operator {rule.operator!r} needs a value", i)

    return issues


def check_template(template: Template) -> List[Issue]:
    """
    Flag conditions that can never behave as authored. The evaluator quietly
    treats all of these as false, so this is the only place they surface.
    """
    issues: List[Issue] = []
    for screen in template.ordered_screens():
        before = {f.name for f in available_fields(template, screen.id)}
        issues.extend(_check_group(screen.conditions, before, screen.id, None))

        for f in screen.ordered_fields():
            reachable = {a.name for a in available_fields(template, screen.id, f.name)}
            issues.extend(_check_group(f.conditions, reachable, screen.id, f.name))
    return issues
