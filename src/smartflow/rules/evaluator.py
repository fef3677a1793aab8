from __future__ import annotations

from typing import Any, Mapping, Union

import structlog
from pydantic import ValidationError

from smartflow.models.conditions import ConditionGroup, ConditionRule
from smartflow.models.types import ConditionOperator, GroupOperator
from smartflow.rules.answers import lookup
from smartflow.rules.operators import OPERATORS
from smartflow.rules.values import tag

log = structlog.get_logger(__name__)

AnswerMap = Mapping[str, Any]


def evaluate_rule(rule: ConditionRule, answers: AnswerMap) -> bool:
    """
    One rule against the answers collected so far. Never raises: a rule with
    no field, a non-text field, or an operator we don't know is simply false.
    """
    if not isinstance(rule.field, str) or not rule.field.strip():
        return False

    op = ConditionOperator.lookup(rule.operator)
    if op is None:
        log.warning("unknown_condition_operator", operator=rule.operator, field=rule.field)
        return False

    try:
        actual = tag(lookup(answers, rule.field))
        expected = tag(rule.value)
        return bool(OPERATORS[op](actual, expected))
    except Exception as e:
        log.warning(
            "condition_rule_failed",
            field=rule.field,
            operator=rule.operator,
            error=f"{type(e).__name__}: {e}",
        )
        return False


def evaluate(
    group: Union[ConditionGroup, Mapping[str, Any], None],
    answers: AnswerMap,
) -> bool:
    # No conditions: always shown
    if group is None:
        return True

    if not isinstance(group, ConditionGroup):
        try:
            group = ConditionGroup.model_validate(group)
        except ValidationError as e:
            log.warning("malformed_condition_group", error=str(e))
            return False

    # Empty rule list counts as unconditional
    if not group.rules:
        return True

    results = [evaluate_rule(r, answers) for r in group.rules]

    if group.operator == GroupOperator.AND.value:
        return all(results)
    if group.operator == GroupOperator.OR.value:
        return any(results)

    log.warning("unknown_group_operator", operator=group.operator)
    return False
