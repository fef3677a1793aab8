from __future__ import annotations

from typing import List, Optional

import structlog

from smartflow.errors import ConditionSyntaxError
from smartflow.models.template import (
    AvailableField,
    Screen,
    ScreenView,
    Template,
    TemplateField,
)
from smartflow.rules.evaluator import AnswerMap, evaluate
from smartflow.rules.serde import ConditionsLike, coerce_conditions

log = structlog.get_logger(__name__)


def is_visible(conditions: ConditionsLike, answers: AnswerMap) -> bool:
    try:
        group = coerce_conditions(conditions)
    except ConditionSyntaxError as e:
        # Stored blob is broken: hide the item until an admin re-saves it
        log.warning("unparseable_conditions", error=str(e))
        return False
    return evaluate(group, answers)


def visible_fields(screen: Screen, answers: AnswerMap) -> List[TemplateField]:
    return [f for f in screen.ordered_fields() if is_visible(f.conditions, answers)]


def visible_screens(template: Template, answers: AnswerMap) -> List[Screen]:
    return [s for s in template.ordered_screens() if is_visible(s.conditions, answers)]


def walk(template: Template, answers: AnswerMap) -> List[ScreenView]:
    """The screens a respondent will see, in order, each with its visible fields."""
    return [
        ScreenView(screen=s, fields=visible_fields(s, answers))
        for s in visible_screens(template, answers)
    ]


def _as_available(f: TemplateField, screen: Screen) -> AvailableField:
    return AvailableField(name=f.name, label=f.label, screen_title=screen.title, type=f.type)


def available_fields(
    template: Template,
    screen_id: str,
    field_name: Optional[str] = None,
) -> List[AvailableField]:
    """
    Fields a condition on the given screen (or on one of its fields) may refer to:
    everything on earlier screens, plus the fields above `field_name` on the
    same screen.
    """
    screens = template.ordered_screens()
    idx = next((i for i, s in enumerate(screens) if s.id == screen_id), None)
    if idx is None:
        raise KeyError(f"no screen {screen_id!r} in template {template.id!r}")

    out: List[AvailableField] = []
    for s in screens[:idx]:
        out.extend(_as_available(f, s) for f in s.ordered_fields())

    if field_name is not None:
        current = screens[idx]
        for f in current.ordered_fields():
            if f.name == field_name:
                break
            out.append(_as_available(f, current))
        else:
            raise KeyError(f"no field {field_name!r} on screen {screen_id!r}")

    return out
