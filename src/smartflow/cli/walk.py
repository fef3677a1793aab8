from __future__ import annotations

from typing import Any, Dict, List

from smartflow.flow.visibility import walk
from smartflow.models.template import Template


def run(template: Template, answers: Dict[str, Any]) -> List[str]:
    """Render the navigation plan for a set of answers, one line per item."""
    views = walk(template, answers)
    shown = {v.screen.id for v in views}

    lines: List[str] = []
    for s in template.ordered_screens():
        if s.id not in shown:
            lines.append(f"- {s.id} ({s.title}) hidden")
            continue
        view = next(v for v in views if v.screen.id == s.id)
        visible = {f.name for f in view.fields}
        lines.append(f"+ {s.id} ({s.title})")
        for f in s.ordered_fields():
            mark = "+" if f.name in visible else "-"
            value = answers.get(f.name)
            suffix = f" = {value!r}" if value is not None and f.name in visible else ""
            lines.append(f"    {mark} {f.name}{suffix}")

    lines.append(
        f"{len(views)} of {len(template.screens)} screens visible, "
        f"{sum(len(v.fields) for v in views)} fields to fill"
    )
    return lines
