from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from smartflow.models.conditions import ConditionGroup

# Stored JSON text is kept as-is and only parsed when visibility is decided,
# so one bad blob hides its own item instead of failing the whole template.
# A mapping that is not a condition group at all is kept unparsed for the same
# reason.
Conditions = Annotated[
    Union[ConditionGroup, str, Dict[str, Any], None],
    Field(union_mode="left_to_right"),
]


class TemplateField(BaseModel):
    name: str
    label: str = ""
    type: str = "text"
    required: bool = False
    order: int = 0
    conditions: Conditions = None


class Screen(BaseModel):
    id: str
    title: str = ""
    description: Optional[str] = None
    type: str = "standard"
    order: int = 0
    conditions: Conditions = None
    fields: List[TemplateField] = Field(default_factory=list)

    def ordered_fields(self) -> List[TemplateField]:
        return sorted(self.fields, key=lambda f: f.order)


class Template(BaseModel):
    id: str
    name: str = ""
    screens: List[Screen] = Field(default_factory=list)

    def ordered_screens(self) -> List[Screen]:
        return sorted(self.screens, key=lambda s: s.order)

    def screen(self, screen_id: str) -> Screen:
        for s in self.screens:
            if s.id == screen_id:
                return s
        raise KeyError(f"no screen {screen_id!r} in template {self.id!r}")


class AvailableField(BaseModel):
    name: str
    label: str
    screen_title: str
    type: str


class ScreenView(BaseModel):
    screen: Screen
    fields: List[TemplateField]


def template_from_document(doc: Any) -> Template:
    """
    Build a Template from a loaded YAML/JSON document. Screen ids and orders
    default to their position when the document leaves them out.
    """
    if not isinstance(doc, dict):
        raise ValueError("template document must be a mapping")

    screens = []
    for i, s in enumerate(doc.get("screens") or []):
        if not isinstance(s, dict):
            raise ValueError(f"screen #{i} must be a mapping")
        s = dict(s)
        s["id"] = str(s.get("id") or f"screen-{i + 1}")
        s.setdefault("order", i)
        fields = []
        for j, f in enumerate(s.get("fields") or []):
            if not isinstance(f, dict):
                raise ValueError(f"field #{j} on screen {s['id']!r} must be a mapping")
            f = dict(f)
            f.setdefault("order", j)
            fields.append(f)
        s["fields"] = fields
        screens.append(s)

    return Template.model_validate(
        {
            "id": str(doc.get("id") or doc.get("slug") or "template"),
            "name": doc.get("name") or "",
            "screens": screens,
        }
    )
