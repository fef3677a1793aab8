"""
Tagged values seen by the rule evaluator.

Answers arrive from loosely typed form state (strings, numbers, booleans,
multi-select lists, or nothing at all). Every raw answer and every rule operand
is tagged once at the evaluator boundary, and each tag spells out its own
coercions:

  text()    -> the string form used by the string operators
  number()  -> a float, or None when the value is not numeric
  empty()   -> the isEmpty predicate
"""
from __future__ import annotations

import json
import math
import re
from typing import Any, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

# Plain decimal / exponent literals only. float() alone would also accept
# "nan", "inf" and "1_000".
_NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def _number_text(x: float) -> str:
    # spelled the way the browser form state prints them
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    if x.is_integer():
        return str(int(x))
    return repr(x)


def parse_number(text: str) -> Optional[float]:
    s = text.strip()
    if not _NUMERIC_RE.match(s):
        return None
    x = float(s)
    if math.isinf(x):
        return None
    return x


class Missing(BaseModel):
    model_config = ConfigDict(frozen=True)

    def text(self) -> str:
        return ""

    def number(self) -> Optional[float]:
        return None

    def empty(self) -> bool:
        return True


class StringVal(BaseModel):
    model_config = ConfigDict(frozen=True)
    raw: str

    def text(self) -> str:
        return self.raw

    def number(self) -> Optional[float]:
        return parse_number(self.raw)

    def empty(self) -> bool:
        return self.raw.strip() == ""


class NumberVal(BaseModel):
    model_config = ConfigDict(frozen=True)
    raw: float

    def text(self) -> str:
        return _number_text(self.raw)

    def number(self) -> Optional[float]:
        if math.isnan(self.raw) or math.isinf(self.raw):
            return None
        return self.raw

    def empty(self) -> bool:
        return False


class BoolVal(BaseModel):
    model_config = ConfigDict(frozen=True)
    raw: bool

    def text(self) -> str:
        return "true" if self.raw else "false"

    def number(self) -> Optional[float]:
        return None

    def empty(self) -> bool:
        return False


class ListVal(BaseModel):
    model_config = ConfigDict(frozen=True)
    items: Tuple[str, ...]   # item texts

    def text(self) -> str:
        return ",".join(self.items)

    def number(self) -> Optional[float]:
        return None

    def empty(self) -> bool:
        return len(self.items) == 0


Value = Union[Missing, StringVal, NumberVal, BoolVal, ListVal]

MISSING = Missing()


def tag(raw: Any) -> Value:
    if raw is None:
        return MISSING
    # bool before int: bool is an int subclass
    if isinstance(raw, bool):
        return BoolVal(raw=raw)
    if isinstance(raw, (int, float)):
        return NumberVal(raw=float(raw))
    if isinstance(raw, str):
        return StringVal(raw=raw)
    if isinstance(raw, (list, tuple, set, frozenset)):
        return ListVal(items=tuple(tag(x).text() for x in raw))
    if isinstance(raw, Mapping):
        # nested answers are compared through dot paths; the object itself
        # only counts as filled in or not
        if not raw:
            return MISSING
        return StringVal(raw=json.dumps(raw, sort_keys=True, default=str))
    return StringVal(raw=str(raw))
