from __future__ import annotations

from typing import Any, Mapping

_ABSENT = object()


def lookup(answers: Mapping[str, Any], path: str) -> Any:
    """
    Resolve an answer key. A literal key wins; otherwise "a.b.c" walks nested
    mappings. Returns None when nothing is there.
    """
    if not isinstance(answers, Mapping):
        return None

    direct = answers.get(path, _ABSENT)
    if direct is not _ABSENT:
        return direct

    cur: Any = answers
    for part in path.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return None
        cur = cur[part]
    return cur
