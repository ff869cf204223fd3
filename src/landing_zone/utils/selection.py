"""Step selection parsing (comma separated names / glob patterns to step names).

Pure helper with no side effects.
"""
from __future__ import annotations

from fnmatch import fnmatchcase


def parse_selection(expression: str | None, step_names: list[str]) -> list[str] | None:
    """Return the step names matched by ``expression`` in plan order.

    ``None`` or an empty expression selects everything (returns None). Unknown
    plain names raise ``ValueError``; patterns that match nothing are ignored.
    """
    if not expression or not expression.strip():
        return None
    chosen: set[str] = set()
    for frag in expression.split(","):
        frag = frag.strip()
        if not frag:
            continue
        if any(ch in frag for ch in "*?["):
            chosen.update(n for n in step_names if fnmatchcase(n, frag))
        elif frag in step_names:
            chosen.add(frag)
        else:
            raise ValueError(f"Unknown step: {frag}")
    return [n for n in step_names if n in chosen]


__all__ = ["parse_selection"]
