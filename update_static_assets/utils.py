"""Utility helpers for version strings, repository slugs and label lists."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

LEADING_INT_PATTERN = re.compile(r"^\s*(\d+)")


def leading_int(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of a version component, if there is one."""
    if not value:
        return None
    match = LEADING_INT_PATTERN.match(value)
    return int(match.group(1)) if match else None


def version_key(version: str) -> Tuple[Tuple[int, object], ...]:
    """Build a sort key that orders dotted versions numerically.

    ``"9.0.0"`` sorts before ``"10.0.0"``. Components without a leading
    integer sort after numeric ones.
    """
    key = []
    for part in version.split("."):
        number = leading_int(part)
        if number is None:
            key.append((1, part))
        else:
            key.append((0, number, part[len(str(number)):]))
    return tuple(key)


def split_repository(repo: Optional[str]) -> Tuple[str, str]:
    """Split an ``owner/name`` repository slug."""
    owner, _, name = (repo or "/").partition("/")
    return owner, name


def split_labels(labels: Optional[str]) -> List[str]:
    """Turn a comma-separated label list into clean label names."""
    if not labels:
        return []
    return [label.strip() for label in labels.split(",") if label.strip()]
