"""Decomposition of slash-delimited paths inside archives."""

import re
from dataclasses import dataclass, field
from typing import List

SEPARATOR = "/"

_SEGMENT = re.compile(r"[^/]+")


def decompose(path: str) -> List[str]:
    """Split ``path`` into its non-empty segments.

    Leading, trailing and doubled separators produce empty components,
    which are dropped.

    Examples:
        >>> decompose("a/inner.zip//b/")
        ['a', 'inner.zip', 'b']
        >>> decompose("/")
        []
    """
    return _SEGMENT.findall(path)


def remaining_path(path: str, consumed: int) -> str:
    """Return the part of ``path`` that follows its first ``consumed`` segments.

    The suffix is sliced from the original string, so separators are kept
    exactly as the caller wrote them.

    Raises:
        ValueError: If ``path`` has fewer than ``consumed`` segments
    """
    if consumed < 0:
        raise ValueError(f"consumed must not be negative: {consumed}")
    if consumed == 0:
        return path

    end = None
    for index, match in enumerate(_SEGMENT.finditer(path), start=1):
        if index == consumed:
            end = match.end()
            break

    if end is None:
        raise ValueError(f"Path '{path}' has fewer than {consumed} segment(s)")
    return path[end:]


@dataclass(frozen=True)
class LogicalPath:
    """A target path inside an archive together with its segments."""
    raw: str
    segments: List[str] = field(init=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "segments", decompose(self.raw))

    def remainder(self, consumed: int) -> "LogicalPath":
        """Path left after the first ``consumed`` segments."""
        return LogicalPath(remaining_path(self.raw, consumed))

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return self.raw
