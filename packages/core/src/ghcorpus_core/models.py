"""Issue and comment records read from a ghdump export.

Each record type has an explicit wire-name → attribute table; a single
generic decoder applies it, so renaming a JSON key is a one-line change.
Records are transient: the pipeline decodes one issue, scrubs it in place,
writes its sentences and drops it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from ghcorpus_core.errors import MalformedInputError

# .NET serializers emit 1 to 7 fractional digits with trailing zeros dropped;
# older fromisoformat() only takes exactly 3 or 6.
_FRACTION_RE = re.compile(r"(?<=\d\d:\d\d:\d\d)\.(\d+)")


def _six_digit_fraction(match: re.Match) -> str:
    return "." + (match.group(1) + "000000")[:6]


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise MalformedInputError(f"expected a string, got {type(value).__name__}")
    return str(value)


def _nullable_text(value: Any) -> str | None:
    if value is None:
        return None
    return _text(value)


def _timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise MalformedInputError(f"expected an ISO-8601 timestamp, got {type(value).__name__}")
    normalized = _FRACTION_RE.sub(_six_digit_fraction, value, count=1)
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(normalized)
    except ValueError as e:
        raise MalformedInputError(f"invalid timestamp {value!r}") from e


def _comments(value: Any) -> list[CommentRecord]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedInputError(f"expected a list of comments, got {type(value).__name__}")
    return [CommentRecord.from_dict(item) for item in value]


def _decode(data: Any, fields: dict[str, tuple[str, Callable[[Any], Any]]], kind: str) -> dict[str, Any]:
    """Map a decoded JSON object onto constructor kwargs using a field table.

    Unknown keys are ignored; missing keys are left out so the dataclass
    defaults apply.
    """
    if not isinstance(data, dict):
        raise MalformedInputError(f"expected a JSON object for {kind}, got {type(data).__name__}")
    return {attr: convert(data[wire]) for wire, (attr, convert) in fields.items() if wire in data}


@dataclass
class CommentRecord:
    """A single comment on an issue or discussion."""

    id: str = ""
    parent_id: str = ""
    author: str = ""
    content: str | None = None
    created_at: datetime | None = None
    url: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> CommentRecord:
        return cls(**_decode(data, COMMENT_FIELDS, "comment"))


@dataclass
class IssueRecord:
    """An issue or discussion thread with its comments in posting order."""

    id: str = ""
    author: str = ""
    title: str = ""
    url: str = ""
    created_at: datetime | None = None
    last_updated: datetime | None = None
    body: str | None = None
    comments: list[CommentRecord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> IssueRecord:
        return cls(**_decode(data, ISSUE_FIELDS, "issue"))


COMMENT_FIELDS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "id": ("id", _text),
    "parentId": ("parent_id", _text),
    "author": ("author", _text),
    "content": ("content", _nullable_text),
    "createdAt": ("created_at", _timestamp),
    "url": ("url", _text),
}

ISSUE_FIELDS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "id": ("id", _text),
    "author": ("author", _text),
    "title": ("title", _text),
    "url": ("url", _text),
    "createdAt": ("created_at", _timestamp),
    "lastUpdated": ("last_updated", _timestamp),
    "body": ("body", _nullable_text),
    "comments": ("comments", _comments),
}
