"""Final per-line cleanup applied to the intermediate sentence file."""

from __future__ import annotations

import re

# Each pattern is anchored at the start and runs to the end, so a match
# empties the whole sentence rather than just the matched keyword.
_DISCARD_PATTERNS: list[re.Pattern[str]] = [
    # Dependency-flow metadata lines: "- **Build**: 20230101.1"
    re.compile(r"^- \*\*(Branch|Build|Coherency Updates|Commit|Date Produced)\*\*: .*", re.DOTALL),
    # Pipeline trigger comments: "/azp run"
    re.compile(r"^/azp.*", re.DOTALL),
    # Issue-closing references: "Fixes #123", "Closes: owner/repo#45"
    re.compile(r"^(Fix|Fixes|Close|Closes|Resolves)(:?)\s+#\d+.*", re.DOTALL | re.IGNORECASE),
    re.compile(
        r"^(Fix|Fixes|Close|Closes|Resolves)(:?)\s+[a-zA-Z0-9_-]+/[a-zA-Z0-9_-]+#\d+.*",
        re.DOTALL | re.IGNORECASE,
    ),
]

_WRAPPER_TAGS = (
    "<details>",
    "</details>",
    "<summary>",
    "</summary>",
    "<div>",
    "</div>",
    "<span>",
    "</span>",
)


def _unwrap(sentence: str) -> str:
    if sentence.startswith('"'):
        sentence = sentence[1:]
    if sentence.endswith('"'):
        sentence = sentence[:-1]
    return sentence


def validate_sentence(sentence: str) -> str:
    """Clean one quoted sentence line; return "" if it should be dropped.

    The input is expected to be wrapped in double quotes as written by
    write_sentences(). The quotes are removed for matching and put back on
    the way out.
    """
    if not sentence or not sentence.strip():
        return ""

    sentence = _unwrap(sentence)

    for pattern in _DISCARD_PATTERNS:
        sentence = pattern.sub("", sentence)

    for tag in _WRAPPER_TAGS:
        sentence = sentence.replace(tag, "")

    sentence = sentence.strip()
    if not sentence:
        return ""

    return f'"{sentence}"'
