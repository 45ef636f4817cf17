"""Scrub identifying and structural markdown out of issue and comment text."""

from __future__ import annotations

import re

ALIAS_PLACEHOLDER = "@github"
URL_PLACEHOLDER = "#url"
CODE_PLACEHOLDER = "#code"

# Applied in order; later patterns see the output of earlier ones.
_SUBSTITUTIONS: list[tuple[re.Pattern[str], str]] = [
    # @alias, @alias-suffix, @alias_suffix
    (re.compile(r"@\w+(-\w+|_\w+)?"), ALIAS_PLACEHOLDER),
    # [label](target)
    (re.compile(r"\[.*?\]\(.*?\)"), URL_PLACEHOLDER),
    (re.compile(r"https?://\S+"), URL_PLACEHOLDER),
    # blockquotes
    (re.compile(r"^>.*", re.MULTILINE), ""),
    # table rows, then separator rows
    (re.compile(r"^\s*\|.*\|\s*$", re.MULTILINE), ""),
    (re.compile(r"^\s*-+:?-+\s*$", re.MULTILINE), ""),
    # fenced code blocks
    (re.compile(r"```.*?```|````.*?````", re.DOTALL), CODE_PLACEHOLDER),
    # inline code
    (re.compile(r"`(.*?)`"), CODE_PLACEHOLDER),
]


def scrub_content(content: str | None) -> str | None:
    """Replace mentions, links and code with placeholders and drop quotes and tables.

    Empty or None input is returned as-is. The placeholders survive a second
    pass unchanged, so scrubbing is idempotent.
    """
    if not content:
        return content

    for pattern, replacement in _SUBSTITUTIONS:
        content = pattern.sub(replacement, content)

    return content.strip()
