from __future__ import annotations

import re
from typing import Iterator

_LINE_BREAK = re.compile(r"\r\n|\n|\r")
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


def split_into_sentences(content: str | None) -> Iterator[str]:
    """Yield the sentences of *content*, line by line, in order.

    A line is split wherever whitespace follows '.', '!' or '?'; the
    punctuation stays with the sentence before it. Blank lines are skipped.
    """
    if not content:
        return

    for line in _LINE_BREAK.split(content):
        line = line.strip()
        if not line:
            continue
        for sentence in _SENTENCE_BREAK.split(line):
            if sentence:
                yield sentence
