"""Sentence corpus output: quoted line writer and the dedupe/sort pass."""

from __future__ import annotations

import logging
from typing import Iterable, TextIO

from ghcorpus_core.validator import validate_sentence

logger = logging.getLogger(__name__)


def _fold(sentence: str) -> str:
    # Ordinal ignore-case: upper-case one code point at a time, leaving
    # characters whose upper case is longer (e.g. "\u00df" -> "SS") as they are.
    return "".join(upper if len(upper := ch.upper()) == 1 else ch for ch in sentence)


class CorpusDeduplicator:
    """Case-insensitive unique set of validated sentence lines.

    The first casing seen for a sentence is the one kept. sentences()
    returns the lines sorted ascending under the same case-insensitive
    ordering.
    """

    def __init__(self) -> None:
        self._sentences: dict[str, str] = {}

    def add(self, line: str) -> bool:
        """Validate *line* and keep it if no case-insensitive match is held yet."""
        sentence = validate_sentence(line)
        if not sentence:
            return False

        key = _fold(sentence)
        if key in self._sentences:
            return False
        self._sentences[key] = sentence
        return True

    def sentences(self) -> list[str]:
        return sorted(self._sentences.values(), key=_fold)

    def __contains__(self, sentence: object) -> bool:
        return isinstance(sentence, str) and _fold(sentence) in self._sentences

    def __len__(self) -> int:
        return len(self._sentences)


def quote_sentence(sentence: str) -> str:
    """Wrap *sentence* in double quotes, doubling any quotes inside it."""
    escaped = sentence.replace('"', '""')
    return f'"{escaped}"'


def write_sentences(fp: TextIO, sentences: Iterable[str]) -> int:
    """Append each sentence to *fp* as one quoted line; return the number written."""
    written = 0
    for sentence in sentences:
        fp.write(quote_sentence(sentence) + "\n")
        written += 1
    fp.flush()
    return written


def sort_and_deduplicate_file(path: str) -> int:
    """Rewrite the sentence file at *path* validated, deduplicated and sorted.

    The whole file is read before it is truncated. Returns the number of
    sentences in the rewritten file.
    """
    corpus = CorpusDeduplicator()
    lines_read = 0

    with open(path, encoding="utf-8") as f:
        for line in f:
            lines_read += 1
            corpus.add(line.rstrip("\r\n"))

    with open(path, "w", encoding="utf-8") as f:
        for sentence in corpus.sentences():
            f.write(sentence + "\n")

    logger.info("Deduplicated %s: %d lines read, %d distinct sentences kept", path, lines_read, len(corpus))
    return len(corpus)
