"""Streaming reader for a top-level JSON array.

ghdump exports can run to hundreds of megabytes, so the array is decoded one
element at a time from a bounded text buffer instead of json.load()-ing the
whole file. Only the element currently being decoded is held in memory.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterator, TextIO

from ghcorpus_core.errors import MalformedInputError
from ghcorpus_core.models import IssueRecord

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
_WHITESPACE = re.compile(r"\s*")
# A decode error this far before the end of the buffer cannot be caused by a
# token cut off at the chunk edge (longest such token: a surrogate-pair escape).
_LOOKAHEAD = 16


class _ArrayStream:
    def __init__(self, fp: TextIO, chunk_size: int):
        self._fp = fp
        self._chunk_size = chunk_size
        self._decoder = json.JSONDecoder()
        self._buf = ""
        self._pos = 0
        self._eof = False

    def _fill(self) -> bool:
        """Append the next chunk, dropping everything already consumed."""
        if self._eof:
            return False
        chunk = self._fp.read(self._chunk_size)
        if not chunk:
            self._eof = True
            return False
        self._buf = self._buf[self._pos :] + chunk
        self._pos = 0
        return True

    def _peek(self) -> str | None:
        """Skip whitespace and return the next character, or None at end of input."""
        while True:
            self._pos = _WHITESPACE.match(self._buf, self._pos).end()
            if self._pos < len(self._buf):
                return self._buf[self._pos]
            if not self._fill():
                return None

    def _maybe_truncated(self, error: json.JSONDecodeError) -> bool:
        if error.msg.startswith("Unterminated string"):
            return True
        return error.pos + _LOOKAHEAD >= len(self._buf)

    def _decode_value(self) -> Any:
        while True:
            try:
                value, end = self._decoder.raw_decode(self._buf, self._pos)
            except json.JSONDecodeError as e:
                # The element may simply be split across chunks.
                if self._maybe_truncated(e) and self._fill():
                    continue
                raise MalformedInputError(f"invalid JSON: {e.msg}") from e
            except RecursionError as e:
                raise MalformedInputError("invalid JSON: nested too deeply") from e
            except ValueError as e:
                raise MalformedInputError(f"invalid JSON: {e}") from e
            # A number ending exactly at the buffer edge may be truncated.
            if end == len(self._buf) and self._fill():
                continue
            self._pos = end
            return value

    def items(self) -> Iterator[Any]:
        if self._peek() != "[":
            raise MalformedInputError("expected a JSON array at the top level")
        self._pos += 1

        first = True
        while True:
            ch = self._peek()
            if ch is None:
                raise MalformedInputError("unexpected end of input inside the top-level array")
            if ch == "]":
                self._pos += 1
                return
            if not first:
                if ch != ",":
                    raise MalformedInputError(f"expected ',' or ']' between array elements, found {ch!r}")
                self._pos += 1
                if self._peek() is None:
                    raise MalformedInputError("unexpected end of input inside the top-level array")
            yield self._decode_value()
            first = False


def iter_json_array(fp: TextIO, chunk_size: int = _CHUNK_SIZE) -> Iterator[Any]:
    """Yield the decoded elements of the JSON array in *fp*, in order.

    Raises MalformedInputError if the document is not an array or is not
    valid JSON. Elements already yielded before the error stay yielded.
    """
    return _ArrayStream(fp, chunk_size).items()


def iter_issues(fp: TextIO, chunk_size: int = _CHUNK_SIZE) -> Iterator[IssueRecord]:
    """Yield IssueRecords from a ghdump export one at a time."""
    for index, item in enumerate(iter_json_array(fp, chunk_size)):
        try:
            yield IssueRecord.from_dict(item)
        except MalformedInputError as e:
            raise MalformedInputError(f"issue #{index}: {e}") from e
