"""Exceptions and failure kinds shared by the pipeline and the CLI.

The pipeline raises; run_ingestion() catches at the boundary and reports a
FailureKind so the CLI alone decides how a failure maps to an exit status.
"""

from __future__ import annotations

from enum import Enum


class GhCorpusError(Exception):
    """Base class for errors raised by ghcorpus_core."""


class MalformedInputError(GhCorpusError):
    """The input is not valid JSON or does not have the expected shape."""


class FailureKind(str, Enum):
    INPUT_NOT_FOUND = "input_not_found"
    PARSE_ERROR = "parse_error"
    IO_ERROR = "io_error"
    UNEXPECTED = "unexpected"
