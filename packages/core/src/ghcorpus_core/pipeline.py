"""Two-pass ingestion: scrub and split every record, then dedupe and sort."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from ghcorpus_core.config import DEFAULT_EXCLUDED_AUTHORS
from ghcorpus_core.corpus import sort_and_deduplicate_file, write_sentences
from ghcorpus_core.errors import FailureKind, MalformedInputError
from ghcorpus_core.models import IssueRecord
from ghcorpus_core.reader import iter_issues
from ghcorpus_core.scrubber import scrub_content
from ghcorpus_core.splitter import split_into_sentences

logger = logging.getLogger(__name__)


@dataclass
class IngestionSummary:
    """Counts from a completed run.

    issues_scrubbed and comments_scrubbed only include records by authors
    outside the excluded set. sentences_written is the number of lines
    appended in the first pass; distinct_sentences is what survived the
    dedupe pass.
    """

    output_file: str
    issues_scrubbed: int = 0
    comments_scrubbed: int = 0
    sentences_written: int = 0
    distinct_sentences: int = 0


@dataclass
class IngestionResult:
    """Outcome of run_ingestion(): a summary on success, a failure kind otherwise."""

    output_file: str
    summary: IngestionSummary | None = None
    failure: FailureKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None


def output_path_for(input_file: str, output_dir: str | None = None) -> str:
    """Return <output_dir>/<input stem>.csv, defaulting to the working directory."""
    directory = output_dir or os.getcwd()
    return os.path.join(directory, f"{Path(input_file).stem}.csv")


class IngestionPipeline:
    """Scrub a ghdump export into a sentence corpus file."""

    def __init__(self, excluded_authors: Iterable[str] = DEFAULT_EXCLUDED_AUTHORS):
        self.excluded_authors = frozenset(excluded_authors)

    def is_excluded(self, author: str) -> bool:
        return author in self.excluded_authors

    def scrub_issue(self, issue: IssueRecord) -> tuple[list[str], bool]:
        """Scrub *issue* in place and return (sentences, issue_counted).

        The body is skipped when the issue author is excluded, but the
        comments are still processed. Excluded comments are removed from
        issue.comments.
        """
        sentences: list[str] = []
        counted = False

        if not self.is_excluded(issue.author):
            issue.body = scrub_content(issue.body)
            sentences.extend(split_into_sentences(issue.body))
            counted = True

        issue.comments[:] = [c for c in issue.comments if not self.is_excluded(c.author)]

        for comment in issue.comments:
            comment.content = scrub_content(comment.content)
            sentences.extend(split_into_sentences(comment.content))

        return sentences, counted

    def run(self, input_file: str, output_file: str) -> IngestionSummary:
        """Run both passes. Any exception aborts the run and leaves partial output behind."""
        summary = IngestionSummary(output_file=output_file)

        with open(input_file, encoding="utf-8") as src, open(output_file, "w", encoding="utf-8") as out:
            for issue in iter_issues(src):
                sentences, counted = self.scrub_issue(issue)
                if counted:
                    summary.issues_scrubbed += 1
                summary.comments_scrubbed += len(issue.comments)
                summary.sentences_written += write_sentences(out, sentences)
                logger.debug(
                    "Issue %s: %d sentences, %d comments kept",
                    issue.id or "?",
                    len(sentences),
                    len(issue.comments),
                )

        logger.info(
            "First pass complete: %d issues, %d comments, %d sentences",
            summary.issues_scrubbed,
            summary.comments_scrubbed,
            summary.sentences_written,
        )

        summary.distinct_sentences = sort_and_deduplicate_file(output_file)
        return summary


def run_ingestion(
    input_file: str,
    output_dir: str | None = None,
    excluded_authors: Iterable[str] | None = None,
) -> IngestionResult:
    """Run the pipeline and report failures as a FailureKind instead of raising."""
    output_file = output_path_for(input_file, output_dir)

    if not os.path.isfile(input_file):
        logger.error("Input file not found: %s", input_file)
        return IngestionResult(
            output_file=output_file,
            failure=FailureKind.INPUT_NOT_FOUND,
            message=f"GitHub data file '{input_file}' not found!",
        )

    pipeline = IngestionPipeline(DEFAULT_EXCLUDED_AUTHORS if excluded_authors is None else excluded_authors)
    try:
        summary = pipeline.run(input_file, output_file)
    except (MalformedInputError, UnicodeDecodeError) as e:
        logger.error("Malformed input in %s: %s", input_file, e)
        logger.debug("Parse failure details", exc_info=True)
        return IngestionResult(
            output_file=output_file,
            failure=FailureKind.PARSE_ERROR,
            message=f"The operation failed: {input_file} is not a valid GitHub data file ({e}).",
        )
    except OSError as e:
        logger.error("I/O failure while processing %s: %s", input_file, e)
        logger.debug("I/O failure details", exc_info=True)
        return IngestionResult(
            output_file=output_file,
            failure=FailureKind.IO_ERROR,
            message=f"The operation failed: {e}",
        )
    except Exception as e:
        logger.error("Unexpected failure while processing %s: %s: %s", input_file, type(e).__name__, e)
        logger.debug("Failure details", exc_info=True)
        return IngestionResult(
            output_file=output_file,
            failure=FailureKind.UNEXPECTED,
            message="The operation failed",
        )

    return IngestionResult(output_file=output_file, summary=summary)
