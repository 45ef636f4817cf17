"""Author tallies for a ghdump export.

Used to spot automation accounts that should be added to the excluded set:
bots tend to dominate the top of the list.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from ghcorpus_core.models import IssueRecord


def tally_authors(issues: Iterable[IssueRecord], excluded_authors: Iterable[str] = ()) -> Counter[str]:
    """Count issues and comments per author, skipping excluded and blank authors."""
    excluded = frozenset(excluded_authors)
    counts: Counter[str] = Counter()

    for issue in issues:
        if issue.author and issue.author not in excluded:
            counts[issue.author] += 1
        for comment in issue.comments:
            if comment.author and comment.author not in excluded:
                counts[comment.author] += 1

    return counts


def sorted_authors(counts: Counter[str]) -> list[str]:
    """Distinct author names, case-insensitively sorted."""
    return sorted(counts, key=lambda name: (name.upper(), name))
