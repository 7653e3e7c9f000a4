"""Commit message analysis for determining release types."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Literal

from semver_calc.git import Commit
from semver_calc.logger import get_logger

logger = get_logger(__name__)

ReleaseType = Literal["major", "minor", "patch"]

# Breaking change marker, matched anywhere in the header (e.g. "feat(api)!: ...")
MAJOR_MARKER = "!:"

# Anchored at the start of the header, so "Merge feat: ..." is not a feature
MINOR_PATTERN = re.compile(r"^feat.*:")
PATCH_PATTERN = re.compile(r"^fix.*:")


@dataclass(frozen=True)
class BumpFlags:
    """Release types observed while walking the commit history.

    Flags only ever go from False to True. Several can be set at once;
    the version calculation decides which one wins.
    """

    major: bool = False
    minor: bool = False
    patch: bool = False
    commits_analysed: int = 0

    def record(self, release_type: ReleaseType | None) -> "BumpFlags":
        """Return new flags with one more commit of the given release type."""
        flags = replace(self, commits_analysed=self.commits_analysed + 1)
        if release_type is None:
            return flags
        return replace(flags, **{release_type: True})

    @property
    def release_type(self) -> ReleaseType | None:
        """Highest release type observed, or None."""
        if self.major:
            return "major"
        if self.minor:
            return "minor"
        if self.patch:
            return "patch"
        return None


def get_header(message: str) -> str:
    """Return the first line of a commit message."""
    return message.split("\n", 1)[0].rstrip("\r")


def classify_message(message: str) -> ReleaseType | None:
    """Determine the release type signalled by a commit message.

    Only the header line is inspected. The first matching rule wins, in
    the order major, minor, patch.

    Args:
        message: Raw commit message, possibly multi-line

    Returns:
        'major', 'minor', 'patch' or None if the message carries no signal
    """
    header = get_header(message)

    if MAJOR_MARKER in header:
        logger.debug("Major release signalled by header: %r", header)
        return "major"
    if MINOR_PATTERN.match(header):
        logger.debug("Minor release signalled by header: %r", header)
        return "minor"
    if PATCH_PATTERN.match(header):
        logger.debug("Patch release signalled by header: %r", header)
        return "patch"

    logger.debug("No semantic information in header: %r", header)
    return None


def classify_commit(commit: Commit) -> ReleaseType | None:
    """Determine the release type signalled by a commit.

    A commit without a readable message is reported and treated as
    carrying no signal.
    """
    if commit.message is None:
        logger.warning("Commit message of %s is not valid.", commit.id)
        return None
    return classify_message(commit.message)


def analyse_commits(commits: Iterable[Commit]) -> BumpFlags:
    """Fold a commit sequence into the release types it signals.

    Commits are consumed lazily in the given order. Consumption stops at
    the first breaking change, since nothing later can outrank it.

    Args:
        commits: Commits in history traversal order (newest first)

    Returns:
        Accumulated release type flags
    """
    flags = BumpFlags()

    for commit in commits:
        flags = flags.record(classify_commit(commit))

        if flags.major:
            logger.debug(
                "Commit %s contains a major release. Stop search here.", commit.id
            )
            break

    logger.debug("Analysed %d commits: %s", flags.commits_analysed, flags)
    return flags
