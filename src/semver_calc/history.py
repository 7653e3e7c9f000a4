"""History walk driving the next version calculation."""

from collections.abc import Iterator
from typing import Protocol

from semver_calc.analyser import analyse_commits
from semver_calc.git import Commit
from semver_calc.logger import get_logger
from semver_calc.prerelease import is_prerelease_branch
from semver_calc.version import (
    INITIAL_VERSION,
    AnalysisResult,
    build_result,
    parse_version,
)

logger = get_logger(__name__)


class Repository(Protocol):
    """Repository access needed by the history walk."""

    def resolve_head(self) -> str: ...

    def resolve_tag(self, tag_name: str) -> tuple[str, str]: ...

    def history_from(self, commit_id: str) -> Iterator[Commit]: ...

    def current_branch(self) -> str: ...


def calculate_next_version(
    repository: Repository,
    since: str | None = None,
    previous_version: str | None = None,
) -> AnalysisResult:
    """Calculate the next semantic version from commit history.

    Walks the history from ``since`` (or HEAD) newest first, stopping at the
    first breaking change, and bumps the previous version accordingly.

    Args:
        repository: Repository to read history and branch name from
        since: Commit hash to start the walk from (None = HEAD)
        previous_version: Version to bump, e.g. 'v1.2.3' (None = 0.0.0)

    Returns:
        Analysis result with the next version

    Raises:
        VersionError: If previous_version is not a semantic version
        GitError: If the repository cannot be read
    """
    # Validate before touching the repository
    if previous_version is None:
        previous_version = INITIAL_VERSION
    previous = parse_version(previous_version)

    branch = repository.current_branch()
    is_prerelease = is_prerelease_branch(branch)

    start = since if since is not None else repository.resolve_head()
    logger.info(
        "Analysing history from %s on branch %r (previous version %s)",
        start,
        branch,
        previous,
    )

    history = repository.history_from(start)
    try:
        flags = analyse_commits(history)
    finally:
        close = getattr(history, "close", None)
        if close is not None:
            close()

    result = build_result(flags, previous, is_prerelease)
    logger.info(
        "Next version %s after %d commits", result.version, result.commits_analysed
    )
    return result


def calculate_from_tag(
    repository: Repository,
    tag_name: str,
    previous_version: str | None = None,
) -> AnalysisResult:
    """Calculate the next version walking history from a tag.

    The tag name is used as the previous version unless one is given.

    Args:
        repository: Repository to read history and branch name from
        tag_name: Tag to start the walk from (e.g., 'v1.2.3')
        previous_version: Explicit previous version overriding the tag

    Returns:
        Analysis result with the next version

    Raises:
        VersionError: If the version hint is not a semantic version
        GitError: If the tag cannot be resolved or history cannot be read
    """
    commit_id, version_hint = repository.resolve_tag(tag_name)
    return calculate_next_version(
        repository,
        since=commit_id,
        previous_version=(
            version_hint if previous_version is None else previous_version
        ),
    )
