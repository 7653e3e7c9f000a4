"""Git operations for semver-calc."""

import subprocess
from collections.abc import Iterator
from pathlib import Path
from typing import IO, NamedTuple, cast

from semver_calc.logger import get_logger

logger = get_logger(__name__)

# Separators used in 'git log' output: NUL ends a record (-z), the
# first newline separates the commit hash from its raw message
RECORD_SEPARATOR = "\0"

# Characters read from 'git log' per chunk while streaming history
READ_CHUNK_SIZE = 8192


class GitError(Exception):
    """Raised when git operations fail."""

    pass


class Commit(NamedTuple):
    """A commit as seen by the history walk."""

    id: str
    message: str | None


def get_git_root(path: Path | str | None = None) -> Path:
    """Get the root directory of the git repository.

    Linked worktrees resolve to their own working directory.

    Args:
        path: Directory inside the repository (default: current directory)

    Returns:
        Path to git repository root

    Raises:
        GitError: If not in a git repository
    """
    cwd = Path(path) if path is not None else Path.cwd()
    if not cwd.is_dir():
        raise GitError(f"Path '{cwd}' is not a directory")

    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            check=True,
        )
        return Path(result.stdout.strip())
    except subprocess.CalledProcessError as e:
        error_msg = e.stderr.strip()
        if "not a git repository" in error_msg.lower():
            raise GitError(f"Path '{cwd}' is not a git repository")
        raise GitError(f"Git command failed: {error_msg}")
    except FileNotFoundError:
        raise GitError("Git not found. Please ensure git is installed.")


def _run_git_command(args: list[str], cwd: Path | str) -> str:
    """Run a git command and return output.

    Args:
        args: Git command arguments (e.g., ['rev-parse', 'HEAD'])
        cwd: Working directory for git command

    Returns:
        Command output as string

    Raises:
        GitError: If git command fails
    """
    try:
        result = subprocess.run(
            ["git"] + args,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()
    except subprocess.CalledProcessError as e:
        raise GitError(f"Git command failed: {e.stderr.strip()}")
    except FileNotFoundError:
        raise GitError("Git not found. Please ensure git is installed.")


def resolve_commit(rev: str, git_root: Path) -> str:
    """Resolve a revision to a full commit hash.

    Args:
        rev: Commit hash, branch, tag or any other revision
        git_root: Git repository root path

    Returns:
        Full commit hash

    Raises:
        GitError: If the revision does not name a commit
    """
    try:
        return _run_git_command(
            ["rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"], cwd=git_root
        )
    except GitError:
        raise GitError(f"'{rev}' does not name a commit")


def resolve_head(git_root: Path) -> str:
    """Resolve HEAD to a full commit hash.

    Raises:
        GitError: If HEAD does not point at a commit (e.g. empty repository)
    """
    return resolve_commit("HEAD", git_root)


def resolve_tag(tag_name: str, git_root: Path) -> str:
    """Resolve a tag to the commit it points at.

    Lightweight and annotated tags are both peeled to their commit.

    Args:
        tag_name: Name of the tag (e.g., 'v1.2.3')
        git_root: Git repository root path

    Returns:
        Full commit hash

    Raises:
        GitError: If the tag does not exist
    """
    try:
        commit_id = _run_git_command(
            ["rev-parse", "--verify", "--quiet", f"refs/tags/{tag_name}^{{commit}}"],
            cwd=git_root,
        )
    except GitError:
        raise GitError(f"'{tag_name}' is not a valid tag name")

    logger.debug("Tag %r is at commit %s", tag_name, commit_id)
    return commit_id


def get_current_branch(git_root: Path) -> str:
    """Get the short name of the current branch.

    Args:
        git_root: Git repository root path

    Returns:
        Current branch name, or 'HEAD' when detached

    Raises:
        GitError: If HEAD cannot be read
    """
    try:
        return _run_git_command(["rev-parse", "--abbrev-ref", "HEAD"], cwd=git_root)
    except GitError as e:
        raise GitError(f"Failed to get current branch: {e}")


def _parse_log_record(record: str) -> Commit:
    """Split one 'git log' record into commit hash and message."""
    commit_id, _, message = record.partition("\n")
    return Commit(id=commit_id.strip(), message=message)


def iter_commits(since: str, git_root: Path) -> Iterator[Commit]:
    """Iterate over the history reachable from a commit, newest first.

    Output is streamed from 'git log', so a consumer that stops early does
    not pay for reading the rest of the history. The git process is
    terminated when the iterator is closed.

    Args:
        since: Commit hash to start from
        git_root: Git repository root path

    Yields:
        Commits in git's default history order

    Raises:
        GitError: If git cannot walk the history
    """
    try:
        process = subprocess.Popen(
            ["git", "log", "-z", "--format=%H%n%B", since, "--"],
            cwd=str(git_root),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("Git not found. Please ensure git is installed.")

    stdout = cast(IO[str], process.stdout)
    finished = False
    try:
        buffer = ""
        while True:
            chunk = stdout.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            buffer += chunk
            *records, buffer = buffer.split(RECORD_SEPARATOR)
            for record in records:
                yield _parse_log_record(record)

        if buffer.strip():
            yield _parse_log_record(buffer)

        returncode = process.wait()
        finished = True
        if returncode != 0:
            stderr = process.stderr.read().strip() if process.stderr else ""
            raise GitError(f"Failed to read history from {since}: {stderr}")
    finally:
        if not finished:
            process.kill()
            process.wait()
        stdout.close()
        if process.stderr:
            process.stderr.close()


class GitRepository:
    """Repository access for the history walk, backed by the git executable."""

    def __init__(self, path: Path | str | None = None):
        """Open the repository containing a path.

        Args:
            path: Directory inside the repository (default: current directory)

        Raises:
            GitError: If the path is not inside a git repository
        """
        self.root = get_git_root(path)
        logger.debug("Using repository at %s", self.root)

    def resolve_head(self) -> str:
        return resolve_head(self.root)

    def resolve_commit(self, rev: str) -> str:
        return resolve_commit(rev, self.root)

    def resolve_tag(self, tag_name: str) -> tuple[str, str]:
        """Resolve a tag to its commit and version hint (the tag name)."""
        return resolve_tag(tag_name, self.root), tag_name

    def history_from(self, commit_id: str) -> Iterator[Commit]:
        return iter_commits(commit_id, self.root)

    def current_branch(self) -> str:
        return get_current_branch(self.root)
