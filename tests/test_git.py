"""Tests for git operations."""

import io
import subprocess
from unittest.mock import MagicMock, Mock, patch

import pytest

from semver_calc.git import (
    Commit,
    GitError,
    GitRepository,
    get_current_branch,
    get_git_root,
    iter_commits,
    resolve_commit,
    resolve_head,
    resolve_tag,
)


def make_log_process(output, returncode=0, stderr=""):
    """Create a fake 'git log' process streaming the given output."""
    process = MagicMock()
    process.stdout = io.StringIO(output)
    process.stderr = io.StringIO(stderr)
    process.wait.return_value = returncode
    return process


def test_get_git_root(tmp_path):
    """Test resolving the repository root."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = Mock(stdout="/repo\n")

        assert str(get_git_root(tmp_path)) == "/repo"
        assert mock_run.call_args.kwargs["cwd"] == str(tmp_path)


def test_get_git_root_not_a_repository(tmp_path):
    """Test that a directory outside a repository raises GitError."""
    with patch("subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            128, ["git"], stderr="fatal: not a git repository"
        )

        with pytest.raises(GitError, match="is not a git repository"):
            get_git_root(tmp_path)


def test_get_git_root_missing_directory(tmp_path):
    """Test that a missing path raises GitError without calling git."""
    with patch("subprocess.run") as mock_run:
        with pytest.raises(GitError, match="is not a directory"):
            get_git_root(tmp_path / "missing")

        mock_run.assert_not_called()


def test_get_git_root_git_not_installed(tmp_path):
    """Test the error when git is not installed."""
    with patch("subprocess.run", side_effect=FileNotFoundError()):
        with pytest.raises(GitError, match="Git not found"):
            get_git_root(tmp_path)


def test_resolve_commit(tmp_path):
    """Test resolving a revision to a commit hash."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = Mock(stdout="a" * 40 + "\n")

        assert resolve_commit("abc", tmp_path) == "a" * 40
        args = mock_run.call_args.args[0]
        assert args[-1] == "abc^{commit}"


def test_resolve_commit_unknown(tmp_path):
    """Test that an unknown revision raises GitError naming it."""
    with patch("subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(1, ["git"], stderr="")

        with pytest.raises(GitError, match="'deadbeef' does not name a commit"):
            resolve_commit("deadbeef", tmp_path)


def test_resolve_head(tmp_path):
    """Test that HEAD is resolved like any other revision."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = Mock(stdout="b" * 40)

        assert resolve_head(tmp_path) == "b" * 40
        assert mock_run.call_args.args[0][-1] == "HEAD^{commit}"


def test_resolve_tag(tmp_path):
    """Test resolving a tag to its commit."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = Mock(stdout="c" * 40)

        assert resolve_tag("v1.2.3", tmp_path) == "c" * 40
        assert mock_run.call_args.args[0][-1] == "refs/tags/v1.2.3^{commit}"


def test_resolve_tag_unknown(tmp_path):
    """Test that a missing tag raises GitError."""
    with patch("subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(1, ["git"], stderr="")

        with pytest.raises(GitError, match="'v9.9.9' is not a valid tag name"):
            resolve_tag("v9.9.9", tmp_path)


def test_get_current_branch(tmp_path):
    """Test reading the current branch name."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = Mock(stdout="develop\n")

        assert get_current_branch(tmp_path) == "develop"


def test_get_current_branch_failure(tmp_path):
    """Test that failing to read HEAD raises GitError."""
    with patch("subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            128, ["git"], stderr="fatal: ambiguous argument 'HEAD'"
        )

        with pytest.raises(GitError, match="Failed to get current branch"):
            get_current_branch(tmp_path)


class TestIterCommits:
    """Tests for iter_commits function."""

    def test_parses_records(self, tmp_path):
        """Test that log records are split into hash and message."""
        output = "aaa\nfeat: one\n\nbody line\n\0bbb\nfix: two\n\0ccc\n\n\0"

        with patch("subprocess.Popen", return_value=make_log_process(output)):
            commits = list(iter_commits("aaa", tmp_path))

        assert commits == [
            Commit(id="aaa", message="feat: one\n\nbody line\n"),
            Commit(id="bbb", message="fix: two\n"),
            Commit(id="ccc", message="\n"),
        ]

    def test_records_split_across_chunks(self, tmp_path):
        """Test that records larger than one read chunk are reassembled."""
        message = "feat: " + "x" * 20000 + "\n"
        output = f"aaa\n{message}\0bbb\nfix: two\n\0"

        with patch("subprocess.Popen", return_value=make_log_process(output)):
            commits = list(iter_commits("aaa", tmp_path))

        assert [commit.id for commit in commits] == ["aaa", "bbb"]
        assert commits[0].message == message

    def test_git_failure(self, tmp_path):
        """Test that a failing git log raises GitError with stderr."""
        process = make_log_process("", returncode=128, stderr="fatal: bad object\n")

        with patch("subprocess.Popen", return_value=process):
            with pytest.raises(GitError, match="fatal: bad object"):
                list(iter_commits("nope", tmp_path))

    def test_closing_early_kills_git(self, tmp_path):
        """Test that abandoning the walk terminates the git process."""
        process = make_log_process("aaa\nfeat!: x\n\0bbb\nfix: y\n\0")

        with patch("subprocess.Popen", return_value=process):
            commits = iter_commits("aaa", tmp_path)
            assert next(commits).id == "aaa"
            commits.close()

        process.kill.assert_called_once()

    def test_git_not_installed(self, tmp_path):
        with patch("subprocess.Popen", side_effect=FileNotFoundError()):
            with pytest.raises(GitError, match="Git not found"):
                list(iter_commits("aaa", tmp_path))


class TestGitRepository:
    """Tests for GitRepository."""

    @pytest.fixture
    def repository(self, tmp_path):
        with patch("semver_calc.git.get_git_root", return_value=tmp_path):
            return GitRepository(tmp_path)

    def test_root(self, repository, tmp_path):
        assert repository.root == tmp_path

    def test_resolve_tag_returns_version_hint(self, repository):
        """Test that the tag name is returned as version hint."""
        with patch("semver_calc.git.resolve_tag", return_value="abc") as mock_resolve:
            assert repository.resolve_tag("v1.2.3") == ("abc", "v1.2.3")
            mock_resolve.assert_called_once_with("v1.2.3", repository.root)

    def test_current_branch(self, repository):
        with patch("semver_calc.git.get_current_branch", return_value="main"):
            assert repository.current_branch() == "main"
