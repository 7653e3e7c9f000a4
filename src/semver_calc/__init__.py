"""semver-calc - Semantic version calculation from conventional commit history."""

from importlib.metadata import version

try:
    __version__ = version("semver-calc")
except Exception:
    __version__ = "0.0.0-dev"
