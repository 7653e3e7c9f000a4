"""Semantic version parsing and bumping utilities."""

import re
from dataclasses import dataclass

from semver import Version

from semver_calc.analyser import BumpFlags
from semver_calc.logger import get_logger
from semver_calc.prerelease import next_prerelease

logger = get_logger(__name__)

# Previous version assumed when no tag, flag or configuration provides one
INITIAL_VERSION = "0.0.0"


class VersionError(Exception):
    """Raised when version operations fail."""

    pass


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of a version calculation."""

    version: Version
    major: bool
    minor: bool
    patch: bool
    prerelease: bool
    previous_version: Version
    commits_analysed: int = 0

    @property
    def release_type(self) -> str | None:
        """Release type that determined the version, or None."""
        if self.major:
            return "major"
        if self.minor:
            return "minor"
        if self.patch:
            return "patch"
        return None

    def __str__(self) -> str:
        return str(self.version)


def extract_version_from_tag(tag: str) -> str:
    """Extract version number from a git tag.

    Args:
        tag: Git tag (e.g., 'v1.2.3' or '1.2.3')

    Returns:
        Version string without prefix (e.g., '1.2.3')
    """
    # Remove common prefixes like 'v', 'version-', etc.
    return re.sub(r"^(version-?|v)", "", tag.strip(), flags=re.IGNORECASE)


def parse_version(version_str: str) -> Version:
    """Parse a semantic version string.

    Tag-style prefixes are accepted, so 'v1.0.2-pre.4' parses as
    1.0.2-pre.4.

    Args:
        version_str: Version string (e.g., '1.2.3', 'v1.2.3-alpha.2')

    Returns:
        Parsed Version object

    Raises:
        VersionError: If version string is invalid
    """
    try:
        return Version.parse(extract_version_from_tag(version_str))
    except (TypeError, ValueError) as e:
        raise VersionError(f"Invalid version string '{version_str}': {e}")


def bump_version(previous: Version, flags: BumpFlags) -> Version:
    """Bump a version according to the strongest release type observed.

    Without any release type every component is reset to zero; the
    previous version is not carried over.

    Args:
        previous: Previous version
        flags: Release types observed in the history

    Returns:
        New version without prerelease or build metadata
    """
    if flags.major:
        return Version(previous.major + 1, 0, 0)
    elif flags.minor:
        return Version(previous.major, previous.minor + 1, 0)
    elif flags.patch:
        return Version(previous.major, previous.minor, previous.patch + 1)

    logger.info("No release type found in history, version is reset to 0.0.0")
    return Version(0, 0, 0)


def calculate_version(
    flags: BumpFlags, previous: Version, is_prerelease: bool
) -> Version:
    """Calculate the next version from observed release types.

    Args:
        flags: Release types observed in the history
        previous: Previous version
        is_prerelease: Whether the build is a prerelease

    Returns:
        Next version, with a prerelease label derived from the previous
        one when building a prerelease
    """
    version = bump_version(previous, flags)

    if is_prerelease:
        version = version.replace(prerelease=next_prerelease(previous.prerelease))

    logger.debug("Version %s -> %s", previous, version)
    return version


def build_result(
    flags: BumpFlags, previous: Version, is_prerelease: bool
) -> AnalysisResult:
    """Calculate the next version and wrap it with the flags that produced it."""
    return AnalysisResult(
        version=calculate_version(flags, previous, is_prerelease),
        major=flags.major,
        minor=flags.minor,
        patch=flags.patch,
        prerelease=is_prerelease,
        previous_version=previous,
        commits_analysed=flags.commits_analysed,
    )
