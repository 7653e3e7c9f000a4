"""Prerelease detection and prerelease label handling."""

import re

from semver_calc.logger import get_logger

logger = get_logger(__name__)

# Branch names containing any of these build stable releases
STABLE_BRANCH_MARKERS = ("main", "master")

# Label used when the previous prerelease label is missing or unusable
DEFAULT_PRERELEASE = "pre.0"

# Tag is everything before the trailing digit run, counter is that run.
# The separator (if any) stays in the tag: "pre.2" -> ("pre.", "2")
PRERELEASE_PATTERN = re.compile(r"^(?P<tag>.*?)(?P<counter>\d*)$", re.DOTALL)


def is_prerelease_branch(branch_name: str | None) -> bool:
    """Check whether builds from a branch are prereleases.

    Args:
        branch_name: Branch or ref short name (may be empty)

    Returns:
        False if the name contains 'main' or 'master', True otherwise
    """
    name = branch_name or ""
    prerelease = not any(marker in name for marker in STABLE_BRANCH_MARKERS)
    logger.debug("Branch %r is prerelease: %s", name, prerelease)
    return prerelease


def split_prerelease(label: str | None) -> tuple[str, int] | None:
    """Split a prerelease label into its tag and counter.

    Args:
        label: Prerelease label (e.g. 'pre.2', 'alpha2', 'beta')

    Returns:
        (tag, counter) tuple, or None if the label has no tag part.
        A missing counter is reported as 0.
    """
    if not label:
        return None

    match = PRERELEASE_PATTERN.match(label)
    if not match or not match.group("tag"):
        return None

    counter = match.group("counter")
    return match.group("tag"), int(counter) if counter else 0


def next_prerelease(label: str | None) -> str:
    """Calculate the prerelease label following the given one.

    Args:
        label: Previous prerelease label (may be empty)

    Returns:
        Label with its counter incremented ('pre.2' -> 'pre.3',
        'alpha2' -> 'alpha3'), or 'pre.0' if the label cannot be split
    """
    parts = split_prerelease(label)
    if parts is None:
        logger.warning(
            "Could not parse prerelease label %r, starting from %s",
            label,
            DEFAULT_PRERELEASE,
        )
        return DEFAULT_PRERELEASE

    tag, counter = parts
    return f"{tag}{counter + 1}"
