"""
Semantic version helpers (pure).

Validates versions against the semver 2.0.0 grammar and expands a tag
into the image tags a container publish pushes.
No I/O, no subprocess.
"""

from __future__ import annotations

import re

_SEMVER = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

# First run of up to three dot-separated numbers anywhere in a string
_COERCE = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def normalize_version(version: object) -> str | None:
    """Return the canonical form of a semantic version, or None if invalid.

    Surrounding whitespace and a single leading ``v`` are dropped, so
    ``" v1.2.3 "`` normalizes to ``"1.2.3"``. Anything else before the
    major number (``vv``, ``=``, inner spaces) makes the version invalid.
    """
    if not isinstance(version, str):
        return None
    candidate = version.strip().removeprefix("v")
    if not _SEMVER.match(candidate):
        return None
    return candidate


def is_valid_version(version: object) -> bool:
    """Whether ``version`` is a valid semantic version."""
    return normalize_version(version) is not None


def semver_components(tag: str) -> list[str]:
    """Expand a tag into its semver component tags.

    ``"1.2.3"`` → ``["1.2.3", "1.2", "1", "latest"]``
    ``"1.2"``   → ``["1.2.0", "1.2", "1", "latest"]``
    ``"latest"`` (not a version) → ``["latest"]``
    """
    match = _COERCE.search(tag)
    if match is None:
        return [tag]

    major, minor, patch = (int(part or 0) for part in match.groups())
    return [
        f"{major}.{minor}.{patch}",
        f"{major}.{minor}",
        f"{major}",
        "latest",
    ]
