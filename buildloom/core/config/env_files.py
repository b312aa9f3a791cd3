"""
Env file loading — ``.env`` parsing for deployment commands.

Files are merged in order and never override a variable that is already
defined, so the first definition wins: the live environment over
``.env.<environment>`` over ``.env``.

Values read from files may reference other variables as ``$NAME``,
``${NAME}`` or ``${NAME:-default}``. References are expanded against the
merged environment once every file is loaded; ``\\$`` keeps a literal ``$``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_REFERENCE = re.compile(
    r"(?P<escape>\\\$)|\$(?:\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}|(?P<bare>[A-Za-z_][A-Za-z0-9_]*))"
)


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a .env file into a key/value dict.

    Handles:
    - KEY=value
    - KEY="value"
    - KEY='value'
    - export KEY=value
    - Comments (#)
    - Empty lines

    A missing or unreadable file parses as empty.
    """
    result: dict[str, str] = {}
    if not path.is_file():
        return result

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Could not read env file %s: %s", path, e)
        return result

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if line.startswith("export "):
            line = line[7:].strip()

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip()

        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1]

        result[key] = value

    return result


def merge_env_files(
    paths: Iterable[str | Path],
    base: Mapping[str, str],
) -> dict[str, str]:
    """Overlay env files onto ``base`` without overriding defined variables.

    Args:
        paths: Env files, highest precedence first.
        base: The starting environment (usually ``os.environ``).

    Returns:
        A new mapping; ``base`` is not modified.
    """
    env = dict(base)
    from_files: list[str] = []
    for raw in paths:
        path = Path(raw)
        loaded = parse_env_file(path)
        if loaded:
            logger.debug("Loaded %d variables from %s", len(loaded), path)
        for key, value in loaded.items():
            if key not in env:
                env[key] = value
                from_files.append(key)

    raw_values = {key: env[key] for key in from_files}
    for key in from_files:
        env[key] = _expand(key, raw_values, env, set())
    return env


def _expand(
    key: str,
    raw_values: Mapping[str, str],
    env: dict[str, str],
    resolving: set[str],
) -> str:
    """Expand the references in a file-loaded value.

    A variable that refers back to itself, directly or through others,
    expands that reference to the empty string.
    """
    resolving.add(key)

    def replace(match: re.Match[str]) -> str:
        if match.group("escape"):
            return "$"
        name = match.group("braced") or match.group("bare")
        if name in resolving:
            value = ""
        elif name in raw_values:
            value = _expand(name, raw_values, env, resolving)
        else:
            value = env.get(name, "")
        if not value and match.group("default") is not None:
            return match.group("default")
        return value

    expanded = _REFERENCE.sub(replace, raw_values[key])
    resolving.discard(key)
    return expanded


def missing_variables(names: Iterable[str], env: Mapping[str, str]) -> list[str]:
    """Names that are undefined or empty in ``env``, in the given order."""
    return [name for name in names if not env.get(name)]
