"""
Filesystem adapter — glob-driven copy, delete and archive.

Patterns are the ``/``-separated globs produced by the Directory model.
A pattern with no matches is skipped, not an error: a build stages
whatever optional files exist.
"""

from __future__ import annotations

import glob
import logging
import os
import shutil
import zipfile
from collections.abc import Iterable
from pathlib import Path

from buildloom.adapters.base import Adapter, ExecutionContext
from buildloom.core.models.action import Receipt

logger = logging.getLogger(__name__)

OPERATIONS = ("copy", "delete", "archive")

# Params each operation needs on top of ``patterns``
_REQUIRED_PARAMS = {
    "copy": ("base_dir", "dest_dir"),
    "delete": (),
    "archive": ("base_dir", "dest_file"),
}


def _expand(patterns: Iterable[str]) -> tuple[list[str], list[str]]:
    """Resolve globs to paths. Returns (matches, patterns_without_matches)."""
    matches: list[str] = []
    empty: list[str] = []
    for pattern in patterns:
        found = sorted(glob.glob(pattern, recursive=True))
        if not found:
            empty.append(pattern)
        matches.extend(found)
    return list(dict.fromkeys(matches)), empty


def _relative_to(path: str, base_dir: str) -> str:
    """Path below ``base_dir``; files outside it keep only their name."""
    rel = os.path.relpath(path, base_dir)
    if rel.startswith(os.pardir):
        return os.path.basename(path)
    return rel


class FilesystemAdapter(Adapter):
    """The ``copy`` / ``delete`` / ``archive`` collaborator.

    Action params:
        operation (str): One of 'copy', 'delete', 'archive'.
        patterns (list[str]): Globs selecting the files to operate on.
        base_dir (str): Root that relative destination paths are taken from
            (copy, archive).
        dest_dir (str): Copy destination (copy).
        dest_file (str): Zip file to write (archive).
    """

    name = "filesystem"
    operations = OPERATIONS

    def describe(self, context: ExecutionContext) -> str:
        patterns = context.params.get("patterns") or []
        return f"{self.operation(context)} {len(patterns)} patterns"

    def validate(self, context: ExecutionContext) -> str | None:
        params = context.params
        operation = params.get("operation")
        if not operation:
            return "Missing required param: 'operation'"
        if operation not in OPERATIONS:
            return f"Unknown operation '{operation}'. Valid: {', '.join(OPERATIONS)}"

        patterns = params.get("patterns")
        if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
            return "Missing required param: 'patterns' (list of globs)"

        for key in _REQUIRED_PARAMS.get(operation, ()):
            if not params.get(key):
                return f"Missing required param: '{key}' for {operation} operation"

        return None

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = self.operation(context)
        handler = {
            "copy": self._copy,
            "delete": self._delete,
            "archive": self._archive,
        }[operation]

        try:
            count, output, unmatched = handler(context)
        except (OSError, zipfile.BadZipFile) as e:
            return self.failed(
                context, f"Filesystem error: {e}", metadata={"operation": operation}
            )

        logger.debug("%s: %s", context.action.id, output)
        return self.succeeded(
            context,
            output,
            metadata={"operation": operation, "count": count, "unmatched": unmatched},
        )

    def _copy(self, ctx: ExecutionContext) -> tuple[int, str, list[str]]:
        base_dir = ctx.params["base_dir"]
        dest_dir = Path(ctx.params["dest_dir"])
        matches, unmatched = _expand(ctx.params["patterns"])

        copied = 0
        for source in matches:
            if not os.path.isfile(source):
                continue
            target = dest_dir / _relative_to(source, base_dir)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
            copied += 1
        return copied, f"Copied {copied} files to {dest_dir}", unmatched

    def _delete(self, ctx: ExecutionContext) -> tuple[int, str, list[str]]:
        matches, unmatched = _expand(ctx.params["patterns"])

        deleted = 0
        for path in matches:
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path)
                deleted += 1
            elif os.path.lexists(path):
                os.remove(path)
                deleted += 1
        return deleted, f"Deleted {deleted} paths", unmatched

    def _archive(self, ctx: ExecutionContext) -> tuple[int, str, list[str]]:
        base_dir = ctx.params["base_dir"]
        dest_file = Path(ctx.params["dest_file"])
        matches, unmatched = _expand(ctx.params["patterns"])

        dest_file.parent.mkdir(parents=True, exist_ok=True)
        added = 0
        with zipfile.ZipFile(dest_file, "w", zipfile.ZIP_DEFLATED) as archive:
            for source in matches:
                if os.path.isfile(source):
                    archive.write(source, _relative_to(source, base_dir))
                    added += 1
        return added, f"Archived {added} files into {dest_file}", unmatched
