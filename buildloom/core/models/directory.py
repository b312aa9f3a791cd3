"""
Directory model — an abstract directory tree with glob generation.

A Directory never touches the filesystem: it models where things live
so builders can derive paths and glob patterns deterministically, whether
or not the directories exist yet.

Every path form is separator-terminated. Glob forms always use ``/``,
whatever the host separator.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Mapping

from buildloom.core.errors import InvalidArgumentError, NotFoundError

_INVALID_NAME_CHARS = re.compile(r"[\\/:]")


def _to_glob(path: str) -> str:
    return path.replace(os.sep, "/")


class Directory:
    """A directory node with an ordered list of owned children.

    Attributes are fixed at construction. The only mutation is
    :meth:`add_child`, used while the tree is being built.
    """

    def __init__(self, path: str):
        if not isinstance(path, str):
            raise InvalidArgumentError("Invalid path specified (arg #1)")

        absolute = os.path.abspath(path)
        relative = path if not os.path.isabs(path) else absolute

        self._name = os.path.basename(absolute)
        self._path = os.path.join(os.path.normpath(relative), "")
        self._absolute_path = os.path.join(absolute, "")
        self._glob_path = _to_glob(self._absolute_path)
        self._children: list[Directory] = []

    # ── Tree construction / traversal ───────────────────────────

    @classmethod
    def create_tree(cls, root_path: str, tree: Mapping) -> Directory:
        """Build a directory tree from a nested mapping.

        Keys are directory names. A mapping value describes the children
        of that directory; any other value (None, list, scalar, callable)
        makes it a leaf. Children keep the key order of ``tree``.

        Example::

            Directory.create_tree(".", {"src": None, "test": {"unit": None}})
        """
        if not isinstance(root_path, str):
            raise InvalidArgumentError("Invalid rootPath (arg #1)")
        if not isinstance(tree, Mapping):
            raise InvalidArgumentError("Invalid tree (arg #2)")

        def _populate(parent: Directory, subtree: object) -> None:
            if not isinstance(subtree, Mapping):
                return
            for dir_name, child_tree in subtree.items():
                child = parent.add_child(dir_name)
                _populate(child, child_tree)

        root = cls(root_path)
        _populate(root, tree)
        return root

    @staticmethod
    def traverse_tree(root: Directory, visit: Callable[[Directory, int], object]) -> None:
        """Visit every node pre-order, parent before children.

        ``visit(node, depth)`` is called once per node; the root has depth 0.
        """
        if not isinstance(root, Directory):
            raise InvalidArgumentError("Invalid root directory (arg #1)")
        if not callable(visit):
            raise InvalidArgumentError("Invalid callback function (arg #2)")

        def _walk(node: Directory, depth: int) -> None:
            visit(node, depth)
            for child in node._children:
                _walk(child, depth + 1)

        _walk(root, 0)

    # ── Properties ──────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> str:
        """Relative path, separator-terminated."""
        return self._path

    @property
    def absolute_path(self) -> str:
        """Absolute path, separator-terminated."""
        return self._absolute_path

    @property
    def glob_path(self) -> str:
        """Absolute path with ``/`` separators, ``/``-terminated."""
        return self._glob_path

    # ── Children ────────────────────────────────────────────────

    def add_child(self, name: str) -> Directory:
        """Append a child directory and return it.

        Duplicate sibling names are accepted; lookups resolve to the
        first match.
        """
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("Invalid directory name specified (arg #1)")
        if _INVALID_NAME_CHARS.search(name):
            raise InvalidArgumentError(
                "Directory name cannot include path separators (:, \\ or /)"
            )

        child = Directory(os.path.join(self._path, name))
        self._children.append(child)
        return child

    def get_child(self, path: str) -> Directory:
        """Look up a descendant by ``/``-delimited relative path."""
        if not isinstance(path, str) or not path:
            raise InvalidArgumentError("Invalid child path specified (arg #1)")

        node: Directory | None = self
        for segment in path.split("/"):
            node = next((c for c in node._children if c.name == segment), None)
            if node is None:
                raise NotFoundError(f"Child not found at path: [{path}]")
        return node

    def get_children(self) -> list[Directory]:
        """First-level children, as a copy."""
        return list(self._children)

    # ── Paths & globs ───────────────────────────────────────────

    def get_file_path(self, file_name: str = "") -> str:
        """Host path of a file (or directory) inside this directory."""
        return os.path.join(self._absolute_path, file_name or "")

    def get_file_glob(self, file_name: str = "") -> str:
        """Glob path of a file (or directory) inside this directory."""
        return _to_glob(self.get_file_path(file_name))

    def get_all_files_glob(self, extension: str | None = None) -> str:
        """Glob matching every file below this directory.

        ``<glob_path>**/*`` or, with an extension, ``<glob_path>**/*.<ext>``.
        """
        pattern = f"*.{extension}" if isinstance(extension, str) else "*"
        return f"{self._glob_path}**/{pattern}"

    def __repr__(self) -> str:
        return f"<Directory path={self._path!r} children={len(self._children)}>"
