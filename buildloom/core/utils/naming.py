"""Name derivations for package-style project names (``@scope/name``)."""

from __future__ import annotations

import re

_SCOPE_PREFIX = re.compile(r"^@[^/]*/")
_WORD_SEPARATORS = re.compile(r"[-_.\s]+")
# An acronym ends where a capitalized word begins (``XMLHttp`` → ``XML``, ``Http``)
_SUBWORDS = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+|[0-9]+")


def unscoped_name(name: str) -> str:
    """``@scope/my-lib`` → ``my-lib``. Unscoped names pass through."""
    return _SCOPE_PREFIX.sub("", name, count=1)


def kebab_cased_name(name: str) -> str:
    """``@scope/my-lib`` → ``scope-my-lib``."""
    return name.removeprefix("@").replace("/", "-")


def camel_case(value: str) -> str:
    """``my-lib`` → ``myLib``, ``foo_bar.baz`` → ``fooBarBaz``.

    Case changes also start a word and capital runs are not kept, so
    ``someName`` stays ``someName``, ``XMLHttp`` becomes ``xmlHttp`` and
    ``MY_LIB`` becomes ``myLib``.
    """
    words = [
        sub.lower()
        for word in _WORD_SEPARATORS.split(value.strip())
        for sub in _SUBWORDS.findall(word)
    ]
    if not words:
        return ""

    first, *rest = words
    return first + "".join(w.capitalize() for w in rest)


def config_file_name(name: str) -> str:
    """``@scope/my-lib`` → ``.myLibrc``."""
    return f".{camel_case(unscoped_name(name))}rc"
