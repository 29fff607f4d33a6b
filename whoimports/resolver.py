"""Module specifier resolution against the known module set."""

from __future__ import annotations

import logging
import posixpath
from typing import Iterable


logger = logging.getLogger(__name__)

CANDIDATE_SUFFIXES = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    "/index.ts",
    "/index.tsx",
    "/index.js",
    "/index.jsx",
)


def is_relative_specifier(specifier: str) -> bool:
    return specifier.startswith(".")


class ModuleResolver:
    """Map ``(from_module, specifier)`` to a module key.

    Module keys are ``/``-separated paths relative to the analysis base path.
    Only relative specifiers are resolved; package specifiers always yield ``None``.
    """

    def __init__(self, modules: Iterable[str]) -> None:
        self._modules = frozenset(modules)

    def resolve(self, from_module: str, specifier: str) -> str | None:
        if not is_relative_specifier(specifier):
            return None

        joined = posixpath.normpath(
            posixpath.join(posixpath.dirname(from_module), specifier)
        )
        for suffix in CANDIDATE_SUFFIXES:
            candidate = posixpath.normpath(joined + suffix)
            if candidate in self._modules:
                return candidate
        if joined in self._modules:
            return joined

        logger.debug("Unresolved specifier %r from %s", specifier, from_module)
        return None
