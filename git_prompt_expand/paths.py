"""Working-directory resolution and ``%/{...}`` rewrite rules."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence


logger = logging.getLogger(__name__)

SEPARATOR = "/"

_ENV_REFERENCE = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")


def resolve_directory(environ: Mapping[str, str]) -> str:
    """Prefer ``$PWD`` (keeps symlinked paths) and fall back to the real cwd."""

    pwd = environ.get("PWD")
    if pwd:
        return pwd
    try:
        return str(Path.cwd().resolve())
    except OSError:
        logger.debug("Current directory is unavailable; using an empty path")
        return ""


def substitute_env(text: str, environ: Mapping[str, str]) -> str:
    """Replace each ``$NAME`` with its value, once, with no other expansion."""

    return _ENV_REFERENCE.sub(lambda match: environ.get(match.group(1), ""), text)


def apply_rules(path: str, rules: Sequence[tuple[str, str]], environ: Mapping[str, str]) -> str:
    """Rewrite ``path`` with the first ``(replacement, prefix)`` pair whose prefix matches."""

    for replacement, prefix in rules:
        resolved = substitute_env(prefix, environ)
        if path.startswith(resolved):
            return replacement + path[len(resolved) :]
    return path


def truncate(path: str, count: int | None) -> str:
    """Keep the trailing ``count`` components, or the leading ``-count`` ones.

    A leading ``/`` counts as a component. A trailing separator is dropped
    unless the result is the root directory itself.
    """

    if count:
        components = _components(path)
        kept = components[-count:] if count > 0 else components[:-count]
        path = _join(kept)
    if path != SEPARATOR and path.endswith(SEPARATOR):
        path = path.rstrip(SEPARATOR) or SEPARATOR
    return path


def _components(path: str) -> list[str]:
    parts = [part for part in path.split(SEPARATOR) if part]
    if path.startswith(SEPARATOR):
        return [SEPARATOR, *parts]
    return parts


def _join(components: Sequence[str]) -> str:
    if components and components[0] == SEPARATOR:
        return SEPARATOR + SEPARATOR.join(components[1:])
    return SEPARATOR.join(components)


@dataclass
class DirectoryRuleApplier:
    """Applies directory rules against a path resolved once, on first use."""

    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)
    _path: str | None = field(default=None, init=False, repr=False)

    @property
    def path(self) -> str:
        if self._path is None:
            self._path = resolve_directory(self.environ)
            logger.debug("Resolved working directory to %s", self._path)
        return self._path

    def apply(self, rules: Sequence[tuple[str, str]], count: int | None = None) -> str:
        return truncate(apply_rules(self.path, rules, self.environ), count)
