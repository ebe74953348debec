"""Dataclasses shared across modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Domain(IntEnum):
    """Hosting provider of the upstream remote, as numbered in ``%(o...)``."""

    GIT = 0
    GITHUB = 1
    GITLAB = 2
    BITBUCKET = 3
    AZURE = 4


KNOWN_HOSTS = {
    "github.com": Domain.GITHUB,
    "gitlab.com": Domain.GITLAB,
    "bitbucket.org": Domain.BITBUCKET,
    "dev.azure.com": Domain.AZURE,
}


@dataclass(frozen=True)
class WorkingTreeStatus:
    """Change flags derived from a single ``git status`` scan."""

    modified: bool = False
    staged: bool = False

    @property
    def dirty(self) -> bool:
        return self.modified or self.staged


@dataclass(frozen=True)
class RepoState:
    """Every repository fact a prompt can ask for.

    The defaults are what a directory outside any repository reports.
    """

    in_repo: bool = False
    branch: str = ""
    ahead: int = 0
    behind: int = 0
    stashes: int = 0
    dirty: bool = False
    modified: bool = False
    staged: bool = False
    domain_class: int = int(Domain.GIT)
