"""Per-invocation memoization of repository facts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from .models import Domain, RepoState, WorkingTreeStatus


logger = logging.getLogger(__name__)


class RepoStateProvider(Protocol):
    """Source of primitive repository facts. Each query is independent."""

    def in_repo(self) -> bool:
        ...

    def branch(self) -> str:
        ...

    def ahead_behind(self) -> tuple[int, int]:
        """Commits ahead of and behind the upstream; ``(0, 0)`` without one."""
        ...

    def stashes(self) -> int:
        ...

    def status(self) -> WorkingTreeStatus:
        ...

    def domain_class(self) -> int:
        ...


@dataclass
class RepoStateCache:
    """Answers each fact from the provider at most once.

    Outside a repository every fact short-circuits to its default without
    asking the provider anything beyond ``in_repo``.
    """

    provider: RepoStateProvider
    _values: dict[str, Any] = field(default_factory=dict, init=False, repr=False)

    def _remember(self, key: str, compute: Callable[[], Any], default: Any) -> Any:
        if key not in self._values:
            if key != "in_repo" and not self.in_repo():
                return default
            self._values[key] = compute()
            logger.debug("Resolved %s = %r", key, self._values[key])
        return self._values[key]

    def in_repo(self) -> bool:
        return self._remember("in_repo", self.provider.in_repo, False)

    def branch(self) -> str:
        return self._remember("branch", self.provider.branch, "")

    def ahead(self) -> int:
        return self._ahead_behind()[0]

    def behind(self) -> int:
        return self._ahead_behind()[1]

    def stashes(self) -> int:
        return self._remember("stashes", self.provider.stashes, 0)

    def dirty(self) -> bool:
        return self._status().dirty

    def modified(self) -> bool:
        return self._status().modified

    def staged(self) -> bool:
        return self._status().staged

    def domain_class(self) -> int:
        return int(self._remember("domain_class", self.provider.domain_class, int(Domain.GIT)))

    def snapshot(self) -> RepoState:
        """Resolve every fact and return them as one record."""

        return RepoState(
            in_repo=self.in_repo(),
            branch=self.branch(),
            ahead=self.ahead(),
            behind=self.behind(),
            stashes=self.stashes(),
            dirty=self.dirty(),
            modified=self.modified(),
            staged=self.staged(),
            domain_class=self.domain_class(),
        )

    def _ahead_behind(self) -> tuple[int, int]:
        return self._remember("ahead_behind", self.provider.ahead_behind, (0, 0))

    def _status(self) -> WorkingTreeStatus:
        return self._remember("status", self.provider.status, WorkingTreeStatus())
