"""Thin wrappers around git CLI commands, and the repository fact provider."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .config import Settings
from .exceptions import GitUnavailableError
from .models import Domain, WorkingTreeStatus
from .remote import classify_remote


logger = logging.getLogger(__name__)


def run_git(
    args: Iterable[str],
    *,
    cwd: Path | None = None,
    settings: Settings | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command and return the result whatever its exit code.

    Callers map a non-zero exit to a default fact. A missing executable or a
    timeout is fatal: without git there are no repository facts to report.
    """

    settings = settings or Settings()
    cmd = [settings.git_executable, *args]
    logger.debug("Running command: %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            check=False,
            timeout=settings.timeout,
        )
    except FileNotFoundError as exc:
        raise GitUnavailableError(f"git executable not found: {settings.git_executable}") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitUnavailableError(f"git timed out after {settings.timeout}s: {' '.join(cmd)}") from exc
    return proc


def parse_ahead_behind(output: str) -> tuple[int, int]:
    """Parse ``rev-list --left-right --count`` output (``"<ahead>\\t<behind>"``)."""

    parts = output.split()
    if len(parts) != 2:
        return 0, 0
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return 0, 0


def parse_status(output: str) -> WorkingTreeStatus:
    """Reduce ``status --porcelain=v1`` output to modified/staged flags.

    Untracked files count as worktree modifications.
    """

    modified = False
    staged = False
    for line in output.splitlines():
        if len(line) < 2:
            continue
        index, worktree = line[0], line[1]
        if index == "!":
            continue
        if index == "?":
            modified = True
            continue
        if index != " ":
            staged = True
        if worktree != " ":
            modified = True
        if modified and staged:
            break
    return WorkingTreeStatus(modified=modified, staged=staged)


@dataclass
class GitStateProvider:
    """Answers repository fact queries by shelling out to git in ``cwd``."""

    cwd: Path | None = None
    settings: Settings = field(default_factory=Settings)

    def _git(self, *args: str) -> subprocess.CompletedProcess[str]:
        return run_git(args, cwd=self.cwd, settings=self.settings)

    def in_repo(self) -> bool:
        return self._git("rev-parse", "--git-dir").returncode == 0

    def branch(self) -> str:
        proc = self._git("rev-parse", "--abbrev-ref", "HEAD")
        if proc.returncode != 0:
            return ""
        return proc.stdout.strip()

    def ahead_behind(self) -> tuple[int, int]:
        proc = self._git("rev-list", "--left-right", "--count", "HEAD...@{upstream}")
        if proc.returncode != 0:
            # no upstream configured
            return 0, 0
        return parse_ahead_behind(proc.stdout)

    def stashes(self) -> int:
        proc = self._git("stash", "list")
        if proc.returncode != 0:
            return 0
        return sum(1 for line in proc.stdout.splitlines() if line.strip())

    def status(self) -> WorkingTreeStatus:
        proc = self._git("status", "--porcelain=v1", "--untracked-files=normal")
        if proc.returncode != 0:
            return WorkingTreeStatus()
        return parse_status(proc.stdout)

    def upstream_remote(self) -> str | None:
        proc = self._git("rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}")
        if proc.returncode != 0:
            return None
        upstream = proc.stdout.strip()
        if not upstream or "/" not in upstream:
            return None
        return upstream.split("/", 1)[0]

    def domain_class(self) -> int:
        remote = self.upstream_remote()
        if remote is None:
            return int(Domain.GIT)
        proc = self._git("remote", "get-url", remote)
        if proc.returncode != 0:
            return int(Domain.GIT)
        return int(classify_remote(proc.stdout.strip()))
