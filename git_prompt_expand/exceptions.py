"""Custom exception hierarchy for git-prompt-expand.

Template parsing and evaluation never raise; only problems with the
environment itself (bad configuration, a missing or hung ``git``) surface as
exceptions.
"""

from __future__ import annotations


class PromptExpandError(RuntimeError):
    """Base error for all custom exceptions."""


class ConfigError(PromptExpandError):
    """Raised when an environment override holds an unusable value."""


class GitUnavailableError(PromptExpandError):
    """Raised when git itself cannot be run, so no repository facts exist."""


__all__ = [
    "PromptExpandError",
    "ConfigError",
    "GitUnavailableError",
]
