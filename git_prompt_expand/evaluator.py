"""Walk a token tree and produce prompt text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from .cache import RepoStateCache
from .parser import EXTENDED_CONDITIONAL_CODES, parse
from .paths import DirectoryRuleApplier
from .tokens import Conditional, DirectoryRule, Literal, Simple, Token, TokenSequence


# code -> name of the RepoStateCache accessor it reads
SIMPLE_SOURCES: Mapping[str, str] = {
    "r": "branch",
    "p": "ahead",
    "q": "behind",
    "x": "stashes",
}

BOOLEAN_SOURCES: Mapping[str, str] = {
    "G": "in_repo",
    "y": "dirty",
    "m": "modified",
    "s": "staged",
}

COUNT_SOURCES: Mapping[str, str] = {
    "o": "domain_class",
    "p": "ahead",
    "q": "behind",
    "x": "stashes",
}


@dataclass
class ExpansionContext:
    """State shared by every template expanded in one invocation."""

    cache: RepoStateCache
    directory: DirectoryRuleApplier = field(default_factory=DirectoryRuleApplier)

    def expand(self, template: str) -> str:
        return evaluate(parse(template), self.cache, self.directory)


def evaluate(tokens: TokenSequence, cache: RepoStateCache, directory: DirectoryRuleApplier) -> str:
    return "".join(_render(token, cache, directory) for token in tokens)


def select_branch(token: Conditional, cache: RepoStateCache) -> int:
    """Index of the branch an extended conditional resolves to.

    The result may point past the written branches (a missing false text),
    which renders as nothing.
    """

    if token.code in BOOLEAN_SOURCES:
        return 0 if getattr(cache, BOOLEAN_SOURCES[token.code])() else 1
    value = getattr(cache, COUNT_SOURCES[token.code])()
    if token.argument is None:
        return min(value, len(token.branches) - 1)
    if token.code == "o":
        matched = value == token.argument
    else:
        matched = value >= token.argument
    return 0 if matched else 1


def _render(token: Token, cache: RepoStateCache, directory: DirectoryRuleApplier) -> str:
    if isinstance(token, Literal):
        return token.text
    if isinstance(token, Simple):
        return str(getattr(cache, SIMPLE_SOURCES[token.code])())
    if isinstance(token, Conditional):
        return _render_conditional(token, cache, directory)
    if isinstance(token, DirectoryRule):
        return directory.apply(token.rules, token.argument)
    raise TypeError(f"Unknown token: {token!r}")


def _render_conditional(token: Conditional, cache: RepoStateCache, directory: DirectoryRuleApplier) -> str:
    if token.code in EXTENDED_CONDITIONAL_CODES:
        index = select_branch(token, cache)
        if index >= len(token.branches):
            return ""
        return evaluate(token.branches[index], cache, directory)
    # a standard zsh conditional: expand inside it, leave the test to zsh
    body = token.delimiter.join(evaluate(branch, cache, directory) for branch in token.branches)
    return f"{token.source}{body})"
