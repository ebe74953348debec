"""Token tree produced by the parser and consumed by the evaluator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union


@dataclass(frozen=True)
class Literal:
    """Text copied to the output untouched, including standard zsh escapes."""

    text: str


@dataclass(frozen=True)
class Simple:
    """A plain substitution: ``%r``, ``%p``, ``%q`` or ``%x``."""

    code: str


@dataclass(frozen=True)
class Conditional:
    """``%N(c<delim>branch<delim>branch...)``.

    ``source`` holds the raw opening text (``%N(c<delim>``) so directives we
    do not interpret can be written back exactly as they were read.
    """

    code: str
    argument: int | None
    delimiter: str
    branches: Tuple["TokenSequence", ...]
    source: str = field(default="", compare=False)


@dataclass(frozen=True)
class DirectoryRule:
    """``%N/{<delim>replacement<delim>prefix...}`` or the ``%d{`` spelling."""

    code: str
    argument: int | None
    delimiter: str
    rules: Tuple[Tuple[str, str], ...]


Token = Union[Literal, Simple, Conditional, DirectoryRule]
TokenSequence = Tuple[Token, ...]
