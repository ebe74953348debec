"""Recursive-descent parser for extended zsh prompt templates.

The grammar is a superset of zsh prompt escapes. Only the extended
directives become structured tokens; every standard escape is kept as
:class:`~git_prompt_expand.tokens.Literal` text so the shell can expand it
later. Standard multi-character escapes (``%D{...}``, ``%F{...}``,
``%{...%}``, truncations) are still consumed as a unit so their bodies never
end a surrounding conditional branch.

Parsing is total: a directive that does not close properly leaves its ``%``
as a literal character and scanning resumes right after it.
"""

from __future__ import annotations

import re
from typing import Callable, Optional, Tuple

from .tokens import Conditional, DirectoryRule, Literal, Simple, Token, TokenSequence


SIMPLE_CODES = frozenset("rpqx")
BOOLEAN_CONDITIONAL_CODES = frozenset("Gyms")
COUNT_CONDITIONAL_CODES = frozenset("opqx")
EXTENDED_CONDITIONAL_CODES = BOOLEAN_CONDITIONAL_CODES | COUNT_CONDITIONAL_CODES
STANDARD_CONDITIONAL_CODES = frozenset("!#?_C/c.~DdegjLlSTtvVw")
CONDITIONAL_CODES = EXTENDED_CONDITIONAL_CODES | STANDARD_CONDITIONAL_CODES

# zsh escapes that never take a numeric argument, and those that may.
PLAIN_ESCAPES = frozenset("%)lMny#?eh!iIjLTt@*wWBbEUuSsD")
NUMERIC_ESCAPES = frozenset("m_^d/~Nc.CvFfKkG")

DIRECTORY_CODES = frozenset("d/")
BRACED_CODES = frozenset("DFK")
TRUNCATION_CODES = frozenset("<>")

_NUMBER = re.compile(r"[+-]?\d+")

_Parsed = Optional[Tuple[Token, int]]


def parse(text: str) -> TokenSequence:
    """Parse ``text`` into a token sequence. Never raises."""

    tokens, _, _ = _Parser(text).sequence(0)
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        # start index -> parsed directive; a directive never depends on the
        # enclosing stop characters, so failures are not retried
        self._directives: dict[int, _Parsed] = {}

    def sequence(self, pos: int, stops: str = "") -> Optional[Tuple[TokenSequence, int, str]]:
        """Parse tokens from ``pos`` until one of ``stops`` at this level.

        Returns the tokens, the index just past the stop character and the
        stop character itself. With no ``stops`` the whole remaining input is
        consumed; with ``stops`` reaching the end of input is a failure.
        """

        text = self.text
        tokens: list[Token] = []
        pending: list[str] = []

        def flush() -> None:
            if pending:
                tokens.append(Literal("".join(pending)))
                pending.clear()

        while pos < len(text):
            char = text[pos]
            if char in stops:
                flush()
                return tuple(tokens), pos + 1, char
            if char == "%":
                parsed = self.directive(pos)
                if parsed is not None:
                    token, pos = parsed
                    if isinstance(token, Literal):
                        pending.append(token.text)
                    else:
                        flush()
                        tokens.append(token)
                    continue
            pending.append(char)
            pos += 1
        if stops:
            return None
        flush()
        return tuple(tokens), pos, ""

    def directive(self, start: int) -> _Parsed:
        if start not in self._directives:
            self._directives[start] = self._parse_directive(start)
        return self._directives[start]

    def _parse_directive(self, start: int) -> _Parsed:
        text = self.text
        pos = start + 1
        argument = None
        number = _NUMBER.match(text, pos)
        if number:
            argument = int(number.group())
            pos = number.end()
        if pos >= len(text):
            return None
        rules: tuple[Callable[[int, int, Optional[int]], _Parsed], ...] = (
            self._truncation,
            self._conditional,
            self._braced,
            self._directory_rule,
            self._escape_literal,
            self._escape,
        )
        for rule in rules:
            parsed = rule(start, pos, argument)
            if parsed is not None:
                return parsed
        return None

    def _truncation(self, start: int, pos: int, argument: Optional[int]) -> _Parsed:
        code = self.text[pos]
        if code not in TRUNCATION_CODES:
            return None
        end = self._find_unescaped(pos + 1, code)
        if end is None:
            return None
        return Literal(self.text[start : end + 1]), end + 1

    def _conditional(self, start: int, pos: int, argument: Optional[int]) -> _Parsed:
        text = self.text
        if text[pos] != "(" or pos + 2 >= len(text):
            return None
        code = text[pos + 1]
        if code not in CONDITIONAL_CODES:
            return None
        delimiter = text[pos + 2]
        cursor = pos + 3
        branches: list[TokenSequence] = []
        if delimiter == ")":
            # true text up to the first ")", false text up to the next
            for _ in range(2):
                parsed = self.sequence(cursor, ")")
                if parsed is None:
                    return None
                branch, cursor, _stop = parsed
                branches.append(branch)
        else:
            stop = delimiter
            while stop != ")":
                parsed = self.sequence(cursor, delimiter + ")")
                if parsed is None:
                    return None
                branch, cursor, stop = parsed
                branches.append(branch)
        token = Conditional(
            code=code,
            argument=argument,
            delimiter=delimiter,
            branches=tuple(branches),
            source=text[start : pos + 3],
        )
        return token, cursor

    def _braced(self, start: int, pos: int, argument: Optional[int]) -> _Parsed:
        text = self.text
        if text[pos] not in BRACED_CODES or not text.startswith("{", pos + 1):
            return None
        end = text.find("}", pos + 2)
        if end <= pos + 2:
            return None
        return Literal(text[start : end + 1]), end + 1

    def _directory_rule(self, start: int, pos: int, argument: Optional[int]) -> _Parsed:
        text = self.text
        if text[pos] not in DIRECTORY_CODES or not text.startswith("{", pos + 1):
            return None
        if pos + 2 >= len(text):
            return None
        delimiter = text[pos + 2]
        fields: list[str] = []
        current: list[str] = []
        cursor = pos + 3
        while True:
            if cursor >= len(text):
                return None
            char = text[cursor]
            if char == "\\":
                if cursor + 1 >= len(text):
                    return None
                current.append(text[cursor + 1])
                cursor += 2
                continue
            if char == "}":
                break
            if char == delimiter:
                fields.append("".join(current))
                current = []
            else:
                current.append(char)
            cursor += 1
        if fields or current:
            fields.append("".join(current))
        if len(fields) % 2 or not all(fields[1::2]):
            return None
        pairs = tuple(zip(fields[0::2], fields[1::2]))
        token = DirectoryRule(code=text[pos], argument=argument, delimiter=delimiter, rules=pairs)
        return token, cursor + 1

    def _escape_literal(self, start: int, pos: int, argument: Optional[int]) -> _Parsed:
        if argument is not None or self.text[pos] != "{":
            return None
        end = self.text.find("%}", pos + 1)
        if end < 0:
            return None
        return Literal(self.text[start : end + 2]), end + 2

    def _escape(self, start: int, pos: int, argument: Optional[int]) -> _Parsed:
        code = self.text[pos]
        if code in SIMPLE_CODES:
            # a numeric prefix means nothing to plain substitutions
            return Simple(code), pos + 1
        if code in NUMERIC_ESCAPES or (argument is None and code in PLAIN_ESCAPES):
            return Literal(self.text[start : pos + 1]), pos + 1
        return None

    def _find_unescaped(self, pos: int, target: str) -> Optional[int]:
        text = self.text
        while pos < len(text):
            char = text[pos]
            if char == "\\":
                pos += 2
                continue
            if char == target:
                return pos
            pos += 1
        return None
