"""Single-pass tokenizer for Trellis templates.

Splits template source into a flat token stream. Only two delimiter pairs
exist: ``{% ... %}`` for tags and ``{{ ... }}`` for variables. Anything the
lexer does not recognise stays text:

- an unterminated delimiter is DATA
- a delimiter whose inside does not match a known grammar is DATA; the
  scan resumes one character later, so a well-formed tag that follows or
  overlaps a broken one (``{{{ x }}}``, ``{{% for ... %}``) is still found
- ``extends`` is only recognised in its exact form ``{% extends "name" %}``

Example:
    >>> [t.type.name for t in tokenize("<h1>{{ title }}</h1>")]
    ['DATA', 'VARIABLE', 'DATA', 'EOF']

Complexity:
    O(n) in template size. Line numbers are resolved with a bisect over
    precomputed newline offsets.

"""

from __future__ import annotations

import re
from bisect import bisect_right

from trellis._types import Token, TokenType


class Lexer:
    """Tokenizer over a single template source.

    Patterns are compiled once at class level and matched against the
    stripped inside of each delimiter pair.
    """

    __slots__ = ("_newlines", "_source")

    _OPEN = re.compile(r"\{[{%]")

    # Matched against the raw tag, not the stripped inside
    _EXTENDS = re.compile(r'\{% extends "([^"]+)" %\}')
    _BLOCK = re.compile(r"block\s+(\w+)")
    _ENDBLOCK = re.compile(r"endblock(?:\s+\w+)?")
    _FOR = re.compile(r"for\s+(\w+)\s+in\s+(\w+)")
    _ENDFOR = re.compile(r"endfor")
    _VARIABLE = re.compile(r"(\w+)(?:\.(\w+))?")

    def __init__(self, source: str):
        self._source = source
        self._newlines = [i for i, ch in enumerate(source) if ch == "\n"]

    def tokenize(self) -> list[Token]:
        """Return the complete token stream, terminated by EOF."""
        source = self._source
        tokens: list[Token] = []
        data_start = 0
        pos = 0

        while True:
            match = self._OPEN.search(source, pos)
            if match is None:
                break
            start = match.start()
            closer = "}}" if match.group() == "{{" else "%}"
            end = source.find(closer, start + 2)
            if end == -1:
                pos = start + 1
                continue

            inner = source[start + 2 : end].strip()
            if closer == "}}":
                token = self._classify_variable(inner, start, end + 2)
            else:
                token = self._classify_tag(inner, start, end + 2)

            if token is None:
                pos = start + 1
                continue

            if start > data_start:
                tokens.append(self._data(data_start, start))
            tokens.append(token)
            data_start = pos = end + 2

        if data_start < len(source):
            tokens.append(self._data(data_start, len(source)))

        lineno, col = self._location(len(source))
        tokens.append(Token(TokenType.EOF, None, lineno, col))
        return tokens

    def _classify_tag(self, inner: str, start: int, stop: int) -> Token | None:
        if inner.startswith("extends"):
            m = self._EXTENDS.fullmatch(self._source, start, stop)
            if m is None:
                return None
            return self._token(TokenType.EXTENDS, m.group(1), start, stop)
        if m := self._BLOCK.fullmatch(inner):
            return self._token(TokenType.BLOCK_BEGIN, m.group(1), start, stop)
        if self._ENDBLOCK.fullmatch(inner):
            return self._token(TokenType.BLOCK_END, None, start, stop)
        if m := self._FOR.fullmatch(inner):
            return self._token(TokenType.FOR_BEGIN, (m.group(1), m.group(2)), start, stop)
        if self._ENDFOR.fullmatch(inner):
            return self._token(TokenType.FOR_END, None, start, stop)
        return None

    def _classify_variable(self, inner: str, start: int, stop: int) -> Token | None:
        if m := self._VARIABLE.fullmatch(inner):
            return self._token(TokenType.VARIABLE, (m.group(1), m.group(2)), start, stop)
        return None

    def _token(self, type_: TokenType, value: object, start: int, stop: int) -> Token:
        lineno, col = self._location(start)
        return Token(type_, value, lineno, col, self._source[start:stop])

    def _data(self, start: int, stop: int) -> Token:
        text = self._source[start:stop]
        lineno, col = self._location(start)
        return Token(TokenType.DATA, text, lineno, col, text)

    def _location(self, offset: int) -> tuple[int, int]:
        """Map a character offset to (1-based line, 0-based column)."""
        line_index = bisect_right(self._newlines, offset - 1)
        line_start = self._newlines[line_index - 1] + 1 if line_index else 0
        return line_index + 1, offset - line_start


def tokenize(source: str) -> list[Token]:
    """Tokenize template source.

    Args:
        source: Template source text

    Returns:
        Flat list of tokens ending with an EOF token
    """
    return Lexer(source).tokenize()
