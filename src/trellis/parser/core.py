"""Parser: folds the flat token stream into a shallow node tree.

Structure rules:
- the first ``{% extends %}`` becomes ``Template.extends``; later ones are text
- ``block`` may contain ``for``; ``for`` may not contain ``block`` or ``for``
- blocks do not nest
- every ``block``/``for`` needs its matching end tag, and end tags need an
  open tag

"""

from __future__ import annotations

from trellis._types import Token, TokenType
from trellis.environment.exceptions import TemplateSyntaxError
from trellis.nodes import Block, Data, Extends, For, Node, Output, Template


class Parser:
    """Single-pass parser over a token list, with a stack of open tags.

    Example:
        >>> from trellis.lexer import tokenize
        >>> tree = Parser(tokenize("{% for x in xs %}{{ x.id }}{% endfor %}")).parse()
        >>> tree.body[0].iter
        'xs'

    """

    __slots__ = ("_extends", "_name", "_pos", "_source", "_stack", "_tokens")

    def __init__(self, tokens: list[Token], name: str | None = None, source: str | None = None):
        self._tokens = tokens
        self._name = name
        self._source = source
        self._pos = 0
        self._extends: Extends | None = None
        # Open tags, innermost last
        self._stack: list[Token] = []

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _error(self, message: str, token: Token) -> TemplateSyntaxError:
        return TemplateSyntaxError(
            message,
            lineno=token.lineno,
            name=self._name,
            source=self._source,
            col_offset=token.col_offset,
        )

    def parse(self) -> Template:
        """Parse the whole stream into a Template node."""
        body = self._parse_body(until=None)
        return Template(lineno=1, col_offset=0, body=tuple(body), extends=self._extends)

    def _parse_body(self, until: TokenType | None) -> list[Node]:
        nodes: list[Node] = []
        while True:
            token = self._current
            ttype = token.type

            if ttype == TokenType.EOF:
                if until is not None:
                    opener = self._stack[-1]
                    raise self._error(f"Unclosed '{opener.raw}'", opener)
                return nodes

            if ttype == until:
                self._advance()
                return nodes

            if ttype == TokenType.DATA:
                self._advance()
                nodes.append(Data(token.lineno, token.col_offset, token.value))
            elif ttype == TokenType.VARIABLE:
                self._advance()
                name, attr = token.value
                nodes.append(Output(token.lineno, token.col_offset, name, attr, token.raw))
            elif ttype == TokenType.EXTENDS:
                self._advance()
                if self._extends is None and not self._stack:
                    self._extends = Extends(
                        token.lineno, token.col_offset, token.value, token.raw
                    )
                else:
                    nodes.append(Data(token.lineno, token.col_offset, token.raw))
            elif ttype == TokenType.BLOCK_BEGIN:
                nodes.append(self._parse_block())
            elif ttype == TokenType.FOR_BEGIN:
                nodes.append(self._parse_for())
            else:
                raise self._error(f"Unexpected '{token.raw}'", token)

    def _parse_block(self) -> Block:
        """Parse {% block name %}...{% endblock %}."""
        start = self._current
        if self._stack:
            raise self._error(
                f"'{start.raw}' cannot appear inside '{self._stack[-1].raw}'", start
            )
        self._advance()
        self._stack.append(start)
        body = self._parse_body(until=TokenType.BLOCK_END)
        self._stack.pop()
        return Block(start.lineno, start.col_offset, start.value, tuple(body))

    def _parse_for(self) -> For:
        """Parse {% for x in items %}...{% endfor %}."""
        start = self._current
        if any(t.type == TokenType.FOR_BEGIN for t in self._stack):
            raise self._error(f"Nested loop '{start.raw}' is not supported", start)
        self._advance()
        self._stack.append(start)
        body = self._parse_body(until=TokenType.FOR_END)
        self._stack.pop()
        target, iterable = start.value
        return For(start.lineno, start.col_offset, target, iterable, tuple(body), start.raw)


def parse(tokens: list[Token], name: str | None = None, source: str | None = None) -> Template:
    """Parse a token list into a Template node."""
    return Parser(tokens, name, source).parse()
