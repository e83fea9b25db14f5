"""Token types shared by the lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of tokens produced by the lexer.

    The stream is flat: structural tags (block/for open and close) are
    separate tokens and the parser pairs them up.
    """

    DATA = "data"
    EXTENDS = "extends"
    BLOCK_BEGIN = "block_begin"
    BLOCK_END = "block_end"
    FOR_BEGIN = "for_begin"
    FOR_END = "for_end"
    VARIABLE = "variable"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token.

    Attributes:
        type: Token kind
        value: Payload. DATA: the text. EXTENDS: base template name.
            BLOCK_BEGIN: block name. FOR_BEGIN: ``(target, iterable)``.
            VARIABLE: ``(name, attr)`` with ``attr`` possibly None.
        lineno: 1-based line of the token start
        col_offset: 0-based column of the token start
        raw: Exact source text of the token
    """

    type: TokenType
    value: object
    lineno: int
    col_offset: int
    raw: str = ""

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.lineno}:{self.col_offset})"
