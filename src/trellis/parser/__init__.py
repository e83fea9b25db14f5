"""Trellis parser: token stream to node tree."""

from trellis.parser.core import Parser, parse

__all__ = ["Parser", "parse"]
