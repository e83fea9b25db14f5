"""Trellis: a small template engine for server-rendered explorer pages.

Quickstart:
    >>> from trellis import Environment
    >>> env = Environment()
    >>> env.from_string("Hello, {{ name }}!").render(name="World")
    'Hello, World!'

File-based templates:
    >>> from trellis import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("templates/"))
    >>> env.render("block.html", {"height": 42, "txs": [{"hash": "ab12"}]})

Template language:
- ``{% extends "base.html" %}``: one level of inheritance
- ``{% block name %}...{% endblock %}``: overridable regions
- ``{% for tx in txs %}...{% endfor %}``: iterate a list of records
- ``{{ name }}`` / ``{{ tx.hash }}``: interpolation

Pipeline:
Source → Lexer → Parser → [merge blocks into base] → expand loops → interpolate

What it does not do: expressions, filters, HTML escaping, whitespace
control, nested loops or blocks, multi-level inheritance.

Lenient by default:
Unresolved ``{{ name }}`` placeholders are left in the output as written.
``Environment(strict=True)`` raises `UndefinedError` instead.

Failure handling:
`Environment.render()` never raises a `TemplateError`; it logs the error and
returns a small fallback fragment. `Template.render()` raises.

"""

from trellis.environment import (
    DEFAULT_FALLBACK,
    ChoiceLoader,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    FunctionLoader,
    MissingIterableError,
    SourceSnippet,
    TemplateCache,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
)
from trellis._types import Token, TokenType
from trellis.context import Scalar, Sequence, coerce_context
from trellis.template import Template

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_FALLBACK",
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "MissingIterableError",
    "Scalar",
    "Sequence",
    "SourceSnippet",
    "Template",
    "TemplateCache",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "UndefinedError",
    "__version__",
    "build_source_snippet",
    "coerce_context",
]
