"""Trellis environment package: configuration, loading, caching, errors."""

from trellis.environment.exceptions import (
    ErrorCode,
    MissingIterableError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
)
from trellis.environment.loaders import ChoiceLoader, DictLoader, FileSystemLoader, FunctionLoader
from trellis.environment.cache import TemplateCache
from trellis.environment.core import DEFAULT_FALLBACK, Environment

__all__ = [
    "DEFAULT_FALLBACK",
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "MissingIterableError",
    "SourceSnippet",
    "TemplateCache",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "UndefinedError",
    "build_source_snippet",
]
