"""Template loaders for the Trellis environment.

Loaders are the backing store behind the template cache. They implement
`get_source(name)` returning `(source, filename)` and raise
`TemplateNotFoundError` on any read failure. They do no caching of their
own; `Environment.load()` reads each name through the loader once and keeps
the result in its `TemplateCache`.

Built-in Loaders:
- `FileSystemLoader`: Load from filesystem directories
- `DictLoader`: Load from in-memory dictionary (testing/embedded)
- `ChoiceLoader`: Try multiple loaders in order (theme fallback)
- `FunctionLoader`: Wrap a callable as a loader (quick one-offs)

Thread-Safety:
All built-in loaders are safe for concurrent `get_source()` calls.

"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from trellis.environment.exceptions import TemplateNotFoundError


class Loader(Protocol):
    """Backing store for template sources."""

    def get_source(self, name: str) -> tuple[str, str | None]: ...


class FileSystemLoader:
    """Load templates from filesystem directories.

    The template name is used verbatim as a path under each search
    directory, with ``suffix`` appended. No normalization is applied.
    The first readable file wins.

    Attributes:
        _paths: List of Path objects to search
        _encoding: File encoding (default: utf-8)
        _suffix: String appended to every name (default: none)

    Example:
            >>> loader = FileSystemLoader("templates/")
            >>> source, filename = loader.get_source("htmx/block.html")
            >>> print(filename)
            'templates/htmx/block.html'

            >>> loader = FileSystemLoader("src/templates", suffix=".html")
            >>> loader.get_source("home")[1]
            'src/templates/home.html'

    Raises:
        TemplateNotFoundError: If the file is missing from every search path
            or cannot be read (permissions, I/O, decoding)

    """

    __slots__ = ("_encoding", "_paths", "_suffix")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        encoding: str = "utf-8",
        suffix: str = "",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding
        self._suffix = suffix

    def get_source(self, name: str) -> tuple[str, str]:
        """Load template source from filesystem."""
        for base in self._paths:
            path = base / f"{name}{self._suffix}"
            if not path.is_file():
                continue
            try:
                return path.read_text(self._encoding), str(path)
            except (OSError, UnicodeDecodeError) as exc:
                raise TemplateNotFoundError(
                    f"Template '{name}' could not be read from {path}: {exc}",
                    name=name,
                ) from exc

        raise TemplateNotFoundError(
            f"Template '{name}' not found in: {', '.join(str(p) for p in self._paths)}",
            name=name,
        )

    def list_templates(self) -> list[str]:
        """List all templates in search paths, without the suffix."""
        templates = set()
        pattern = f"*{self._suffix}" if self._suffix else "*"
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob(pattern):
                    if path.is_file():
                        rel = str(path.relative_to(base))
                        templates.add(rel[: len(rel) - len(self._suffix)] if self._suffix else rel)
        return sorted(templates)


class DictLoader:
    """Load templates from an in-memory dictionary.

    Useful for testing and for templates embedded in code.

    Example:
            >>> loader = DictLoader({
            ...     "base.html": "<html>{% block content %}{% endblock %}</html>",
            ...     "page.html": '{% extends "base.html" %}{% block content %}Hi{% endblock %}',
            ... })
            >>> env = Environment(loader=loader)
            >>> env.render("page.html")
            '<html>Hi</html>'

    Raises:
        TemplateNotFoundError: If template name not in mapping

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            from difflib import get_close_matches

            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise TemplateNotFoundError(msg, name=name)
        return self._mapping[name], None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())


class ChoiceLoader:
    """Try multiple loaders in order, returning the first match.

    Example:
            >>> loader = ChoiceLoader([
            ...     FileSystemLoader("themes/custom/"),
            ...     FileSystemLoader("themes/default/"),
            ... ])

    Raises:
        TemplateNotFoundError: If no loader can find the template

    Thread-Safety:
        Safe if all child loaders are thread-safe.
    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: list[Loader]):
        self._loaders = loaders

    def get_source(self, name: str) -> tuple[str, str | None]:
        """Try each loader in order, return first match."""
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError:
                continue
        raise TemplateNotFoundError(
            f"Template '{name}' not found in any of {len(self._loaders)} loaders",
            name=name,
        )

    def list_templates(self) -> list[str]:
        """Merge template lists from all loaders (deduplicated, sorted)."""
        templates: set[str] = set()
        for loader in self._loaders:
            if hasattr(loader, "list_templates"):
                templates.update(loader.list_templates())
        return sorted(templates)


class FunctionLoader:
    """Wrap a callable as a template loader.

    The function takes a template name and returns the source string, a
    ``(source, filename)`` tuple, or ``None`` when the template does not
    exist.

    Example:
            >>> def load(name):
            ...     if name == "greeting.html":
            ...         return "Hello, {{ name }}!"
            ...     return None
            >>> env = Environment(loader=FunctionLoader(load))
            >>> env.render("greeting.html", name="World")
            'Hello, World!'

    Raises:
        TemplateNotFoundError: If ``load_func`` returns ``None`` or fails
            with an I/O or decoding error

    """

    __slots__ = ("_load_func",)

    def __init__(
        self,
        load_func: Callable[[str], str | tuple[str, str | None] | None],
    ):
        self._load_func = load_func

    def get_source(self, name: str) -> tuple[str, str | None]:
        """Call the load function and normalize the result."""
        try:
            result = self._load_func(name)
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateNotFoundError(
                f"Template '{name}' could not be read: {exc}", name=name
            ) from exc

        if result is None:
            raise TemplateNotFoundError(f"Template '{name}' not found", name=name)

        if isinstance(result, str):
            return result, "<function>"

        return result

    def list_templates(self) -> list[str]:
        """FunctionLoader cannot enumerate templates."""
        return []
