"""Trellis Environment: loader, source cache and render entry points.

The Environment owns a `TemplateCache` and a loader. `load()` is the only
place that touches the backing store; everything above it works on cached
source text.

Recovery boundary:
    `Environment.render()` and `Environment.render_direct()` never raise a
    `TemplateError`. A failed render is logged and answered with a small
    HTML fragment naming the template, so one broken template cannot take
    down the page handler that called it. Use `get_template(...).render()`
    to see the exception instead.

Example:
    >>> env = Environment(loader=FileSystemLoader("templates/"))
    >>> env.render("htmx/network_info.html", {"height": 3129442, "hash_rate": "2.1 GH/s"})
    '<dd>3129442</dd><dd>2.1 GH/s</dd>'

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from trellis.environment.cache import TemplateCache
from trellis.environment.exceptions import TemplateError, TemplateNotFoundError
from trellis.environment.loaders import Loader
from trellis.lexer import tokenize
from trellis.parser import parse
from trellis.template import Template

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK = "<h1>Template Error</h1><p>Could not render template: {name}</p>"


class Environment:
    """Central configuration and render entry point.

    Args:
        loader: Backing store for named templates. Without one, only
            `from_string()` templates can be rendered.
        strict: Raise `UndefinedError` for unresolved ``{{ name }}`` instead
            of leaving the placeholder in the output.
        fallback: Markup returned by `render()` on failure. Every
            ``{name}`` in it is replaced with the template name; other
            braces are kept as they are.
        cache: Source cache to use. Defaults to a fresh `TemplateCache`;
            pass one explicitly to share or inspect it.

    Thread-Safety:
        Configuration is fixed at construction. The cache tolerates
        concurrent first loads (see `TemplateCache`).

    """

    __slots__ = ("_cache", "fallback", "loader", "strict")

    def __init__(
        self,
        loader: Loader | None = None,
        *,
        strict: bool = False,
        fallback: str = DEFAULT_FALLBACK,
        cache: TemplateCache | None = None,
    ):
        self.loader = loader
        self.strict = strict
        self.fallback = fallback
        self._cache = cache if cache is not None else TemplateCache()

    @property
    def cache(self) -> TemplateCache:
        return self._cache

    def cache_info(self) -> dict[str, int]:
        """Return source cache statistics (size, hits, misses)."""
        return self._cache.info()

    def load(self, name: str) -> str:
        """Return the source for a template name.

        A cache hit does no I/O. A miss reads the loader once and stores the
        result.

        Raises:
            TemplateNotFoundError: No loader configured, or the read failed
        """
        source = self._cache.get(name)
        if source is not None:
            return source

        if self.loader is None:
            raise TemplateNotFoundError(
                f"Template '{name}' not found: no loader configured", name=name
            )

        logger.debug("Loading template %r", name)
        try:
            source, _filename = self.loader.get_source(name)
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateNotFoundError(
                f"Template '{name}' could not be read: {exc}", name=name
            ) from exc
        self._cache.set(name, source)
        return source

    def get_template(self, name: str) -> Template:
        """Load and parse a named template.

        Raises:
            TemplateNotFoundError: If the template cannot be loaded
            TemplateSyntaxError: If the template's structure is invalid
        """
        source = self.load(name)
        tree = parse(tokenize(source), name=name, source=source)
        return Template(self, tree, name, source=source)

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Parse a template from a string. The source is not cached.

        Raises:
            TemplateSyntaxError: If the template's structure is invalid
        """
        tree = parse(tokenize(source), name=name, source=source)
        return Template(self, tree, name, source=source)

    def render(
        self, name: str, context: Mapping[str, Any] | None = None, /, **kwargs: Any
    ) -> str:
        """Render a named template, returning the fallback fragment on failure.

        Args:
            name: Template name, resolved by the loader
            context: Variable name → scalar or list of records
            **kwargs: Extra variables (override ``context`` on conflict).
                ``name`` and ``context`` are valid variable names here.

        Returns:
            Rendered markup, or the fallback fragment. Never raises
            `TemplateError`.
        """
        try:
            return self.get_template(name).render(context, **kwargs)
        except TemplateError as exc:
            return self._fail(name, exc)

    def render_direct(
        self, name: str, context: Mapping[str, Any] | None = None, /, **kwargs: Any
    ) -> str:
        """Render a named template without resolving ``extends``.

        Same recovery behaviour as `render()`.
        """
        try:
            return self.get_template(name).render_direct(context, **kwargs)
        except TemplateError as exc:
            return self._fail(name, exc)

    def _fail(self, name: str, exc: TemplateError) -> str:
        logger.error("Error rendering template %r: %s", name, exc.format_compact())
        return self.fallback.replace("{name}", name)

    def __repr__(self) -> str:
        return (
            f"<Environment loader={type(self.loader).__name__} "
            f"strict={self.strict} cached={len(self._cache)}>"
        )
