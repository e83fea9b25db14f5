"""Exceptions for the Trellis template engine.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Backing store read failed
├── TemplateSyntaxError       # Structural error in template source
└── TemplateRuntimeError      # Render-time error with context
    ├── MissingIterableError  # for-loop collection absent from context
    └── UndefinedError        # Unresolved {{ name }} in strict mode

``Environment.render()`` is the single recovery boundary: every
``TemplateError`` raised below it is logged and turned into a fallback
fragment. Lower-level APIs (``Environment.load``, ``Template.render``)
propagate these exceptions.

Example:
    ```
    T-RUN-002: Loop collection 'blocks' is missing from the render context
      Location: home.html:12
      Expression: {% for b in blocks %}
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes for Trellis template errors.

    Format: T-{CATEGORY}-{NUMBER}
    Categories: RUN (runtime), TPL (template loading and parsing)
    """

    # Runtime errors (T-RUN-xxx)
    UNDEFINED_VARIABLE = "T-RUN-001"
    MISSING_ITERABLE = "T-RUN-002"
    RUNTIME_ERROR = "T-RUN-003"

    # Template loading errors (T-TPL-xxx)
    TEMPLATE_NOT_FOUND = "T-TPL-001"
    SYNTAX_ERROR = "T-TPL-002"

    @property
    def category(self) -> str:
        """Error category ('runtime' or 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format snippet with line numbers, marking the error line with ``>``."""
        parts: list[str] = ["   |"]
        for lineno, content in self.lines:
            marker = ">" if lineno == self.error_line else " "
            parts.append(f"{marker}{lineno:>3} | {content}")
            if lineno == self.error_line and self.column is not None:
                parts.append(f"    | {' ' * self.column}^")
        parts.append("   |")
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.

    Returns:
        SourceSnippet with surrounding context lines.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all Trellis template errors.

    All template-related exceptions inherit from this class, enabling
    broad exception handling:

        >>> try:
        ...     template.render()
        ... except TemplateError as e:
        ...     log.error("Template error: %s", e)

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a one-screen summary without traceback noise.

        Prefixes the message with the error code when the message does not
        already carry it.
        """
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TemplateNotFoundError(TemplateError):
    """Template source could not be read from the backing store.

    Raised by loaders for a missing file, a permission error or any other
    read failure. Loads are never retried.

    Example:
            >>> env.load("nonexistent.html")
        TemplateNotFoundError: Template 'nonexistent.html' not found in: templates/

    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND

    def __init__(self, message: str, *, name: str | None = None):
        self.name = name
        super().__init__(message)


class TemplateSyntaxError(TemplateError):
    """Structural error in template source.

    Raised by the parser for unclosed or stray ``block``/``for`` tags and
    for nesting the engine does not support. Malformed tags are not syntax
    errors; they pass through as text.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.source = source
        self.col_offset = col_offset
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"

        header = f"Syntax Error: {self.message}\n  --> {location}"

        if self.source and self.lineno:
            snippet = build_source_snippet(
                self.source, self.lineno, context_lines=0, column=self.col_offset
            )
            return f"{header}\n{snippet.format()}"

        return header


class TemplateRuntimeError(TemplateError):
    """Render-time error with debugging context.

    Output Format:
            ```
            Runtime Error: 'network' is not a sequence
              Location: home.html:4
              Expression: {% for n in network %}
              Suggestion: Pass a list of records for 'network'
            ```

    Attributes:
        message: Error description
        expression: Template text that failed
        template_name: Name of the template
        lineno: Line number in template source
        suggestion: Actionable fix suggestion

    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        template_name: str | None = None,
        lineno: int | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.expression = expression
        self.template_name = template_name
        self.lineno = lineno
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]

        if self.template_name or self.lineno:
            loc = self.template_name or "<template>"
            if self.lineno:
                loc += f":{self.lineno}"
            parts.append(f"  Location: {loc}")

        if self.expression:
            parts.append(f"  Expression: {self.expression}")

        if self.suggestion:
            parts.append(f"  Suggestion: {self.suggestion}")

        return "\n".join(parts)


class MissingIterableError(TemplateRuntimeError):
    """A ``for`` loop names a collection that is not in the render context.

    Terminal for the render: the loop cannot be expanded, so the whole
    render aborts.
    """

    code: ErrorCode | None = ErrorCode.MISSING_ITERABLE

    def __init__(
        self,
        name: str,
        *,
        expression: str | None = None,
        template_name: str | None = None,
        lineno: int | None = None,
    ):
        self.name = name
        super().__init__(
            f"Loop collection '{name}' is missing from the render context",
            expression=expression,
            template_name=template_name,
            lineno=lineno,
            suggestion=f"Pass a list of records as '{name}'",
        )


class UndefinedError(TemplateRuntimeError):
    """Unresolved ``{{ name }}`` placeholder in strict mode.

    Only raised when the environment is created with ``strict=True``. The
    default lenient mode leaves the placeholder in the output.

    Example:
            >>> env = Environment(strict=True)
            >>> env.from_string("{{ titl }}").render(title="x")
        UndefinedError: Undefined variable 'titl'
          Suggestion: Did you mean 'title'?

    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE

    def __init__(
        self,
        name: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        available: list[str] | None = None,
    ):
        from difflib import get_close_matches

        self.name = name
        suggestion = None
        matches = get_close_matches(name, available or [], n=1, cutoff=0.6)
        if matches:
            suggestion = f"Did you mean '{matches[0]}'?"
        super().__init__(
            f"Undefined variable '{name}'",
            expression=f"{{{{ {name} }}}}",
            template_name=template_name,
            lineno=lineno,
            suggestion=suggestion,
        )
