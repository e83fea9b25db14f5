"""Trellis Template: parsed template object ready for rendering.

Render pipeline, run top to bottom once per call:

    ```
    child source ─┬─ extends? ── load base ── extract_blocks ── merge_blocks ─┐
                  └─ standalone ─────────────────────────── flatten_blocks ───┤
                                                                              │
                          expand_loops (for) ── interpolate ({{ }}) ── str ◄──┘
    ```

Only one ``extends`` hop is resolved. Templates are immutable after
construction and keep their Environment alive, since the base template and
the ``strict`` setting are looked up through it at render time.

Thread-Safety:
- Template object is immutable after construction
- ``render()`` builds only local state
- Multiple threads can render the same template simultaneously

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from trellis.context import coerce_context
from trellis.nodes import Block, Node
from trellis.template.inheritance import extract_blocks, flatten_blocks, merge_blocks
from trellis.template.interpolate import interpolate
from trellis.template.loops import expand_loops

if TYPE_CHECKING:
    from trellis.environment import Environment
    from trellis.nodes import Template as TemplateNode


class Template:
    """Parsed template ready for rendering.

    Attributes:
        name: Template identifier (for error messages)
        source: Original template source

    Methods:
        render(context, **kwargs): Full render with inheritance
        render_direct(context, **kwargs): Render without resolving ``extends``

    Example:
            >>> from trellis import Environment
            >>> env = Environment()
            >>> t = env.from_string("{% for b in blocks %}#{{ b.height }} {% endfor %}")
            >>> t.render(blocks=[{"height": 101}, {"height": 102}])
            '#101 #102 '

    """

    __slots__ = ("_env", "_name", "_source", "_tree")

    def __init__(
        self,
        env: Environment,
        tree: TemplateNode,
        name: str | None,
        source: str | None = None,
    ):
        self._env = env
        self._tree = tree
        self._name = name
        self._source = source

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def base_name(self) -> str | None:
        """Name of the template this one extends, or None."""
        return self._tree.extends.template if self._tree.extends else None

    def block_names(self) -> list[str]:
        """Names of the blocks declared in this template, in source order."""
        return [node.name for node in self._tree.body if isinstance(node, Block)]

    def _resolve(self) -> list[Node]:
        """Apply inheritance: merge into the base or flatten standalone."""
        extends = self._tree.extends
        if extends is None:
            return flatten_blocks(self._tree)
        base = self._env.get_template(extends.template)
        return merge_blocks(base._tree, extract_blocks(self._tree))

    def _finish(self, nodes: list[Node], data: Mapping[str, Any]) -> str:
        context = coerce_context(data)
        expanded = expand_loops(nodes, context, template_name=self._name)
        return interpolate(
            expanded,
            context,
            strict=self._env.strict,
            template_name=self._name,
        )

    def render(self, *args: Any, **kwargs: Any) -> str:
        """Render template with given context.

        Accepts a single mapping positional argument, keyword arguments, or
        both (keywords win on conflict).

        Raises:
            TemplateNotFoundError: Base template could not be loaded
            TemplateRuntimeError: Loop over a missing or non-sequence key,
                or an unresolved variable in strict mode
        """
        return self._finish(self._resolve(), _merge_args(args, kwargs))

    def render_direct(self, *args: Any, **kwargs: Any) -> str:
        """Render this template alone, without following ``extends``.

        The ``extends`` tag is written back as text and blocks show their
        default content.
        """
        nodes = flatten_blocks(self._tree, keep_extends=True)
        return self._finish(nodes, _merge_args(args, kwargs))

    def __repr__(self) -> str:
        return f"<Template {self._name or '(string)'}>"


def _merge_args(args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
    if len(args) > 1:
        raise TypeError(f"render() takes at most 1 positional argument ({len(args)} given)")
    data: dict[str, Any] = {}
    if args and args[0] is not None:
        data.update(args[0])
    data.update(kwargs)
    return data
