"""Loop expansion.

Each ``{% for item in items %}`` region is replaced by one copy of its body
per record in ``items``, in collection order. Inside the body,
``{{ item.prop }}`` becomes the record's property (empty string if the
record lacks it). Every other reference is left for the interpolator, so
``{{ title }}`` inside a loop still resolves against the top-level context.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence as SequenceABC

from trellis.context import ContextValue, Record, Sequence
from trellis.environment.exceptions import MissingIterableError, TemplateRuntimeError
from trellis.nodes import Data, For, Node, Output


def _expand_body(loop: For, record: Record) -> list[Node]:
    nodes: list[Node] = []
    for node in loop.body:
        if isinstance(node, Output) and node.name == loop.target and node.attr:
            nodes.append(Data(node.lineno, node.col_offset, record.get(node.attr, "")))
        else:
            nodes.append(node)
    return nodes


def expand_loops(
    nodes: SequenceABC[Node],
    context: Mapping[str, ContextValue],
    *,
    template_name: str | None = None,
) -> list[Node]:
    """Expand every For node against the context.

    Args:
        nodes: Flat node list (blocks already merged or flattened)
        context: Typed render context
        template_name: For error messages

    Returns:
        Node list containing only Data and Output nodes

    Raises:
        MissingIterableError: A loop names a key absent from the context
        TemplateRuntimeError: A loop names a key holding a scalar
    """
    expanded: list[Node] = []
    for node in nodes:
        if not isinstance(node, For):
            expanded.append(node)
            continue

        expression = node.raw or f"{{% for {node.target} in {node.iter} %}}"
        value = context.get(node.iter)
        if value is None:
            raise MissingIterableError(
                node.iter,
                expression=expression,
                template_name=template_name,
                lineno=node.lineno,
            )
        if not isinstance(value, Sequence):
            raise TemplateRuntimeError(
                f"'{node.iter}' is not a sequence",
                expression=expression,
                template_name=template_name,
                lineno=node.lineno,
                suggestion=f"Pass a list of records for '{node.iter}'",
            )

        for record in value.items:
            expanded.extend(_expand_body(node, record))
    return expanded
