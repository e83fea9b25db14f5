"""Single-level template inheritance.

A child template that starts with ``{% extends "base.html" %}`` contributes
only its blocks. Rendering splices them into the base:

    base:   <title>{% block title %}Explorer{% endblock %}</title>
            <main>{% block content %}{% endblock %}</main>
    child:  {% extends "base.html" %}{% block content %} Block 42 {% endblock %}
    result: <title></title>
            <main>Block 42</main>

Base blocks the child does not override are removed, default content and
all. Child text outside blocks is discarded. The base's own ``extends`` tag
is not followed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from trellis.nodes import Block, Data, Node, Template

BlockTable = dict[str, tuple[Node, ...]]


def _trim(body: Sequence[Node]) -> tuple[Node, ...]:
    """Strip leading and trailing whitespace from a block body."""
    nodes = list(body)

    while nodes and isinstance(nodes[0], Data):
        first = nodes[0]
        stripped = first.value.lstrip()
        if stripped:
            nodes[0] = Data(first.lineno, first.col_offset, stripped)
            break
        nodes.pop(0)

    while nodes and isinstance(nodes[-1], Data):
        last = nodes[-1]
        stripped = last.value.rstrip()
        if stripped:
            nodes[-1] = Data(last.lineno, last.col_offset, stripped)
            break
        nodes.pop()

    return tuple(nodes)


def extract_blocks(child: Template) -> BlockTable:
    """Collect the child's blocks as name → trimmed body.

    A name declared twice keeps its last body.
    """
    return {node.name: _trim(node.body) for node in child.body if isinstance(node, Block)}


def merge_blocks(base: Template, blocks: Mapping[str, Sequence[Node]]) -> list[Node]:
    """Replace each base block with the child's body, or drop it.

    Returns a flat node list with no Block nodes left.
    """
    merged: list[Node] = []
    if base.extends is not None:
        merged.append(Data(base.extends.lineno, base.extends.col_offset, base.extends.raw))
    for node in base.body:
        if isinstance(node, Block):
            merged.extend(blocks.get(node.name, ()))
        else:
            merged.append(node)
    return merged


def flatten_blocks(template: Template, *, keep_extends: bool = False) -> list[Node]:
    """Render-ready node list for a template rendered on its own.

    Blocks keep their default content; only the block markers disappear.
    With ``keep_extends`` an ignored ``extends`` tag is written back as text.
    """
    nodes: list[Node] = []
    if keep_extends and template.extends is not None:
        ext = template.extends
        nodes.append(Data(ext.lineno, ext.col_offset, ext.raw))
    nodes.extend(_unwrap(template.body))
    return nodes


def _unwrap(body: Iterable[Node]) -> Iterable[Node]:
    for node in body:
        if isinstance(node, Block):
            yield from node.body
        else:
            yield node
