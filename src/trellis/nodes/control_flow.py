"""Control flow nodes for the Trellis node tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from trellis.nodes.base import Node


@dataclass(frozen=True, slots=True)
class For(Node):
    """For loop: {% for x in items %}...{% endfor %}

    The body holds only Data and Output nodes; loops do not nest. ``raw`` is
    the opening tag as written.
    """

    target: str
    iter: str
    body: Sequence[Node]
    raw: str = ""
