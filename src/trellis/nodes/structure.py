"""Template structure nodes for the Trellis node tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from trellis.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Extends(Node):
    """Template inheritance: {% extends "base.html" %}"""

    template: str
    raw: str = ""


@dataclass(frozen=True, slots=True)
class Block(Node):
    """Named block for inheritance: {% block name %}...{% endblock %}"""

    name: str
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node representing a complete template.

    ``extends`` is the honoured inheritance directive, if any. Its tag is not
    part of ``body``.
    """

    body: Sequence[Node]
    extends: Extends | None = None
