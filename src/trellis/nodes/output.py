"""Output nodes for the Trellis node tree."""

from __future__ import annotations

from dataclasses import dataclass

from trellis.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Variable reference: {{ name }} or {{ name.attr }}

    ``raw`` keeps the exact source text so an unresolved reference can be
    written back unchanged.
    """

    name: str
    attr: str | None = None
    raw: str = ""

    @property
    def path(self) -> str:
        return f"{self.name}.{self.attr}" if self.attr else self.name


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Raw text data between template constructs."""

    value: str
