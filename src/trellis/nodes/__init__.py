"""Trellis node tree.

Parsed templates are a shallow tree: a root ``Template`` holding Data,
Output, For and Block nodes. Blocks may contain loops; nothing else nests.

"""

from trellis.nodes.base import Node
from trellis.nodes.control_flow import For
from trellis.nodes.output import Data, Output
from trellis.nodes.structure import Block, Extends, Template

__all__ = [
    "Block",
    "Data",
    "Extends",
    "For",
    "Node",
    "Output",
    "Template",
]
