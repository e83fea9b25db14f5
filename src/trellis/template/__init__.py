"""Trellis Template package: parsed templates and the render stages."""

from trellis.template.core import Template
from trellis.template.inheritance import extract_blocks, flatten_blocks, merge_blocks
from trellis.template.interpolate import interpolate
from trellis.template.loops import expand_loops

__all__ = [
    "Template",
    "expand_loops",
    "extract_blocks",
    "flatten_blocks",
    "interpolate",
    "merge_blocks",
]
