"""Variable interpolation, the last render stage."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from trellis.context import ContextValue, Scalar
from trellis.environment.exceptions import UndefinedError
from trellis.nodes import Data, Node, Output


def interpolate(
    nodes: Sequence[Node],
    context: Mapping[str, ContextValue],
    *,
    strict: bool = False,
    template_name: str | None = None,
) -> str:
    """Join nodes into output text, substituting top-level scalars.

    ``{{ name }}`` with a scalar value is replaced by it. Anything else
    (unknown names, sequence-valued names, dotted references outside a
    loop) is written back exactly as it appeared in the source, unless
    ``strict`` is set.

    Raises:
        UndefinedError: In strict mode, for the first unresolved reference
    """
    buf: list[str] = []
    _append = buf.append
    for node in nodes:
        if isinstance(node, Data):
            _append(node.value)
            continue
        if isinstance(node, Output):
            value = context.get(node.name) if node.attr is None else None
            if isinstance(value, Scalar):
                _append(value.value)
            elif strict:
                raise UndefinedError(
                    node.path,
                    template_name=template_name,
                    lineno=node.lineno,
                    available=sorted(context),
                )
            else:
                _append(node.raw)
            continue
        raise TypeError(f"Unexpected {type(node).__name__} node after loop expansion")
    return "".join(buf)
