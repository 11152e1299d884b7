"""Line reflow: merge soft-wrapped source lines into translatable units."""

from __future__ import annotations

import re
from typing import List, Optional

from .structures import REFLOWABLE_CONTENT_MODELS, Renderer, RenderedNode

# Any rendered line ending in a break tag counts, not only the line at the join.
HARD_BREAK_PATTERN = re.compile(r"<br>[ \t]*$", re.MULTILINE)


def is_reflowable(content_model: Optional[str]) -> bool:
    """Return True when lines of this content model may be merged."""

    return content_model in REFLOWABLE_CONTENT_MODELS


def has_hard_break(rendered: str) -> bool:
    """Detect a rendered hard line break at the end of any line."""

    return HARD_BREAK_PATTERN.search(rendered) is not None


def reflow(lines: List[str], reflowable: bool, render: Renderer) -> List[str]:
    """Join soft-wrapped lines while keeping author-intended hard breaks.

    Each adjacent pair is rendered through ``render`` and inspected for a
    break marker; the raw text is never parsed here. Empty input and
    non-reflowable content are returned as-is.
    """

    if not lines or not reflowable:
        return lines

    result = [lines[0]]
    for line in lines[1:]:
        rendered = render(f"{result[-1]}\n{line}")
        if has_hard_break(rendered):
            result.append(line)
        else:
            result[-1] = f"{result[-1]} {line}"
    return result


def reflow_node_lines(node: RenderedNode, lines: List[str]) -> List[str]:
    """Reflow ``lines`` using the content model and renderer of ``node``."""

    return reflow(lines, is_reflowable(node.content_model), node.render)
