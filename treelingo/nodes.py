"""In-memory document tree implementing the node capabilities.

Parser adapters build these nodes; the walker only relies on the protocols
in ``structures``. The substitutions here cover what line reflow needs to
see in rendered output (escaped special characters and hard line breaks),
not a full markup renderer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .errors import MalformedTreeError
from .structures import EMBEDDED_CELL_STYLE, iter_tree

Substitution = Callable[[str], str]

SPECIAL_CHARACTERS = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}
SPECIAL_CHARACTERS_PATTERN = re.compile(r"[&<>]")
HARD_BREAK_SOURCE_PATTERN = re.compile(r"^(.*) \+$", re.MULTILINE)

DEFAULT_CONTENT_MODELS = {
    "paragraph": "simple",
    "admonition": "simple",
    "literal": "verbatim",
    "listing": "verbatim",
    "pass": "raw",
    "sidebar": "compound",
    "example": "compound",
    "quote": "compound",
    "open": "compound",
}


def escape_special_characters(text: str) -> str:
    return SPECIAL_CHARACTERS_PATTERN.sub(
        lambda match: SPECIAL_CHARACTERS[match.group()], text
    )


def replace_hard_breaks(text: str) -> str:
    """Turn a trailing `` +`` on a line into a ``<br>`` tag."""

    return HARD_BREAK_SOURCE_PATTERN.sub(r"\1<br>", text)


def break_every_line(text: str) -> str:
    """Treat every line end as a hard break (the ``hardbreaks`` option)."""

    lines = [
        line[:-2] if line.endswith(" +") else line for line in text.split("\n")
    ]
    return "<br>\n".join(lines)


NORMAL_SUBS: tuple[Substitution, ...] = (escape_special_characters, replace_hard_breaks)
VERBATIM_SUBS: tuple[Substitution, ...] = (escape_special_characters,)


def default_subs(content_model: str, options: Iterable[str] = ()) -> tuple[Substitution, ...]:
    if content_model == "verbatim":
        return VERBATIM_SUBS
    if content_model in {"raw", "empty"}:
        return ()
    if "hardbreaks" in options:
        return (escape_special_characters, break_every_line)
    return NORMAL_SUBS


class Node:
    """Base node with structural children and an optional title."""

    context = "node"

    def __init__(
        self,
        blocks: Optional[Sequence["Node"]] = None,
        *,
        raw_title: Optional[str] = None,
    ) -> None:
        self.blocks: List[Node] = list(blocks or [])
        self.raw_title = raw_title

    @property
    def title(self) -> Optional[str]:
        return self.raw_title

    @title.setter
    def title(self, value: Optional[str]) -> None:
        self.raw_title = value

    def find_by(self, context: Optional[str] = None) -> List[Any]:
        """Return this node and its descendants, optionally filtered by context."""

        return [
            node
            for node in iter_tree(self)
            if context is None or getattr(node, "context", None) == context
        ]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} context={self.context!r} title={self.title!r}>"


class Document(Node):
    """Document root; the ``doctitle`` attribute backs a missing title."""

    context = "document"

    def __init__(
        self,
        blocks: Optional[Sequence[Node]] = None,
        *,
        raw_title: Optional[str] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(blocks, raw_title=raw_title)
        self.attributes: Dict[str, Any] = dict(attributes or {})

    @property
    def raw_doctitle(self) -> Optional[str]:
        return self.attributes.get("doctitle")

    @property
    def title(self) -> Optional[str]:
        return self.raw_title if self.raw_title is not None else self.raw_doctitle

    @title.setter
    def title(self, value: Optional[str]) -> None:
        self.raw_title = value


class Section(Node):
    context = "section"

    def __init__(
        self,
        title: str,
        blocks: Optional[Sequence[Node]] = None,
        *,
        level: int = 1,
    ) -> None:
        super().__init__(blocks, raw_title=title)
        self.level = level


class Block(Node):
    """A block holding physical source lines (paragraph, listing, sidebar...)."""

    def __init__(
        self,
        context: str,
        lines: Optional[Sequence[str]] = None,
        *,
        content_model: Optional[str] = None,
        raw_title: Optional[str] = None,
        options: Iterable[str] = (),
        subs: Optional[Sequence[Substitution]] = None,
        blocks: Optional[Sequence[Node]] = None,
    ) -> None:
        super().__init__(blocks, raw_title=raw_title)
        self.context = context
        self.lines: List[str] = list(lines or [])
        self.content_model = content_model or DEFAULT_CONTENT_MODELS.get(context, "simple")
        self.options = frozenset(options)
        self.subs = tuple(subs) if subs is not None else default_subs(
            self.content_model, self.options
        )

    @property
    def source(self) -> str:
        return "\n".join(self.lines)

    def render(self, text: str) -> str:
        for sub in self.subs:
            text = sub(text)
        return text


class ListNode(Node):
    """An ordered, unordered or description list; items are its blocks."""

    def __init__(
        self,
        context: str,
        items: Optional[Sequence["ListItem"]] = None,
        *,
        raw_title: Optional[str] = None,
    ) -> None:
        super().__init__(items, raw_title=raw_title)
        self.context = context


class ListItem(Node):
    context = "list_item"
    content_model = "compound"

    def __init__(
        self,
        text: Optional[str],
        *,
        marker: str = "*",
        blocks: Optional[Sequence[Node]] = None,
        subs: Optional[Sequence[Substitution]] = None,
    ) -> None:
        super().__init__(blocks)
        self.raw_text = text
        self.marker = marker
        self.subs = tuple(subs) if subs is not None else NORMAL_SUBS

    @property
    def text(self) -> Optional[str]:
        return self.raw_text

    @text.setter
    def text(self, value: Optional[str]) -> None:
        self.raw_text = value

    def render(self, text: str) -> str:
        for sub in self.subs:
            text = sub(text)
        return text


class Cell:
    """Table cell; the ``asciidoc`` style owns a nested document instead of text."""

    def __init__(
        self,
        text: Optional[str] = None,
        *,
        style: Optional[str] = None,
        inner_document: Optional[Document] = None,
    ) -> None:
        self.raw_text = text
        self.style = style
        self._inner_document = inner_document

    @property
    def text(self) -> Optional[str]:
        return self.raw_text

    @text.setter
    def text(self, value: Optional[str]) -> None:
        self.raw_text = value

    @property
    def inner_document(self) -> Optional[Document]:
        if self.style == EMBEDDED_CELL_STYLE and self._inner_document is None:
            raise MalformedTreeError(
                "Table cell is styled as an embedded document but has none."
            )
        return self._inner_document


@dataclass
class TableRows:
    head: List[List[Cell]] = field(default_factory=list)
    body: List[List[Cell]] = field(default_factory=list)


class Table(Node):
    context = "table"

    def __init__(
        self,
        *,
        head: Optional[List[List[Cell]]] = None,
        body: Optional[List[List[Cell]]] = None,
        raw_title: Optional[str] = None,
    ) -> None:
        super().__init__(raw_title=raw_title)
        self.rows = TableRows(head=list(head or []), body=list(body or []))
