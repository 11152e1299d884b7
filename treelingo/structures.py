"""Core types and node capabilities for the Treelingo localization pass."""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Iterator,
    List,
    Optional,
    Protocol,
    Sequence,
    Union,
    runtime_checkable,
)


TextUnit = Union[str, List[str]]
Renderer = Callable[[str], str]

REFLOWABLE_CONTENT_MODELS = frozenset({"simple", "compound"})
EMBEDDED_CELL_STYLE = "asciidoc"


@runtime_checkable
class TitledNode(Protocol):
    """A node that may carry a title."""

    raw_title: Optional[str]
    title: Optional[str]


@runtime_checkable
class DocumentRoot(Protocol):
    """The root of a document (or of a nested document in a table cell)."""

    raw_doctitle: Optional[str]


@runtime_checkable
class RenderedNode(Protocol):
    """A node able to run text through its own substitution pipeline."""

    content_model: str

    def render(self, text: str) -> str:
        ...


@runtime_checkable
class TextBlockNode(RenderedNode, Protocol):
    """A block whose content is a sequence of physical source lines."""

    lines: List[str]


@runtime_checkable
class ListItemNode(RenderedNode, Protocol):
    """A list item with a single text value."""

    raw_text: Optional[str]
    text: Optional[str]


class CellNode(Protocol):
    """A table cell: plain text or an embedded sub-document."""

    style: Optional[str]
    raw_text: Optional[str]
    text: Optional[str]
    inner_document: Any


class TableRows(Protocol):
    head: Sequence[Sequence[CellNode]]
    body: Sequence[Sequence[CellNode]]


@runtime_checkable
class TableNode(Protocol):
    """A table exposing its head and body rows."""

    rows: TableRows


def iter_tree(root: Any) -> Iterator[Any]:
    """Yield ``root`` and its structural descendants in document order."""

    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        children = getattr(node, "blocks", None) or ()
        stack.extend(reversed(list(children)))
