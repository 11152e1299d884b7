"""Document tree traversal and in-place translation."""

from __future__ import annotations

from typing import Any

from .reflow import reflow_node_lines
from .store import TranslationStore
from .structures import (
    EMBEDDED_CELL_STYLE,
    CellNode,
    DocumentRoot,
    ListItemNode,
    TableNode,
    TextBlockNode,
    TitledNode,
    iter_tree,
)


class TreeWalker:
    """Translates every text-bearing node reachable from a document root.

    Capabilities are checked independently, so a block with both a title
    and body lines gets both translated.
    """

    def __init__(self, store: TranslationStore) -> None:
        self.store = store

    def process(self, root: Any) -> None:
        for node in iter_tree(root):
            if isinstance(node, TitledNode):
                self._process_title(node)
            if isinstance(node, TextBlockNode):
                self._process_lines(node)
            if isinstance(node, TableNode):
                self._process_table(node)
            if isinstance(node, ListItemNode):
                self._process_list_item(node)

    # --- Internal helpers -------------------------------------------------

    def _process_title(self, node: TitledNode) -> None:
        raw = node.raw_title
        if raw is None and isinstance(node, DocumentRoot):
            raw = node.raw_doctitle
        if not raw:
            return
        node.title = self.store.translate(raw)

    def _process_lines(self, node: TextBlockNode) -> None:
        node.lines = self.store.translate(reflow_node_lines(node, node.lines))

    def _process_table(self, node: TableNode) -> None:
        for row in [*node.rows.head, *node.rows.body]:
            for cell in row:
                self._process_cell(cell)

    def _process_cell(self, cell: CellNode) -> None:
        if cell.style == EMBEDDED_CELL_STYLE:
            self.process(cell.inner_document)
            return
        raw = cell.raw_text
        if not raw:
            return
        cell.text = self.store.translate(raw)

    def _process_list_item(self, node: ListItemNode) -> None:
        raw = node.raw_text
        if not raw:
            return
        text = "\n".join(reflow_node_lines(node, raw.split("\n")))
        node.text = self.store.translate(text)


def process(root: Any, store: TranslationStore) -> None:
    """Translate ``root`` and all nested documents in place using ``store``."""

    TreeWalker(store).process(root)
