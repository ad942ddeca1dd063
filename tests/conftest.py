import pytest

from use_order_fixer.core import render_tree
from use_order_fixer.source_map import SourceMap
from use_order_fixer.syntax import Module
from use_order_fixer.syntax import OtherItem
from use_order_fixer.syntax import Span
from use_order_fixer.syntax import UseItem
from use_order_fixer.syntax import UseTree


def _layout(entries, file="src/lib.rs", name="crate"):
    """Lay out one module body line by line and compute the item spans.

    Entries are None (blank line), a UseTree (``use <tree>;``), a
    ``(text, tree)`` pair for a hand-written, possibly multi-line import, a
    string starting with ``//`` (comment line, no item) or any other string (a
    non-import item).
    """
    chunks = []
    items = []
    offset = 0
    for entry in entries:
        if entry is None:
            text, item = "", None
        elif isinstance(entry, UseTree):
            text = f"use {render_tree(entry)};"
            item = lambda span, tree=entry: UseItem(span, tree)
        elif isinstance(entry, tuple):
            text, tree = entry
            item = lambda span, tree=tree: UseItem(span, tree)
        elif entry.startswith("//"):
            text, item = entry, None
        else:
            text = entry
            item = lambda span: OtherItem(span, "fn")
        size = len(text.encode("utf-8"))
        if item is not None:
            items.append(item(Span(file, offset, offset + size)))
        chunks.append(text)
        offset += size + 1
    source = "\n".join(chunks) + "\n"
    source_map = SourceMap()
    source_map.add_file(file, source)
    module = Module(name, tuple(items), Span(file, 0, len(source.encode("utf-8"))))
    return source_map, module, source


@pytest.fixture
def layout():
    return _layout
