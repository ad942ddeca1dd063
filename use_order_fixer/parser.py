"""Parser module for use-order-fixer.

This module reads the JSON syntax-tree dump written by the external front end
and turns it into the types of ``syntax.py``, together with a ``SourceMap``
over the source files the dump refers to.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any
from typing import Set
from typing import Tuple

from use_order_fixer.source_map import SourceMap
from use_order_fixer.syntax import Item
from use_order_fixer.syntax import Module
from use_order_fixer.syntax import OtherItem
from use_order_fixer.syntax import Span
from use_order_fixer.syntax import UseItem
from use_order_fixer.syntax import UseTree
from use_order_fixer.syntax import UseTreeKind

LOG = logging.getLogger(__name__)

DUMP_SUFFIX = ".ast.json"


class TreeFormatError(ValueError):
    """The dump does not describe a valid module tree."""


def _expect(condition: bool, message: str) -> None:
    if not condition:
        raise TreeFormatError(message)


def parse_span(data: Any, file: str) -> Span:
    _expect(
        isinstance(data, list) and len(data) == 2 and all(isinstance(x, int) for x in data),
        f"span must be a [lo, hi] pair of integers, got {data!r}",
    )
    lo, hi = data
    _expect(0 <= lo <= hi, f"invalid span {lo}..{hi}")
    return Span(file, lo, hi)


def parse_use_tree(data: Any) -> UseTree:
    """Build a UseTree from its dump representation.

    Args:
        data: A mapping with ``kind`` (simple, nested or glob), ``prefix`` (a
            list of segment strings) and, depending on the kind, ``alias`` or
            ``children``.

    Raises:
        TreeFormatError: If the mapping is not a valid use tree.
    """
    _expect(isinstance(data, dict), f"use tree must be an object, got {data!r}")
    try:
        kind = UseTreeKind(data.get("kind"))
    except ValueError:
        raise TreeFormatError(f"unknown use tree kind {data.get('kind')!r}") from None

    prefix = data.get("prefix", [])
    _expect(
        isinstance(prefix, list) and all(isinstance(seg, str) and seg for seg in prefix),
        f"prefix must be a list of non-empty strings, got {prefix!r}",
    )
    alias = data.get("alias")
    _expect(alias is None or isinstance(alias, str), f"alias must be a string, got {alias!r}")
    children = data.get("children", [])
    _expect(isinstance(children, list), f"children must be a list, got {children!r}")

    try:
        return UseTree(
            tuple(prefix),
            kind,
            alias=alias,
            children=tuple(parse_use_tree(child) for child in children),
        )
    except TreeFormatError:
        raise
    except ValueError as e:
        raise TreeFormatError(str(e)) from e


def parse_item(data: Any, file: str) -> Item:
    _expect(isinstance(data, dict), f"item must be an object, got {data!r}")
    kind = data.get("kind")
    _expect(isinstance(kind, str), f"item kind must be a string, got {kind!r}")
    if kind == "use":
        visibility = data.get("vis") or ""
        _expect(isinstance(visibility, str), f"vis must be a string, got {visibility!r}")
        return UseItem(parse_span(data.get("span"), file), parse_use_tree(data.get("tree")), visibility)
    if kind == "mod":
        return parse_module(data, file)
    return OtherItem(parse_span(data.get("span"), file), kind)


def parse_module(data: Any, file: str) -> Module:
    """Build a Module; an out-of-line module names its own ``file``."""
    _expect(isinstance(data, dict), f"module must be an object, got {data!r}")
    name = data.get("name", "crate")
    _expect(isinstance(name, str), f"module name must be a string, got {name!r}")
    # The declaration span lives in the parent's file, the body may not.
    span = parse_span(data["span"], file) if "span" in data else None
    body_file = data.get("file", file)
    _expect(isinstance(body_file, str) and bool(body_file), f"file must be a non-empty string, got {body_file!r}")
    items = data.get("items", [])
    _expect(isinstance(items, list), f"items must be a list, got {items!r}")
    return Module(name, tuple(parse_item(item, body_file) for item in items), span)


def _collect_files(module: Module, files: Set[str]) -> None:
    for item in module.items:
        if isinstance(item, Module):
            if item.span is not None:
                files.add(item.span.file)
            _collect_files(item, files)
        else:
            files.add(item.span.file)


def load_crate(dump_path) -> Tuple[Module, SourceMap]:
    """Load a dump file and the source files it refers to.

    Source file names are resolved relative to the dump's directory.

    Returns:
        The crate root module and a SourceMap holding every referenced file.

    Raises:
        TreeFormatError: If the dump is not valid JSON or not a module tree.
        OSError: If a referenced source file cannot be read.
    """
    dump_path = Path(dump_path)
    try:
        data = json.loads(dump_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise TreeFormatError(f"{dump_path}: {e}") from e

    _expect(isinstance(data, dict) and isinstance(data.get("file"), str), f"{dump_path}: missing root 'file'")
    root = parse_module(data, data["file"])

    files: Set[str] = {data["file"]}
    _collect_files(root, files)

    source_map = SourceMap()
    for name in sorted(files):
        source_map.load_file(dump_path.parent / name, name)
    LOG.debug("Loaded %s with %d source file(s)", dump_path, len(files))
    return root, source_map
