#!/usr/bin/env python3
"""Core utilities for use-order-fixer. This module renders use trees back to
Rust source, builds the regrouping suggestion for a module body, walks every
module of a crate, and applies suggestions to source files.
"""
from __future__ import annotations
from dataclasses import dataclass
from dataclasses import field
import logging
from pathlib import Path
from typing import Dict
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

from use_order_fixer import config
from use_order_fixer.diagnostics import Applicability
from use_order_fixer.diagnostics import Diagnostic
from use_order_fixer.diagnostics import format_diagnostic
from use_order_fixer.diagnostics import format_location
from use_order_fixer.diagnostics import ORDER_OF_USE
from use_order_fixer.diagnostics import Suggestion
from use_order_fixer.parser import DUMP_SUFFIX
from use_order_fixer.parser import load_crate
from use_order_fixer.rules import Category
from use_order_fixer.rules import needs_rewrite
from use_order_fixer.rules import split_imports
from use_order_fixer.source_map import SourceMap
from use_order_fixer.source_map import SpanResolutionError
from use_order_fixer.syntax import Module
from use_order_fixer.syntax import PATH_ROOT
from use_order_fixer.syntax import Span
from use_order_fixer.syntax import UseItem
from use_order_fixer.syntax import UseTree
from use_order_fixer.syntax import UseTreeKind

LOG = logging.getLogger(__name__)

MESSAGE = "Put a block of `use` here"


def render_path(prefix: Sequence[str]) -> str:
    """Join path segments with ``::``; the path root renders as nothing."""
    return "::".join("" if segment == PATH_ROOT else segment for segment in prefix)


def render_tree(tree: UseTree) -> str:
    """Render a use tree, and its children, back to source text."""
    prefix = render_path(tree.prefix)
    if tree.kind is UseTreeKind.SIMPLE:
        if tree.alias is None:
            return prefix
        return f"{prefix} as {tree.alias}"
    if tree.kind is UseTreeKind.NESTED:
        body = "{%s}" % ", ".join(render_tree(child) for child in tree.children)
    elif tree.kind is UseTreeKind.GLOB:
        body = "*"
    else:
        raise ValueError(f"Unsupported use tree kind: {tree.kind!r}")
    if not tree.prefix:
        return body
    return f"{prefix}::{body}"


def render_use(item: UseItem) -> str:
    vis = f"{item.visibility} " if item.visibility else ""
    return f"{vis}use {render_tree(item.tree)};"


def render_groups(groups: Dict[Category, List[UseItem]], indent: str = "") -> str:
    """Compose the replacement text: one block per non-empty group, blank line between.

    Every line after the first is prefixed with ``indent``; blank lines stay empty.
    """
    newline = "\n" + indent
    blocks = [newline.join(render_use(item) for item in items) for items in groups.values() if items]
    return ("\n" + newline).join(blocks) + "\n"


def collect_use_items(module: Module) -> List[UseItem]:
    """Return the module's direct ``use`` declarations sorted by span."""
    return sorted((item for item in module.items if isinstance(item, UseItem)), key=lambda item: item.span)


def find_use_block_span(module: Module) -> Optional[Span]:
    """Return the span covering every direct ``use`` declaration of the module."""
    result: Optional[Span] = None
    for item in module.items:
        if isinstance(item, UseItem):
            result = item.span if result is None else result.to(item.span)
    return result


def _overlaps_other_items(module: Module, span: Span) -> bool:
    for item in module.items:
        if isinstance(item, UseItem):
            continue
        item_span = item.span
        if item_span is None or item_span.file != span.file:
            continue
        if item_span.lo < span.hi and span.lo < item_span.hi:
            return True
    return False


def _has_text_between(source_map: SourceMap, use_items: Sequence[UseItem]) -> bool:
    """Return True if a comment or other non-whitespace text sits between two imports."""
    for prev_item, next_item in zip(use_items, use_items[1:]):
        src = source_map.source(next_item.span.file)
        if src[prev_item.span.hi:next_item.span.lo].strip():
            return True
    return False


def _line_indent(source_map: SourceMap, span: Span) -> str:
    """Return the whitespace before ``span`` on its first line, or "" if there is code."""
    src = source_map.source(span.file)
    head = src[:span.lo].rsplit(b"\n", 1)[-1]
    if head.strip():
        return ""
    return head.decode("utf-8")


def check_module(source_map: SourceMap, module: Module) -> Optional[Diagnostic]:
    """Check the imports of one module body and return the suggestion, if any.

    Raises:
        SpanResolutionError: If an import span cannot be mapped to lines.
    """
    use_items = collect_use_items(module)
    if not needs_rewrite(source_map, use_items):
        return None

    groups = split_imports(use_items)
    span = find_use_block_span(module)
    applicability = Applicability.MACHINE_APPLICABLE
    if _overlaps_other_items(module, span):
        LOG.debug("Imports of module %s are interleaved with other items", module.name)
        applicability = Applicability.MAYBE_INCORRECT
    elif _has_text_between(source_map, use_items):
        LOG.debug("Imports of module %s have comments between them", module.name)
        applicability = Applicability.MAYBE_INCORRECT

    replacement = render_groups(groups, _line_indent(source_map, span))
    suggestion = Suggestion(span, replacement, applicability=applicability)
    return Diagnostic(ORDER_OF_USE, span, MESSAGE, suggestion)


def iter_modules(module: Module, parent: str = "") -> Iterator[Tuple[str, Module]]:
    """Yield ``(path, module)`` for the module and its submodules, depth first."""
    path = f"{parent}::{module.name}" if parent else module.name
    yield path, module
    for item in module.items:
        if isinstance(item, Module):
            yield from iter_modules(item, path)


@dataclass
class CrateReport:
    diagnostics: List[Diagnostic] = field(default_factory=list)
    failures: List[Tuple[str, SpanResolutionError]] = field(default_factory=list)


def check_crate(source_map: SourceMap, root: Module) -> CrateReport:
    """Run the check on every module; a failing module does not stop the others."""
    report = CrateReport()
    for path, module in iter_modules(root):
        try:
            diagnostic = check_module(source_map, module)
        except SpanResolutionError as exc:
            LOG.error("Internal error while checking module %s: %s", path, exc)
            report.failures.append((path, exc))
            continue
        if diagnostic is not None:
            report.diagnostics.append(diagnostic)
    LOG.debug("Checked crate %s: %d diagnostic(s), %d failure(s)", root.name, len(report.diagnostics), len(report.failures))
    return report


def apply_suggestions(src: bytes, suggestions: Iterable[Suggestion]) -> bytes:
    """Replace each suggestion's span in ``src``, back to front."""
    ordered = sorted(suggestions, key=lambda s: s.span.lo, reverse=True)
    limit = len(src)
    for suggestion in ordered:
        span = suggestion.span
        if span.hi > limit:
            raise ValueError(f"overlapping suggestions at {span}")
        src = src[:span.lo] + suggestion.replacement.encode("utf-8") + src[span.hi:]
        limit = span.lo
    return src


@dataclass
class FileResult:
    level: str = config.DEFAULT_LEVEL
    modified: bool = False
    warnings: List[Tuple[str, str]] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)


def process_file(dump_path: str, apply: bool = False, level: Optional[str] = None) -> FileResult:
    """Check the crate described by one dump file, optionally fixing its sources.

    ``modified`` is True when a fix is needed (check) or was written (apply).
    ``level`` is the lint level in effect, from the argument or the config files.
    """
    dump_path = Path(dump_path)
    if level is None:
        level = config.read_lint_level(str(dump_path.parent))
    result = FileResult(level=level)
    if level == "allow":
        LOG.debug("Lint %s is allowed for %s", ORDER_OF_USE.name, dump_path)
        return result

    root, source_map = load_crate(dump_path)
    report = check_crate(source_map, root)
    result.failures = [(path, str(exc)) for path, exc in report.failures]

    by_file: Dict[str, List[Suggestion]] = {}
    for diagnostic in report.diagnostics:
        result.warnings.append(
            (format_location(source_map, diagnostic.span), format_diagnostic(diagnostic, source_map, level)),
        )
        if diagnostic.suggestion.applicability is Applicability.MACHINE_APPLICABLE:
            by_file.setdefault(diagnostic.span.file, []).append(diagnostic.suggestion)

    if not apply:
        result.modified = bool(report.diagnostics)
        return result

    for name, suggestions in by_file.items():
        path = dump_path.parent / name
        new_src = apply_suggestions(source_map.source(name), suggestions)
        path.write_bytes(new_src)
        LOG.debug("Applied %d suggestion(s) to %s", len(suggestions), path)
        result.modified = True
    return result


def iter_dump_files(root: str) -> Iterator[Path]:
    """Yield syntax-tree dump files under the given root directory."""
    yield from sorted(Path(root).rglob(f"*{DUMP_SUFFIX}"))
