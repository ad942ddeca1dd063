"""Top-level package for use-order-fixer.

This package exposes the core API for checking and regrouping Rust ``use``
declarations over a syntax tree supplied by an external front end.
"""

from use_order_fixer.core import apply_suggestions
from use_order_fixer.core import check_crate
from use_order_fixer.core import check_module
from use_order_fixer.core import find_use_block_span
from use_order_fixer.core import iter_dump_files
from use_order_fixer.core import iter_modules
from use_order_fixer.core import process_file
from use_order_fixer.core import render_groups
from use_order_fixer.core import render_tree
from use_order_fixer.diagnostics import Applicability
from use_order_fixer.diagnostics import Diagnostic
from use_order_fixer.diagnostics import ORDER_OF_USE
from use_order_fixer.parser import load_crate
from use_order_fixer.rules import Category
from use_order_fixer.rules import find_category
from use_order_fixer.rules import is_adjacent
from use_order_fixer.rules import needs_rewrite
from use_order_fixer.rules import split_imports
from use_order_fixer.source_map import SourceMap
from use_order_fixer.source_map import SpanResolutionError
from use_order_fixer.syntax import Module
from use_order_fixer.syntax import OtherItem
from use_order_fixer.syntax import Span
from use_order_fixer.syntax import UseItem
from use_order_fixer.syntax import UseTree


__all__ = [
    "Applicability",
    "Category",
    "Diagnostic",
    "Module",
    "ORDER_OF_USE",
    "OtherItem",
    "SourceMap",
    "Span",
    "SpanResolutionError",
    "UseItem",
    "UseTree",
    "apply_suggestions",
    "check_crate",
    "check_module",
    "find_category",
    "find_use_block_span",
    "is_adjacent",
    "iter_dump_files",
    "iter_modules",
    "load_crate",
    "needs_rewrite",
    "process_file",
    "render_groups",
    "render_tree",
    "split_imports",
]
