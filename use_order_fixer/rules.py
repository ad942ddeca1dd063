"""Rules module for use-order-fixer.

This module defines the checks behind the ``order_of_use`` lint: classifying
``use`` trees into std, external and crate-local groups, and deciding whether
the imports of one module body are laid out as three blank-line separated
groups in that order.
"""
from __future__ import annotations

import enum
import logging
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence

from use_order_fixer.source_map import SourceMap
from use_order_fixer.syntax import PATH_ROOT
from use_order_fixer.syntax import Span
from use_order_fixer.syntax import UseItem
from use_order_fixer.syntax import UseTree

LOG = logging.getLogger(__name__)


class Category(enum.Enum):
    STD = "std"
    OTHER = "other"
    SUPER_OR_CRATE = "super_or_crate"


CATEGORY_ORDER: Dict[Category, int] = {
    Category.STD: 0,
    Category.OTHER: 1,
    Category.SUPER_OR_CRATE: 2,
}

_ROOT_CATEGORIES: Dict[str, Category] = {
    "std": Category.STD,
    "super": Category.SUPER_OR_CRATE,
    "crate": Category.SUPER_OR_CRATE,
}


def find_category(tree: UseTree) -> Optional[Category]:
    """Classify a use tree by the first segment of its prefix.

    Args:
        tree: The top-level tree of a ``use`` declaration.

    Returns:
        The category, or None when the prefix has no segments (``use {a, b};``
        or a bare glob), which carries no root to classify.
    """
    segments = tree.prefix
    if segments and segments[0] == PATH_ROOT:
        segments = segments[1:]
    if not segments:
        return None
    return _ROOT_CATEGORIES.get(segments[0], Category.OTHER)


def is_adjacent(source_map: SourceMap, span1: Span, span2: Span) -> bool:
    """Return True if ``span2`` starts on the line right after ``span1`` ends, or earlier.

    Only line numbers are compared, so a comment line between the two spans
    separates them just like a blank line.

    Raises:
        SpanResolutionError: If either span cannot be mapped to lines.
    """
    _, last1 = source_map.span_to_lines(span1)
    first2, _ = source_map.span_to_lines(span2)
    return last1 + 1 >= first2


def needs_rewrite(source_map: SourceMap, use_items: Sequence[UseItem]) -> bool:
    """Decide whether the imports of one module must be regrouped.

    Args:
        source_map: Line resolution for the item spans.
        use_items: The module's ``use`` declarations, sorted by span.

    Returns:
        True if any consecutive pair breaks the layout: a blank line inside a
        group, groups out of order, or two groups without a blank line between
        them. False when there is nothing to check or when some import has no
        category, in which case the whole module is left alone.
    """
    categories = [find_category(item.tree) for item in use_items]
    if any(category is None for category in categories):
        LOG.debug("Skipping module: an import has no path segment to categorize")
        return False

    has_error = False
    for idx in range(1, len(use_items)):
        prev_item, next_item = use_items[idx - 1], use_items[idx]
        cat1, cat2 = categories[idx - 1], categories[idx]
        adjacent = is_adjacent(source_map, prev_item.span, next_item.span)
        if cat1 == cat2:
            if not adjacent:
                LOG.debug("Gap inside the %s group at %s", cat1.value, prev_item.span)
                has_error = True
        elif CATEGORY_ORDER[cat1] > CATEGORY_ORDER[cat2]:
            LOG.debug("Group %s comes after %s at %s", cat2.value, cat1.value, next_item.span)
            has_error = True
        elif adjacent:
            LOG.debug("Groups %s and %s are not separated at %s", cat1.value, cat2.value, next_item.span)
            has_error = True
    return has_error


def split_imports(use_items: Sequence[UseItem]) -> Dict[Category, List[UseItem]]:
    """Split ``use`` declarations into categories, keeping their relative order.

    Args:
        use_items: Declarations sorted by span.

    Returns:
        A dictionary with every category, in canonical order, mapped to its
        declarations.
    """
    grouped: Dict[Category, List[UseItem]] = {category: [] for category in sorted(CATEGORY_ORDER, key=CATEGORY_ORDER.get)}
    for item in use_items:
        category = find_category(item.tree)
        if category is None:
            raise ValueError(f"use declaration at {item.span} has no category")
        grouped[category].append(item)
    return grouped
