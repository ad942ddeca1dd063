import pytest

from use_order_fixer.core import collect_use_items
from use_order_fixer.rules import Category
from use_order_fixer.rules import find_category
from use_order_fixer.rules import is_adjacent
from use_order_fixer.rules import needs_rewrite
from use_order_fixer.rules import split_imports
from use_order_fixer.source_map import SourceMap
from use_order_fixer.source_map import SpanResolutionError
from use_order_fixer.syntax import Span
from use_order_fixer.syntax import UseTree

S = UseTree.simple


def test_find_category_by_root_segment():
    assert find_category(S("std::path")) is Category.STD
    assert find_category(S("crate::x::y")) is Category.SUPER_OR_CRATE
    assert find_category(S("super::z")) is Category.SUPER_OR_CRATE
    assert find_category(S("base::hoge")) is Category.OTHER
    assert find_category(S("self::inner")) is Category.OTHER
    assert find_category(UseTree.nested("std", S("io"), S("fs"))) is Category.STD
    assert find_category(UseTree.glob("base::test")) is Category.OTHER


def test_find_category_skips_path_root():
    assert find_category(S("::std::io")) is Category.STD
    assert find_category(S("::serde")) is Category.OTHER


def test_find_category_undefined_without_segments():
    assert find_category(UseTree.nested("", S("ext"), S("std::fs"))) is None
    assert find_category(UseTree.glob()) is None
    assert find_category(UseTree.nested("::", S("a"))) is None


def test_is_adjacent_on_consecutive_lines():
    source_map = SourceMap()
    source_map.add_file("a.rs", "use a;\nuse b;\n\nuse c;\n")
    first, second, third = Span("a.rs", 0, 6), Span("a.rs", 7, 13), Span("a.rs", 15, 21)
    assert is_adjacent(source_map, first, second)
    assert not is_adjacent(source_map, second, third)


def test_is_adjacent_uses_line_extent_of_multiline_spans():
    source_map = SourceMap()
    text = "use a::{\n    b,\n    c,\n};\nuse d;\n"
    source_map.add_file("a.rs", text)
    multi = Span("a.rs", 0, text.index(";") + 1)
    after = Span("a.rs", text.index("use d"), len(text) - 1)
    assert is_adjacent(source_map, multi, after)


def test_is_adjacent_unknown_file_is_fatal():
    source_map = SourceMap()
    with pytest.raises(SpanResolutionError):
        is_adjacent(source_map, Span("missing.rs", 0, 1), Span("missing.rs", 2, 3))


def test_needs_rewrite_nothing_to_compare(layout):
    source_map, module, _ = layout([])
    assert not needs_rewrite(source_map, collect_use_items(module))
    source_map, module, _ = layout([S("crate::x")])
    assert not needs_rewrite(source_map, collect_use_items(module))


def test_needs_rewrite_std_then_crate_without_other(layout):
    source_map, module, _ = layout([
        S("std::path"),
        None,
        S("crate::x"),
        S("crate::x::y"),
        S("crate::z"),
    ])
    assert not needs_rewrite(source_map, collect_use_items(module))


def test_needs_rewrite_groups_on_adjacent_lines(layout):
    # std directly followed by crate: the two groups need a blank line
    source_map, module, _ = layout([
        S("std::path"),
        S("crate::x"),
        S("crate::x::y"),
        S("crate::z"),
    ])
    assert needs_rewrite(source_map, collect_use_items(module))


def test_needs_rewrite_other_before_std(layout):
    source_map, module, _ = layout([
        S("base::hoge"),
        UseTree.nested("base::fuga", S("a"), S("b")),
        UseTree.glob("base::test"),
        S("std::path"),
        S("crate::x"),
        S("crate::x::y"),
        S("crate::z"),
    ])
    assert needs_rewrite(source_map, collect_use_items(module))


def test_needs_rewrite_blank_line_inside_group(layout):
    source_map, module, _ = layout([S("std::io"), S("std::fs")])
    assert not needs_rewrite(source_map, collect_use_items(module))
    source_map, module, _ = layout([S("std::io"), None, S("std::fs")])
    assert needs_rewrite(source_map, collect_use_items(module))


def test_needs_rewrite_comment_line_breaks_adjacency(layout):
    # any line in between counts, not only blank ones
    source_map, module, _ = layout([S("std::io"), "// files", S("std::fs")])
    assert needs_rewrite(source_map, collect_use_items(module))


def test_needs_rewrite_bails_out_on_empty_prefix(layout):
    source_map, module, _ = layout([
        UseTree.glob("crate::myself"),
        (
            "use ext::{\n    Alpha,\n    Beta,\n};",
            UseTree.nested("ext", S("Alpha"), S("Beta")),
        ),
        S("std::io"),
        UseTree.nested("", UseTree.glob("ext"), S("std::fs")),
    ])
    assert not needs_rewrite(source_map, collect_use_items(module))


def test_needs_rewrite_same_layout_without_bailout_is_violation(layout):
    source_map, module, _ = layout([
        UseTree.glob("crate::myself"),
        (
            "use ext::{\n    Alpha,\n    Beta,\n};",
            UseTree.nested("ext", S("Alpha"), S("Beta")),
        ),
        S("std::io"),
    ])
    assert needs_rewrite(source_map, collect_use_items(module))


def test_split_imports_is_stable(layout):
    _, module, _ = layout([
        S("base::hoge"),
        S("crate::x"),
        S("std::path"),
        S("base::fuga"),
        S("super::y"),
        S("std::io"),
    ])
    groups = split_imports(collect_use_items(module))
    assert list(groups) == [Category.STD, Category.OTHER, Category.SUPER_OR_CRATE]
    rendered = {cat: [item.tree.prefix for item in items] for cat, items in groups.items()}
    assert rendered[Category.STD] == [("std", "path"), ("std", "io")]
    assert rendered[Category.OTHER] == [("base", "hoge"), ("base", "fuga")]
    assert rendered[Category.SUPER_OR_CRATE] == [("crate", "x"), ("super", "y")]


def test_split_imports_keeps_empty_groups(layout):
    _, module, _ = layout([S("crate::x")])
    groups = split_imports(collect_use_items(module))
    assert groups[Category.STD] == []
    assert groups[Category.OTHER] == []
    assert len(groups[Category.SUPER_OR_CRATE]) == 1


def test_split_imports_rejects_uncategorized(layout):
    _, module, _ = layout([UseTree.glob()])
    with pytest.raises(ValueError):
        split_imports(collect_use_items(module))
