"""Syntax tree types consumed by the use-order rule.

The tree is produced by an external front end (see ``parser.py`` for the dump
format); nothing in this package parses Rust source text.
"""
from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import Optional
from typing import Tuple
from typing import Union

# Segment the front end emits for a leading ``::`` (``use ::std::io;``).
PATH_ROOT = "{{root}}"


@dataclass(frozen=True, order=True)
class Span:
    """Half-open byte range ``[lo, hi)`` inside one source file."""

    file: str
    lo: int
    hi: int

    def to(self, other: Span) -> Span:
        """Return the smallest span covering both spans."""
        if other.file != self.file:
            raise ValueError(f"cannot merge spans from {self.file!r} and {other.file!r}")
        return Span(self.file, min(self.lo, other.lo), max(self.hi, other.hi))


class UseTreeKind(enum.Enum):
    SIMPLE = "simple"
    NESTED = "nested"
    GLOB = "glob"


def split_path(path: str) -> Tuple[str, ...]:
    """Split ``a::b::c`` into segments; a leading ``::`` becomes PATH_ROOT."""
    if not path:
        return ()
    if path.startswith("::"):
        return (PATH_ROOT,) + split_path(path[2:])
    return tuple(path.split("::"))


@dataclass(frozen=True)
class UseTree:
    """One node of an import tree.

    ``alias`` is only meaningful for SIMPLE trees and ``children`` only for
    NESTED ones. NESTED and GLOB trees may have an empty prefix (``use {a, b};``
    or a bare ``*`` inside a group).
    """

    prefix: Tuple[str, ...]
    kind: UseTreeKind
    alias: Optional[str] = None
    children: Tuple[UseTree, ...] = ()

    def __post_init__(self) -> None:
        if self.kind is UseTreeKind.SIMPLE and not self.prefix:
            raise ValueError("a simple use tree needs at least one path segment")
        if self.alias is not None and self.kind is not UseTreeKind.SIMPLE:
            raise ValueError(f"only simple use trees take an alias, got {self.kind.value}")
        if self.children and self.kind is not UseTreeKind.NESTED:
            raise ValueError(f"only nested use trees have children, got {self.kind.value}")

    @classmethod
    def simple(cls, path: str, alias: Optional[str] = None) -> UseTree:
        return cls(split_path(path), UseTreeKind.SIMPLE, alias=alias)

    @classmethod
    def nested(cls, path: str, *children: UseTree) -> UseTree:
        return cls(split_path(path), UseTreeKind.NESTED, children=tuple(children))

    @classmethod
    def glob(cls, path: str = "") -> UseTree:
        return cls(split_path(path), UseTreeKind.GLOB)


@dataclass(frozen=True)
class UseItem:
    """A ``use`` declaration: its span, its tree and its visibility text."""

    span: Span
    tree: UseTree
    visibility: str = ""


@dataclass(frozen=True)
class OtherItem:
    span: Span
    kind: str = "item"


@dataclass(frozen=True)
class Module:
    """A module body: the crate root, an inline ``mod x { ... }`` or a loaded one."""

    name: str
    items: Tuple[Item, ...] = ()
    span: Optional[Span] = None


Item = Union[UseItem, OtherItem, Module]
