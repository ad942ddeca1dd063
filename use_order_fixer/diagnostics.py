"""Diagnostic records produced by the use-order rule and their text form."""
from __future__ import annotations

from dataclasses import dataclass
import enum

from use_order_fixer.source_map import SourceMap
from use_order_fixer.syntax import Span


class Applicability(enum.Enum):
    MACHINE_APPLICABLE = "machine-applicable"
    MAYBE_INCORRECT = "maybe-incorrect"


@dataclass(frozen=True)
class Lint:
    name: str
    group: str
    default_level: str
    description: str


ORDER_OF_USE = Lint(
    name="order_of_use",
    group="style",
    default_level="warn",
    description="checks that `use` declarations form std, external and crate-local groups, in that order",
)


@dataclass(frozen=True)
class Suggestion:
    span: Span
    replacement: str
    label: str = "try"
    applicability: Applicability = Applicability.MACHINE_APPLICABLE


@dataclass(frozen=True)
class Diagnostic:
    lint: Lint
    span: Span
    message: str
    suggestion: Suggestion


def format_location(source_map: SourceMap, span: Span) -> str:
    line, col = source_map.lookup_position(span.file, span.lo)
    return f"{span.file}:{line}:{col}"


def format_diagnostic(diagnostic: Diagnostic, source_map: SourceMap, level: str = "warn") -> str:
    """Render a diagnostic the way rustc prints lint output."""
    severity = "error" if level == "deny" else "warning"
    lines = [
        f"{severity}: {diagnostic.message}",
        f"  --> {format_location(source_map, diagnostic.span)}",
        f"   = note: `{diagnostic.lint.name}` ({diagnostic.lint.group}) is set to `{level}`",
        f"help: {diagnostic.suggestion.label}",
    ]
    lines.extend(f"   | {line}" if line else "   |" for line in diagnostic.suggestion.replacement.splitlines())
    if diagnostic.suggestion.applicability is not Applicability.MACHINE_APPLICABLE:
        lines.append("   = note: the suggestion overlaps other items and is not applied automatically")
    return "\n".join(lines)
