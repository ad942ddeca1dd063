"""Line resolution for spans handed over by the front end."""
from __future__ import annotations

import bisect
import logging
from pathlib import Path
from typing import Dict
from typing import List
from typing import Optional
from typing import Tuple

from use_order_fixer.syntax import Span

LOG = logging.getLogger(__name__)


class SpanResolutionError(LookupError):
    """A span points outside every file the source map knows about."""


class SourceFile:
    """Bytes of one source file plus the offsets at which its lines start."""

    def __init__(self, name: str, src: bytes) -> None:
        self.name = name
        self.src = src
        self.line_starts: List[int] = [0]
        for idx, byte in enumerate(src):
            if byte == 0x0A:
                self.line_starts.append(idx + 1)

    def lookup_line(self, pos: int) -> int:
        """Return the 0-based line holding byte ``pos``."""
        if pos < 0 or pos > len(self.src):
            raise SpanResolutionError(f"{self.name}: offset {pos} is outside the file ({len(self.src)} bytes)")
        return bisect.bisect_right(self.line_starts, pos) - 1

    def span_to_lines(self, span: Span) -> Tuple[int, int]:
        if span.lo > span.hi:
            raise SpanResolutionError(f"{self.name}: inverted span {span.lo}..{span.hi}")
        first = self.lookup_line(span.lo)
        # hi is exclusive; the last touched byte is hi - 1
        last = self.lookup_line(max(span.hi - 1, span.lo))
        return first, last


class SourceMap:
    """All source files of one crate, keyed by the names spans refer to."""

    def __init__(self) -> None:
        self._files: Dict[str, SourceFile] = {}

    def add_file(self, name: str, src) -> SourceFile:
        if isinstance(src, str):
            src = src.encode("utf-8")
        source_file = SourceFile(name, src)
        self._files[name] = source_file
        return source_file

    def load_file(self, path: Path, name: Optional[str] = None) -> SourceFile:
        LOG.debug("Loading source file %s", path)
        return self.add_file(name or str(path), Path(path).read_bytes())

    def files(self) -> List[str]:
        return list(self._files)

    def get(self, name: str) -> SourceFile:
        try:
            return self._files[name]
        except KeyError:
            raise SpanResolutionError(f"no source file named {name!r}") from None

    def source(self, name: str) -> bytes:
        return self.get(name).src

    def span_to_lines(self, span: Span) -> Tuple[int, int]:
        """Return the first and last 0-based lines touched by ``span``."""
        return self.get(span.file).span_to_lines(span)

    def lookup_position(self, name: str, pos: int) -> Tuple[int, int]:
        """Return the 1-based ``(line, column)`` of byte ``pos``."""
        source_file = self.get(name)
        line = source_file.lookup_line(pos)
        return line + 1, pos - source_file.line_starts[line] + 1
