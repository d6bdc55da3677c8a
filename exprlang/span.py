"""
Source spans for AST nodes and parse-tree occurrences.

A span is an owned offset range into the source text plus the line/column
pair lark reports for both ends. It never holds the text itself, so nodes stay
valid however the caller keeps (or drops) the buffer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Span:
    """Half-open character range `[start, end)` with 1-based line/column info."""

    start: int = 0
    end: int = 0
    line: int = 1
    column: int = 1
    end_line: int = 1
    end_column: int = 1

    @classmethod
    def from_meta(cls, meta: Any) -> "Span":
        """Build a span from a lark `Meta` (or anything exposing the same fields)."""
        return cls(
            start=meta.start_pos,
            end=meta.end_pos,
            line=meta.line,
            column=meta.column,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )

    @classmethod
    def covering(cls, source: str) -> "Span":
        """Span of the whole of `source` (the empty text gives an empty span)."""
        lines = source.split("\n")
        return cls(
            start=0,
            end=len(source),
            line=1,
            column=1,
            end_line=len(lines),
            end_column=len(lines[-1]) + 1,
        )

    def slice(self, source: str) -> str:
        return source[self.start:self.end]

    def contains(self, other: "Span") -> bool:
        return self.start <= other.start and other.end <= self.end

    def to_dict(self) -> Dict[str, int]:
        return {
            "start": self.start,
            "end": self.end,
            "line": self.line,
            "column": self.column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }

    def __str__(self) -> str:
        return f"{self.line}:{self.column}-{self.end_line}:{self.end_column}"


__all__ = ["Span"]
