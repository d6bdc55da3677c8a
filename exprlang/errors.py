"""
Errors raised while turning a tagged parse tree into the typed AST.

Every error carries a stable reason code and, when known, the span of the
offending occurrence. Syntax errors from the grammar engine are not wrapped
here; they reach the caller as lark exceptions.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from .span import Span


class AstBuildError(Exception):
    """Base class for AST construction failures."""

    code = "E-AST"

    def __init__(self, message: str, span: Optional[Span] = None) -> None:
        super().__init__(message)
        self.message = message
        self.span = span

    def __str__(self) -> str:
        if self.span is None:
            return f"[{self.code}] {self.message}"
        return f"{self.span.line}:{self.span.column}: [{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        span = self.span.to_dict() if self.span is not None else None
        return {"code": self.code, "message": self.message, "span": span}


class RuleMismatch(AstBuildError):
    code = "E-AST-RULE-MISMATCH"

    def __init__(
        self,
        expected: str,
        actual: str,
        text: str,
        span: Optional[Span] = None,
        message: Optional[str] = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        self.text = text
        super().__init__(message or f"expected rule '{expected}', found '{actual}' ({text!r})", span)


class UnexpectedRule(RuleMismatch):
    """An occurrence whose tag is none of the tags allowed at its position."""

    code = "E-AST-UNEXPECTED-RULE"

    def __init__(self, allowed: Sequence[str], actual: str, text: str, span: Optional[Span] = None) -> None:
        self.allowed = tuple(allowed)
        message = f"unexpected rule '{actual}' ({text!r}); expected one of: {', '.join(self.allowed)}"
        super().__init__(" | ".join(self.allowed), actual, text, span, message)


class MissingChild(AstBuildError):
    code = "E-AST-MISSING-CHILD"

    def __init__(self, context: str, span: Optional[Span] = None) -> None:
        self.context = context
        super().__init__(f"missing child: {context}", span)


class StructuralError(AstBuildError):
    code = "E-AST-STRUCTURE"


class NestingDepthError(StructuralError):
    code = "E-AST-DEPTH"

    def __init__(self, limit: int, span: Optional[Span] = None, message: Optional[str] = None) -> None:
        self.limit = limit
        super().__init__(message or f"expression nesting exceeds the limit of {limit}", span)


class NumericConversionError(AstBuildError):
    code = "E-AST-NUMBER"

    def __init__(self, text: str, reason: str, span: Optional[Span] = None) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"cannot convert {text!r} to a 64-bit integer: {reason}", span)


class TopLevelArityError(AstBuildError):
    code = "E-AST-TOP-LEVEL"

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"expected exactly one top-level 'program' occurrence, got {count}")


__all__ = [
    "AstBuildError",
    "RuleMismatch",
    "UnexpectedRule",
    "MissingChild",
    "StructuralError",
    "NestingDepthError",
    "NumericConversionError",
    "TopLevelArityError",
]
