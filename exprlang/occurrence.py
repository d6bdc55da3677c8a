"""
Generic tagged parse tree consumed by the AST builders.

An occurrence is one matched grammar rule: its tag, the span it matched and
its child occurrences in source order. The builders only ever see this shape,
so any grammar engine that can produce it (or a test building one by hand)
can drive them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from lark import Token, Tree

from .span import Span

RULES = (
    "program",
    "assignment",
    "expression",
    "identifier",
    "number",
    "function_call",
    "function_arguments",
    "function_definition",
    "ident_list",
    "block",
)


@dataclass(frozen=True)
class Occurrence:
    rule: str
    span: Span
    children: Tuple["Occurrence", ...] = ()
    # The retained source buffer; spans index into it.
    source: str = field(default="", repr=False, compare=False)

    @property
    def text(self) -> str:
        return self.span.slice(self.source)


def from_lark(tree: Tree, source: str) -> Occurrence:
    """
    Convert a lark parse tree into an occurrence tree.

    Token children are dropped: a leaf rule's text is recovered from its span.
    The walk uses an explicit stack so deeply nested input cannot exhaust the
    interpreter stack here.
    """
    built: Dict[int, Occurrence] = {}
    stack: List[Tuple[Tree, bool]] = [(tree, False)]
    while stack:
        node, expanded = stack.pop()
        if not expanded:
            stack.append((node, True))
            for child in node.children:
                if isinstance(child, Tree):
                    stack.append((child, False))
            continue
        children = tuple(built.pop(id(child)) for child in node.children if isinstance(child, Tree))
        built[id(node)] = Occurrence(
            rule=_name(node),
            span=_span(node, source),
            children=children,
            source=source,
        )
    return built[id(tree)]


def _span(tree: Tree, source: str) -> Span:
    if _name(tree) == "program":
        return Span.covering(source)
    meta = tree.meta
    if meta.empty:
        return Span()
    return Span.from_meta(meta)


def _name(node: Tree | Token) -> str:
    if isinstance(node, Tree):
        data = node.data
        if isinstance(data, Token):
            return data.value
        return data
    if isinstance(node, Token):
        return node.type
    return str(node)


__all__ = ["Occurrence", "RULES", "from_lark"]
