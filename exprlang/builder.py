"""
Build the typed AST from a tagged parse tree.

Each builder takes one occurrence, checks its tag, takes its children apart in
the fixed order the grammar produces them and recurses. Builders keep no state
between calls; the first violation raises and nothing partial is returned.

Expression nesting is bounded by `BuildOptions.max_depth`; `depth` is threaded
through the composite builders and checked on every expression.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Iterable, List, Sequence

from .ast import (
    Assignment,
    Block,
    Expr,
    FunctionCall,
    FunctionDefinition,
    Identifier,
    Number,
    Program,
)
from .config import DEFAULT_OPTIONS, BuildOptions
from .errors import (
    MissingChild,
    NestingDepthError,
    NumericConversionError,
    RuleMismatch,
    StructuralError,
    TopLevelArityError,
    UnexpectedRule,
)
from .occurrence import Occurrence

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

EXPRESSION_RULES = ("number", "identifier", "function_call", "function_definition", "block")


def build_program(occurrences: Iterable[Occurrence], options: BuildOptions = DEFAULT_OPTIONS) -> Program:
    """Build the AST root from the grammar engine's top-level result."""
    roots = list(occurrences)
    if len(roots) != 1:
        raise TopLevelArityError(count=len(roots))
    root = roots[0]
    _expect_rule(root, "program")
    assignments: List[Assignment] = []
    for child in root.children:
        if child.rule != "assignment":
            raise StructuralError(
                f"program may only contain assignments, found '{child.rule}' ({child.text!r})",
                child.span,
            )
        try:
            assignments.append(build_assignment(child, options, depth=0))
        except RecursionError:
            # max_depth set above what the interpreter stack can hold.
            raise NestingDepthError(
                options.max_depth,
                child.span,
                message=f"expression nesting exceeds the interpreter recursion limit ({sys.getrecursionlimit()})",
            ) from None
    logger.debug("built program with %d assignment(s)", len(assignments))
    return Program(assignments=tuple(assignments), span=root.span)


def build_assignment(occ: Occurrence, options: BuildOptions = DEFAULT_OPTIONS, depth: int = 0) -> Assignment:
    _expect_rule(occ, "assignment")
    children = occ.children
    if len(children) < 1:
        raise MissingChild("assignment: identifier", occ.span)
    if len(children) < 2:
        raise MissingChild("assignment: expression", occ.span)
    identifier = build_identifier(children[0])
    expression = build_expression(children[1], options, depth + 1)
    _expect_no_more(children, 2, "assignment's expression")
    return Assignment(identifier=identifier, expression=expression, span=occ.span)


def build_expression(occ: Occurrence, options: BuildOptions = DEFAULT_OPTIONS, depth: int = 0) -> Expr:
    _expect_rule(occ, "expression")
    if depth > options.max_depth:
        raise NestingDepthError(options.max_depth, occ.span)
    if not occ.children:
        raise MissingChild("expression: inner", occ.span)
    inner = occ.children[0]
    kind = inner.rule
    expr: Expr
    if kind == "number":
        expr = build_number(inner)
    elif kind == "identifier":
        expr = build_identifier(inner)
    elif kind == "function_call":
        expr = build_function_call(inner, options, depth)
    elif kind == "function_definition":
        expr = build_function_definition(inner, options, depth)
    elif kind == "block":
        expr = build_block(inner, options, depth)
    else:
        raise UnexpectedRule(EXPRESSION_RULES, kind, inner.text, inner.span)
    _expect_no_more(occ.children, 1, "expression's single child")
    return expr


def build_identifier(occ: Occurrence) -> Identifier:
    _expect_rule(occ, "identifier")
    return Identifier(name=occ.text, span=occ.span)


def build_number(occ: Occurrence) -> Number:
    _expect_rule(occ, "number")
    return Number(value=_parse_int64(occ.text, occ), span=occ.span)


def build_function_call(occ: Occurrence, options: BuildOptions = DEFAULT_OPTIONS, depth: int = 0) -> FunctionCall:
    _expect_rule(occ, "function_call")
    children = occ.children
    if not children:
        raise MissingChild("function_call: function_name", occ.span)
    function_name = build_identifier(children[0])
    arguments: List[Expr] = []
    if len(children) > 1:
        args_node = children[1]
        _expect_rule(args_node, "function_arguments")
        arguments = [build_expression(arg, options, depth + 1) for arg in args_node.children]
    _expect_no_more(children, 2, "call's argument list")
    return FunctionCall(function_name=function_name, arguments=tuple(arguments), span=occ.span)


def build_function_definition(
    occ: Occurrence, options: BuildOptions = DEFAULT_OPTIONS, depth: int = 0
) -> FunctionDefinition:
    """
    The parameter list is optional in the grammar and no marker is emitted
    when it is absent, so the first child is peeked: an `ident_list` is the
    parameters and the body follows it; anything else is itself the body.
    """
    _expect_rule(occ, "function_definition")
    children = occ.children
    idx = 0
    parameters: List[Identifier] = []
    if idx < len(children) and children[idx].rule == "ident_list":
        parameters = [build_identifier(param) for param in children[idx].children]
        idx += 1
    if idx >= len(children):
        raise MissingChild("function_definition: body", occ.span)
    body = build_expression(children[idx], options, depth + 1)
    idx += 1
    _expect_no_more(children, idx, "function body")
    return FunctionDefinition(parameters=tuple(parameters), body=body, span=occ.span)


def build_block(occ: Occurrence, options: BuildOptions = DEFAULT_OPTIONS, depth: int = 0) -> Block:
    _expect_rule(occ, "block")
    children = occ.children
    idx = 0
    assignments: List[Assignment] = []
    while idx < len(children) and children[idx].rule == "assignment":
        assignments.append(build_assignment(children[idx], options, depth))
        idx += 1
    if idx >= len(children):
        raise MissingChild("block: expression", occ.span)
    expression = build_expression(children[idx], options, depth + 1)
    idx += 1
    _expect_no_more(children, idx, "block's trailing expression")
    return Block(assignments=tuple(assignments), expression=expression, span=occ.span)


def _parse_int64(text: str, occ: Occurrence) -> int:
    if not text:
        raise NumericConversionError(text, "cannot parse integer from empty string", occ.span)
    if not _INTEGER_RE.fullmatch(text):
        raise NumericConversionError(text, "invalid digit found in string", occ.span)
    value = int(text)
    if value > INT64_MAX:
        raise NumericConversionError(text, "number too large to fit in target type", occ.span)
    if value < INT64_MIN:
        raise NumericConversionError(text, "number too small to fit in target type", occ.span)
    return value


def _expect_rule(occ: Occurrence, rule: str) -> None:
    if occ.rule != rule:
        raise RuleMismatch(expected=rule, actual=occ.rule, text=occ.text, span=occ.span)


def _expect_no_more(children: Sequence[Occurrence], idx: int, after: str) -> None:
    if idx < len(children):
        extra = children[idx]
        raise StructuralError(
            f"unexpected extra content after {after}: '{extra.rule}' ({extra.text!r})",
            extra.span,
        )


__all__ = [
    "EXPRESSION_RULES",
    "INT64_MAX",
    "INT64_MIN",
    "build_assignment",
    "build_block",
    "build_expression",
    "build_function_call",
    "build_function_definition",
    "build_identifier",
    "build_number",
    "build_program",
]
