from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .span import Span


class Expr:
    """Base of the expression variants: Number, Identifier, FunctionCall,
    FunctionDefinition and Block."""

    span: Span


@dataclass(frozen=True)
class Identifier(Expr):
    name: str
    span: Span


@dataclass(frozen=True)
class Number(Expr):
    value: int
    span: Span


@dataclass(frozen=True)
class Assignment:
    identifier: Identifier
    expression: Expr
    span: Span


@dataclass(frozen=True)
class FunctionCall(Expr):
    function_name: Identifier
    arguments: Tuple[Expr, ...]
    span: Span


@dataclass(frozen=True)
class FunctionDefinition(Expr):
    parameters: Tuple[Identifier, ...]
    body: Expr
    span: Span


@dataclass(frozen=True)
class Block(Expr):
    """Local assignments followed by the trailing expression that gives the
    block its value."""

    assignments: Tuple[Assignment, ...]
    expression: Expr
    span: Span


@dataclass(frozen=True)
class Program:
    assignments: Tuple[Assignment, ...]
    span: Span


Node = Union[Program, Assignment, Identifier, Number, FunctionCall, FunctionDefinition, Block]


__all__ = [
    "Expr",
    "Identifier",
    "Number",
    "Assignment",
    "FunctionCall",
    "FunctionDefinition",
    "Block",
    "Program",
    "Node",
]
