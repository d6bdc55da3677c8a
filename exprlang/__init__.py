"""
exprlang front end: source text -> lark parse tree -> tagged occurrences ->
typed AST.
"""

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
from .builder import build_program
from .config import BuildOptions
from .errors import (
    AstBuildError,
    MissingChild,
    NestingDepthError,
    NumericConversionError,
    RuleMismatch,
    StructuralError,
    TopLevelArityError,
    UnexpectedRule,
)
from .occurrence import Occurrence
from .parser import parse_program, parse_tree
from .span import Span

__all__ = [
    "Assignment",
    "AstBuildError",
    "Block",
    "BuildOptions",
    "Expr",
    "FunctionCall",
    "FunctionDefinition",
    "Identifier",
    "MissingChild",
    "NestingDepthError",
    "Number",
    "NumericConversionError",
    "Occurrence",
    "Program",
    "RuleMismatch",
    "Span",
    "StructuralError",
    "TopLevelArityError",
    "UnexpectedRule",
    "build_program",
    "parse_program",
    "parse_tree",
]
