from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from lark import Lark, Token, Tree
from lark.indenter import Indenter

from .ast import Program
from .builder import build_program
from .config import DEFAULT_OPTIONS, BuildOptions
from .occurrence import Occurrence, from_lark

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_LAYOUT_TOKENS = frozenset({"_NL", "_INDENT", "_DEDENT"})


class LayoutIndenter(Indenter):
    """
    Indentation post-lexer.

    lark's Indenter emits `_NL` followed by any `_DEDENT`s; a block that closes
    also ends the line holding it, so every `_DEDENT` run is followed by a
    fresh `_NL`, as is a final line with no trailing newline.
    """

    NL_type = "_NL"
    OPEN_PAREN_types = ["LPAR"]
    CLOSE_PAREN_types = ["RPAR"]
    INDENT_type = "_INDENT"
    DEDENT_type = "_DEDENT"
    tab_len = 8

    def process(self, stream):
        return self._terminate_lines(super().process(stream))

    def _terminate_lines(self, stream) -> Iterator[Token]:
        last: Optional[Token] = None
        for token in stream:
            if token.type == self.DEDENT_type:
                if last is not None and last.type != self.NL_type:
                    yield self._newline(last)
            elif last is not None and last.type == self.DEDENT_type:
                yield self._newline(last)
            yield token
            last = token
        if last is not None and last.type != self.NL_type:
            yield self._newline(last)

    def _newline(self, after: Token) -> Token:
        return Token.new_borrow_pos(self.NL_type, "", after)


def _carries_position(node: object) -> bool:
    # Layout tokens would stretch a node's span over surrounding newlines.
    return not (isinstance(node, Token) and node.type in _LAYOUT_TOKENS)


_PARSER = Lark(
    _GRAMMAR_SRC,
    parser="lalr",
    # The post-lexer reads one token past each dedent run, so tokens cannot
    # depend on parser state.
    lexer="basic",
    start="program",
    propagate_positions=_carries_position,
    maybe_placeholders=False,
    postlex=LayoutIndenter(),
)
logger.debug("loaded grammar from %s", _GRAMMAR_PATH)


def parse_tree(source: str) -> Occurrence:
    """
    Run the grammar engine over `source` and return the `program` occurrence.

    Syntax errors are lark exceptions and propagate unchanged.
    """
    tree: Tree = _PARSER.parse(source)
    return from_lark(tree, source)


def parse_program(source: str, options: BuildOptions = DEFAULT_OPTIONS) -> Program:
    return build_program([parse_tree(source)], options)


__all__ = ["LayoutIndenter", "parse_program", "parse_tree"]
