import pytest

from exprlang import ast
from exprlang.builder import (
    INT64_MAX,
    INT64_MIN,
    build_assignment,
    build_block,
    build_expression,
    build_function_call,
    build_function_definition,
    build_identifier,
    build_number,
    build_program,
)
from exprlang.config import BuildOptions
from exprlang.errors import (
    MissingChild,
    NestingDepthError,
    NumericConversionError,
    RuleMismatch,
    StructuralError,
    TopLevelArityError,
    UnexpectedRule,
)
from exprlang.occurrence import Occurrence
from exprlang.span import Span


def _occ(rule: str, text: str = "", *children: Occurrence) -> Occurrence:
    return Occurrence(rule=rule, span=Span.covering(text), children=tuple(children), source=text)


def _ident(name: str) -> Occurrence:
    return _occ("identifier", name)


def _num(text: str) -> Occurrence:
    return _occ("number", text)


def _expr(inner: Occurrence) -> Occurrence:
    return _occ("expression", inner.text, inner)


def _assign(name: str, inner: Occurrence) -> Occurrence:
    return _occ("assignment", f"{name} = {inner.text}", _ident(name), _expr(inner))


def test_identifier_copies_text_and_span() -> None:
    node = build_identifier(_ident("total"))
    assert node == ast.Identifier(name="total", span=Span.covering("total"))


def test_identifier_rejects_number_occurrence() -> None:
    with pytest.raises(RuleMismatch) as excinfo:
        build_identifier(_num("42"))
    err = excinfo.value
    assert err.expected == "identifier"
    assert err.actual == "number"
    assert err.text == "42"
    assert "identifier" in str(err) and "number" in str(err)


def test_number_converts_signed_values() -> None:
    assert build_number(_num("42")).value == 42
    assert build_number(_num("-7")).value == -7
    assert build_number(_num("+3")).value == 3


def test_number_accepts_int64_bounds() -> None:
    assert build_number(_num(str(INT64_MAX))).value == INT64_MAX
    assert build_number(_num(str(INT64_MIN))).value == INT64_MIN


@pytest.mark.parametrize(
    "text, reason",
    [
        (str(INT64_MAX + 1), "number too large to fit in target type"),
        (str(INT64_MIN - 1), "number too small to fit in target type"),
        ("12a", "invalid digit found in string"),
        ("1_000", "invalid digit found in string"),
        (" 5", "invalid digit found in string"),
        ("", "cannot parse integer from empty string"),
    ],
)
def test_number_conversion_failures(text: str, reason: str) -> None:
    with pytest.raises(NumericConversionError) as excinfo:
        build_number(_num(text))
    assert excinfo.value.text == text
    assert excinfo.value.reason == reason


def test_number_rejects_identifier_occurrence() -> None:
    with pytest.raises(RuleMismatch) as excinfo:
        build_number(_ident("x"))
    assert excinfo.value.expected == "number"
    assert excinfo.value.actual == "identifier"


def test_expression_dispatches_on_child_tag() -> None:
    assert isinstance(build_expression(_expr(_num("1"))), ast.Number)
    assert isinstance(build_expression(_expr(_ident("a"))), ast.Identifier)
    call = _occ("function_call", "f()", _ident("f"))
    assert isinstance(build_expression(_expr(call)), ast.FunctionCall)
    fn = _occ("function_definition", "|| 1", _expr(_num("1")))
    assert isinstance(build_expression(_expr(fn)), ast.FunctionDefinition)
    block = _occ("block", "a", _expr(_ident("a")))
    assert isinstance(build_expression(_expr(block)), ast.Block)


def test_expression_requires_a_child() -> None:
    with pytest.raises(MissingChild) as excinfo:
        build_expression(_occ("expression", ""))
    assert excinfo.value.context == "expression: inner"


def test_expression_rejects_unknown_child_tag() -> None:
    with pytest.raises(UnexpectedRule) as excinfo:
        build_expression(_expr(_occ("ident_list", "a, b", _ident("a"), _ident("b"))))
    err = excinfo.value
    assert err.actual == "ident_list"
    assert err.text == "a, b"
    assert "number" in err.allowed and "block" in err.allowed
    assert "ident_list" in str(err)


def test_expression_rejects_second_child() -> None:
    with pytest.raises(StructuralError):
        build_expression(_occ("expression", "1 2", _num("1"), _num("2")))


def test_expression_rejects_wrong_outer_tag() -> None:
    with pytest.raises(RuleMismatch) as excinfo:
        build_expression(_num("1"))
    assert excinfo.value.expected == "expression"


def test_assignment_builds_identifier_then_expression() -> None:
    occ = _assign("x", _num("1"))
    node = build_assignment(occ)
    assert node.identifier.name == "x"
    assert node.expression == ast.Number(value=1, span=Span.covering("1"))
    assert node.span == occ.span


def test_assignment_missing_expression() -> None:
    with pytest.raises(MissingChild) as excinfo:
        build_assignment(_occ("assignment", "x =", _ident("x")))
    assert excinfo.value.context == "assignment: expression"


def test_assignment_missing_identifier() -> None:
    with pytest.raises(MissingChild) as excinfo:
        build_assignment(_occ("assignment", ""))
    assert excinfo.value.context == "assignment: identifier"


def test_assignment_rejects_wrong_tag() -> None:
    with pytest.raises(RuleMismatch) as excinfo:
        build_assignment(_expr(_num("1")))
    assert excinfo.value.expected == "assignment"
    assert excinfo.value.actual == "expression"


def test_function_call_with_arguments_keeps_order() -> None:
    args = _occ("function_arguments", "1, 2", _expr(_num("1")), _expr(_num("2")))
    node = build_function_call(_occ("function_call", "foo(1, 2)", _ident("foo"), args))
    assert node.function_name.name == "foo"
    assert [arg.value for arg in node.arguments] == [1, 2]


def test_function_call_without_argument_list() -> None:
    node = build_function_call(_occ("function_call", "foo()", _ident("foo")))
    assert node.arguments == ()


def test_function_call_second_child_must_be_arguments() -> None:
    with pytest.raises(RuleMismatch) as excinfo:
        build_function_call(_occ("function_call", "foo 1", _ident("foo"), _expr(_num("1"))))
    assert excinfo.value.expected == "function_arguments"
    assert excinfo.value.actual == "expression"


def test_function_call_missing_callee() -> None:
    with pytest.raises(MissingChild) as excinfo:
        build_function_call(_occ("function_call", "()"))
    assert excinfo.value.context == "function_call: function_name"


def test_function_definition_with_parameters() -> None:
    params = _occ("ident_list", "a, b", _ident("a"), _ident("b"))
    node = build_function_definition(_occ("function_definition", "|a, b| a", params, _expr(_ident("a"))))
    assert [p.name for p in node.parameters] == ["a", "b"]
    assert node.body == ast.Identifier(name="a", span=Span.covering("a"))


def test_function_definition_without_parameters_takes_first_child_as_body() -> None:
    node = build_function_definition(_occ("function_definition", "|| 7", _expr(_num("7"))))
    assert node.parameters == ()
    assert isinstance(node.body, ast.Number)
    assert node.body.value == 7


def test_function_definition_parameters_without_body() -> None:
    params = _occ("ident_list", "a", _ident("a"))
    with pytest.raises(MissingChild) as excinfo:
        build_function_definition(_occ("function_definition", "|a|", params))
    assert excinfo.value.context == "function_definition: body"


def test_function_definition_parameters_must_be_identifiers() -> None:
    params = _occ("ident_list", "a, 1", _ident("a"), _num("1"))
    with pytest.raises(RuleMismatch) as excinfo:
        build_function_definition(_occ("function_definition", "|a, 1| a", params, _expr(_ident("a"))))
    assert excinfo.value.expected == "identifier"
    assert excinfo.value.actual == "number"


def test_block_with_assignments_and_tail() -> None:
    occ = _occ(
        "block",
        "a = 1\nb = 2\na",
        _assign("a", _num("1")),
        _assign("b", _num("2")),
        _expr(_ident("a")),
    )
    node = build_block(occ)
    assert [(a.identifier.name, a.expression.value) for a in node.assignments] == [("a", 1), ("b", 2)]
    assert node.expression == ast.Identifier(name="a", span=Span.covering("a"))


def test_block_with_only_tail() -> None:
    node = build_block(_occ("block", "5", _expr(_num("5"))))
    assert node.assignments == ()
    assert node.expression.value == 5


def test_block_missing_tail() -> None:
    occ = _occ("block", "a = 1", _assign("a", _num("1")))
    with pytest.raises(MissingChild) as excinfo:
        build_block(occ)
    assert excinfo.value.context == "block: expression"


def test_block_rejects_content_after_tail() -> None:
    occ = _occ("block", "a\nb", _expr(_ident("a")), _expr(_ident("b")))
    with pytest.raises(StructuralError) as excinfo:
        build_block(occ)
    assert "block's trailing expression" in str(excinfo.value)


def test_block_rejects_assignment_after_tail() -> None:
    occ = _occ("block", "a\nb = 1", _expr(_ident("a")), _assign("b", _num("1")))
    with pytest.raises(StructuralError):
        build_block(occ)


def test_program_builds_assignments_in_order() -> None:
    root = _occ("program", "x = 1\ny = 2", _assign("x", _num("1")), _assign("y", _num("2")))
    program = build_program([root])
    assert [a.identifier.name for a in program.assignments] == ["x", "y"]
    assert program.span == root.span


def test_empty_program_is_valid() -> None:
    program = build_program([_occ("program", "")])
    assert program.assignments == ()


@pytest.mark.parametrize("count", [0, 2])
def test_program_requires_exactly_one_root(count: int) -> None:
    roots = [_occ("program", "") for _ in range(count)]
    with pytest.raises(TopLevelArityError) as excinfo:
        build_program(roots)
    assert excinfo.value.count == count


def test_program_root_must_be_program() -> None:
    with pytest.raises(RuleMismatch):
        build_program([_assign("x", _num("1"))])


def test_program_rejects_non_assignment_child() -> None:
    root = _occ("program", "x = 1\n2", _assign("x", _num("1")), _expr(_num("2")))
    with pytest.raises(StructuralError) as excinfo:
        build_program([root])
    assert "expression" in str(excinfo.value)


def test_first_error_aborts_the_build() -> None:
    root = _occ(
        "program",
        "",
        _assign("x", _num("99999999999999999999")),
        _occ("assignment", "y ="),
    )
    with pytest.raises(NumericConversionError):
        build_program([root])


def _nested_calls(levels: int) -> Occurrence:
    expr = _expr(_num("1"))
    for _ in range(levels):
        args = _occ("function_arguments", expr.text, expr)
        expr = _expr(_occ("function_call", f"f({expr.text})", _ident("f"), args))
    return expr


def test_nesting_within_limit_builds() -> None:
    options = BuildOptions(max_depth=10)
    node = build_assignment(_occ("assignment", "", _ident("x"), _nested_calls(9)), options)
    assert isinstance(node.expression, ast.FunctionCall)


def test_nesting_beyond_limit_is_reported() -> None:
    options = BuildOptions(max_depth=10)
    with pytest.raises(NestingDepthError) as excinfo:
        build_assignment(_occ("assignment", "", _ident("x"), _nested_calls(10)), options)
    assert excinfo.value.limit == 10
    assert isinstance(excinfo.value, StructuralError)
