import pytest

from minicomp.frontend import (
    CompileSyntaxError,
    Parser,
    is_op,
    parse_program,
    tokenize,
)
from minicomp.nodes import NodeType, Operator, make_num, make_op


def _kinds(tokens):
    return [(token.type, token.value) for token in tokens]


def _compile(source):
    variables, functions = [], []
    tokens = tokenize(source, variables, functions)
    return parse_program(tokens, variables), tokens, variables, functions


def test_tokenize_declaration():
    variables, functions = [], []
    tokens = tokenize("var x = 5;", variables, functions)
    assert _kinds(tokens) == [
        (NodeType.VAR_INIT, 0),
        (NodeType.OP, Operator.EQ),
        (NodeType.NUM, 5),
        (NodeType.OP, Operator.SEP),
    ]
    assert variables == ["x"]
    assert functions == []


def test_tokenize_multidigit_number_and_reference():
    variables = []
    tokens = tokenize("var abc1 = 42; abc1", variables, [])
    assert tokens[2].value == 42
    assert tokens[-1].type == NodeType.VAR
    assert tokens[-1].value == "abc1"
    assert variables == ["abc1"]


def test_closing_brace_adds_separator():
    tokens = tokenize("}", [], [])
    assert _kinds(tokens) == [
        (NodeType.OP, Operator.END),
        (NodeType.OP, Operator.SEP),
    ]


def test_tokenize_keywords_and_math():
    variables = []
    tokens = tokenize("var x = 1; while (x) { print(sin x); }", variables, [])
    opers = [token.value for token in tokens if token.type == NodeType.OP]
    assert Operator.WHILE in opers
    assert Operator.PRINT in opers
    assert Operator.SIN in opers


def test_tokenize_function_call_uses_index():
    functions = []
    tokens = tokenize("func f(var a) { return a; } f(1)", [], functions)
    assert functions == ["f"]
    assert tokens[0].type == NodeType.FUNC_INIT
    assert tokens[0].value == 0
    calls = [token for token in tokens if token.type == NodeType.FUNC]
    assert len(calls) == 1
    assert calls[0].value == 0


def test_tokenize_undeclared_variable_raises():
    with pytest.raises(CompileSyntaxError):
        tokenize("y = 1;", [], [])


def test_tokenize_var_needs_name():
    with pytest.raises(CompileSyntaxError):
        tokenize("var 1 = 2;", [], [])


def test_tokenize_unknown_character_raises():
    with pytest.raises(CompileSyntaxError):
        tokenize("var x = 1 # 2;", [], [])


def test_is_op():
    assert is_op(make_op(Operator.ADD), Operator.ADD)
    assert not is_op(make_op(Operator.SUB), Operator.ADD)
    assert not is_op(make_num(0), Operator.ADD)
    assert not is_op(None, Operator.ADD)


def test_empty_program():
    root, tokens, _, _ = _compile("")
    assert tokens == []
    assert root is None


def test_precedence():
    root, tokens, _, _ = _compile("var x = 2 + 3 * 4;")
    assert root is tokens[-1]
    assert is_op(root, Operator.SEP)
    eq = root.left
    assert is_op(eq, Operator.EQ)
    assert eq.right.type == NodeType.VAR_INIT
    add = eq.left
    assert is_op(add, Operator.ADD)
    assert add.left.value == 2
    mul = add.right
    assert is_op(mul, Operator.MUL)
    assert (mul.left.value, mul.right.value) == (3, 4)
    assert mul.parent is add
    assert root.right is None


def test_subtraction_is_left_associative():
    root, _, _, _ = _compile("var x = 1 - 2 - 3;")
    outer = root.left.left
    assert is_op(outer, Operator.SUB)
    assert outer.right.value == 3
    inner = outer.left
    assert is_op(inner, Operator.SUB)
    assert (inner.left.value, inner.right.value) == (1, 2)


def test_degree_and_parentheses():
    root, _, _, _ = _compile("var x = (1 + 2) ^ 3;")
    deg = root.left.left
    assert is_op(deg, Operator.DEG)
    assert is_op(deg.left, Operator.ADD)
    assert deg.right.value == 3


def test_if_statement():
    root, _, _, _ = _compile("var x = 1; if (x) { x = 2; }")
    assert is_op(root.left, Operator.EQ)
    second = root.right
    assert is_op(second, Operator.SEP)
    branch = second.left
    assert is_op(branch, Operator.IF)
    assert branch.left.type == NodeType.VAR
    assert branch.left.value == "x"
    body = branch.right
    assert is_op(body, Operator.SEP)
    assert is_op(body.left, Operator.EQ)
    assert body.left.left.value == 2
    assert second.right is None


def test_while_statement():
    root, _, _, _ = _compile("var x = 3; while (x) { x = x - 1; }")
    loop = root.right.left
    assert is_op(loop, Operator.WHILE)
    assert is_op(loop.right.left.left, Operator.SUB)


def test_print_statement():
    root, _, _, _ = _compile("var x = 1; print(x);")
    command = root.right.left
    assert is_op(command, Operator.PRINT)
    assert command.left.value == "x"


def test_function_with_two_params():
    root, _, variables, functions = _compile("func f(var a, var b) { return a; }")
    func = root.left
    assert func.type == NodeType.FUNC_INIT
    assert functions[func.value] == "f"
    params = func.left
    assert is_op(params, Operator.COMMA)
    assert variables[params.left.value] == "a"
    assert variables[params.right.value] == "b"
    ret = func.right.left
    assert is_op(ret, Operator.RETURN)
    assert ret.left.value == "a"


def test_function_call_in_expression():
    root, _, _, _ = _compile("func f(var a) { return a; } var y = f(2);")
    call = root.right.left.left
    assert call.type == NodeType.FUNC
    assert call.left.value == 2
    assert call.left.parent is call


def test_function_cannot_see_outer_variables():
    with pytest.raises(CompileSyntaxError):
        _compile("var x = 1; func f(var a) { return x; }")


def test_parameters_leave_scope_after_function():
    with pytest.raises(CompileSyntaxError):
        _compile("func f(var a) { return a; } a = 1;")


def test_missing_separator_raises():
    with pytest.raises(CompileSyntaxError):
        _compile("var x = 1")


def test_missing_closing_paren_raises():
    with pytest.raises(CompileSyntaxError):
        _compile("var x = 1; if (x { x = 2; }")


def test_return_without_value_raises():
    with pytest.raises(CompileSyntaxError):
        _compile("return;")


def test_missing_operand_raises():
    with pytest.raises(CompileSyntaxError):
        _compile("var x = * 2;")


def test_leftover_tokens_raise():
    with pytest.raises(CompileSyntaxError):
        _compile("var x = 1; )")


def test_parser_parse_matches_parse_program():
    variables = []
    tokens = tokenize("var x = 7;", variables, [])
    root = Parser(tokens, variables).parse()
    assert root is tokens[-1]
    assert root.left.left.value == 7
    assert Parser(tokens, variables).parse() is root