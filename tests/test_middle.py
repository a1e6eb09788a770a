import pytest

from minicomp.middle import Optimizer, evaluate, optimize
from minicomp.nodes import Operator, make_num, make_op, make_var


def op(oper, left=None, right=None):
    node = make_op(oper)
    node.left = left
    node.right = right
    return node


def test_evaluate_number():
    assert evaluate(make_num(42)) == 42


def test_evaluate_pinned_values():
    assert evaluate(op(Operator.ADD, make_num(2), make_num(3))) == 5
    assert evaluate(op(Operator.DIV, make_num(7), make_num(2))) == 3
    assert evaluate(op(Operator.DEG, make_num(2), make_num(10))) == 1024


@pytest.mark.parametrize("oper", [Operator.ADD, Operator.MUL])
@pytest.mark.parametrize("a,b", [(4, 9), (-3, 7), (0, 11)])
def test_evaluate_commutative(oper, a, b):
    assert evaluate(op(oper, make_num(a), make_num(b))) == evaluate(
        op(oper, make_num(b), make_num(a))
    )


def test_evaluate_subtraction_antisymmetric():
    forward = evaluate(op(Operator.SUB, make_num(12), make_num(5)))
    backward = evaluate(op(Operator.SUB, make_num(5), make_num(12)))
    assert forward == -backward


def test_division_truncates_toward_zero():
    positive = evaluate(op(Operator.DIV, make_num(7), make_num(2)))
    negative = evaluate(op(Operator.DIV, make_num(-7), make_num(2)))
    assert negative == -positive


def test_division_by_zero_raises():
    with pytest.raises(ZeroDivisionError):
        evaluate(op(Operator.DIV, make_num(1), make_num(0)))


def test_logarithm_domain_error():
    with pytest.raises(ValueError):
        evaluate(op(Operator.LN, make_num(0)))


def test_non_arithmetic_evaluates_to_zero():
    assert evaluate(None) == 0
    assert evaluate(make_var("x")) == 0
    assert evaluate(op(Operator.SEP, make_num(3), make_num(4))) == 0


def test_fold_constants():
    result = optimize(op(Operator.ADD, make_num(2), make_num(3)))
    assert result == make_num(evaluate(op(Operator.ADD, make_num(2), make_num(3))))


@pytest.mark.parametrize(
    "tree",
    [
        lambda: op(Operator.MUL, make_var("x"), make_num(1)),
        lambda: op(Operator.MUL, make_num(1), make_var("x")),
        lambda: op(Operator.DIV, make_var("x"), make_num(1)),
        lambda: op(Operator.ADD, make_num(0), make_var("x")),
        lambda: op(Operator.ADD, make_var("x"), make_num(0)),
        lambda: op(Operator.SUB, make_var("x"), make_num(0)),
    ],
)
def test_neutral_elements_removed(tree):
    assert optimize(tree()) == make_var("x")


@pytest.mark.parametrize(
    "tree",
    [
        lambda: op(Operator.MUL, make_var("x"), make_num(0)),
        lambda: op(Operator.MUL, make_num(0), make_var("x")),
        lambda: op(Operator.DIV, make_num(0), make_var("x")),
    ],
)
def test_zero_products(tree):
    assert optimize(tree()) == make_num(0)


def test_zero_minus_variable_kept():
    result = optimize(op(Operator.SUB, make_num(0), make_var("x")))
    assert result == op(Operator.SUB, make_num(0), make_var("x"))


def test_nested_simplification_repeats():
    tree = op(
        Operator.ADD,
        op(Operator.MUL, make_var("x"), op(Operator.SUB, make_num(2), make_num(1))),
        make_num(0),
    )
    assert optimize(tree) == make_var("x")


def test_optimize_is_idempotent():
    def build():
        return op(
            Operator.SEP,
            op(Operator.EQ, op(Operator.MUL, make_num(6), make_var("y")), make_var("y")),
        )

    once = optimize(build())
    assert optimize(optimize(build())) == once


def test_optimizer_changed_flag():
    optimizer = Optimizer()
    optimizer.fold_constants(op(Operator.MUL, make_var("a"), make_var("b")))
    assert optimizer.changed is False
    optimizer.fold_constants(op(Operator.MUL, make_num(2), make_num(4)))
    assert optimizer.changed is True


def test_remove_neutral_leaves_other_trees():
    optimizer = Optimizer()
    tree = op(Operator.ADD, make_var("a"), make_var("b"))
    result = optimizer.remove_neutral(tree)
    assert result == op(Operator.ADD, make_var("a"), make_var("b"))
    assert optimizer.changed is False