"""Tree optimizer: constant folding and removal of neutral elements."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from minicomp.nodes import Node, NodeType, Operator


def _truncating_div(left: int, right: int) -> int:
    if right == 0:
        raise ZeroDivisionError("Division by zero")
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def _power(base: int, exponent: int) -> int:
    if exponent >= 0:
        return base**exponent
    return int(math.pow(base, exponent))


_BINARY: dict[Operator, Callable[[int, int], int]] = {
    Operator.ADD: lambda a, b: a + b,
    Operator.SUB: lambda a, b: a - b,
    Operator.MUL: lambda a, b: a * b,
    Operator.DIV: _truncating_div,
    Operator.DEG: _power,
}

_UNARY: dict[Operator, Callable[[float], float]] = {
    Operator.SIN: math.sin,
    Operator.COS: math.cos,
    Operator.LN: math.log,
    Operator.TAN: math.tan,
    Operator.ASIN: math.asin,
    Operator.ACOS: math.acos,
    Operator.ATAN: math.atan,
    Operator.SINH: math.sinh,
    Operator.COSH: math.cosh,
    Operator.TANH: math.tanh,
}


def evaluate(node: Node | None) -> int:
    """Compute the integer value of an arithmetic tree.

    Division truncates toward zero and math functions are truncated to
    integers.  Anything that is neither a number nor an arithmetic operator
    evaluates to 0.  Division by zero raises ZeroDivisionError.
    """
    if node is None:
        return 0
    if node.type == NodeType.NUM:
        return int(node.value)
    if node.type != NodeType.OP:
        return 0
    left = evaluate(node.left)
    right = evaluate(node.right)
    oper = Operator(node.value)
    if oper in _BINARY:
        return _BINARY[oper](left, right)
    if oper in _UNARY:
        return int(_UNARY[oper](left))
    return 0


def _is_num(node: Node, value: int) -> bool:
    return node.type == NodeType.NUM and node.value == value


@dataclass
class Optimizer:
    """Simplifies a tree in place; ``changed`` records whether a pass did anything."""

    changed: bool = False

    def fold_constants(self, node: Node) -> Node:
        """Replace every node with two number children by its value."""
        if node.left is not None:
            node.left = self.fold_constants(node.left)
        if node.right is not None:
            node.right = self.fold_constants(node.right)
        if node.left is None or node.right is None:
            return node
        if node.left.type == NodeType.NUM and node.right.type == NodeType.NUM:
            value = evaluate(node)
            self.changed = True
            node.type = NodeType.NUM
            node.value = value
            node.left = None
            node.right = None
        return node

    def _keep(self, node: Node, child: Node) -> Node:
        self.changed = True
        child.parent = node.parent
        return child

    def _zero(self, node: Node) -> Node:
        self.changed = True
        node.type = NodeType.NUM
        node.value = 0
        node.left = None
        node.right = None
        return node

    def remove_neutral(self, node: Node) -> Node:
        """Drop multiplications by 1 or 0, additions of 0 and similar."""
        if node.left is not None:
            node.left = self.remove_neutral(node.left)
        if node.right is not None:
            node.right = self.remove_neutral(node.right)
        left, right = node.left, node.right
        if left is None or right is None or node.type != NodeType.OP:
            return node

        oper = node.value
        if oper == Operator.MUL:
            if _is_num(left, 0) or _is_num(right, 0):
                return self._zero(node)
            if _is_num(left, 1):
                return self._keep(node, right)
            if _is_num(right, 1):
                return self._keep(node, left)
            return node
        if oper == Operator.DIV:
            if _is_num(left, 0):
                return self._zero(node)
            if _is_num(right, 1):
                return self._keep(node, left)
            return node
        if oper == Operator.ADD and _is_num(left, 0):
            return self._keep(node, right)
        if oper in (Operator.ADD, Operator.SUB) and _is_num(right, 0):
            return self._keep(node, left)
        return node

    def run(self, root: Node) -> Node:
        """Repeat both passes until neither changes the tree."""
        while True:
            self.changed = False
            root = self.fold_constants(root)
            root = self.remove_neutral(root)
            if not self.changed:
                return root


def optimize(root: Node) -> Node:
    """Simplify a tree and return its new root."""
    return Optimizer().run(root)