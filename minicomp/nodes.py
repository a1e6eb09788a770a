"""Syntax tree nodes, node types and the operator table of the language."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import IntEnum

from minicomp.textutil import count_hash


class NodeType(IntEnum):
    """Kind of a syntax tree node."""

    NUM = 0
    OP = 1
    VAR = 2
    VAR_INIT = 3
    FUNC = 4
    FUNC_INIT = 5
    NO_TYPE = 6


class Operator(IntEnum):
    """Operators, keywords and punctuation of the language."""

    ADD = 0
    SUB = 1
    MUL = 2
    DIV = 3
    DEG = 4
    SIN = 5
    COS = 6
    LN = 7
    TAN = 8
    ASIN = 9
    ACOS = 10
    ATAN = 11
    SINH = 12
    COSH = 13
    TANH = 14
    EQ = 15
    SEP = 16
    IF = 17
    BEGIN = 18
    END = 19
    WHILE = 20
    PAP_OPEN = 21
    PAP_CLOSE = 22
    COMMA = 23
    RETURN = 24
    PRINT = 25


@dataclass(frozen=True)
class OperatorInfo:
    """Spelling, hash and command name of one operator."""

    name: str
    hash: int
    command_name: str
    code: Operator


def _info(name: str, command_name: str, code: Operator) -> OperatorInfo:
    return OperatorInfo(name, count_hash(name), command_name, code)


OPERATORS: tuple[OperatorInfo, ...] = (
    _info("+", "ADD", Operator.ADD),
    _info("-", "SUB", Operator.SUB),
    _info("*", "MUL", Operator.MUL),
    _info("/", "DIV", Operator.DIV),
    _info("^", "DEG", Operator.DEG),
    _info("sin", "SIN", Operator.SIN),
    _info("cos", "COS", Operator.COS),
    _info("ln", "LN", Operator.LN),
    _info("tg", "TAN", Operator.TAN),
    _info("arcsin", "ARCSIN", Operator.ASIN),
    _info("arccos", "ARCCOS", Operator.ACOS),
    _info("arctan", "ARCTAN", Operator.ATAN),
    _info("sinh", "SINH", Operator.SINH),
    _info("cosh", "COSH", Operator.COSH),
    _info("tanh", "TANH", Operator.TANH),
    _info("=", "=", Operator.EQ),
    _info(";", "SEP", Operator.SEP),
    _info("if", "IF", Operator.IF),
    _info("{", "{", Operator.BEGIN),
    _info("}", "}", Operator.END),
    _info("while", "WHILE", Operator.WHILE),
    _info("(", "(", Operator.PAP_OPEN),
    _info(")", ")", Operator.PAP_CLOSE),
    _info(",", ",", Operator.COMMA),
    _info("return", "RET", Operator.RETURN),
    _info("print", "PRINT", Operator.PRINT),
)

# Node types that may appear in the textual tree format, in table order.
TYPE_NAMES: tuple[NodeType, ...] = (
    NodeType.NUM,
    NodeType.OP,
    NodeType.VAR,
    NodeType.VAR_INIT,
    NodeType.FUNC,
    NodeType.FUNC_INIT,
)

_BY_NAME = {info.name: info.code for info in OPERATORS}
_TYPES_BY_NAME = {kind.name: kind for kind in TYPE_NAMES}


@dataclass(eq=True)
class Node:
    """A node of the syntax tree.

    ``value`` holds an ``Operator`` for OP nodes, an ``int`` for NUM nodes,
    a name for VAR nodes and a table index (or a name) for the init and
    function kinds.
    """

    type: NodeType
    value: int | str | Operator | None = None
    left: Node | None = None
    right: Node | None = None
    parent: Node | None = field(default=None, compare=False, repr=False)

    def walk(self) -> Iterator[Node]:
        """Yield this node and its descendants in pre-order."""
        pending: list[Node] = [self]
        while pending:
            node = pending.pop()
            yield node
            if node.right is not None:
                pending.append(node.right)
            if node.left is not None:
                pending.append(node.left)


def make_op(oper: Operator) -> Node:
    """Create an operator node."""
    return Node(NodeType.OP, Operator(oper))


def make_num(value: int) -> Node:
    """Create a number node."""
    return Node(NodeType.NUM, int(value))


def make_var(name: str) -> Node:
    """Create a variable reference node."""
    return Node(NodeType.VAR, name)


def operator_info(oper: Operator) -> OperatorInfo:
    """Return the table entry of an operator."""
    return OPERATORS[Operator(oper)]


def find_operator(name: str) -> Operator:
    """Return the operator spelled ``name``; raise ValueError if none is."""
    try:
        return _BY_NAME[name]
    except KeyError:
        raise ValueError(f"unknown operator {name!r}") from None


def find_type(name: str) -> NodeType:
    """Return the node type called ``name``; raise ValueError if none is."""
    try:
        return _TYPES_BY_NAME[name]
    except KeyError:
        raise ValueError(f"unknown node type {name!r}") from None