"""Generation of stack-machine assembly from a syntax tree."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path

from minicomp.nodes import Node, NodeType, Operator

_SIMPLE_OPS = {
    Operator.ADD: "ADD",
    Operator.SUB: "SUB",
    Operator.MUL: "MUL",
    Operator.DIV: "DIV",
    Operator.DEG: "POW",
    Operator.PRINT: "OUT",
}


def get_index(name: str, names: Sequence[str]) -> int:
    """Index of the first occurrence of ``name`` in ``names``, or -1."""
    for index, item in enumerate(names):
        if item == name:
            return index
    return -1


def _load(index: int) -> Iterator[str]:
    yield f"PUSH {index}"
    yield "POPR RAX"
    yield "PUSHM [RAX]"


def _emit(node: Node, variables: Sequence[str], labels: dict[int, str]) -> Iterator[str]:
    if node.left is not None:
        yield from _emit(node.left, variables, labels)

    is_if = node.type == NodeType.OP and node.value == Operator.IF
    if is_if:
        yield "PUSH 0"
        yield f"JE :{labels.setdefault(id(node), f'if{len(labels)}')}"

    if node.right is not None:
        yield from _emit(node.right, variables, labels)

    if node.type == NodeType.NUM:
        yield f"PUSH {int(node.value)}"
    elif node.type == NodeType.OP:
        oper = node.value
        if oper in _SIMPLE_OPS:
            yield _SIMPLE_OPS[oper]
        elif oper == Operator.EQ:
            yield "POPR RHX"
            yield "POPM [RAX]"
        elif is_if:
            yield f":{labels[id(node)]}"
    elif node.type == NodeType.VAR:
        yield from _load(get_index(str(node.value), variables))
    elif node.type == NodeType.VAR_INIT:
        value = node.value
        index = get_index(value, variables) if isinstance(value, str) else int(value)
        yield from _load(index)


def generate_asm(root: Node, variables: Sequence[str]) -> str:
    """Assembly text for a tree, ending with HLT."""
    labels: dict[int, str] = {}
    lines = list(_emit(root, variables, labels))
    lines.append("HLT")
    return "\n".join(lines)


def write_asm(root: Node, variables: Sequence[str], path: str | Path = "code_asm.asm") -> Path:
    """Write the assembly of a tree to ``path`` and return the path."""
    target = Path(path)
    target.write_text(generate_asm(root, variables), encoding="utf-8")
    return target