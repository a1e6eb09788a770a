"""Reading and writing syntax trees in the parenthesised text format.

A node is written as ``("TYPE value"<left><right>)`` where a missing child
is written as ``nil``.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from minicomp.nodes import (
    Node,
    NodeType,
    TYPE_NAMES,
    find_operator,
    find_type,
    operator_info,
)
from minicomp.textutil import skip_space

_TYPE_RE = re.compile(r'\s*"(\S+)\s*')
_OP_RE = re.compile(r'\s*([^"]+)"')
_STRING_RE = re.compile(r'([^"]+)"')
_NUMBER_RE = re.compile(r'([+-]?\d+)"')

_NAMED = (NodeType.VAR, NodeType.VAR_INIT, NodeType.FUNC, NodeType.FUNC_INIT)


class TreeFormatError(ValueError):
    """The text is not a well-formed syntax tree."""


def _format(node: Node, describe: Callable[[Node], str], out: list[str]) -> None:
    if node.type not in TYPE_NAMES:
        raise TreeFormatError(f"cannot format node of type {node.type.name}")
    out.append(f'("{node.type.name} {describe(node)}"')
    for child in (node.left, node.right):
        if child is None:
            out.append("nil")
        else:
            _format(child, describe, out)
    out.append(")")


def format_tree(node: Node, variables: list[str], functions: list[str]) -> str:
    """Write a tree whose init and function nodes hold table indices."""

    def describe(item: Node) -> str:
        if item.type is NodeType.NUM:
            return str(int(item.value))
        if item.type is NodeType.VAR:
            return str(item.value)
        if item.type is NodeType.OP:
            return operator_info(item.value).name
        if item.type is NodeType.VAR_INIT:
            return variables[item.value]
        return functions[item.value]

    out: list[str] = []
    _format(node, describe, out)
    return "".join(out)


def format_tree_middle(node: Node) -> str:
    """Write a tree whose init and function nodes hold names."""

    def describe(item: Node) -> str:
        if item.type is NodeType.NUM:
            return str(int(item.value))
        if item.type is NodeType.OP:
            return operator_info(item.value).name
        return str(item.value)

    out: list[str] = []
    _format(node, describe, out)
    return "".join(out)


class _TreeReader:
    def __init__(self, text: str, resolve: Callable[[NodeType, str], int | str]):
        self._text = text
        self._pos = 0
        self._resolve = resolve

    def _match(self, pattern: re.Pattern[str], what: str) -> str:
        found = pattern.match(self._text, self._pos)
        if found is None:
            raise TreeFormatError(f"expected {what} at position {self._pos}")
        self._pos = found.end()
        return found.group(1)

    def _read_type(self) -> NodeType:
        name = self._match(_TYPE_RE, "a node type")
        try:
            return find_type(name)
        except ValueError:
            raise TreeFormatError(f"unknown type [{name}]") from None

    def _read_value(self, kind: NodeType) -> int | str:
        if kind is NodeType.NUM:
            self._pos = skip_space(self._text, self._pos)
            return int(self._match(_NUMBER_RE, "a number"))
        if kind is NodeType.OP:
            name = self._match(_OP_RE, "an operator")
            try:
                return find_operator(name)
            except ValueError:
                raise TreeFormatError(f"unknown op [{name}]") from None
        self._pos = skip_space(self._text, self._pos)
        return self._resolve(kind, self._match(_STRING_RE, "a name"))

    def read(self) -> Node | None:
        text = self._text
        self._pos = skip_space(text, self._pos)
        if text.startswith("(", self._pos):
            self._pos += 1
            kind = self._read_type()
            node = Node(kind, self._read_value(kind))
            self._pos = skip_space(text, self._pos)
            node.left = self.read()
            node.right = self.read()
            self._pos = skip_space(text, self._pos)
            if text.startswith(")", self._pos):
                self._pos += 1
            return node
        if text.startswith("nil", self._pos):
            self._pos += 3
            return None
        raise TreeFormatError(f"expected '(' or 'nil' at position {self._pos}")


def parse_tree(text: str) -> Node | None:
    """Read a tree, keeping every name as a string."""
    return _TreeReader(text, lambda kind, name: name).read()


def parse_tree_back(
    text: str, variables: list[str], functions: list[str]
) -> Node | None:
    """Read a tree, registering declared variables and functions.

    Names of VAR_INIT and FUNC_INIT nodes are appended to ``variables`` and
    ``functions`` and the nodes hold their indices; other names stay strings.
    """

    def resolve(kind: NodeType, name: str) -> int | str:
        if kind is NodeType.VAR_INIT:
            variables.append(name)
            return len(variables) - 1
        if kind is NodeType.FUNC_INIT:
            functions.append(name)
            return len(functions) - 1
        return name

    return _TreeReader(text, resolve).read()