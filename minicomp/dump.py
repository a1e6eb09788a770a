"""Graphviz dumps of syntax trees and an HTML log that shows them."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path

from minicomp.nodes import Node, NodeType, Operator, operator_info

_SEP_COLOR = "#ff00d0ff"
_OP_COLOR = "#5f5fffff"
_NUM_COLOR = "#0CFF0C"
_VAR_COLOR = "#FF0C0C"
_FUNC_COLOR = "#e3ff0cff"
_VAR_INIT_COLOR = "#00ccffff"
_FUNC_INIT_COLOR = "#a600ffff"

_Describe = Callable[[Node], "tuple[str, str] | None"]


def _describe_common(node: Node) -> tuple[str, str] | None:
    if node.type is NodeType.OP:
        color = _SEP_COLOR if node.value == Operator.SEP else _OP_COLOR
        return operator_info(node.value).command_name, color
    if node.type is NodeType.NUM:
        return str(int(node.value)), _NUM_COLOR
    if node.type is NodeType.VAR:
        return f"('{node.value}')", _VAR_COLOR
    return None


def _render(node: Node | None, describe: _Describe) -> str:
    if node is None:
        raise ValueError("cannot dump an empty tree")

    refs: dict[int, str] = {}

    def ref(item: Node | None) -> str:
        if item is None:
            return "(nil)"
        return refs.setdefault(id(item), str(len(refs)))

    for item in node.walk():
        ref(item)

    lines = ["digraph {\n"]

    def visit(item: Node) -> None:
        entry = describe(item)
        if entry is not None:
            value, color = entry
            me = ref(item)
            lines.append(
                f'\tnode{me}[label = "{{parent: {ref(item.parent)} | {me}| '
                f"TYPE: {item.type.name} |VAL: {value} | "
                f'{{{ref(item.left)} | {ref(item.right)}}}}}", shape = Mrecord, '
                f'style = "filled", fillcolor = "{color}"]\n'
            )
        if item.left is not None:
            visit(item.left)
            lines.append(f'\tnode{ref(item)} -> node{ref(item.left)} [color = "blue"]\n ')
        if item.right is not None:
            visit(item.right)
            lines.append(f'\tnode{ref(item)} -> node{ref(item.right)} [color = "red"]\n')

    visit(node)
    lines.append("}")
    return "".join(lines)


def render_dot(node: Node, variables: list[str]) -> str:
    """Graphviz text for a tree whose VAR_INIT nodes hold table indices."""

    def describe(item: Node) -> tuple[str, str] | None:
        common = _describe_common(item)
        if common is not None:
            return common
        if item.type is NodeType.FUNC:
            return "('FUNC_NAME')", _FUNC_COLOR
        if item.type is NodeType.VAR_INIT:
            return f" ('{variables[item.value]}')", _VAR_INIT_COLOR
        if item.type is NodeType.FUNC_INIT:
            return " ('FUNC INTT')", _FUNC_INIT_COLOR
        return None

    return _render(node, describe)


def render_dot_string(node: Node) -> str:
    """Graphviz text for a tree whose init and function nodes hold names."""

    def describe(item: Node) -> tuple[str, str] | None:
        common = _describe_common(item)
        if common is not None:
            return common
        if item.type is NodeType.FUNC:
            return f"('{item.value}')", _FUNC_COLOR
        if item.type is NodeType.VAR_INIT:
            return f" ('{item.value}')", _VAR_INIT_COLOR
        if item.type is NodeType.FUNC_INIT:
            return f" ('{item.value}')", _FUNC_INIT_COLOR
        return None

    return _render(node, describe)


class DumpWriter:
    """Writes tree pictures with Graphviz and links them from an HTML log."""

    def __init__(
        self,
        log_path: str | Path = "Logfile.htm",
        image_dir: str | Path = "pictures",
        dot_path: str | Path = "Comp_dump.txt",
    ) -> None:
        self.image_dir = Path(image_dir)
        self.dot_path = Path(dot_path)
        self.images: list[Path] = []
        self._log = open(log_path, "w", encoding="utf-8")

    def __enter__(self) -> DumpWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _picture(self, dot_text: str) -> Path:
        self.dot_path.write_text(dot_text, encoding="utf-8")
        image = self.image_dir / f"graph{len(self.images)}.png"
        self.image_dir.mkdir(parents=True, exist_ok=True)
        try:
            subprocess.run(
                ["dot", str(self.dot_path), "-T", "png", "-o", str(image)],
                check=False,
            )
        except OSError:
            pass
        self.images.append(image)
        return image

    def _write(self, dot_text: str, text: str, closing: str) -> Path:
        self._log.write("<pre>\n")
        self._log.write(f"\t<h3>DUMP {text}</h3>\n")
        image = self._picture(dot_text)
        self._log.write(f'Image: \n <img src= "{image.as_posix()}">')
        self._log.write(closing)
        self._log.flush()
        return image

    def dump(self, node: Node, text: str, variables: list[str]) -> Path:
        """Dump a tree with indexed variables; return the picture's path."""
        return self._write(render_dot(node, variables), text, "</pre>")

    def dump_string(self, node: Node, text: str) -> Path:
        """Dump a tree with named variables; return the picture's path."""
        return self._write(render_dot_string(node), text, "</pre>\n")

    def close(self) -> None:
        """Close the HTML log."""
        self._log.close()