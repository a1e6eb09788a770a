"""Lexer and recursive-descent parser of the source language.

The lexer turns program text into a flat list of token nodes and records
declared variables and functions.  The parser links those same token nodes
into a syntax tree.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from minicomp.nodes import (
    OPERATORS,
    Node,
    NodeType,
    Operator,
    make_num,
    make_op,
    make_var,
)
from minicomp.textutil import skip_space

_PUNCTUATION: dict[str, tuple[Operator, ...]] = {
    "(": (Operator.PAP_OPEN,),
    ")": (Operator.PAP_CLOSE,),
    "{": (Operator.BEGIN,),
    "}": (Operator.END, Operator.SEP),
    "=": (Operator.EQ,),
    ";": (Operator.SEP,),
    ",": (Operator.COMMA,),
}

_KEYWORDS: tuple[tuple[str, Operator], ...] = (
    ("if", Operator.IF),
    ("while", Operator.WHILE),
    ("print", Operator.PRINT),
)

_NAME_TAIL = re.compile(r"[A-Za-z0-9]*")
_DIGITS = re.compile(r"[0-9]+")


class CompileSyntaxError(ValueError):
    """The program text does not follow the language's grammar."""


def _is_alpha(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _read_name(text: str, pos: int) -> str:
    """A name is its first character followed by letters and digits."""
    tail = _NAME_TAIL.match(text, pos + 1)
    return text[pos] + tail.group(0)


def tokenize(source: str, variables: list[str], functions: list[str]) -> list[Node]:
    """Split ``source`` into token nodes.

    Variables declared with ``var`` are appended to ``variables`` and
    functions declared with ``func`` to ``functions``; the init tokens hold
    the index of the new entry.
    """
    text = source.partition("\0")[0]
    tokens: list[Node] = []
    pos = 0

    while pos < len(text):
        ch = text[pos]

        if ch in _PUNCTUATION:
            tokens.extend(make_op(oper) for oper in _PUNCTUATION[ch])
            pos += 1
            continue

        keyword = next((item for item in _KEYWORDS if text.startswith(item[0], pos)), None)
        if keyword is not None:
            tokens.append(make_op(keyword[1]))
            pos += len(keyword[0])
            continue

        if text.startswith("var", pos):
            pos = skip_space(text, pos + 3)
            if pos >= len(text) or not _is_alpha(text[pos]):
                raise CompileSyntaxError("Syntax error: expected a variable name after 'var'")
            name = _read_name(text, pos)
            pos += len(name)
            variables.append(name)
            tokens.append(Node(NodeType.VAR_INIT, len(variables) - 1))
            continue

        if text.startswith("func", pos):
            pos = skip_space(text, pos + 4)
            if pos >= len(text):
                raise CompileSyntaxError("Syntax error: expected a function name after 'func'")
            name = _read_name(text, pos)
            pos += len(name)
            functions.append(name)
            tokens.append(Node(NodeType.FUNC_INIT, len(functions) - 1))
            continue

        if text.startswith("return", pos):
            tokens.append(make_op(Operator.RETURN))
            pos += len("return")
            continue

        digits = _DIGITS.match(text, pos)
        if digits is not None:
            tokens.append(make_num(int(digits.group(0))))
            pos = digits.end()
            continue

        info = next((item for item in OPERATORS if text.startswith(item.name, pos)), None)
        if info is not None:
            tokens.append(make_op(info.code))
            pos += len(info.name)
            continue

        if _is_alpha(ch):
            name = _read_name(text, pos)
            pos += len(name)
            if name in functions:
                tokens.append(Node(NodeType.FUNC, functions.index(name)))
            elif name in variables:
                tokens.append(make_var(name))
            else:
                raise CompileSyntaxError(f"Uninitialized variable [{name}]")
            continue

        after_space = skip_space(text, pos)
        if after_space != pos:
            pos = after_space
            continue

        raise CompileSyntaxError(f"Syntax error: {ch}")

    return tokens


def is_op(node: Node | None, oper: Operator) -> bool:
    """Whether ``node`` is an operator node holding ``oper``."""
    return node is not None and node.type == NodeType.OP and node.value == oper


def _is_math(node: Node) -> bool:
    return node.type == NodeType.OP and Operator.DEG < node.value <= Operator.TANH


class Parser:
    """Builds a syntax tree by linking the token nodes together.

    Variable references are checked against the variables declared in the
    current scope; a function body sees only its parameters and its own
    declarations.
    """

    def __init__(self, tokens: Sequence[Node], variables: Sequence[str]) -> None:
        self.tokens = tokens
        self.variables = variables
        self.pos = 0
        self._scope: list[int] = []
        self._scope_start = 0

    @property
    def _token(self) -> Node | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _advance(self) -> Node:
        token = self._token
        self.pos += 1
        return token

    def _expect(self, oper: Operator, lexeme: str) -> None:
        if not is_op(self._token, oper):
            raise CompileSyntaxError(f'Syntax error in "{lexeme}"')
        self.pos += 1

    def parse(self) -> Node | None:
        """Parse every token; return the root, or None for an empty program."""
        self.pos = 0
        self._scope.clear()
        self._scope_start = 0
        root = self._operation()
        if self._token is not None:
            raise CompileSyntaxError(f"Syntax error at token {self.pos}")
        return root

    def _operation(self) -> Node | None:
        if self._token is None:
            return None
        rules: tuple[Callable[[], Node | None], ...] = (
            self._if,
            self._function,
            self._return,
            self._print,
            self._equation,
        )
        for rule in rules:
            statement = rule()
            if statement is not None:
                break
        else:
            return None

        sep = self._token
        self.pos += 1
        if not is_op(sep, Operator.SEP):
            raise CompileSyntaxError("Syntax error SEP")
        sep.left = statement
        sep.right = self._operation()
        return sep

    def _return(self) -> Node | None:
        if not is_op(self._token, Operator.RETURN):
            return None
        node = self._advance()
        argument = self._var_or_num()
        if argument is None:
            raise CompileSyntaxError("No-return function")
        node.left = argument
        return node

    def _function(self) -> Node | None:
        token = self._token
        if token is None or token.type != NodeType.FUNC_INIT:
            return None
        self.pos += 1
        outer_size = len(self._scope)

        self._expect(Operator.PAP_OPEN, "(")
        params = self._commas()
        self._expect(Operator.PAP_CLOSE, ")")

        self._scope_start = outer_size
        self._expect(Operator.BEGIN, "{")
        body = self._operation()
        self._expect(Operator.END, "}")

        del self._scope[outer_size:]
        self._scope_start = 0

        token.left = params
        token.right = body
        return token

    def _commas(self) -> Node | None:
        param = self._variable()
        sep = self._token
        if is_op(sep, Operator.COMMA):
            sep.left = param
            self.pos += 1
            param = self._variable()
            if is_op(self._token, Operator.COMMA):
                sep.right = self._token
                sep = self._token
                self.pos += 1
                param = self._variable()
            else:
                sep.right = param
        if is_op(sep, Operator.COMMA):
            return sep
        return param

    def _print(self) -> Node | None:
        if not is_op(self._token, Operator.PRINT):
            return None
        node = self._advance()
        self._expect(Operator.PAP_OPEN, "(")
        argument = self._var_or_num()
        self._expect(Operator.PAP_CLOSE, ")")
        node.left = argument
        return node

    def _if(self) -> Node | None:
        token = self._token
        if not (is_op(token, Operator.IF) or is_op(token, Operator.WHILE)):
            return None
        self.pos += 1
        self._expect(Operator.PAP_OPEN, "(")
        condition = self._expression()
        self._expect(Operator.PAP_CLOSE, ")")
        self._expect(Operator.BEGIN, "{")
        body = self._operation()
        self._expect(Operator.END, "}")
        token.left = condition
        token.right = body
        return token

    def _equation(self) -> Node | None:
        if self._token is None:
            return None
        target = self._variable()
        if target is None or not is_op(self._token, Operator.EQ):
            return self._expression()
        node = self._advance()
        node.right = target
        node.left = self._expression()
        return node

    def _expression(self) -> Node | None:
        if self._token is None:
            return None
        left = self._mul()
        token = self._token
        if token is None or token.type != NodeType.OP:
            return left
        while is_op(self._token, Operator.ADD) or is_op(self._token, Operator.SUB):
            op = self._advance()
            right = self._mul()
            op.left = left
            op.right = right
            if left is not None:
                left.parent = op
            if right is not None:
                right.parent = op
            left = op
        return left

    def _binary(
        self, operand: Callable[[], Node | None], opers: tuple[Operator, ...]
    ) -> Node | None:
        if self._token is None:
            return None
        left = operand()
        token = self._token
        if token is None or token.type != NodeType.OP:
            return left
        while any(is_op(self._token, oper) for oper in opers):
            op = self._advance()
            right = operand()
            if left is None or right is None:
                raise CompileSyntaxError(
                    f"Syntax error: missing operand of {Operator(op.value).name}"
                )
            op.left = left
            op.right = right
            left.parent = op
            right.parent = op
            left = op
        return left

    def _mul(self) -> Node | None:
        return self._binary(self._degree, (Operator.MUL, Operator.DIV))

    def _degree(self) -> Node | None:
        return self._binary(self._command, (Operator.DEG,))

    def _command(self) -> Node | None:
        token = self._token
        if token is None:
            return None
        if token.type != NodeType.FUNC and not _is_math(token):
            return self._primary()
        self.pos += 1
        argument = self._primary()
        if argument is None:
            raise CompileSyntaxError("Syntax error: missing argument")
        token.left = argument
        argument.parent = token
        return token

    def _primary(self) -> Node | None:
        token = self._token
        if token is None:
            return None
        if token.type == NodeType.OP:
            if token.value != Operator.PAP_OPEN:
                return None
            self.pos += 1
            node = self._expression()
            if not is_op(self._token, Operator.PAP_CLOSE):
                raise CompileSyntaxError('Syntax error ")"')
            self.pos += 1
            return node
        return self._var_or_num()

    def _var_or_num(self) -> Node | None:
        token = self._token
        if token is None:
            return None
        if token.type == NodeType.NUM:
            return self._number()
        return self._variable()

    def _is_initialized(self, name: str) -> bool:
        return any(
            self.variables[index] == name for index in self._scope[self._scope_start:]
        )

    def _variable(self) -> Node | None:
        token = self._token
        if token is None:
            return None
        if token.type == NodeType.VAR_INIT:
            self._scope.append(token.value)
        if token.type == NodeType.VAR and not self._is_initialized(token.value):
            raise CompileSyntaxError(f"Uninitialized variable [{token.value}]")
        if token.type in (NodeType.VAR, NodeType.VAR_INIT):
            self.pos += 1
            return token
        return None

    def _number(self) -> Node:
        token = self._token
        if token is None or token.type != NodeType.NUM:
            raise CompileSyntaxError("It isn't number")
        self.pos += 1
        return token


def parse_program(tokens: Sequence[Node], variables: Sequence[str]) -> Node | None:
    """Parse a token list into a syntax tree."""
    return Parser(tokens, variables).parse()