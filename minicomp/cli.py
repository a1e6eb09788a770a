"""Command-line entry points for the three compiler stages."""

from __future__ import annotations

import argparse
import sys
from contextlib import nullcontext
from pathlib import Path

from minicomp.backend import write_asm
from minicomp.code_tree import (
    TreeFormatError,
    format_tree,
    format_tree_middle,
    parse_tree,
    parse_tree_back,
)
from minicomp.dump import DumpWriter
from minicomp.frontend import CompileSyntaxError, parse_program, tokenize
from minicomp.middle import optimize
from minicomp.textutil import read_source

DEFAULT_TREE = "code_file.txt"
DEFAULT_ASM = "code_asm.asm"


def _dumps(disabled: bool):
    return nullcontext(None) if disabled else DumpWriter()


def _fail(error: Exception) -> int:
    print(f"error: {error}", file=sys.stderr)
    return 1


def front_main(argv: list[str] | None = None) -> int:
    """Tokenize and parse a program, then write its tree to a file."""
    parser = argparse.ArgumentParser(prog="minicomp-front")
    parser.add_argument("source", help="program text to compile")
    parser.add_argument("-o", "--output", default=DEFAULT_TREE, help="tree file to write")
    parser.add_argument("--no-dump", action="store_true", help="skip Graphviz dumps")
    args = parser.parse_args(argv)

    variables: list[str] = []
    functions: list[str] = []
    try:
        tokens = tokenize(read_source(args.source), variables, functions)
        with _dumps(args.no_dump) as writer:
            if writer is not None:
                for token in tokens[:-1]:
                    writer.dump(token, "token", variables)
            root = parse_program(tokens, variables)
            if root is None:
                raise CompileSyntaxError("empty program")
            if writer is not None:
                writer.dump(root, "first dump", variables)
    except (CompileSyntaxError, OSError) as error:
        return _fail(error)

    Path(args.output).write_text(format_tree(root, variables, functions), encoding="utf-8")
    return 0


def middle_main(argv: list[str] | None = None) -> int:
    """Optimize a tree file in place."""
    parser = argparse.ArgumentParser(prog="minicomp-middle")
    parser.add_argument("--tree", default=DEFAULT_TREE, help="tree file to optimize")
    parser.add_argument("--no-dump", action="store_true", help="skip Graphviz dumps")
    args = parser.parse_args(argv)

    try:
        root = parse_tree(read_source(args.tree))
        if root is None:
            raise TreeFormatError("empty tree")
        root = optimize(root)
        with _dumps(args.no_dump) as writer:
            if writer is not None:
                writer.dump_string(root, "dump")
    except (TreeFormatError, ZeroDivisionError, OSError) as error:
        return _fail(error)

    Path(args.tree).write_text(format_tree_middle(root), encoding="utf-8")
    return 0


def back_main(argv: list[str] | None = None) -> int:
    """Translate a tree file into assembly."""
    parser = argparse.ArgumentParser(prog="minicomp-back")
    parser.add_argument("--tree", default=DEFAULT_TREE, help="tree file to read")
    parser.add_argument("-o", "--output", default=DEFAULT_ASM, help="assembly file to write")
    parser.add_argument("--no-dump", action="store_true", help="skip Graphviz dumps")
    args = parser.parse_args(argv)

    variables: list[str] = []
    functions: list[str] = []
    try:
        root = parse_tree_back(read_source(args.tree), variables, functions)
        if root is None:
            raise TreeFormatError("empty tree")
        with _dumps(args.no_dump) as writer:
            if writer is not None:
                writer.dump(root, "dump", variables)
    except (TreeFormatError, OSError) as error:
        return _fail(error)

    print(" ".join(variables))
    write_asm(root, variables, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(front_main())