"""Text helpers: reading sources, counting lines, hashing, skipping spaces."""

from __future__ import annotations

import re
from pathlib import Path

_WHITESPACE = frozenset(" \t\n\v\f\r")
_MASK = (1 << 64) - 1


def _until_nul(text: str) -> str:
    return text.partition("\0")[0]


def read_source(filename: str | Path) -> str:
    """Return the whole text of a file."""
    return Path(filename).read_text(encoding="utf-8")


def count_lines(text: str) -> int:
    """Count lines, treating a run of newlines as a single line break."""
    return len(re.findall(r"\n+", _until_nul(text))) + 1


def max_line_length(text: str) -> int:
    """Length of the longest newline-terminated line.

    Every line after the first is counted together with the newline that
    precedes it; an unterminated last line is not considered.
    """
    parts = _until_nul(text).split("\n")
    if len(parts) == 1:
        return 0
    lengths = [len(parts[0])]
    lengths.extend(len(line) + 1 for line in parts[1:-1])
    return max(lengths)


def split_lines(text: str) -> list[str]:
    """Split text into lines, dropping the empty lines of newline runs."""
    parts = text.split("\n")
    if len(parts) == 1:
        return parts
    return [parts[0], *(line for line in parts[1:-1] if line), parts[-1]]


def count_hash(text: str) -> int:
    """Polynomial hash with base 31 over the signed bytes, modulo 2**64."""
    value = 0
    for byte in text.encode("utf-8"):
        signed = byte - 256 if byte >= 128 else byte
        value = (value * 31 + signed) & _MASK
    return value


def skip_space(text: str, pos: int = 0) -> int:
    """Return the index of the first non-whitespace character at or after pos."""
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    return pos