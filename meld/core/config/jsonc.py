"""
JSON-with-comments reader for meld.jsonc.

Strips ``//`` line comments, ``/* */`` block comments and trailing
commas, then hands the text to the standard JSON decoder. Comment
markers inside string literals are left alone. Stripped comments are
replaced by spaces (newlines kept) so decoder line/column positions
still point into the original text.
"""

from __future__ import annotations

import json
from typing import Any


class JsoncDecodeError(ValueError):
    """Raised when a JSON-with-comments document cannot be parsed."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.line = line
        self.column = column


def strip_comments(text: str) -> str:
    """Blank out comments in ``text`` without moving any other character."""
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False

    while i < n:
        ch = text[i]

        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
            continue

        if ch == "/" and i + 1 < n and text[i + 1] == "/":
            while i < n and text[i] != "\n":
                out.append(" ")
                i += 1
            continue

        if ch == "/" and i + 1 < n and text[i + 1] == "*":
            end = text.find("*/", i + 2)
            if end == -1:
                raise JsoncDecodeError("Unterminated block comment", *_position(text, i))
            for c in text[i:end + 2]:
                out.append("\n" if c == "\n" else " ")
            i = end + 2
            continue

        out.append(ch)
        i += 1

    return "".join(out)


def strip_trailing_commas(text: str) -> str:
    """Drop commas that directly precede ``]`` or ``}`` (whitespace allowed).

    Expects comment-free input.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False

    while i < n:
        ch = text[i]

        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
        elif ch == ",":
            j = i + 1
            while j < n and text[j] in " \t\r\n":
                j += 1
            if j < n and text[j] in "]}":
                out.append(" ")
                i += 1
                continue

        out.append(ch)
        i += 1

    return "".join(out)


def loads(text: str) -> Any:
    """Parse a JSON-with-comments document.

    Raises:
        JsoncDecodeError: If the text is not valid JSON once comments
            and trailing commas are removed.
    """
    cleaned = strip_trailing_commas(strip_comments(text))
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise JsoncDecodeError(f"{e.msg} (line {e.lineno}, column {e.colno})", e.lineno, e.colno) from e


def _position(text: str, index: int) -> tuple[int, int]:
    line = text.count("\n", 0, index) + 1
    column = index - (text.rfind("\n", 0, index) + 1) + 1
    return line, column
