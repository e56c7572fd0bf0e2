"""Word tokenizer that skips command names but keeps their arguments."""

from __future__ import annotations

from typing import Iterator

from .base import Token

COMMAND_ESCAPE = "\\"
APOSTROPHE = "'"


def tokenize(line: str) -> Iterator[Token]:
    """Yield word tokens from ``line`` in left-to-right order.

    A token starts at a letter that opens the line or follows a character
    which is neither a letter nor an apostrophe, and runs over letters and
    apostrophes. Trailing apostrophes are trimmed, so quotes such as
    ``word''`` produce ``word``. Tokens sitting on a command name
    (``\\section``, ``\\make@title``) are dropped entirely.
    """

    index = 0
    length = len(line)
    while index < length:
        if not _starts_word(line, index):
            index += 1
            continue

        end = index + 1
        while end < length and _is_word_char(line[end]):
            end += 1

        if not is_command_name(line, index):
            text = line[index:end].rstrip(APOSTROPHE)
            yield Token(text=text, start=index, end=index + len(text))
        index = end


def is_command_name(line: str, index: int) -> bool:
    """Return True when the 0-based ``index`` lies on a command name."""

    if index > 0 and line[index - 1] == COMMAND_ESCAPE:
        return True

    start = index
    while start > 0 and _is_command_char(line[start - 1]):
        start -= 1
    return start > 0 and line[start - 1] == COMMAND_ESCAPE


def _starts_word(line: str, index: int) -> bool:
    if not line[index].isalpha():
        return False
    return index == 0 or not _is_word_char(line[index - 1])


def _is_word_char(char: str) -> bool:
    return char.isalpha() or char == APOSTROPHE


def _is_command_char(char: str) -> bool:
    return char.isalpha() or char == "@"


__all__ = ["COMMAND_ESCAPE", "is_command_name", "tokenize"]
