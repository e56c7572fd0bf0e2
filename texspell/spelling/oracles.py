"""Spell oracle backends."""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Iterable

from spellchecker import SpellChecker

from .base import KIND_CAPS, KIND_LOCAL, KIND_RARE, OracleError, OracleResult

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 4096


def read_word_list(path: Path) -> list[str]:
    """Read one word per line, skipping blanks and ``#`` comments."""

    words: list[str] = []
    for raw in Path(path).read_text(encoding="utf-8").splitlines():
        word = raw.strip()
        if word and not word.startswith("#"):
            words.append(word)
    return words


class WordListOracle:
    """Judge words against explicit word lists.

    ``words`` keep their canonical casing: a lowercase entry also accepts the
    capitalised and all-caps spellings, while a word that only differs from an
    entry by case is reported with kind ``caps``. ``rare`` and ``local`` words
    are reported with their own kinds.
    """

    def __init__(
        self,
        words: Iterable[str],
        *,
        rare: Iterable[str] = (),
        local: Iterable[str] = (),
    ) -> None:
        self._words = set(words)
        self._index: dict[str, set[str]] = {}
        for word in self._words:
            self._index.setdefault(word.lower(), set()).add(word)
        self._rare = {word.lower() for word in rare}
        self._local = {word.lower() for word in local}

    @classmethod
    def from_file(cls, path: Path) -> "WordListOracle":
        return cls(read_word_list(path))

    def add_words(self, words: Iterable[str]) -> None:
        for word in words:
            self._words.add(word)
            self._index.setdefault(word.lower(), set()).add(word)

    def check(self, word: str) -> OracleResult:
        lowered = word.lower()
        if lowered in self._rare:
            return OracleResult.bad(word, KIND_RARE)
        if lowered in self._local:
            return OracleResult.bad(word, KIND_LOCAL)
        if word in self._words:
            return OracleResult.correct()

        forms = self._index.get(lowered)
        if not forms:
            return OracleResult.bad(word)
        if any(_case_variant_allowed(word, form) for form in forms):
            return OracleResult.correct()
        return OracleResult.bad(word, KIND_CAPS)


class SpellCheckerOracle:
    """Oracle backed by a pyspellchecker dictionary."""

    def __init__(
        self,
        language: str = "en",
        *,
        extra_words: Iterable[str] = (),
        checker: SpellChecker | None = None,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ) -> None:
        if checker is None:
            checker = _build_checker(language)
        self._checker = checker
        self._lookup = functools.lru_cache(maxsize=cache_size)(self._lookup_uncached)
        extra = [word for word in extra_words if word]
        if extra:
            self._checker.word_frequency.load_words(extra)
            logger.debug("Loaded %s personal words into the %s dictionary", len(extra), language)

    def check(self, word: str) -> OracleResult:
        return self._lookup(word)

    def cache_info(self) -> functools._CacheInfo:
        return self._lookup.cache_info()

    def _lookup_uncached(self, word: str) -> OracleResult:
        if self._checker.unknown([word]):
            return OracleResult.bad(word)
        return OracleResult.correct()


def _build_checker(language: str) -> SpellChecker:
    try:
        return SpellChecker(language=language)
    except ValueError as exc:
        raise OracleError(f"No pyspellchecker dictionary for language '{language}'") from exc


def _case_variant_allowed(word: str, form: str) -> bool:
    if word.isupper():
        return True
    if form.islower():
        return word == form[:1].upper() + form[1:]
    return False


__all__ = ["SpellCheckerOracle", "WordListOracle", "read_word_list"]
