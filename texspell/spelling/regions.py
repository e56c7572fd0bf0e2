"""Decide from a syntax stack whether a position should be spell checked."""

from __future__ import annotations

from typing import Iterable

from .base import RegionTag, SyntaxStack

EXCLUDED_INNERMOST_PREFIXES = (
    "texMath",
    "texDisplayMath",
    "texComment",
)

SPELLABLE_PREFIXES = (
    "texPartArgTitle",
    "texTitle",
    "texSection",
    "texChapterTitle",
    "texAuthorTitle",
    "texDocType",
    "texDocTypeArgs",
    "texArg",
)

SKIPPED_PREFIXES = (
    "texStatement",
    "texBeginEnd",
    "texDelimiter",
    "texInputFile",
    "texSpecialChar",
)


class RegionClassifier:
    """Classify syntax stacks using prefix tables over region tag names.

    The innermost tag alone decides the math/comment exclusion. Otherwise the
    stack is walked from the innermost tag outwards and the first tag that is
    either spellable or a known non-text element wins. Stacks that match
    nothing are treated as text, so arguments of unknown commands are checked.
    """

    def __init__(
        self,
        *,
        excluded_innermost: Iterable[str] = EXCLUDED_INNERMOST_PREFIXES,
        spellable: Iterable[str] = SPELLABLE_PREFIXES,
        skipped: Iterable[str] = SKIPPED_PREFIXES,
    ) -> None:
        self.excluded_innermost = tuple(excluded_innermost)
        self.spellable = tuple(spellable)
        self.skipped = tuple(skipped)

    @classmethod
    def with_extra(
        cls,
        *,
        spellable: Iterable[str] = (),
        skipped: Iterable[str] = (),
    ) -> "RegionClassifier":
        return cls(
            spellable=SPELLABLE_PREFIXES + tuple(spellable),
            skipped=SKIPPED_PREFIXES + tuple(skipped),
        )

    def is_spellcheckable(self, stack: SyntaxStack) -> bool:
        if not stack:
            return True

        innermost = RegionTag.coerce(stack[-1])
        if innermost.name.startswith(self.excluded_innermost):
            return False

        for raw in reversed(stack):
            tag = RegionTag.coerce(raw)
            if tag.spell or tag.name.startswith(self.spellable):
                return True
            if tag.name.startswith(self.skipped):
                return False

        return True


default_classifier = RegionClassifier()


def is_spellcheckable(stack: SyntaxStack) -> bool:
    return default_classifier.is_spellcheckable(stack)


__all__ = [
    "EXCLUDED_INNERMOST_PREFIXES",
    "RegionClassifier",
    "SKIPPED_PREFIXES",
    "SPELLABLE_PREFIXES",
    "default_classifier",
    "is_spellcheckable",
]
