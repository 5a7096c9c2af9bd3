"""Contextual feature extraction for the averaged perceptron tagger."""

from __future__ import annotations

from collections.abc import Sequence

from .types import Feature

START = ("-START-", "-START2-")
END = ("-END-", "-END2-")
SUFFIX_LENGTH = 3


def normalize(word: str) -> str:
    """Collapse numbers and hyphenated compounds into shared placeholders."""

    if "-" in word and not word.startswith("-"):
        return "!HYPHEN"
    if word.isdigit() and len(word) == 4:
        return "!YEAR"
    if word[:1].isdigit():
        return "!DIGITS"
    return word.lower()


def build_context(tokens: Sequence[str]) -> list[str]:
    """Return normalized tokens padded with start and end markers."""

    return [*START, *(normalize(token) for token in tokens), *END]


def extract_features(
    index: int,
    word: str,
    context: Sequence[str],
    prev: str,
    prev2: str,
) -> frozenset[Feature]:
    """Describe the token at ``index`` of an unpadded sentence.

    ``context`` is the padded list produced by :func:`build_context`; ``prev``
    and ``prev2`` are the tags assigned to the two preceding tokens. Context
    positions outside ``context`` are skipped.
    """

    position = index + len(START)
    features: set[Feature] = set()

    def add(name: str, *values: str) -> None:
        features.add(Feature(" ".join((name, *values))))

    def at(offset: int) -> str | None:
        target = position + offset
        if 0 <= target < len(context):
            return context[target]
        return None

    add("bias")
    add("i suffix", _suffix(word))
    add("i pref1", word[:1])
    add("i-1 tag", prev)
    add("i-2 tag", prev2)
    add("i tag+i-2 tag", prev, prev2)

    current = at(0)
    if current is not None:
        add("i word", current)
        add("i-1 tag+i word", prev, current)
    previous = at(-1)
    if previous is not None:
        add("i-1 word", previous)
        add("i-1 suffix", _suffix(previous))
    before_previous = at(-2)
    if before_previous is not None:
        add("i-2 word", before_previous)
    following = at(1)
    if following is not None:
        add("i+1 word", following)
        add("i+1 suffix", _suffix(following))
    after_following = at(2)
    if after_following is not None:
        add("i+2 word", after_following)
    return frozenset(features)


def _suffix(word: str) -> str:
    return word[-SUFFIX_LENGTH:]


__all__ = ["END", "START", "build_context", "extract_features", "normalize"]
