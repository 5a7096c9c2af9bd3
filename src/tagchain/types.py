"""Core value types shared by the feature extractor, perceptron and taggers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import NewType

Tag = NewType("Tag", str)
Feature = NewType("Feature", str)
Class = NewType("Class", str)

Sentence = list[str]
TaggedSentence = list[tuple[str, Tag]]

UNK: Tag = Tag("Unk")
"""Sentinel tag for tokens no tagger stage could classify."""


def parse_tag(text: str) -> Tag:
    """Return a Tag for ``text``, treating blank labels as unknown."""

    normalized = text.strip()
    if not normalized:
        return UNK
    return Tag(normalized)


def is_unknown(tag: Tag) -> bool:
    return tag == UNK


def tag_to_class(tag: Tag) -> Class:
    return Class(str(tag))


def class_to_tag(label: Class) -> Tag:
    return Tag(str(label))


def strip_tags(tagged: Iterable[tuple[str, Tag]]) -> Sentence:
    """Remove the tags from a tagged sentence."""

    return [word for word, _tag in tagged]


__all__ = [
    "Class",
    "Feature",
    "Sentence",
    "Tag",
    "TaggedSentence",
    "UNK",
    "class_to_tag",
    "is_unknown",
    "parse_tag",
    "strip_tags",
    "tag_to_class",
]
