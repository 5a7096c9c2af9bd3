"""Tagger protocol and backoff chain orchestration."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Protocol, runtime_checkable

from ..types import Sentence, Tag, TaggedSentence, is_unknown

LOGGER = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """Raised when training data is empty or malformed."""


@runtime_checkable
class Tagger(Protocol):
    """Common interface shared by every stage of a backoff chain."""

    algorithm_id: bytes
    backoff: Tagger | None
    tokenizer: Callable[[str], Sentence]
    splitter: Callable[[str], list[str]]

    def classify(self, sentences: Sequence[Sentence]) -> list[TaggedSentence]:
        """Tag sentences with this stage only, using ``UNK`` where unsure."""

    def train(self, labeled: Sequence[TaggedSentence]) -> Tagger:
        """Return a copy of this stage trained on ``labeled``; backoffs are untouched."""

    def serialize(self) -> bytes:
        """Encode the state of this stage, excluding its backoff."""


Reader = Callable[[bytes, "Tagger | None"], Tagger]


def iter_chain(tagger: Tagger) -> Iterator[Tagger]:
    """Yield the head of the chain followed by each backoff stage."""

    stage: Tagger | None = tagger
    while stage is not None:
        yield stage
        stage = stage.backoff


def chain_length(tagger: Tagger) -> int:
    return sum(1 for _stage in iter_chain(tagger))


def tag_sentences(tagger: Tagger, sentences: Sequence[Sentence]) -> list[TaggedSentence]:
    """Tag ``sentences`` with the whole chain.

    The head classifies every token. Each following stage only sees the tokens
    still tagged ``UNK``, submitted as one sentence per original sentence, and
    its answers are written back at their original positions. Tokens that
    remain unknown after the last stage stay ``UNK``.
    """

    stages = iter_chain(tagger)
    tagged = [list(sentence) for sentence in next(stages).classify(sentences)]
    for stage in stages:
        pending = [
            [index for index, (_word, tag) in enumerate(sentence) if is_unknown(tag)]
            for sentence in tagged
        ]
        if not any(pending):
            break
        owners = [number for number, positions in enumerate(pending) if positions]
        unknown_words = [[tagged[number][index][0] for index in pending[number]] for number in owners]
        LOGGER.debug(
            "Delegating %d unknown token(s) to %s",
            sum(len(words) for words in unknown_words),
            stage.algorithm_id.decode("utf-8", "replace"),
        )
        resolved = stage.classify(unknown_words)
        for number, answers in zip(owners, resolved):
            for index, (word, tag) in zip(pending[number], answers):
                tagged[number][index] = (word, tag)
    return tagged


def validate_training_data(labeled: Sequence[TaggedSentence]) -> list[TaggedSentence]:
    """Return ``labeled`` as lists of ``(word, Tag)`` pairs or raise InvalidInputError.

    ``UNK`` is never a valid training label: it marks the absence of a tag.
    """

    if isinstance(labeled, (str, bytes)):
        raise InvalidInputError("Training data must be a sequence of tagged sentences.")
    sentences: list[TaggedSentence] = []
    for number, sentence in enumerate(labeled, start=1):
        if isinstance(sentence, (str, bytes)):
            raise InvalidInputError(f"Sentence {number} is not a sequence of (word, tag) pairs.")
        pairs: TaggedSentence = []
        for position, pair in enumerate(sentence, start=1):
            if not isinstance(pair, (tuple, list)) or len(pair) != 2:
                raise InvalidInputError(f"Sentence {number}, token {position} is not a pair.")
            word, tag = pair
            if not isinstance(word, str) or not isinstance(tag, str) or not word:
                raise InvalidInputError(
                    f"Sentence {number}, token {position} needs a non-empty word and a tag."
                )
            if is_unknown(Tag(tag)):
                raise InvalidInputError(
                    f"Sentence {number}, token {position} ('{word}') has no tag."
                )
            pairs.append((word, Tag(tag)))
        if not pairs:
            raise InvalidInputError(f"Sentence {number} is empty.")
        sentences.append(pairs)
    if not sentences:
        raise InvalidInputError("No training sentences supplied.")
    return sentences


__all__ = [
    "InvalidInputError",
    "Reader",
    "Tagger",
    "chain_length",
    "iter_chain",
    "tag_sentences",
    "validate_training_data",
]
