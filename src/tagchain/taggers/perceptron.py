"""Greedy left-to-right tagger backed by an averaged perceptron."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import numpy as np

from ..features import START, build_context, extract_features
from ..perceptron import Perceptron
from ..serialization import CorruptModelDataError, decode_payload, encode_payload
from ..tokenize import split_sentences, tokenize
from ..types import UNK, Sentence, TaggedSentence, class_to_tag, tag_to_class
from .base import Tagger, validate_training_data

LOGGER = logging.getLogger(__name__)

ALGORITHM_ID = b"tagchain.avg-perceptron"
DEFAULT_EPOCHS = 5
PAYLOAD_VERSION = 1
UNKNOWN_CLASS = tag_to_class(UNK)


class AveragedPerceptronTagger:
    """Tags each token from its context and the two previously assigned tags."""

    algorithm_id = ALGORITHM_ID

    def __init__(
        self,
        perceptron: Perceptron | None = None,
        *,
        backoff: Tagger | None = None,
        tokenizer: Callable[[str], Sentence] = tokenize,
        splitter: Callable[[str], list[str]] = split_sentences,
        epochs: int = DEFAULT_EPOCHS,
        seed: int | None = None,
    ) -> None:
        if epochs < 1:
            raise ValueError("epochs must be a positive integer")
        self._perceptron = perceptron if perceptron is not None else Perceptron()
        self.backoff = backoff
        self.tokenizer = tokenizer
        self.splitter = splitter
        self.epochs = epochs
        self.seed = seed

    @property
    def perceptron(self) -> Perceptron:
        return self._perceptron

    def classify(self, sentences: Sequence[Sentence]) -> list[TaggedSentence]:
        return [self._tag_sentence(sentence) for sentence in sentences]

    def train(self, labeled: Sequence[TaggedSentence]) -> AveragedPerceptronTagger:
        """Train a copy of the perceptron for ``epochs`` passes, then average it.

        Sentences are visited in a fresh random order on every pass, drawn from
        a generator seeded with ``seed``.
        """

        sentences = validate_training_data(labeled)
        perceptron = self._perceptron.copy()
        rng = np.random.default_rng(self.seed)
        for epoch in range(1, self.epochs + 1):
            correct = 0
            total = 0
            for position in rng.permutation(len(sentences)):
                hits, seen = _train_sentence(perceptron, sentences[int(position)])
                correct += hits
                total += seen
            LOGGER.debug(
                "Epoch %d/%d: %d/%d token(s) correct (%.2f%%)",
                epoch,
                self.epochs,
                correct,
                total,
                100.0 * correct / total,
            )
        LOGGER.info(
            "Trained averaged perceptron on %d sentence(s) for %d epoch(s); %d class(es)",
            len(sentences),
            self.epochs,
            len(perceptron.classes()),
        )
        return AveragedPerceptronTagger(
            perceptron.average(),
            backoff=self.backoff,
            tokenizer=self.tokenizer,
            splitter=self.splitter,
            epochs=self.epochs,
            seed=self.seed,
        )

    def serialize(self) -> bytes:
        return encode_payload({"version": PAYLOAD_VERSION, "perceptron": self._perceptron.to_payload()})

    def _tag_sentence(self, sentence: Sentence) -> TaggedSentence:
        context = build_context(sentence)
        prev, prev2 = START
        tagged: TaggedSentence = []
        for index, word in enumerate(sentence):
            features = extract_features(index, word, context, prev, prev2)
            tag = class_to_tag(self._perceptron.predict(features, UNKNOWN_CLASS))
            tagged.append((word, tag))
            prev2, prev = prev, tag
        return tagged


def _train_sentence(perceptron: Perceptron, sentence: TaggedSentence) -> tuple[int, int]:
    context = build_context([word for word, _tag in sentence])
    prev, prev2 = START
    correct = 0
    for index, (word, tag) in enumerate(sentence):
        features = extract_features(index, word, context, prev, prev2)
        guess = perceptron.predict(features, UNKNOWN_CLASS)
        truth = tag_to_class(tag)
        perceptron.update(features, guess, truth)
        correct += guess == truth
        prev2, prev = prev, guess
    return correct, len(sentence)


def read_tagger(blob: bytes, backoff: Tagger | None) -> AveragedPerceptronTagger:
    """Rebuild a tagger from :meth:`AveragedPerceptronTagger.serialize` output."""

    payload: Any = decode_payload(blob)
    if not isinstance(payload, Mapping) or payload.get("version") != PAYLOAD_VERSION:
        raise CorruptModelDataError("Averaged perceptron blob has an unexpected layout.")
    return AveragedPerceptronTagger(Perceptron.from_payload(payload.get("perceptron")), backoff=backoff)


__all__ = ["ALGORITHM_ID", "AveragedPerceptronTagger", "DEFAULT_EPOCHS", "read_tagger"]
