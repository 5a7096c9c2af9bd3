"""Tagger that learns the words which only ever appear with one tag."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from ..serialization import CorruptModelDataError, decode_payload, encode_payload
from ..tokenize import split_sentences, tokenize
from ..types import UNK, Sentence, Tag, TaggedSentence
from .base import Tagger, validate_training_data

ALGORITHM_ID = b"tagchain.unambiguous"
PAYLOAD_VERSION = 1


class UnambiguousTagger:
    """Tags words observed with exactly one tag during training."""

    algorithm_id = ALGORITHM_ID

    def __init__(
        self,
        observations: Mapping[str, set[Tag]] | None = None,
        *,
        backoff: Tagger | None = None,
        tokenizer: Callable[[str], Sentence] = tokenize,
        splitter: Callable[[str], list[str]] = split_sentences,
    ) -> None:
        self._observations: dict[str, set[Tag]] = {
            word: set(tags) for word, tags in (observations or {}).items()
        }
        self.backoff = backoff
        self.tokenizer = tokenizer
        self.splitter = splitter

    @property
    def observations(self) -> dict[str, set[Tag]]:
        return {word: set(tags) for word, tags in self._observations.items()}

    def lookup(self, word: str) -> Tag:
        tags = self._observations.get(word)
        if tags is not None and len(tags) == 1:
            return next(iter(tags))
        return UNK

    def classify(self, sentences: Sequence[Sentence]) -> list[TaggedSentence]:
        return [[(word, self.lookup(word)) for word in sentence] for sentence in sentences]

    def train(self, labeled: Sequence[TaggedSentence]) -> UnambiguousTagger:
        """Merge the word/tag pairs of ``labeled`` into a copy of the observations."""

        observations = self.observations
        for sentence in validate_training_data(labeled):
            for word, tag in sentence:
                observations.setdefault(word, set()).add(tag)
        return UnambiguousTagger(
            observations,
            backoff=self.backoff,
            tokenizer=self.tokenizer,
            splitter=self.splitter,
        )

    def serialize(self) -> bytes:
        return encode_payload(
            {
                "version": PAYLOAD_VERSION,
                "observations": {
                    word: sorted(str(tag) for tag in tags)
                    for word, tags in self._observations.items()
                },
            }
        )


def read_tagger(blob: bytes, backoff: Tagger | None) -> UnambiguousTagger:
    payload: Any = decode_payload(blob)
    if not isinstance(payload, Mapping) or payload.get("version") != PAYLOAD_VERSION:
        raise CorruptModelDataError("Unambiguous tagger blob has an unexpected layout.")
    raw = payload.get("observations")
    if not isinstance(raw, Mapping):
        raise CorruptModelDataError("Unambiguous tagger observations are malformed.")
    observations: dict[str, set[Tag]] = {}
    for word, tags in raw.items():
        if not isinstance(word, str) or not isinstance(tags, list):
            raise CorruptModelDataError("Unambiguous tagger observations are malformed.")
        if not all(isinstance(tag, str) for tag in tags):
            raise CorruptModelDataError("Unambiguous tagger observations are malformed.")
        observations[word] = {Tag(tag) for tag in tags}
    return UnambiguousTagger(observations, backoff=backoff)


__all__ = ["ALGORITHM_ID", "UnambiguousTagger", "read_tagger"]
