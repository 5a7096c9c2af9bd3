"""High-level tagging, training and persistence entry points."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from . import serialization
from .corpora.tagged import parse_tagged_text
from .evaluation import evaluate_tagger
from .taggers import literal, perceptron, unambiguous
from .taggers.base import Tagger, tag_sentences
from .taggers.perceptron import AveragedPerceptronTagger
from .taggers.registry import TaggerRegistry
from .types import Sentence, Tag, TaggedSentence


def default_registry() -> TaggerRegistry:
    """Return a registry holding the readers of every built-in tagger."""

    return TaggerRegistry(
        {
            perceptron.ALGORITHM_ID: perceptron.read_tagger,
            unambiguous.ALGORITHM_ID: unambiguous.read_tagger,
            literal.ALGORITHM_ID: literal.read_tagger,
        }
    )


def default_tagger() -> AveragedPerceptronTagger:
    return AveragedPerceptronTagger()


def tag(tagger: Tagger, text: str) -> list[TaggedSentence]:
    """Split, tokenize and tag ``text`` with the chain headed by ``tagger``."""

    sentences = [tagger.tokenizer(sentence) for sentence in tagger.splitter(text)]
    return tag_tokens(tagger, [sentence for sentence in sentences if sentence])


def tag_tokens(tagger: Tagger, sentences: Sequence[Sentence]) -> list[TaggedSentence]:
    return tag_sentences(tagger, sentences)


def format_tagged(tagged: Iterable[tuple[str, Tag]]) -> str:
    return " ".join(f"{word}/{tag}" for word, tag in tagged)


def tag_text(tagger: Tagger, text: str) -> str:
    """Tag ``text`` and render it as space separated ``word/TAG`` tokens."""

    return " ".join(format_tagged(sentence) for sentence in tag(tagger, text))


def train(tagger: Tagger, labeled: Sequence[TaggedSentence]) -> Tagger:
    """Train the head of the chain only; backoff stages are kept as they are."""

    return tagger.train(labeled)


def train_text(tagger: Tagger, text: str) -> Tagger:
    """Train on ``word/TAG`` text with one sentence per line."""

    return train(tagger, parse_tagged_text(text))


def evaluate(tagger: Tagger, labeled: Sequence[TaggedSentence]) -> float:
    """Return the token accuracy of the full chain on ``labeled``."""

    return evaluate_tagger(tagger, labeled).accuracy


def serialize(tagger: Tagger) -> bytes:
    return serialization.serialize(tagger)


def deserialize(data: bytes, registry: TaggerRegistry | None = None) -> Tagger:
    return serialization.deserialize(data, registry if registry is not None else default_registry())


__all__ = [
    "default_registry",
    "default_tagger",
    "deserialize",
    "evaluate",
    "format_tagged",
    "serialize",
    "tag",
    "tag_text",
    "tag_tokens",
    "train",
    "train_text",
]
