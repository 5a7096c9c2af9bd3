"""Tagger implementations and chain infrastructure."""

from .base import InvalidInputError, Tagger, chain_length, iter_chain, tag_sentences
from .literal import LiteralTagger
from .perceptron import AveragedPerceptronTagger
from .registry import TaggerRegistry, UnknownTaggerAlgorithmError
from .unambiguous import UnambiguousTagger

__all__ = [
    "AveragedPerceptronTagger",
    "InvalidInputError",
    "LiteralTagger",
    "Tagger",
    "TaggerRegistry",
    "UnambiguousTagger",
    "UnknownTaggerAlgorithmError",
    "chain_length",
    "iter_chain",
    "tag_sentences",
]
