"""Lexicon lookup tagger, typically the head of a chain for domain vocabulary."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from ..serialization import CorruptModelDataError, decode_payload, encode_payload
from ..tokenize import split_sentences, tokenize
from ..types import UNK, Sentence, Tag, TaggedSentence
from .base import Tagger, validate_training_data

ALGORITHM_ID = b"tagchain.literal"
PAYLOAD_VERSION = 1


class LiteralTagger:
    """Assigns fixed tags to known terms and ``UNK`` to everything else.

    Multi-word terms such as ``"New York"`` are kept together by the default
    tokenizer so that they can be looked up as a single token.
    """

    algorithm_id = ALGORITHM_ID

    def __init__(
        self,
        lexicon: Mapping[str, str],
        *,
        case_sensitive: bool = False,
        backoff: Tagger | None = None,
        tokenizer: Callable[[str], Sentence] | None = None,
        splitter: Callable[[str], list[str]] = split_sentences,
    ) -> None:
        self._lexicon: dict[str, Tag] = {}
        for term, tag in lexicon.items():
            normalized = " ".join(str(term).split())
            if not normalized:
                raise ValueError("lexicon terms cannot be empty")
            self._lexicon[normalized] = Tag(str(tag))
        self.case_sensitive = case_sensitive
        self._lookup = {self._key(term): tag for term, tag in self._lexicon.items()}
        self._phrase_re = _phrase_pattern(self._lexicon, case_sensitive)
        self.backoff = backoff
        self._custom_tokenizer = tokenizer
        self.tokenizer = tokenizer if tokenizer is not None else self.protected_tokenize
        self.splitter = splitter

    @property
    def lexicon(self) -> dict[str, Tag]:
        return dict(self._lexicon)

    def classify(self, sentences: Sequence[Sentence]) -> list[TaggedSentence]:
        return [
            [(word, self._lookup.get(self._key(word), UNK)) for word in sentence]
            for sentence in sentences
        ]

    def train(self, labeled: Sequence[TaggedSentence]) -> LiteralTagger:
        validate_training_data(labeled)
        return LiteralTagger(
            self._lexicon,
            case_sensitive=self.case_sensitive,
            backoff=self.backoff,
            tokenizer=self._custom_tokenizer,
            splitter=self.splitter,
        )

    def serialize(self) -> bytes:
        return encode_payload(
            {
                "version": PAYLOAD_VERSION,
                "lexicon": {term: str(tag) for term, tag in self._lexicon.items()},
                "case_sensitive": self.case_sensitive,
            }
        )

    def protected_tokenize(self, text: str) -> Sentence:
        """Tokenize ``text`` while keeping multi-word lexicon terms intact."""

        if self._phrase_re is None:
            return tokenize(text)
        tokens: Sentence = []
        cursor = 0
        for match in self._phrase_re.finditer(text):
            tokens.extend(tokenize(text[cursor : match.start()]))
            tokens.append(" ".join(match.group(0).split()))
            cursor = match.end()
        tokens.extend(tokenize(text[cursor:]))
        return tokens

    def _key(self, word: str) -> str:
        return word if self.case_sensitive else word.casefold()


def _phrase_pattern(lexicon: Mapping[str, Tag], case_sensitive: bool) -> re.Pattern[str] | None:
    phrases = sorted((term for term in lexicon if " " in term), key=len, reverse=True)
    if not phrases:
        return None
    alternatives = "|".join(r"\s+".join(map(re.escape, phrase.split(" "))) for phrase in phrases)
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)", flags)


def read_tagger(blob: bytes, backoff: Tagger | None) -> LiteralTagger:
    payload: Any = decode_payload(blob)
    if not isinstance(payload, Mapping) or payload.get("version") != PAYLOAD_VERSION:
        raise CorruptModelDataError("Literal tagger blob has an unexpected layout.")
    lexicon = payload.get("lexicon")
    case_sensitive = payload.get("case_sensitive")
    if (
        not isinstance(lexicon, Mapping)
        or not isinstance(case_sensitive, bool)
        or not all(isinstance(k, str) and isinstance(v, str) for k, v in lexicon.items())
    ):
        raise CorruptModelDataError("Literal tagger lexicon is malformed.")
    try:
        return LiteralTagger(lexicon, case_sensitive=case_sensitive, backoff=backoff)
    except ValueError as exc:
        raise CorruptModelDataError(str(exc)) from exc


__all__ = ["ALGORITHM_ID", "LiteralTagger", "read_tagger"]
