"""Document-frequency corpus; document contents are not stored."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable


class Corpus:
    """Number of documents plus, per term, the number of documents containing it.

    All corpus statistics assume documents were tokenized and normalized the
    same way before being added.
    """

    def __init__(self) -> None:
        self.length = 0
        self._term_counts: Counter[str] = Counter()

    @classmethod
    def from_documents(cls, documents: Iterable[Iterable[str]]) -> Corpus:
        corpus = cls()
        for document in documents:
            corpus.add_document(document)
        return corpus

    def add_document(self, tokens: Iterable[str]) -> Corpus:
        """Count each distinct term of ``tokens`` once and return the corpus."""

        self.length += 1
        self._term_counts.update(set(tokens))
        return self

    def term_count(self, term: str) -> int:
        return self._term_counts.get(term, 0)

    @property
    def term_counts(self) -> dict[str, int]:
        return dict(self._term_counts)

    def __len__(self) -> int:
        return self.length

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Corpus):
            return NotImplemented
        return self.length == other.length and self._term_counts == other._term_counts

    def __repr__(self) -> str:
        return f"Corpus(length={self.length}, terms={len(self._term_counts)})"


__all__ = ["Corpus"]
