"""Default tokenizer and sentence splitters supplied to taggers."""

from __future__ import annotations

import re

from .types import Sentence

LEADING_PUNCTUATION = "([{\"'`"
TRAILING_PUNCTUATION = ".,;:!?)]}\"'`"

URL_RE = re.compile(r"^(?:[a-z][a-z0-9+.-]*://|www\.)\S+$", re.IGNORECASE)
NUMBER_RE = re.compile(r"^[+-]?\d+(?:[.,:/]\d+)*%?$")
CLITIC_RE = re.compile(r"^(?P<stem>.+?)(?P<clitic>n't|'s|'re|'ve|'ll|'d|'m)$", re.IGNORECASE)
EDGE_RE = re.compile(
    rf"^(?P<lead>[{re.escape(LEADING_PUNCTUATION)}]*)"
    rf"(?P<core>.*?)"
    rf"(?P<trail>[{re.escape(TRAILING_PUNCTUATION)}]*)$",
    re.DOTALL,
)
RUN_RE = re.compile(r"(.)\1*", re.DOTALL)
PARAGRAPH_RE = re.compile(r"\n\s*\n")
SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+|(?<=[.!?][\"')\]])\s+")


def tokenize(text: str) -> Sentence:
    """Split ``text`` into word and punctuation tokens.

    Punctuation is peeled from the edges of whitespace separated chunks (runs
    such as ``...`` stay together), URLs and numbers are kept whole and
    English clitics (``n't``, ``'s``, ``'ll``...) become their own tokens.
    """

    tokens: Sentence = []
    for chunk in text.split():
        tokens.extend(_split_chunk(chunk))
    return tokens


def whitespace_tokenize(text: str) -> Sentence:
    return text.split()


def split_sentences(text: str) -> list[str]:
    """Split on terminal punctuation followed by whitespace and on blank lines."""

    sentences: list[str] = []
    for paragraph in PARAGRAPH_RE.split(text):
        for piece in SENTENCE_BOUNDARY_RE.split(paragraph.strip()):
            normalized = " ".join(piece.split())
            if normalized:
                sentences.append(normalized)
    return sentences


def split_lines(text: str) -> list[str]:
    """Treat every non-blank line as one sentence."""

    return [line.strip() for line in text.splitlines() if line.strip()]


def _split_chunk(chunk: str) -> list[str]:
    if URL_RE.match(chunk):
        return [chunk]
    match = EDGE_RE.match(chunk)
    if match is None:  # pragma: no cover - EDGE_RE matches any string
        return [chunk]
    lead = _runs(match.group("lead"))
    core = match.group("core")
    trail = _runs(match.group("trail"))
    if not core:
        return lead + trail
    return lead + _split_core(core) + trail


def _split_core(core: str) -> list[str]:
    if URL_RE.match(core) or NUMBER_RE.match(core):
        return [core]
    clitic = CLITIC_RE.match(core)
    if clitic:
        return [clitic.group("stem"), clitic.group("clitic")]
    return [core]


def _runs(punctuation: str) -> list[str]:
    return [run.group(0) for run in RUN_RE.finditer(punctuation)]


__all__ = ["split_lines", "split_sentences", "tokenize", "whitespace_tokenize"]
