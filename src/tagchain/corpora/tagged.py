"""Readers for ``word/TAG`` annotated text, one sentence per line."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..types import UNK, TaggedSentence, parse_tag

LOGGER = logging.getLogger(__name__)

SEPARATOR = "/"


def parse_tagged_token(token: str) -> tuple[str, str]:
    """Split ``word/TAG`` on its last separator; untagged tokens become unknown."""

    word, separator, tag = token.rpartition(SEPARATOR)
    if not separator or not word:
        return token, UNK
    return word, parse_tag(tag)


def parse_tagged_sentence(line: str) -> TaggedSentence:
    return [parse_tagged_token(token) for token in line.split()]


def parse_tagged_text(text: str) -> list[TaggedSentence]:
    """Parse every non-blank line of ``text`` as one tagged sentence."""

    return [parse_tagged_sentence(line) for line in text.splitlines() if line.strip()]


def read_tagged_files(paths: Iterable[Path]) -> list[TaggedSentence]:
    sentences: list[TaggedSentence] = []
    for path in paths:
        resolved = Path(path).expanduser()
        parsed = parse_tagged_text(resolved.read_text(encoding="utf-8"))
        LOGGER.info("Read %d tagged sentence(s) from %s", len(parsed), resolved)
        sentences.extend(parsed)
    return sentences


__all__ = [
    "parse_tagged_sentence",
    "parse_tagged_text",
    "parse_tagged_token",
    "read_tagged_files",
]
