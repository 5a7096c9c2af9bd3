"""Corpus readers feeding training and term statistics."""

from .email import archive_messages, archive_text, archive_tokens
from .tagged import parse_tagged_sentence, parse_tagged_text, read_tagged_files

__all__ = [
    "archive_messages",
    "archive_text",
    "archive_tokens",
    "parse_tagged_sentence",
    "parse_tagged_text",
    "read_tagged_files",
]
