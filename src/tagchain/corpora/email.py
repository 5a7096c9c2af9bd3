"""Utilities for reading mailman-style mbox archives as raw text corpora."""

from __future__ import annotations

import logging
import re
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from pathlib import Path

from ..tokenize import tokenize
from ..types import Sentence

LOGGER = logging.getLogger(__name__)

PLUG_DATA_PATH = Path("./data/corpora/PLUG/")
ARCHIVE_SUFFIX = ".txt"
ARCHIVE_ENCODING = "latin-1"
FROM_LINE_RE = re.compile(r"^From \S+.*$", re.MULTILINE)


class ArchiveError(RuntimeError):
    """Raised when an archive directory cannot be read."""


def archive_messages(archive_dir: Path = PLUG_DATA_PATH) -> list[EmailMessage]:
    """Parse every ``*.txt`` mbox file in ``archive_dir`` (sorted by name)."""

    root = Path(archive_dir).expanduser()
    if not root.is_dir():
        raise ArchiveError(f"Archive directory not found: {root}")
    messages: list[EmailMessage] = []
    for path in sorted(root.iterdir()):
        if not path.is_file() or path.suffix != ARCHIVE_SUFFIX:
            continue
        contents = path.read_bytes().decode(ARCHIVE_ENCODING)
        parsed = parse_mbox(contents)
        LOGGER.debug("Parsed %d message(s) from %s", len(parsed), path)
        messages.extend(parsed)
    return messages


def parse_mbox(contents: str) -> list[EmailMessage]:
    """Split mbox text on ``From `` separator lines and parse each message."""

    parser = BytesParser(policy=policy.default)
    starts = [match.start() for match in FROM_LINE_RE.finditer(contents)]
    messages: list[EmailMessage] = []
    for index, start in enumerate(starts):
        end = starts[index + 1] if index + 1 < len(starts) else len(contents)
        chunk = contents[start:end]
        _separator, _newline, raw = chunk.partition("\n")
        if not raw.strip():
            continue
        messages.append(parser.parsebytes(raw.encode(ARCHIVE_ENCODING)))
    return messages


def message_body(message: EmailMessage) -> str:
    """Return the plain-text body of ``message`` (empty when there is none)."""

    part = message.get_body(preferencelist=("plain",))
    if part is None:
        return ""
    payload = part.get_payload(decode=True)
    if not isinstance(payload, (bytes, bytearray)):
        return ""
    charset = part.get_content_charset() or ARCHIVE_ENCODING
    try:
        return bytes(payload).decode(charset, errors="replace")
    except LookupError:
        return bytes(payload).decode(ARCHIVE_ENCODING)


def archive_text(archive_dir: Path = PLUG_DATA_PATH) -> list[str]:
    return [message_body(message) for message in archive_messages(archive_dir)]


def archive_tokens(archive_dir: Path = PLUG_DATA_PATH) -> list[Sentence]:
    return [tokenize(body) for body in archive_text(archive_dir)]


__all__ = [
    "ArchiveError",
    "PLUG_DATA_PATH",
    "archive_messages",
    "archive_text",
    "archive_tokens",
    "message_body",
    "parse_mbox",
]
