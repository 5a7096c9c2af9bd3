"""Byte-level persistence for perceptrons and backoff tagger chains.

A persisted chain is an ordered list of ``(algorithm_id, blob)`` records, from
the head of the chain down to its innermost backoff. Each blob is produced by
the owning tagger's ``serialize`` method and is opaque to everything except
the reader registered for its algorithm id.
"""

from __future__ import annotations

import logging
import pickle
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .taggers.base import Reader, Tagger
    from .taggers.registry import TaggerRegistry

LOGGER = logging.getLogger(__name__)

CHAIN_FORMAT = "tagchain-chain"
CHAIN_VERSION = 1

_DECODE_ERRORS = (
    pickle.UnpicklingError,
    EOFError,
    AttributeError,
    ImportError,
    IndexError,
    KeyError,
    TypeError,
    ValueError,
)


class CorruptModelDataError(ValueError):
    """Raised when persisted bytes cannot be decoded into the expected structure."""


def encode_payload(payload: Any) -> bytes:
    """Encode builtin containers (and Feature/Class strings) to bytes."""

    return pickle.dumps(payload, protocol=pickle.HIGHEST_PROTOCOL)


def decode_payload(data: bytes) -> Any:
    """Inverse of :func:`encode_payload`."""

    if not isinstance(data, (bytes, bytearray)):
        raise CorruptModelDataError(f"Expected bytes, got {type(data).__name__}")
    try:
        return pickle.loads(data)
    except _DECODE_ERRORS as exc:
        raise CorruptModelDataError(f"Unable to decode payload: {exc}") from exc


def chain_records(tagger: Tagger) -> list[tuple[bytes, bytes]]:
    """Linearize a tagger chain into head-to-innermost records."""

    records: list[tuple[bytes, bytes]] = []
    stage: Tagger | None = tagger
    while stage is not None:
        records.append((bytes(stage.algorithm_id), stage.serialize()))
        stage = stage.backoff
    return records


def serialize(tagger: Tagger) -> bytes:
    """Serialize a complete chain, every stage included."""

    records = chain_records(tagger)
    LOGGER.debug(
        "Serializing tagger chain: %s",
        ", ".join(algorithm_id.decode("utf-8", "replace") for algorithm_id, _ in records),
    )
    return encode_payload({"format": CHAIN_FORMAT, "version": CHAIN_VERSION, "records": records})


def read_records(data: bytes) -> list[tuple[bytes, bytes]]:
    """Decode and validate the record list of a serialized chain."""

    container = decode_payload(data)
    if not isinstance(container, dict) or container.get("format") != CHAIN_FORMAT:
        raise CorruptModelDataError("Data is not a serialized tagger chain.")
    version = container.get("version")
    if version != CHAIN_VERSION:
        raise CorruptModelDataError(f"Unsupported chain format version: {version!r}")
    records = container.get("records")
    if not isinstance(records, list) or not records:
        raise CorruptModelDataError("Serialized chain contains no taggers.")
    validated: list[tuple[bytes, bytes]] = []
    for index, record in enumerate(records):
        if (
            not isinstance(record, tuple)
            or len(record) != 2
            or not all(isinstance(part, bytes) for part in record)
        ):
            raise CorruptModelDataError(f"Chain record {index} is malformed.")
        validated.append((record[0], record[1]))
    return validated


def deserialize(data: bytes, registry: TaggerRegistry) -> Tagger:
    """Rebuild a chain innermost-first, wiring each stage to the one after it.

    Raises:
        CorruptModelDataError: the container or one of its blobs is malformed.
        UnknownTaggerAlgorithmError: a record names an unregistered algorithm.
    """

    records = read_records(data)
    readers = [registry.get(algorithm_id) for algorithm_id, _blob in records]
    tagger = _rebuild(records[-1], readers[-1], None)
    for record, reader in zip(reversed(records[:-1]), reversed(readers[:-1])):
        tagger = _rebuild(record, reader, tagger)
    return tagger


def _rebuild(record: tuple[bytes, bytes], reader: Reader, backoff: Tagger | None) -> Tagger:
    algorithm_id, blob = record
    try:
        return reader(blob, backoff)
    except CorruptModelDataError:
        raise
    except _DECODE_ERRORS as exc:
        raise CorruptModelDataError(
            f"Failed to rebuild tagger '{algorithm_id.decode('utf-8', 'replace')}': {exc}"
        ) from exc


__all__ = [
    "CHAIN_FORMAT",
    "CHAIN_VERSION",
    "CorruptModelDataError",
    "chain_records",
    "decode_payload",
    "deserialize",
    "encode_payload",
    "read_records",
    "serialize",
]
