"""Registry mapping algorithm ids to tagger reconstruction functions."""

from __future__ import annotations

from collections import OrderedDict

from .base import Reader


class UnknownTaggerAlgorithmError(LookupError):
    """Raised when a persisted chain names an algorithm with no registered reader."""


class TaggerRegistry:
    """Lookup table used to rebuild persisted tagger chains."""

    def __init__(self, readers: dict[bytes, Reader] | None = None) -> None:
        self._readers: OrderedDict[bytes, Reader] = OrderedDict()
        for algorithm_id, reader in (readers or {}).items():
            self.register(algorithm_id, reader)

    def register(self, algorithm_id: bytes, reader: Reader) -> None:
        key = bytes(algorithm_id)
        if not key:
            raise ValueError("Algorithm id cannot be empty.")
        if key in self._readers:
            raise ValueError(f"Tagger algorithm '{_display(key)}' is already registered.")
        self._readers[key] = reader

    def get(self, algorithm_id: bytes) -> Reader:
        try:
            return self._readers[bytes(algorithm_id)]
        except KeyError as exc:
            raise UnknownTaggerAlgorithmError(
                f"Tagger algorithm '{_display(algorithm_id)}' is not registered."
            ) from exc

    def ids(self) -> list[bytes]:
        return list(self._readers)

    def __contains__(self, algorithm_id: object) -> bool:
        return isinstance(algorithm_id, (bytes, bytearray)) and bytes(algorithm_id) in self._readers

    def __len__(self) -> int:
        return len(self._readers)


def _display(algorithm_id: bytes) -> str:
    return bytes(algorithm_id).decode("utf-8", "replace")


__all__ = ["TaggerRegistry", "UnknownTaggerAlgorithmError"]
