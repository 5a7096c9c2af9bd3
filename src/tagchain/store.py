"""On-disk persistence for serialized tagger chains."""

from __future__ import annotations

import gzip
import logging
import uuid
import zlib
from collections.abc import Callable
from pathlib import Path

from .pos import default_registry
from .serialization import CorruptModelDataError, deserialize, read_records, serialize
from .taggers.base import Tagger
from .taggers.registry import TaggerRegistry

LOGGER = logging.getLogger(__name__)
MODELS_DIRNAME = "models"
MODEL_SUFFIX = ".model"


def save_tagger(path: Path, tagger: Tagger) -> Path:
    """Write the gzip-compressed chain to ``path`` atomically."""

    target = Path(path).expanduser()
    payload = gzip.compress(serialize(tagger))

    def _write(tmp_path: Path) -> None:
        with tmp_path.open("wb") as handle:
            handle.write(payload)

    _atomic_write(target, _write)
    LOGGER.info("Saved tagger chain to %s (%d bytes)", target, len(payload))
    return target


def load_tagger(path: Path, registry: TaggerRegistry | None = None) -> Tagger:
    """Load a chain written by :func:`save_tagger`.

    Raises:
        FileNotFoundError: ``path`` does not exist.
        CorruptModelDataError: the file is not a valid compressed chain.
        UnknownTaggerAlgorithmError: the chain uses an unregistered algorithm.
    """

    source = Path(path).expanduser()
    tagger = deserialize(_read_chain(source), registry if registry is not None else default_registry())
    LOGGER.debug("Loaded tagger chain from %s", source)
    return tagger


def model_records(path: Path) -> list[tuple[bytes, bytes]]:
    """Return the ``(algorithm_id, blob)`` records of a saved chain without rebuilding it."""

    return read_records(_read_chain(Path(path).expanduser()))


def _read_chain(source: Path) -> bytes:
    compressed = source.read_bytes()
    try:
        return gzip.decompress(compressed)
    except (gzip.BadGzipFile, EOFError, zlib.error) as exc:
        raise CorruptModelDataError(f"Model file {source} is not a compressed tagger chain.") from exc


class ModelStore:
    """Named tagger models kept under ``<root>/models``."""

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = Path(root_dir).expanduser()
        self._models_dir = self.root_dir / MODELS_DIRNAME

    @property
    def models_dir(self) -> Path:
        return self._models_dir

    def path_for(self, name: str) -> Path:
        normalized = name.strip()
        if not normalized or "/" in normalized or normalized.startswith("."):
            raise ValueError(f"Invalid model name: {name!r}")
        return self._models_dir / f"{normalized}{MODEL_SUFFIX}"

    def save(self, name: str, tagger: Tagger) -> Path:
        return save_tagger(self.path_for(name), tagger)

    def load(self, name: str, registry: TaggerRegistry | None = None) -> Tagger:
        return load_tagger(self.path_for(name), registry)

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def names(self) -> list[str]:
        if not self._models_dir.is_dir():
            return []
        return sorted(path.stem for path in self._models_dir.glob(f"*{MODEL_SUFFIX}"))


def _atomic_write(target: Path, writer: Callable[[Path], None]) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_name = f".{target.name}.{uuid.uuid4().hex}.tmp"
    tmp_path = target.with_name(tmp_name)
    try:
        writer(tmp_path)
        tmp_path.replace(target)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


__all__ = ["ModelStore", "load_tagger", "model_records", "save_tagger"]
