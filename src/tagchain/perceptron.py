"""Multi-class averaged perceptron with lazy time-weighted averaging."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .serialization import CorruptModelDataError
from .types import Class, Feature

LOGGER = logging.getLogger(__name__)

PAYLOAD_VERSION = 1

WeightKey = tuple[Feature, Class]


@dataclass
class Perceptron:
    """Learned weight state of an averaged perceptron.

    ``weights`` holds the (feature, class) weights grouped by feature so that
    scoring only visits the classes attached to the features being scored.
    ``totals`` and ``tstamps`` are keyed by the flat ``(feature, class)`` pair
    and are kept in step with every weight change. ``instances`` is the
    training clock.
    """

    weights: dict[Feature, dict[Class, float]] = field(default_factory=dict)
    totals: dict[WeightKey, float] = field(default_factory=dict)
    tstamps: dict[WeightKey, int] = field(default_factory=dict)
    instances: int = 0

    def scores(self, features: Iterable[Feature]) -> dict[Class, float]:
        """Return summed weights for every class with a non-zero weight on ``features``."""

        totals: dict[Class, float] = {}
        for feature in sorted(set(features)):
            class_weights = self.weights.get(feature)
            if not class_weights:
                continue
            for label in sorted(class_weights):
                weight = class_weights[label]
                if weight == 0.0:
                    continue
                totals[label] = totals.get(label, 0.0) + weight
        return totals

    def predict(self, features: Iterable[Feature], default: Class) -> Class:
        """Return the best scoring class, or ``default`` when nothing scores.

        Ties are broken in favour of the class that compares greatest.
        """

        scores = self.scores(features)
        if not scores:
            return default
        best_label, _best_score = max(scores.items(), key=lambda item: (item[1], item[0]))
        return best_label

    def update(self, features: Iterable[Feature], predicted: Class, truth: Class) -> Perceptron:
        """Apply one training step and advance the clock by one."""

        if predicted != truth:
            for feature in sorted(set(features)):
                self._bump(feature, truth, 1.0)
                self._bump(feature, predicted, -1.0)
        self.instances += 1
        return self

    def _bump(self, feature: Feature, label: Class, delta: float) -> None:
        key = (feature, label)
        class_weights = self.weights.setdefault(feature, {})
        weight = class_weights.get(label, 0.0)
        elapsed = self.instances - self.tstamps.get(key, 0)
        self.totals[key] = self.totals.get(key, 0.0) + elapsed * weight
        self.tstamps[key] = self.instances
        class_weights[label] = weight + delta

    def averaged_weights(self) -> dict[WeightKey, float]:
        """Finalize every running total at the current clock and divide by it."""

        averaged: dict[WeightKey, float] = {}
        for feature, class_weights in self.weights.items():
            for label, weight in class_weights.items():
                key = (feature, label)
                if self.instances == 0:
                    averaged[key] = weight
                    continue
                elapsed = self.instances - self.tstamps.get(key, 0)
                total = self.totals.get(key, 0.0) + elapsed * weight
                averaged[key] = total / self.instances
        return averaged

    def average(self) -> Perceptron:
        """Return an inference snapshot whose weights are the averaged weights.

        The running totals and timestamps are carried over unchanged. Training
        that continues from the snapshot therefore accrues the averaged weight
        for the time since each weight was last touched, including time that
        passed before the snapshot was taken.
        """

        weights: dict[Feature, dict[Class, float]] = {}
        for (feature, label), weight in self.averaged_weights().items():
            weights.setdefault(feature, {})[label] = weight
        LOGGER.debug(
            "Averaged %d feature(s) over %d training instance(s)",
            len(weights),
            self.instances,
        )
        return Perceptron(
            weights=weights,
            totals=dict(self.totals),
            tstamps=dict(self.tstamps),
            instances=self.instances,
        )

    def copy(self) -> Perceptron:
        return Perceptron(
            weights={feature: dict(class_weights) for feature, class_weights in self.weights.items()},
            totals=dict(self.totals),
            tstamps=dict(self.tstamps),
            instances=self.instances,
        )

    def classes(self) -> list[Class]:
        labels: set[Class] = set()
        for class_weights in self.weights.values():
            labels.update(class_weights)
        return sorted(labels)

    def to_payload(self) -> dict[str, Any]:
        return {
            "version": PAYLOAD_VERSION,
            "weights": {feature: dict(class_weights) for feature, class_weights in self.weights.items()},
            "totals": dict(self.totals),
            "tstamps": dict(self.tstamps),
            "instances": self.instances,
        }

    @classmethod
    def from_payload(cls, payload: Any) -> Perceptron:
        if not isinstance(payload, Mapping):
            raise CorruptModelDataError("Perceptron payload must be a mapping.")
        if payload.get("version") != PAYLOAD_VERSION:
            raise CorruptModelDataError(
                f"Unsupported perceptron payload version: {payload.get('version')!r}"
            )
        instances = payload.get("instances")
        if not isinstance(instances, int) or isinstance(instances, bool) or instances < 0:
            raise CorruptModelDataError("Perceptron instance counter is invalid.")
        return cls(
            weights=_parse_weights(payload.get("weights")),
            totals=_parse_keyed(payload.get("totals"), (int, float), float, "totals"),
            tstamps=_parse_keyed(payload.get("tstamps"), (int,), int, "tstamps"),
            instances=instances,
        )


def _parse_weights(raw: Any) -> dict[Feature, dict[Class, float]]:
    if not isinstance(raw, Mapping):
        raise CorruptModelDataError("Perceptron weights must be a mapping.")
    weights: dict[Feature, dict[Class, float]] = {}
    for feature, class_weights in raw.items():
        if not isinstance(feature, str) or not isinstance(class_weights, Mapping):
            raise CorruptModelDataError("Perceptron weights are malformed.")
        parsed: dict[Class, float] = {}
        for label, weight in class_weights.items():
            if not isinstance(label, str) or not _is_number(weight, (int, float)):
                raise CorruptModelDataError("Perceptron weights are malformed.")
            parsed[Class(label)] = float(weight)
        weights[Feature(feature)] = parsed
    return weights


def _parse_keyed(raw: Any, accepted: tuple[type, ...], convert: type, name: str) -> dict:
    if not isinstance(raw, Mapping):
        raise CorruptModelDataError(f"Perceptron {name} must be a mapping.")
    parsed = {}
    for key, value in raw.items():
        if (
            not isinstance(key, tuple)
            or len(key) != 2
            or not all(isinstance(part, str) for part in key)
            or not _is_number(value, accepted)
        ):
            raise CorruptModelDataError(f"Perceptron {name} are malformed.")
        parsed[(Feature(key[0]), Class(key[1]))] = convert(value)
    return parsed


def _is_number(value: Any, accepted: tuple[type, ...]) -> bool:
    return isinstance(value, accepted) and not isinstance(value, bool)


__all__ = ["PAYLOAD_VERSION", "Perceptron", "WeightKey"]
