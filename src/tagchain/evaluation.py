"""Accuracy reports for tagger chains against annotated sentences."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from sklearn.metrics import accuracy_score, classification_report

from .taggers.base import Tagger, tag_sentences, validate_training_data
from .types import TaggedSentence, is_unknown, strip_tags

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationReport:
    """Token-level comparison of predicted and reference tags."""

    accuracy: float
    total: int
    correct: int
    unknown: int
    per_tag: Mapping[str, Mapping[str, float]]


def evaluate_tagger(tagger: Tagger, labeled: Sequence[TaggedSentence]) -> EvaluationReport:
    """Tag the untagged ``labeled`` sentences with the whole chain and score them."""

    reference = validate_training_data(labeled)
    predicted = tag_sentences(tagger, [strip_tags(sentence) for sentence in reference])
    expected_tags = [str(tag) for sentence in reference for _word, tag in sentence]
    predicted_tags = [str(tag) for sentence in predicted for _word, tag in sentence]

    accuracy = float(accuracy_score(expected_tags, predicted_tags))
    correct = sum(1 for gold, guess in zip(expected_tags, predicted_tags) if gold == guess)
    unknown = sum(1 for guess in predicted_tags if is_unknown(guess))
    labels = sorted(set(expected_tags))
    report = classification_report(
        expected_tags,
        predicted_tags,
        labels=labels,
        output_dict=True,
        zero_division=0,
    )
    per_tag = {
        label: {
            "precision": float(report[label]["precision"]),
            "recall": float(report[label]["recall"]),
            "f1": float(report[label]["f1-score"]),
            "support": float(report[label]["support"]),
        }
        for label in labels
    }
    LOGGER.info(
        "Evaluated %d token(s): accuracy %.4f, %d unknown", len(expected_tags), accuracy, unknown
    )
    return EvaluationReport(
        accuracy=accuracy,
        total=len(expected_tags),
        correct=correct,
        unknown=unknown,
        per_tag=per_tag,
    )


__all__ = ["EvaluationReport", "evaluate_tagger"]
