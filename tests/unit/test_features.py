from __future__ import annotations

import pytest

from tagchain.features import build_context, extract_features, normalize


@pytest.mark.parametrize(
    "word, expected",
    [
        ("well-known", "!HYPHEN"),
        ("-LRB-", "-lrb-"),
        ("1999", "!YEAR"),
        ("42nd", "!DIGITS"),
        ("12345", "!DIGITS"),
        ("Hello", "hello"),
    ],
)
def test_normalize(word: str, expected: str) -> None:
    assert normalize(word) == expected


def test_build_context_pads_normalized_tokens() -> None:
    assert build_context(["The", "Dog"]) == ["-START-", "-START2-", "the", "dog", "-END-", "-END2-"]


def test_extract_features_describes_token_context() -> None:
    tokens = ["The", "dog", "runs"]
    context = build_context(tokens)

    features = extract_features(1, "dog", context, "DT", "-START-")

    assert features == {
        "bias",
        "i suffix dog",
        "i pref1 d",
        "i-1 tag DT",
        "i-2 tag -START-",
        "i tag+i-2 tag DT -START-",
        "i word dog",
        "i-1 tag+i word DT dog",
        "i-1 word the",
        "i-1 suffix the",
        "i-2 word -START2-",
        "i+1 word runs",
        "i+1 suffix uns",
        "i+2 word -END-",
    }


def test_extract_features_with_missing_context_yields_fewer_features() -> None:
    features = extract_features(0, "word", [], "-START-", "-START2-")

    assert "bias" in features
    assert "i suffix ord" in features
    assert not any(feature.startswith("i word") for feature in features)
    assert not any(feature.startswith("i+1") for feature in features)


def test_extract_features_is_deterministic() -> None:
    context = build_context(["a", "b"])

    first = extract_features(0, "a", context, "-START-", "-START2-")
    second = extract_features(0, "a", context, "-START-", "-START2-")

    assert first == second
    assert isinstance(first, frozenset)
