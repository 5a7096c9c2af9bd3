from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from tagchain.cli import app
from tagchain.store import ModelStore, load_tagger, save_tagger
from tagchain.taggers import AveragedPerceptronTagger, LiteralTagger, UnambiguousTagger
from tagchain.types import UNK

runner = CliRunner()

TRAINING_TEXT = """\
the/DT dog/NN runs/VBZ ./.
a/DT cat/NN sleeps/VBZ ./.
the/DT cat/NN runs/VBZ ./.
a/DT dog/NN sleeps/VBZ ./.
"""


class ForeignTagger:
    """Minimal chain stage whose algorithm id no reader knows about."""

    algorithm_id = b"thirdparty.tagger"
    backoff = None

    def serialize(self) -> bytes:
        return b"opaque"


def _write_config(tmp_path: Path, root_dir: Path | None = None) -> Path:
    root = root_dir or (tmp_path / "state")
    config = tmp_path / "config.yaml"
    config.write_text(
        "\n".join(
            [
                f"root_dir: {root}",
                "training:",
                "  epochs: 10",
                "  seed: 7",
                "logging:",
                "  level: info",
                "",
            ]
        ),
        encoding="utf-8",
    )
    return config


def _write_corpus(tmp_path: Path) -> Path:
    corpus = tmp_path / "train.txt"
    corpus.write_text(TRAINING_TEXT, encoding="utf-8")
    return corpus


def test_train_then_tag_with_stored_model(tmp_path):
    config_path = _write_config(tmp_path)
    corpus = _write_corpus(tmp_path)

    result = runner.invoke(app, ["-c", str(config_path), "train", str(corpus), "-o", "news"])

    assert result.exit_code == 0
    assert "Trained on 4 sentence(s) for 10 epoch(s)" in result.stdout
    assert ModelStore(tmp_path / "state").names() == ["news"]

    result = runner.invoke(app, ["-c", str(config_path), "tag", "news", "the dog runs."])

    assert result.exit_code == 0
    assert "the/DT dog/NN runs/VBZ ./." in result.stdout


def test_train_with_unambiguous_head_delegates_unseen_words(tmp_path):
    config_path = _write_config(tmp_path)
    corpus = _write_corpus(tmp_path)
    output = tmp_path / "chain.model"

    result = runner.invoke(
        app,
        ["-c", str(config_path), "train", str(corpus), "-o", str(output), "--unambiguous-head"],
    )

    assert result.exit_code == 0
    assert "2-stage chain" in result.stdout
    tagger = load_tagger(output)
    assert isinstance(tagger, UnambiguousTagger)
    assert isinstance(tagger.backoff, AveragedPerceptronTagger)
    assert tagger.classify([["the", "zebra"]]) == [[("the", "DT"), ("zebra", UNK)]]

    result = runner.invoke(app, ["-c", str(config_path), "tag", str(output), "the zebra runs."])

    assert result.exit_code == 0
    assert "the/DT" in result.stdout
    assert "zebra/" in result.stdout
    assert "zebra/Unk" not in result.stdout


def test_train_continues_base_model_behind_its_unambiguous_head(tmp_path):
    config_path = _write_config(tmp_path)
    corpus = _write_corpus(tmp_path)
    runner.invoke(
        app,
        ["-c", str(config_path), "train", str(corpus), "-o", "base", "--epochs", "1", "--unambiguous-head"],
    )

    result = runner.invoke(
        app,
        ["-c", str(config_path), "train", str(corpus), "-o", "more", "--base", "base", "--epochs", "1"],
    )

    assert result.exit_code == 0
    chain = ModelStore(tmp_path / "state").load("more")
    assert isinstance(chain, UnambiguousTagger)
    assert chain.lookup("dog") == "NN"
    assert chain.backoff.perceptron.instances == 2 * 16


def test_train_continues_from_base_model(tmp_path):
    config_path = _write_config(tmp_path)
    corpus = _write_corpus(tmp_path)
    runner.invoke(app, ["-c", str(config_path), "train", str(corpus), "-o", "base", "--epochs", "1"])

    result = runner.invoke(
        app,
        ["-c", str(config_path), "train", str(corpus), "-o", "more", "--base", "base", "--epochs", "1"],
    )

    assert result.exit_code == 0
    store = ModelStore(tmp_path / "state")
    assert store.load("more").perceptron.instances == 2 * 16


def test_train_rejects_base_with_unambiguous_head(tmp_path):
    config_path = _write_config(tmp_path)
    corpus = _write_corpus(tmp_path)

    result = runner.invoke(
        app,
        [
            "-c",
            str(config_path),
            "train",
            str(corpus),
            "-o",
            "news",
            "--base",
            "old",
            "--unambiguous-head",
        ],
    )

    assert result.exit_code == 2


def test_train_rejects_non_perceptron_base(tmp_path):
    config_path = _write_config(tmp_path)
    corpus = _write_corpus(tmp_path)
    base = save_tagger(tmp_path / "literal.model", LiteralTagger({"the": "DT"}))

    result = runner.invoke(
        app, ["-c", str(config_path), "train", str(corpus), "-o", "news", "--base", str(base)]
    )

    assert result.exit_code == 1


def test_train_reports_empty_corpus(tmp_path):
    config_path = _write_config(tmp_path)
    corpus = tmp_path / "empty.txt"
    corpus.write_text("\n", encoding="utf-8")

    result = runner.invoke(app, ["-c", str(config_path), "train", str(corpus), "-o", "news"])

    assert result.exit_code == 1


def test_evaluate_prints_accuracy(tmp_path):
    config_path = _write_config(tmp_path)
    model = save_tagger(tmp_path / "literal.model", LiteralTagger({"the": "DT", "a": "DT"}))
    corpus = tmp_path / "gold.txt"
    corpus.write_text("the/DT dog/NN\na/DT cat/NN\n", encoding="utf-8")

    result = runner.invoke(app, ["-c", str(config_path), "evaluate", str(model), str(corpus)])

    assert result.exit_code == 0
    assert "Accuracy: 0.5000" in result.stdout
    assert "Tokens: 4" in result.stdout
    assert "Unknown: 2" in result.stdout


def test_info_lists_stages(tmp_path):
    config_path = _write_config(tmp_path)
    chain = LiteralTagger({"the": "DT"}, backoff=UnambiguousTagger())
    model = save_tagger(tmp_path / "chain.model", chain)

    result = runner.invoke(app, ["-c", str(config_path), "info", str(model)])

    assert result.exit_code == 0
    assert "Stages:" in result.stdout
    assert "1. tagchain.literal:" in result.stdout
    assert "2. tagchain.unambiguous:" in result.stdout
    assert "unregistered" not in result.stdout


def test_info_flags_unregistered_stages(tmp_path):
    config_path = _write_config(tmp_path)
    model = save_tagger(tmp_path / "foreign.model", ForeignTagger())

    result = runner.invoke(app, ["-c", str(config_path), "info", str(model)])

    assert result.exit_code == 0
    assert "thirdparty.tagger: 6 bytes (unregistered)" in result.stdout

    result = runner.invoke(app, ["-c", str(config_path), "tag", str(model), "hello"])

    assert result.exit_code == 1


def test_tag_missing_model_fails(tmp_path):
    config_path = _write_config(tmp_path)

    result = runner.invoke(app, ["-c", str(config_path), "tag", "missing", "hello"])

    assert result.exit_code == 1


def test_models_lists_store(tmp_path):
    config_path = _write_config(tmp_path)

    result = runner.invoke(app, ["-c", str(config_path), "models"])

    assert result.exit_code == 0
    assert "No models in" in result.stdout

    ModelStore(tmp_path / "state").save("legal", LiteralTagger({"tort": "NN"}))
    result = runner.invoke(app, ["-c", str(config_path), "models"])

    assert "legal" in result.stdout.splitlines()


def test_invalid_config_exits_with_code_2(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("training:\n  epochs: 0\n", encoding="utf-8")

    result = runner.invoke(app, ["-c", str(config_path), "models"])

    assert result.exit_code == 2
