from __future__ import annotations

from pathlib import Path

from tagchain import pos
from tagchain.corpora.email import archive_tokens
from tagchain.corpora.tagged import read_tagged_files
from tagchain.corpus import Corpus
from tagchain.evaluation import evaluate_tagger
from tagchain.store import ModelStore
from tagchain.taggers import (
    AveragedPerceptronTagger,
    LiteralTagger,
    UnambiguousTagger,
    chain_length,
)

LEXICON = {"Linux": "NNP", "Debian": "NNP", "Red Hat": "NNP"}


def _build_chain(corpus_dir: Path):
    labeled = read_tagged_files([corpus_dir / "train.txt"])
    perceptron = AveragedPerceptronTagger(epochs=8, seed=3).train(labeled)
    unambiguous = UnambiguousTagger(backoff=perceptron).train(labeled)
    return LiteralTagger(LEXICON, backoff=unambiguous)


def test_chain_survives_store_roundtrip(tmp_path: Path, corpus_dir: Path) -> None:
    chain = _build_chain(corpus_dir)
    store = ModelStore(tmp_path / "state")

    store.save("tech", chain)
    restored = store.load("tech")

    assert chain_length(restored) == 3
    text = "They run Red Hat. The kernel boots quickly."
    assert pos.tag(restored, text) == pos.tag(chain, text)
    assert ("Red Hat", "NNP") in pos.tag(restored, text)[0]


def test_trained_chain_tags_held_out_sentences(corpus_dir: Path) -> None:
    chain = _build_chain(corpus_dir)
    gold = read_tagged_files([corpus_dir / "gold.txt"])

    report = evaluate_tagger(chain, gold)

    assert report.total == 16
    assert report.unknown == 0
    assert report.accuracy >= 0.8


def test_mail_archive_feeds_document_frequencies(plug_dir: Path) -> None:
    corpus = Corpus.from_documents(archive_tokens(plug_dir))

    assert len(corpus) == 2
    assert corpus.term_count("kernel") == 2
    assert corpus.term_count("driver") == 1
    assert corpus.term_count("panics") == 1


class RecordingStage:
    """Wraps a chain stage and remembers every sentence handed to it."""

    def __init__(self, stage) -> None:
        self.stage = stage
        self.algorithm_id = stage.algorithm_id
        self.backoff = stage.backoff
        self.tokenizer = stage.tokenizer
        self.splitter = stage.splitter
        self.seen: list[list[str]] = []

    def classify(self, sentences):
        self.seen.extend(list(sentence) for sentence in sentences)
        return self.stage.classify(sentences)

    def train(self, labeled):
        return self.stage.train(labeled)

    def serialize(self) -> bytes:
        return self.stage.serialize()


def test_statistical_stage_receives_words_the_lookups_miss(corpus_dir: Path) -> None:
    chain = _build_chain(corpus_dir)
    unambiguous = chain.backoff
    recorder = RecordingStage(unambiguous.backoff)
    rewired = LiteralTagger(
        LEXICON, backoff=UnambiguousTagger(unambiguous.observations, backoff=recorder)
    )

    tagged = pos.tag_tokens(rewired, [["qwxz", "the", "flurble", "boots", "Linux"]])

    assert recorder.seen == [["qwxz", "flurble"]]
    assert all(tag != "Unk" for _word, tag in tagged[0])
    assert tagged[0][1] == ("the", "DT")
    assert tagged[0][4] == ("Linux", "NNP")
