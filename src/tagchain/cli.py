"""tagchain command-line interface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from . import __version__
from .config import Config, ConfigError, load_config
from .corpora.tagged import read_tagged_files
from .evaluation import evaluate_tagger
from .logging import configure_logging
from .pos import default_registry, tag_text
from .serialization import CorruptModelDataError
from .store import ModelStore, load_tagger, model_records, save_tagger
from .taggers.base import InvalidInputError, Tagger, chain_length
from .taggers.perceptron import AveragedPerceptronTagger
from .taggers.registry import UnknownTaggerAlgorithmError
from .taggers.unambiguous import UnambiguousTagger
from .types import TaggedSentence

app = typer.Typer(help="Backoff part-of-speech tagger utilities.")
LOGGER = logging.getLogger(__name__)

LOAD_ERRORS = (CorruptModelDataError, UnknownTaggerAlgorithmError, FileNotFoundError)


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None


@app.callback()
def _tagchain(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Path to tagchain config (env TAGCHAIN_CONFIG or ~/.config/tagchain/config.yaml).",
        ),
    ] = None,
) -> None:
    """Capture global CLI options."""

    resolved = config.expanduser() if config else None
    ctx.obj = CLIState(config_path=resolved)


@app.command()
def tag(
    ctx: typer.Context,
    model: Annotated[str, typer.Argument(help="Model file, or name of a stored model.")],
    sentence: Annotated[str, typer.Argument(help="Text to tag.")],
) -> None:
    """Tag text with a saved model and print word/TAG tokens."""

    config = _load_environment(_state(ctx))
    tagger = _load_model(config, model)
    typer.echo(tag_text(tagger, sentence))


@app.command()
def train(
    ctx: typer.Context,
    corpus: Annotated[list[Path], typer.Argument(help="word/TAG files, one sentence per line.")],
    output: Annotated[
        str,
        typer.Option("-o", "--output", help="Model file, or name of a stored model, to write."),
    ],
    base: Annotated[
        str | None,
        typer.Option("--base", help="Continue training the perceptron tagger of this model."),
    ] = None,
    epochs: Annotated[
        int | None,
        typer.Option("--epochs", min=1, help="Training passes (defaults to config)."),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", min=0, help="Shuffle seed (defaults to config)."),
    ] = None,
    unambiguous_head: Annotated[
        bool,
        typer.Option(
            "--unambiguous-head",
            help="Put a trained unambiguous-word tagger in front of the new perceptron tagger.",
        ),
    ] = False,
) -> None:
    """Train an averaged perceptron tagger and save the resulting chain.

    With ``--base``, training continues from the perceptron of an existing
    model. A base model headed by an unambiguous-word tagger keeps that head,
    retrained on the new corpus.
    """

    config = _load_environment(_state(ctx))
    if base is not None and unambiguous_head:
        raise typer.BadParameter("--unambiguous-head only applies when training from scratch.")
    labeled = _read_corpus(corpus)
    train_epochs = epochs if epochs is not None else config.training.epochs
    train_seed = seed if seed is not None else config.training.seed

    lexical_head: UnambiguousTagger | None = UnambiguousTagger() if unambiguous_head else None
    if base is not None:
        chain = _load_model(config, base)
        if isinstance(chain, UnambiguousTagger):
            lexical_head, head = chain, chain.backoff
        else:
            head = chain
        if not isinstance(head, AveragedPerceptronTagger):
            _fail(f"Base model has no averaged perceptron tagger to train: {base}")
        untrained = AveragedPerceptronTagger(
            head.perceptron,
            backoff=head.backoff,
            epochs=train_epochs,
            seed=train_seed,
        )
    else:
        untrained = AveragedPerceptronTagger(epochs=train_epochs, seed=train_seed)

    trained = _train_stage(untrained, labeled)
    if lexical_head is not None:
        # The perceptron answers every token it scores, so it has to sit behind
        # the lookup stage to leave that stage anything to tag.
        trained = _train_stage(
            UnambiguousTagger(lexical_head.observations, backoff=trained), labeled
        )
    target = save_tagger(_model_path(config, output), trained)
    typer.echo(
        f"Trained on {len(labeled)} sentence(s) for {train_epochs} epoch(s); "
        f"saved {chain_length(trained)}-stage chain to {target}"
    )


@app.command()
def evaluate(
    ctx: typer.Context,
    model: Annotated[str, typer.Argument(help="Model file, or name of a stored model.")],
    corpus: Annotated[list[Path], typer.Argument(help="word/TAG files, one sentence per line.")],
) -> None:
    """Report the accuracy of a saved model on annotated text."""

    config = _load_environment(_state(ctx))
    tagger = _load_model(config, model)
    labeled = _read_corpus(corpus)
    try:
        report = evaluate_tagger(tagger, labeled)
    except InvalidInputError as exc:
        _fail(f"Invalid evaluation data: {exc}")
    typer.echo(f"Accuracy: {report.accuracy:.4f}")
    typer.echo(f"Tokens: {report.total}")
    typer.echo(f"Correct: {report.correct}")
    typer.echo(f"Unknown: {report.unknown}")


@app.command()
def info(
    ctx: typer.Context,
    model: Annotated[str, typer.Argument(help="Model file, or name of a stored model.")],
) -> None:
    """List the stages stored in a model file."""

    config = _load_environment(_state(ctx))
    path = _model_path(config, model)
    try:
        records = model_records(path)
    except LOAD_ERRORS as exc:
        _fail(f"Failed to read model {path}: {exc}")
    registry = default_registry()
    typer.echo(f"→ tagchain {__version__}")
    typer.echo(f"Model: {path}")
    typer.echo("Stages:")
    for position, (algorithm_id, blob) in enumerate(records, start=1):
        name = algorithm_id.decode("utf-8", "replace")
        marker = "" if algorithm_id in registry else " (unregistered)"
        typer.echo(f"  {position}. {name}: {len(blob)} bytes{marker}")


@app.command()
def models(ctx: typer.Context) -> None:
    """List models saved in the configured root directory."""

    config = _load_environment(_state(ctx))
    store = ModelStore(config.root_dir)
    names = store.names()
    if not names:
        typer.echo(f"No models in {store.models_dir}")
        return
    for name in names:
        typer.echo(name)


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    return state


def _load_environment(state: CLIState) -> Config:
    try:
        config = load_config(state.config_path)
        configure_logging(config.logging, config.root_dir)
    except ConfigError as exc:
        _config_failure(exc)
    return config


def _config_failure(exc: ConfigError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


def _model_path(config: Config, value: str) -> Path:
    """Treat bare names as stored models and anything path-like as a file."""

    candidate = Path(value).expanduser()
    if candidate.suffix or candidate.parent != Path(".") or candidate.exists():
        return candidate
    return ModelStore(config.root_dir).path_for(value)


def _load_model(config: Config, value: str) -> Tagger:
    path = _model_path(config, value)
    LOGGER.info("Loading model %s", path)
    try:
        return load_tagger(path, default_registry())
    except LOAD_ERRORS as exc:
        _fail(f"Failed to load model {path}: {exc}")


def _read_corpus(paths: list[Path]) -> list[TaggedSentence]:
    try:
        return read_tagged_files(paths)
    except (OSError, UnicodeDecodeError) as exc:
        _fail(f"Failed to read corpus: {exc}")


def _train_stage(tagger: Tagger, labeled: list[TaggedSentence]) -> Tagger:
    try:
        return tagger.train(labeled)
    except InvalidInputError as exc:
        _fail(f"Invalid training data: {exc}")


__all__ = ["app"]
