"""tagchain module entrypoint for ``python -m tagchain``."""

from __future__ import annotations

from .cli import app


def main() -> None:
    """Run the typer application."""
    app(prog_name="tagchain")


if __name__ == "__main__":  # pragma: no cover - module execution guard
    main()
