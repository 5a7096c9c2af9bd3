from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"


@pytest.fixture(scope="session")
def corpus_dir() -> Path:
    root = FIXTURES / "corpus"
    if not root.exists():
        pytest.skip("Tagged corpus fixtures missing")
    return root


@pytest.fixture(scope="session")
def plug_dir() -> Path:
    root = FIXTURES / "plug"
    if not root.exists():
        pytest.skip("Mail archive fixtures missing")
    return root


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically mark tests in this package as integration."""

    package_root = Path(__file__).resolve().parent
    integration_mark = pytest.mark.integration
    for item in items:
        try:
            path = Path(item.fspath).resolve()
        except OSError:
            continue
        if package_root in path.parents:
            item.add_marker(integration_mark)
