"""Pytest configuration for test isolation.

The CLI reads ``HLEDGER_FMT_*`` environment variables, loads a ``.env`` from
the working directory into ``os.environ`` and picks up ``.hledger-fmt.toml``
from the working directory. Any of those leaking from the developer's shell
or from an earlier test would change formatting results, so every test runs
in its own temporary working directory with those variables cleared.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

_ENV_PREFIX = "HLEDGER_FMT_"


@pytest.fixture(autouse=True)
def _isolate_env_and_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run each test in ``tmp_path`` without inherited ``HLEDGER_FMT_*`` vars.

    ``load_dotenv`` writes straight to ``os.environ``, bypassing monkeypatch,
    so variables added during the test are removed afterwards as well.
    """

    for key in list(os.environ):
        if key.startswith(_ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

    yield

    for key in list(os.environ):
        if key.startswith(_ENV_PREFIX):
            del os.environ[key]
