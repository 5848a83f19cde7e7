"""Pytest configuration for the generation client test suite.

- Every test starts without credential/endpoint environment variables and
  without a ``.env`` file, so routing only sees what the test sets.
- The default HTTP transport is reset after each test; tests install an
  ``httpx.MockTransport`` through :func:`set_default_transport`.
"""

from __future__ import annotations

from typing import Callable, Iterator, List

import pytest

from unigen_providers.base.http import reset_default_transport

_ENV_VARS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "UNIGEN_API_KEY",
    "OPENAI_API_KEY",
    "UNIGEN_API_BASE_URL",
    "GEMINI_TIMEOUT_MS",
    "UNIGEN_TIMEOUT_SECONDS",
    "UNIGEN_CONNECT_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear provider environment variables and point dotenv at a missing file."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    yield
    reset_default_transport()


class ChunkCollector:
    """Callable ``on_chunk`` recording chunks in arrival order."""

    def __init__(self, on_each: Callable[[str], None] | None = None) -> None:
        self.chunks: List[str] = []
        self._on_each = on_each

    def __call__(self, chunk: str) -> None:
        self.chunks.append(chunk)
        if self._on_each is not None:
            self._on_each(chunk)

    @property
    def text(self) -> str:
        return "".join(self.chunks)


@pytest.fixture()
def collector() -> ChunkCollector:
    return ChunkCollector()
