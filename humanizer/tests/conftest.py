"""Shared pytest configuration for humanizer tests."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

# humanizer/ is a namespace package (no __init__.py). Put the project root
# on sys.path so `from humanizer.xxx import ...` resolves without an install.
_PROJECT_ROOT = str(Path(__file__).resolve().parent.parent.parent)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from humanizer.models import HumanizerConfig
from humanizer.text import split_into_sentences


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------

class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """Settings fetcher that records calls and can be held open.

    result: the raw string (or None) to return, or an exception to raise.
    gate: when set, each fetch waits on it before answering.
    """

    def __init__(self, result: str | None | Exception = None) -> None:
        self.result = result
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None

    async def __call__(self, key: str) -> str | None:
        self.calls.append(key)
        if self.gate is not None:
            await self.gate.wait()
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def make_config(**sections: dict) -> HumanizerConfig:
    """Config from partial camelCase sections, e.g. make_config(rules={'maxBubbles': 3})."""
    return HumanizerConfig.from_dict(sections)


def count_sentences(text: str) -> int:
    return len(split_into_sentences(text))


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher()
