from __future__ import annotations

import pytest

from fakes import FakeStore, RecordingFallbackLogger, fixed, ranged


@pytest.fixture
def store() -> FakeStore:
    return FakeStore(
        {
            "pokemon": [ranged(0, 10, 30, 45), ranged(10.01, 100, 40, 55)],
            "japanese-pokemon": [fixed(10, 15)],
        }
    )


@pytest.fixture
def fallback_logger() -> RecordingFallbackLogger:
    return RecordingFallbackLogger()
