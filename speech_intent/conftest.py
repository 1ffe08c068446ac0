"""Shared test fixtures: throwaway SQLite database and a scripted classifier."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from speech_intent.intent.types import IntentResult
from speech_intent.settings import SpeechIntentSettings
from speech_intent.storage.database import Database


class StubClassifier:
    """Deterministic stand-in for the LLM classifier."""

    def __init__(self, result: IntentResult | dict[str, Any] | None = None) -> None:
        self.calls: list[str] = []
        self.result = result

    def returns(self, result: IntentResult | dict[str, Any]) -> None:
        self.result = result

    async def classify(self, text: str) -> IntentResult:
        self.calls.append(text)
        if self.result is None:
            return IntentResult(intent="unknown", entities={}, targetCollection=None)
        if isinstance(self.result, IntentResult):
            return self.result
        return IntentResult.model_validate(self.result)


@pytest.fixture
def settings(tmp_path: Path) -> SpeechIntentSettings:
    return SpeechIntentSettings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'speech.db'}",
        gemini_api_key="test-key",
        env="development",
        _env_file=None,
    )


@pytest_asyncio.fixture
async def database(settings: SpeechIntentSettings) -> AsyncIterator[Database]:
    db = Database(settings.database_url)
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database: Database) -> AsyncIterator[AsyncSession]:
    async with database.session() as s:
        yield s


@pytest.fixture
def classifier() -> StubClassifier:
    return StubClassifier()
