from collections.abc import AsyncIterator
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from speech_intent.api.app import create_app
from speech_intent.conftest import StubClassifier
from speech_intent.intent.types import IntentResult
from speech_intent.pipeline.service import CLASSIFY_FAILED, TEXT_REQUIRED
from speech_intent.settings import SpeechIntentSettings
from speech_intent.storage.database import Database
from speech_intent.storage.models import Task
from speech_intent.storage.repository import TaskRepo


@pytest_asyncio.fixture
async def app(settings: SpeechIntentSettings, classifier: StubClassifier) -> AsyncIterator[FastAPI]:
    application = create_app(settings, classifier=classifier)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def _task_count(app: FastAPI) -> int:
    async with app.state.db.session() as s:
        return await s.scalar(select(func.count()).select_from(Task))


@pytest.mark.asyncio
async def test_health(client: httpx.AsyncClient) -> None:
    resp = await client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "   "}, {"text": None}, {"text": 42}, ["text"]])
async def test_invalid_text_is_400(client: httpx.AsyncClient, app: FastAPI, payload: object) -> None:
    resp = await client.post("/api/process-speech", json=payload)

    assert resp.status_code == 400
    assert resp.json()["message"] == TEXT_REQUIRED
    assert await _task_count(app) == 0


@pytest.mark.asyncio
async def test_add_task_round_trip_over_http(
    client: httpx.AsyncClient, app: FastAPI, classifier: StubClassifier
) -> None:
    classifier.returns({
        "intent": "add_task",
        "entities": {"description": "call the doctor", "time": "tomorrow"},
        "targetCollection": "tasks",
    })

    resp = await client.post("/api/process-speech", json={"text": "Remind me to call the doctor tomorrow"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["intent"] == "add_task"
    assert body["entities"] == {"description": "call the doctor", "time": "tomorrow"}
    assert "call the doctor" in body["message"]
    assert await _task_count(app) == 1

    classifier.returns({"intent": "get_tasks", "entities": {"time": "TOMORROW"}, "targetCollection": "tasks"})
    listed = await client.post("/api/process-speech", json={"text": "what do I have tomorrow"})

    assert listed.json()["message"] == "Here are your current tasks: call the doctor at tomorrow"


@pytest.mark.asyncio
async def test_blocked_content_is_500_with_details(client: httpx.AsyncClient, classifier: StubClassifier) -> None:
    classifier.returns(IntentResult.failure("Content blocked due to HATE_SPEECH"))

    resp = await client.post("/api/process-speech", json={"text": "something hateful"})

    assert resp.status_code == 500
    assert resp.json() == {"message": CLASSIFY_FAILED, "details": "Content blocked due to HATE_SPEECH"}


@pytest.mark.asyncio
async def test_missing_entities_is_400(client: httpx.AsyncClient, app: FastAPI, classifier: StubClassifier) -> None:
    classifier.returns({"intent": "add_task", "entities": {"description": None}, "targetCollection": "tasks"})

    resp = await client.post("/api/process-speech", json={"text": "remind me"})

    assert resp.status_code == 400
    assert "description" in resp.json()["message"]
    assert await _task_count(app) == 0


@pytest.mark.asyncio
async def test_database_failure_is_detailed_in_development(
    client: httpx.AsyncClient, classifier: StubClassifier
) -> None:
    classifier.returns({"intent": "get_tasks", "entities": {}, "targetCollection": "tasks"})

    with patch.object(TaskRepo, "find_pending", AsyncMock(side_effect=RuntimeError("disk on fire"))):
        resp = await client.post("/api/process-speech", json={"text": "list my tasks"})

    assert resp.status_code == 500
    assert resp.json() == {"message": "Internal Server Error: disk on fire"}


@pytest.mark.asyncio
async def test_database_failure_is_generic_in_production(
    settings: SpeechIntentSettings, classifier: StubClassifier
) -> None:
    prod = settings.model_copy(update={"env": "production"})
    application = create_app(prod, classifier=classifier)
    classifier.returns({"intent": "get_contacts", "entities": {}, "targetCollection": "contacts"})

    async with application.router.lifespan_context(application):
        transport = httpx.ASGITransport(app=application, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            with patch(
                "speech_intent.storage.repository.ContactRepo.find",
                AsyncMock(side_effect=RuntimeError("connection reset")),
            ):
                resp = await c.post("/api/process-speech", json={"text": "who are my contacts"})

    assert resp.status_code == 500
    assert resp.json() == {"message": "An internal server error occurred."}


@pytest.mark.asyncio
async def test_unreachable_database_aborts_startup(
    settings: SpeechIntentSettings, classifier: StubClassifier, tmp_path
) -> None:
    missing_dir = tmp_path / "nope" / "speech.db"
    db = Database(f"sqlite+aiosqlite:///{missing_dir}")
    application = create_app(settings, database=db, classifier=classifier)

    with pytest.raises(Exception):
        async with application.router.lifespan_context(application):
            pass


@pytest.mark.asyncio
async def test_failed_commit_is_500_and_stores_nothing(
    client: httpx.AsyncClient, app: FastAPI, classifier: StubClassifier
) -> None:
    classifier.returns({"intent": "add_task", "entities": {"description": "buy milk"}, "targetCollection": "tasks"})

    with patch.object(AsyncSession, "commit", AsyncMock(side_effect=RuntimeError("commit failed"))):
        resp = await client.post("/api/process-speech", json={"text": "remind me to buy milk"})

    assert resp.status_code == 500
    assert resp.json() == {"message": "Internal Server Error: commit failed"}
    assert await _task_count(app) == 0
