"""Speech API – classify an utterance and act on it.

The LLM decides the intent and entities; the pipeline persists or
queries and phrases the reply.  This route only maps the reply to HTTP.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from speech_intent.api.deps import ClassifierDep, SessionDep
from speech_intent.pipeline.service import SpeechService

router = APIRouter()


class ProcessSpeechRequest(BaseModel):
    text: str | None = None


class ProcessSpeechResponse(BaseModel):
    message: str
    intent: str
    entities: dict[str, object]


class ErrorResponse(BaseModel):
    message: str
    details: str | None = None


@router.post(
    "/process-speech",
    response_model=ProcessSpeechResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def process_speech(
    body: ProcessSpeechRequest, session: SessionDep, classifier: ClassifierDep
) -> JSONResponse:
    reply = await SpeechService(session, classifier).handle(body.text)
    return JSONResponse(status_code=reply.status_code, content=reply.body())
