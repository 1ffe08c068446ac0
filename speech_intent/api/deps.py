"""FastAPI dependencies for objects built in the application lifespan."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from speech_intent.intent.classifier import IntentClassifier
from speech_intent.storage.database import get_session


def get_classifier(request: Request) -> IntentClassifier:
    return request.app.state.classifier


SessionDep = Annotated[AsyncSession, Depends(get_session)]
ClassifierDep = Annotated[IntentClassifier, Depends(get_classifier)]
