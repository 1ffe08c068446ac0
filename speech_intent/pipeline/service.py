"""SpeechService: from utterance to stored record and spoken reply.

Classification is delegated to an ``IntentClassifier``; this service
validates the result, runs the one insert or query it calls for and
phrases the answer.  The unit of work is committed before a 200 reply is
built.  Database errors are not caught here; they reach the application's
exception handler.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from speech_intent.errors import MissingEntitiesError
from speech_intent.intent.classifier import IntentClassifier
from speech_intent.intent.types import (
    AddContactEntities,
    AddTaskEntities,
    GetContactsEntities,
    GetTasksEntities,
    IntentName,
)
from speech_intent.storage.models import Contact, Task
from speech_intent.storage.repository import ContactRepo, TaskRepo

TEXT_REQUIRED = "Valid text input is required in the request body"
CLASSIFY_FAILED = "Sorry, I had trouble understanding that right now."
NOT_UNDERSTOOD = "I'm sorry, I didn't quite understand your request."
CONTACT_INCOMPLETE = (
    "I understood you want to add a contact, but I couldn't get the required name or phone number."
)
TASK_INCOMPLETE = "I understood you want to add a task, but I couldn't get the description."


@dataclass(frozen=True, slots=True)
class PipelineReply:
    status_code: int
    message: str
    intent: str | None = None
    entities: dict[str, Any] | None = None
    details: str | None = None

    def body(self) -> dict[str, Any]:
        """JSON body: success carries intent/entities, failures may carry details."""
        if self.status_code == 200:
            return {"message": self.message, "intent": self.intent, "entities": self.entities or {}}
        out: dict[str, Any] = {"message": self.message}
        if self.details:
            out["details"] = self.details
        return out


def describe_task(task: Task) -> str:
    return f"{task.description} at {task.time}" if task.time else task.description


def describe_contact(contact: Contact) -> str:
    line = f"{contact.name}, phone {contact.phone_number}"
    return f"{line} ({contact.relationship})" if contact.relationship else line


class SpeechService:
    def __init__(self, session: AsyncSession, classifier: IntentClassifier) -> None:
        self._session = session
        self._classifier = classifier
        self._contacts = ContactRepo(session)
        self._tasks = TaskRepo(session)

    async def handle(self, text: str | None) -> PipelineReply:
        if not isinstance(text, str) or not text.strip():
            return PipelineReply(400, TEXT_REQUIRED)

        result = await self._classifier.classify(text)

        if result.error:
            logger.error(f"Classification failed: {result.error}")
            return PipelineReply(500, CLASSIFY_FAILED, details=result.error)
        if result.intent is IntentName.UNKNOWN:
            logger.info("Unknown intent received")
            return PipelineReply(400, NOT_UNDERSTOOD, details="Unknown intent")

        if result.collection_mismatch:
            # intent alone drives dispatch
            logger.warning(
                f"Intent/collection mismatch: intent is {result.intent.value}, "
                f"but collection is {result.target_collection.value if result.target_collection else None}"
            )

        logger.info(f"Processing intent {result.intent.value}, entities={result.entities}")

        try:
            entities = result.typed_entities()
        except MissingEntitiesError as e:
            logger.info(f"Rejected {e.intent}: missing {', '.join(e.missing)}")
            message = CONTACT_INCOMPLETE if result.intent is IntentName.ADD_CONTACT else TASK_INCOMPLETE
            return PipelineReply(400, message, details=str(e))

        message = await self._dispatch(entities, prompt=text)
        # commit before confirming; a failed commit must reach the error handler
        await self._session.commit()
        return PipelineReply(200, message, intent=result.intent.value, entities=result.entities)

    async def _dispatch(
        self,
        entities: AddContactEntities | AddTaskEntities | GetContactsEntities | GetTasksEntities,
        prompt: str,
    ) -> str:
        if isinstance(entities, AddContactEntities):
            await self._contacts.create(
                name=entities.name,
                phone_number=entities.phone_number,
                relationship=entities.relationship,
                prompt=prompt,
            )
            return f"OK. I've added {entities.name} to your contacts."

        if isinstance(entities, AddTaskEntities):
            await self._tasks.create(description=entities.description, time=entities.time, prompt=prompt)
            return f"OK. I've added the task: {entities.description}."

        if isinstance(entities, GetTasksEntities):
            tasks = await self._tasks.find_pending(time=entities.time, keywords=entities.description)
            if not tasks:
                return "You have no pending tasks matching that description."
            return "Here are your current tasks: " + ". ".join(describe_task(t) for t in tasks)

        contacts = await self._contacts.find(name=entities.name)
        if contacts:
            return "Here are the contacts I found: " + ". ".join(describe_contact(c) for c in contacts)
        if entities.name:
            return f"I couldn't find a contact named {entities.name}."
        return "You don't have any contacts saved yet."

