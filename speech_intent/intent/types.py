"""Classification result and the per-intent entity variants.

The model replies with one loose ``entities`` mapping; ``IntentResult``
keeps it as received (it is echoed back to the client) and
``typed_entities()`` narrows it to the variant that fits the intent.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from speech_intent.errors import MissingEntitiesError


class IntentName(str, Enum):
    ADD_CONTACT = "add_contact"
    ADD_TASK = "add_task"
    GET_CONTACTS = "get_contacts"
    GET_TASKS = "get_tasks"
    UNKNOWN = "unknown"


class TargetCollection(str, Enum):
    CONTACTS = "contacts"
    TASKS = "tasks"


EXPECTED_COLLECTION: dict[IntentName, TargetCollection] = {
    IntentName.ADD_CONTACT: TargetCollection.CONTACTS,
    IntentName.GET_CONTACTS: TargetCollection.CONTACTS,
    IntentName.ADD_TASK: TargetCollection.TASKS,
    IntentName.GET_TASKS: TargetCollection.TASKS,
}


def _text(raw: dict[str, Any], key: str) -> str | None:
    """Non-blank string value for *key*, else None."""
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


# ---------------------------------------------------------------------------
# entity variants
# ---------------------------------------------------------------------------


class _Entities(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AddContactEntities(_Entities):
    name: str
    phone_number: str = Field(alias="phoneNumber")
    relationship: str | None = None


class AddTaskEntities(_Entities):
    description: str
    time: str | None = None


class GetContactsEntities(_Entities):
    name: str | None = None


class GetTasksEntities(_Entities):
    description: str | None = None
    time: str | None = None


Entities = AddContactEntities | AddTaskEntities | GetContactsEntities | GetTasksEntities


# ---------------------------------------------------------------------------
# result
# ---------------------------------------------------------------------------


class IntentResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    intent: IntentName
    entities: dict[str, Any] = Field(default_factory=dict)
    target_collection: TargetCollection | None = Field(default=None, alias="targetCollection")
    error: str | None = None

    @field_validator("target_collection", mode="before")
    @classmethod
    def _known_collection(cls, value: Any) -> Any:
        if value is None or value in {c.value for c in TargetCollection}:
            return value
        logger.warning(f"Ignoring unrecognised targetCollection {value!r}")
        return None

    @classmethod
    def failure(cls, error: str) -> IntentResult:
        return cls(intent=IntentName.UNKNOWN, entities={}, target_collection=None, error=error)

    @property
    def collection_mismatch(self) -> bool:
        expected = EXPECTED_COLLECTION.get(self.intent)
        return expected is not None and self.target_collection != expected

    def typed_entities(self) -> Entities:
        """Narrow ``entities`` to the variant for ``intent``.

        Raises:
            MissingEntitiesError: an add-intent lacks a required field.
            ValueError: the intent carries no entities (``unknown``).
        """
        raw = self.entities
        if self.intent is IntentName.ADD_CONTACT:
            name, phone = _text(raw, "name"), _text(raw, "phoneNumber")
            missing = [k for k, v in (("name", name), ("phoneNumber", phone)) if v is None]
            if missing:
                raise MissingEntitiesError(self.intent.value, missing)
            return AddContactEntities(name=name, phone_number=phone, relationship=_text(raw, "relationship"))
        if self.intent is IntentName.ADD_TASK:
            description = _text(raw, "description")
            if description is None:
                raise MissingEntitiesError(self.intent.value, ["description"])
            return AddTaskEntities(description=description, time=_text(raw, "time"))
        if self.intent is IntentName.GET_CONTACTS:
            return GetContactsEntities(name=_text(raw, "name"))
        if self.intent is IntentName.GET_TASKS:
            return GetTasksEntities(description=_text(raw, "description"), time=_text(raw, "time"))
        raise ValueError(f"intent {self.intent.value!r} has no entities")

    def to_wire(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True)
        if data["error"] is None:
            del data["error"]
        return data
