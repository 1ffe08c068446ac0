"""Persistence: ORM models, engine lifecycle and repositories."""

from speech_intent.storage.database import Database, get_session
from speech_intent.storage.models import Base, Contact, Task
from speech_intent.storage.repository import ContactRepo, TaskRepo

__all__ = ["Base", "Contact", "ContactRepo", "Database", "Task", "TaskRepo", "get_session"]
