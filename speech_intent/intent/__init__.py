"""Intent classification: prompt, JSON extraction and result types."""

from speech_intent.intent.classifier import IntentClassifier, LLMIntentClassifier, build_prompt
from speech_intent.intent.extraction import extract_json
from speech_intent.intent.types import (
    AddContactEntities,
    AddTaskEntities,
    GetContactsEntities,
    GetTasksEntities,
    IntentName,
    IntentResult,
    TargetCollection,
)

__all__ = [
    "AddContactEntities",
    "AddTaskEntities",
    "GetContactsEntities",
    "GetTasksEntities",
    "IntentClassifier",
    "IntentName",
    "IntentResult",
    "LLMIntentClassifier",
    "TargetCollection",
    "build_prompt",
    "extract_json",
]
