"""Intent classification through a hosted language model.

The classifier never raises: blocked prompts, unparseable replies and
transport failures all come back as an ``unknown`` IntentResult with
``error`` set, so the pipeline can branch on data alone.
"""

from __future__ import annotations

import json
from typing import Protocol

from loguru import logger
from pydantic import ValidationError

from speech_intent.intent.extraction import extract_json
from speech_intent.intent.types import IntentResult
from speech_intent.providers.base import LLMProvider

PARSE_ERROR = "Failed to extract or parse valid JSON from model response."

PROMPT_TEMPLATE = """\
You are an assistant that helps elderly users keep track of their contacts and tasks by voice.
Analyse this user request: "{text}"

Work out what the user wants to do and pull out the relevant details.

Possible intents:
- add_contact: save a new contact.
- add_task: save a new task or reminder.
- get_contacts: look up saved contacts.
- get_tasks: look up saved tasks.
- unknown: the request is unclear or unrelated.

Entities to extract:
- add_contact: name (string), phoneNumber (string), relationship (string, optional)
- add_task: description (string), time (string, optional)
- get_contacts: name (string, optional, when asking about a specific contact)
- get_tasks: time (string, optional, e.g. "today", "morning"), description (string, optional, keywords)

Pick the data collection the intent concerns: "contacts" or "tasks".

Reply ONLY with a JSON object with these keys:
1. "intent": one of the intents above.
2. "entities": an object with the extracted entities (null for anything not mentioned).
3. "targetCollection": "contacts", "tasks", or null when the intent is "unknown".

Example request: "Please add my son John Doe to my contacts, his number is 555-111-2222"
Example reply:
{{
  "intent": "add_contact",
  "entities": {{
    "name": "John Doe",
    "phoneNumber": "555-111-2222",
    "relationship": "son"
  }},
  "targetCollection": "contacts"
}}

Now analyse the user request: "{text}"
Reply with the JSON object only, no text before or after it.
"""


def build_prompt(text: str) -> str:
    # json.dumps escapes quotes so the utterance cannot close the literal early
    quoted = json.dumps(text, ensure_ascii=False)[1:-1]
    return PROMPT_TEMPLATE.format(text=quoted)


class IntentClassifier(Protocol):
    async def classify(self, text: str) -> IntentResult: ...


class LLMIntentClassifier:
    """Classifies utterances with an ``LLMProvider``."""

    def __init__(self, provider: LLMProvider) -> None:
        self._provider = provider

    async def classify(self, text: str) -> IntentResult:
        logger.info(f"Classifying text: {text!r}")
        try:
            reply = await self._provider.generate(build_prompt(text))
        except Exception as e:
            logger.error(f"Error calling language model: {e}")
            return IntentResult.failure(f"Language model error: {e}")

        if reply.blocked:
            logger.error(f"Language model request blocked. Reason: {reply.block_reason}")
            return IntentResult.failure(f"Content blocked due to {reply.block_reason}")

        logger.debug(f"Model raw response ({reply.model}, finish={reply.finish_reason}): {reply.text}")
        parsed = extract_json(reply.text)
        if parsed is None:
            return IntentResult.failure(PARSE_ERROR)

        try:
            result = IntentResult.model_validate(parsed)
        except ValidationError as e:
            logger.error(f"Model JSON has an invalid shape: {e}")
            return IntentResult.failure(PARSE_ERROR)

        logger.info(f"Classified as {result.intent.value} (target={result.target_collection})")
        return result
