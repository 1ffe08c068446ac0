from speech_intent.intent.extraction import extract_json

PAYLOAD = '{"intent": "add_task", "entities": {"description": "buy milk", "time": null}, "targetCollection": "tasks"}'


def test_fenced_block_is_returned_exactly() -> None:
    text = f"Sure! Here you go:\n```json\n{PAYLOAD}\n```\nAnything else?"

    assert extract_json(text) == {
        "intent": "add_task",
        "entities": {"description": "buy milk", "time": None},
        "targetCollection": "tasks",
    }


def test_fenced_block_wins_over_earlier_braces() -> None:
    text = 'Note {"intent": "get_contacts"} then\n```json\n' + PAYLOAD + "\n```"

    assert extract_json(text)["intent"] == "add_task"


def test_bare_object_is_found_without_fence() -> None:
    parsed = extract_json(f"The answer is {PAYLOAD} as requested.")

    assert parsed is not None
    assert parsed["entities"]["description"] == "buy milk"


def test_no_json_returns_none() -> None:
    assert extract_json("I could not work out what you meant.") is None


def test_invalid_json_returns_none() -> None:
    assert extract_json('```json\n{"intent": "add_task", entities: }\n```') is None


def test_missing_required_keys_returns_none() -> None:
    assert extract_json('{"intent": "add_task", "entities": {}}') is None
    assert extract_json('{"intent": "add_task", "targetCollection": "tasks"}') is None
    assert extract_json('{"intent": null, "entities": {}, "targetCollection": null}') is None


def test_null_target_collection_is_allowed() -> None:
    parsed = extract_json('{"intent": "unknown", "entities": {}, "targetCollection": null}')

    assert parsed == {"intent": "unknown", "entities": {}, "targetCollection": None}


def test_non_object_json_returns_none() -> None:
    assert extract_json("```json\n[1, 2, 3]\n```") is None
