import json

EXTRACTED_FIELDS = ("email", "phone", "name", "intent")


def empty_record() -> dict:
    return {field: None for field in EXTRACTED_FIELDS}


def normalize(raw_text) -> dict:
    """Best-effort conversion of the assistant's reply into an extraction record.

    Text that starts with '{' and parses as a JSON object is returned as
    parsed, with no schema checks. Anything else yields the all-null record.
    """
    if not isinstance(raw_text, str) or not raw_text.lstrip().startswith("{"):
        return empty_record()

    try:
        parsed = json.loads(raw_text)
    except (ValueError, RecursionError):
        return empty_record()

    if not isinstance(parsed, dict):
        return empty_record()
    return parsed
