"""Turn a raw model reply into validated content fields."""
import json
import logging
import re

from errors import IncompleteResponse, InvalidFieldType, MalformedResponse

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("titles", "description", "tags", "thumbnailIdeas", "scriptOutline")
LIST_FIELDS = ("titles", "tags", "thumbnailIdeas", "scriptOutline")

_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```$")
_EXCERPT_CHARS = 200


def _excerpt(text: str) -> str:
    text = " ".join(text.split())
    return text if len(text) <= _EXCERPT_CHARS else text[:_EXCERPT_CHARS] + "…"


def normalize(raw: str, model: str) -> dict:
    """Parse the model's reply into the five content fields.

    Models wrap JSON in markdown fences or surround it with commentary despite
    being told not to, so fences are stripped first and then the outermost
    {...} region is taken.

    Raises MalformedResponse, IncompleteResponse or InvalidFieldType.
    """
    cleaned = _LEADING_FENCE.sub("", (raw or "").strip())
    cleaned = _TRAILING_FENCE.sub("", cleaned).strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end < start:
        logger.warning("No JSON object in reply from %s: %s", model, _excerpt(cleaned))
        raise MalformedResponse(model, "no JSON object found", _excerpt(cleaned))

    candidate = cleaned[start:end + 1]
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning("Unparseable JSON from %s (%s): %s", model, exc.msg, _excerpt(candidate))
        raise MalformedResponse(model, exc.msg, _excerpt(candidate)) from exc
    if not isinstance(parsed, dict):
        raise MalformedResponse(model, "top-level JSON value is not an object", _excerpt(candidate))

    missing = [key for key in REQUIRED_FIELDS if key not in parsed]
    if missing:
        logger.warning("Reply from %s missing fields: %s", model, ", ".join(missing))
        raise IncompleteResponse(model, missing)

    for key in REQUIRED_FIELDS:
        value = parsed[key]
        if key in LIST_FIELDS:
            if not isinstance(value, list) or not value:
                raise InvalidFieldType(model, key, "a non-empty list")
            if not all(isinstance(item, str) for item in value):
                raise InvalidFieldType(model, key, "a non-empty list of strings")
        elif not isinstance(value, str) or not value.strip():
            raise InvalidFieldType(model, key, "a non-blank string")

    return {key: parsed[key] for key in REQUIRED_FIELDS}
