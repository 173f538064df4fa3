"""
Interpretation of raw model output into a validated ExtractedTodo.

The model is asked for a bare JSON object but may wrap it in prose or a
code fence, so the outermost brace span is located first. Once an object
is decoded, field problems are never errors: out-of-domain values fall
back to defaults.
"""
import json
import re

from errors import ParseError
from models import CATEGORIES, DEFAULT_CATEGORY, DEFAULT_PRIORITY, PRIORITIES, ExtractedTodo

# Greedy: first "{" through last "}"
JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

TITLE_FALLBACK_LENGTH = 50


def extract_json_object(raw_text: str) -> dict:
    match = JSON_OBJECT_RE.search(raw_text or "")
    if not match:
        raise ParseError("no JSON object found")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ParseError(f"malformed JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ParseError("malformed JSON: not an object")
    return parsed


def _text_or_none(value) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def normalize_fields(parsed: dict, original_input: str) -> ExtractedTodo:
    """Apply field defaults and allow-lists. Never raises."""
    title = _text_or_none(parsed.get("title")) or original_input[:TITLE_FALLBACK_LENGTH]
    priority = parsed.get("priority")
    category = parsed.get("category")
    return ExtractedTodo(
        title=title,
        description=_text_or_none(parsed.get("description")),
        due_date=_text_or_none(parsed.get("due_date")),
        priority=priority if priority in PRIORITIES else DEFAULT_PRIORITY,
        category=category if category in CATEGORIES else DEFAULT_CATEGORY,
    )


def interpret(raw_text: str, original_input: str) -> ExtractedTodo:
    return normalize_fields(extract_json_object(raw_text), original_input)


def to_model_json(todo: ExtractedTodo) -> str:
    """Serialize back into the five-key format the model is asked to produce."""
    return json.dumps(todo.model_dump(), ensure_ascii=False)
