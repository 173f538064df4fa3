"""
Natural-language todo parsing pipeline.

raw text -> temporal anchors -> prompt -> model call -> validated ExtractedTodo

Every failure leaves this module as a TodoAIError subclass so the API layer
can turn it into an {"error": ...} payload.
"""
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

import llm_client
import temporal
from errors import InvalidInput, ParseError, TodoAIError, classify_upstream_error
from interpreter import interpret
from models import ExtractedTodo
from prompts import compose_prompt

logger = logging.getLogger(__name__)

Completion = Callable[[str], Awaitable[str]]


def validate_input(raw_input: Any) -> str:
    if not isinstance(raw_input, str) or not raw_input.strip():
        raise InvalidInput("input must be a non-empty string")
    return raw_input.strip()


async def parse_todo(
    raw_input: Any,
    reference: Optional[datetime] = None,
    complete: Optional[Completion] = None,
) -> ExtractedTodo:
    """
    Convert one natural-language sentence into a structured todo.

    reference defaults to the current time in the configured zone; pass it
    explicitly for deterministic results. complete defaults to the Anthropic
    client and is the only I/O in the pipeline.
    """
    text = validate_input(raw_input)
    if complete is None:
        complete = llm_client.complete
    if reference is None:
        reference = temporal.now()

    anchors = temporal.resolve(reference)
    prompt = compose_prompt(text, anchors, reference)

    try:
        raw_output = await complete(prompt)
    except TodoAIError:
        raise
    except Exception as e:
        error = classify_upstream_error(e)
        logger.error("Model call failed (%s): %s", type(error).__name__, e)
        raise error from e

    try:
        return interpret(raw_output, text)
    except ParseError as e:
        logger.error("Could not parse model response (%s). Raw output: %s", e, raw_output)
        raise
