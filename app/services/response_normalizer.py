"""Extract JSON payloads from free-form model replies.

The model is asked for strict JSON but frequently wraps it in a code fence or
adds a sentence before or after it. Extraction is deliberately simple:

1. the interior of the first ```json fence (or bare ``` fence), else
2. the span from the first ``{`` or ``[`` (whichever comes first) to the last
   matching ``}`` or ``]`` in the text.

Prose that itself contains a brace or bracket before the real payload makes
step 2 select the wrong span. That is a known limitation of the heuristic.
"""

import json
import re
from typing import Any, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

T = TypeVar("T")

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


class ModelResponseParseError(ValueError):
    """Raised when a model reply does not contain a usable JSON payload."""


def extract_json_text(text: str) -> str:
    fenced = _FENCED_BLOCK.search(text)
    if fenced:
        return fenced.group(1)

    first_curly = text.find("{")
    first_square = text.find("[")

    start_index = end_index = -1
    if first_curly != -1 and (first_square == -1 or first_curly < first_square):
        start_index = first_curly
        end_index = text.rfind("}")
    elif first_square != -1:
        start_index = first_square
        end_index = text.rfind("]")

    if start_index != -1 and end_index != -1:
        return text[start_index : end_index + 1]
    raise ModelResponseParseError("No JSON object or array found in model reply")


def parse_model_json(text: Any) -> Any:
    if not isinstance(text, str):
        raise ModelResponseParseError("Model reply is not text")
    candidate = extract_json_text(text)
    try:
        return json.loads(candidate)
    except (json.JSONDecodeError, RecursionError) as e:
        raise ModelResponseParseError(f"Model reply is not valid JSON: {e}") from e


def normalize(text: Any, schema: Type[T]) -> T:
    """Parse ``text`` and validate it into ``schema``.

    ``schema`` may be a pydantic model or any type a ``TypeAdapter`` accepts,
    e.g. ``list[LabItem]``.
    """
    payload = parse_model_json(text)
    try:
        return TypeAdapter(schema).validate_python(payload)
    except ValidationError as e:
        raise ModelResponseParseError(
            f"Model reply does not match {getattr(schema, '__name__', schema)}: "
            f"{e.error_count()} validation error(s)"
        ) from e
