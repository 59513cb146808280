# app/agent/json_extract.py
#
# Pull a JSON object out of raw model text.
# Models sometimes wrap JSON in code fences or add commentary around it
# despite being told not to.

import json
import logging
import re
from typing import Any, Dict, NamedTuple, Optional

from app.agent.errors import GenerationParseError, ValidationIssue

logger = logging.getLogger(__name__)

STRICT = "strict"
BRACE_SLICE = "brace_slice"

_JSON_FENCE = re.compile(r"```json\s*", re.IGNORECASE)


class JsonExtraction(NamedTuple):
    data: Dict[str, Any]
    strategy: str


def strip_json_fences(text: str) -> str:
    """
    Removes ```json ... ``` fences (and trims)
    """
    return _JSON_FENCE.sub("", text).replace("```", "").strip()


def extract_json_object(text: str) -> Optional[str]:
    """
    First '{' to last '}' inclusive, or None if there is no such span
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start:end + 1]


def _loads_object(text: str) -> Dict[str, Any]:
    value = json.loads(text)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


def parse_model_json(raw: str) -> JsonExtraction:
    """
    Two-stage parse of model output.

    1. strict: the fence-stripped text must itself be a JSON object
    2. brace_slice: only if (1) fails, parse the first-brace/last-brace span

    Raises GenerationParseError when neither stage yields an object.
    """
    cleaned = strip_json_fences(raw)

    try:
        return JsonExtraction(_loads_object(cleaned), STRICT)
    except ValueError as strict_err:
        # json.JSONDecodeError is a ValueError
        logger.warning("Strict JSON parse failed (%s), trying brace slice", strict_err)

    block = extract_json_object(cleaned)
    if block is None:
        raise GenerationParseError(
            raw=raw,
            issues=[ValidationIssue("(root)", "No JSON object found in model output")],
        )

    try:
        return JsonExtraction(_loads_object(block), BRACE_SLICE)
    except ValueError as err:
        raise GenerationParseError(
            raw=raw,
            issues=[ValidationIssue("(root)", f"Invalid JSON: {err}")],
        ) from err
