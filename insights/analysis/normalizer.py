"""
Normalization of the model's raw text output into JSON.
"""
import json
import re
from typing import Any, Dict

from ..utils import ModelOutputError, get_logger

logger = get_logger(__name__)

JSON_FENCE = re.compile(r"```json\n?")
BARE_FENCE = re.compile(r"```\n?")


def strip_code_fences(text: str) -> str:
    """
    Remove markdown code fences the model may wrap its JSON in.

    Only applies when the trimmed text starts with a fence, but then removes
    every fence marker in the text, not just the outer pair. A widget whose
    content contains a literal ``` is altered as a result.
    """
    json_text = text.strip()
    if json_text.startswith("```json"):
        json_text = BARE_FENCE.sub("", JSON_FENCE.sub("", json_text))
    elif json_text.startswith("```"):
        json_text = BARE_FENCE.sub("", json_text)
    return json_text


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def normalize_response(text: str) -> Any:
    """
    Parse the model output as JSON after fence stripping.

    The parsed value is returned as-is; its shape is not validated.

    Raises:
        ModelOutputError: if the output is not valid JSON
    """
    json_text = strip_code_fences(text or "")
    try:
        return json.loads(json_text, parse_constant=_reject_constant)
    except ValueError as e:
        raise ModelOutputError(
            "Model output is not valid JSON",
            details={"error": str(e), "preview": json_text[:200]},
        ) from e


def error_payload(message: str) -> Dict[str, Any]:
    """Body returned for any failed analysis request."""
    return {"error": message, "widgets": []}
