"""
Cleanup of JSON returned by hosted language models.

Models are asked for bare JSON but regularly wrap it in markdown fences,
add commentary around it, or emit JavaScript-style objects. These helpers
cut the payload out and patch the common defects before parsing.
"""
import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_UNQUOTED_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_]\w*)(\s*):")
_SINGLE_QUOTED_VALUE_RE = re.compile(r":\s*'([^']*)'")
_WHITESPACE_RE = re.compile(r"\s+")


class JSONRepairError(ValueError):
    """The text did not contain a parseable JSON payload."""


def strip_markdown_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "")


def extract_json_block(text: str, opener: str = "{", closer: str = "}") -> str:
    """Return the substring from the first `opener` to the last `closer`."""
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end == -1 or end < start:
        raise JSONRepairError("No valid JSON object found in response")
    return text[start:end + 1]


def repair_json_syntax(text: str) -> str:
    """
    Patch common syntax defects:
    trailing commas, unquoted keys, single-quoted values and raw newlines.
    """
    repaired = _TRAILING_COMMA_RE.sub(r"\1", text)
    repaired = _UNQUOTED_KEY_RE.sub(r'\1"\2"\3:', repaired)
    repaired = _SINGLE_QUOTED_VALUE_RE.sub(r': "\1"', repaired)
    repaired = _WHITESPACE_RE.sub(" ", repaired)
    return repaired.strip()


def clean_json_response(response: str, opener: str = "{", closer: str = "}") -> str:
    """Strip fences, cut the JSON block out and repair its syntax."""
    block = extract_json_block(strip_markdown_fences(response), opener, closer)
    return repair_json_syntax(block)


def parse_model_json(response: str, expect: type = dict) -> Any:
    """
    Parse a model response into `expect` (dict or list).

    The raw block is tried first so valid JSON is never touched by the
    repair substitutions; repaired text is the second attempt.

    Raises:
        JSONRepairError: when neither attempt yields a value of type `expect`
    """
    opener, closer = ("[", "]") if expect is list else ("{", "}")
    block = extract_json_block(strip_markdown_fences(response), opener, closer)

    for candidate in (block, repair_json_syntax(block)):
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(value, expect):
            return value

    logger.warning(f"Unrepairable JSON from model: {block[:200]}")
    raise JSONRepairError("Model response is not valid JSON")
