"""Fast, strict JSON parsing with lenient object location."""

from typing import Any
import json

import msgspec
import orjson
from json_repair import repair_json


class ParseError(Exception):
    """No JSON object could be recovered from the text."""

    def __init__(self, message: str, raw: str = "", original: Exception | None = None) -> None:
        super().__init__(message)
        self.raw = raw
        self.original = original


_decoder = msgspec.json.Decoder()


def parse_object(text: str) -> dict[str, Any] | None:
    """
    Strictly parse text as a JSON object.

    Args:
        text: Candidate JSON text

    Returns:
        Parsed dictionary, or None if the text is not a valid JSON object
    """
    try:
        result = _decoder.decode(text)
    except (msgspec.DecodeError, UnicodeError):
        # Lone surrogates cannot be encoded to UTF-8
        return None
    return result if isinstance(result, dict) else None


def outer_braces(text: str) -> str | None:
    """
    Return the substring from the first '{' to the last '}'.

    Args:
        text: Text potentially containing a JSON object

    Returns:
        The brace-delimited substring, or None if no such pair exists
    """
    start = text.find("{")
    end = text.rfind("}")

    if start == -1 or end == -1 or end < start:
        return None

    return text[start:end + 1]


def extract_json(text: str, repair: bool = False) -> dict[str, Any]:
    """
    Recover a JSON object from text that may carry prose or fencing around it.

    Attempts, first success wins:
        1. strict parse of the whole trimmed text
        2. strict parse of the outer-brace substring
        3. json_repair of the outer-brace substring (only when ``repair`` is set)

    Args:
        text: Raw text
        repair: Attempt to repair an invalid brace region

    Returns:
        Parsed JSON dictionary

    Raises:
        ParseError: If no attempt yields a JSON object. The raw text is kept on
            the exception.
    """
    trimmed = text.strip()

    result = parse_object(trimmed)
    if result is not None:
        return result

    candidate = outer_braces(trimmed)
    if candidate is None:
        raise ParseError("No JSON object found in response", raw=text)

    result = parse_object(candidate)
    if result is not None:
        return result

    if repair:
        try:
            repaired = repair_json(candidate, return_objects=True)
        except Exception as e:
            raise ParseError(f"JSON repair failed: {e}", raw=text, original=e) from e
        if isinstance(repaired, dict) and repaired:
            return repaired

    raise ParseError("Response contains no valid JSON object", raw=text)


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to JSON string using fastest available library.

    Args:
        obj: Object to encode
        **kwargs: Additional arguments (indent, etc.)

    Returns:
        JSON string
    """
    indent = kwargs.get("indent", 0)

    if indent == 0:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except (TypeError, ValueError):
            # Fallback for edge cases (e.g., integers outside 64-bit range)
            pass

    return json.dumps(obj, indent=indent if indent > 0 else None, ensure_ascii=False)
