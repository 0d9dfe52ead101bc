"""Response Extractor - recovers the html/css/javascript triple from raw text."""

from typing import Any

from design_prototype.core import get_logger, extract_json, ParseError, ValidationError
from .models import CodeTab, GeneratedArtifacts


logger = get_logger(__name__)

EXPECTED_KEYS = tuple(tab.value for tab in CodeTab)


def extract_artifacts(raw: str, repair: bool = False) -> GeneratedArtifacts:
    """
    Recover generated artifacts from raw generator output.

    Missing keys and empty values (null, false, 0, [], {}) become empty
    strings; partial results are accepted.

    Args:
        raw: Raw text returned by the generation client
        repair: Allow json_repair on the brace region as a last attempt

    Returns:
        Generated artifacts

    Raises:
        ParseError: If no JSON object can be located
        ValidationError: If none of html/css/javascript is present and non-empty,
            or one of them holds a non-empty value that is not a string
    """
    try:
        parsed = extract_json(raw, repair=repair)
    except ParseError as e:
        logger.error("parse_failed", error=str(e), raw_preview=raw[:500])
        raise

    return validate_artifacts(parsed, raw)


def validate_artifacts(parsed: dict[str, Any], raw: str = "") -> GeneratedArtifacts:
    """Check a parsed object carries at least one artifact and coerce it."""
    values: dict[str, str] = {}
    for key in EXPECTED_KEYS:
        value = parsed.get(key)
        if isinstance(value, str):
            values[key] = value
        elif not value:
            # null, false, 0, [] and {} all mean "nothing generated"
            values[key] = ""
        else:
            raise ValidationError(
                f"Generated '{key}' must be a string, got {type(value).__name__}", raw=raw
            )

    if not any(values.values()):
        logger.error("validation_failed", keys=sorted(parsed.keys())[:20])
        raise ValidationError(
            "Generated code is missing required fields (html, css, javascript)", raw=raw
        )

    missing = [key for key in EXPECTED_KEYS if not values[key]]
    if missing:
        logger.info("partial_result", empty=missing)

    return GeneratedArtifacts(**values)
