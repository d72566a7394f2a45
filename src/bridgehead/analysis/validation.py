"""
Validation of raw Gemini output.

The model sometimes wraps JSON in markdown fences even when JSON
output is forced, so every parser strips them first. Parsed values are
checked against a schema before anyone trusts them.
"""

import json
import re
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from bridgehead.analysis.errors import InvalidResponseError
from bridgehead.models import Coordinates, GroundingSource, MatchResult

logger = structlog.get_logger()

_OPENING_FENCE = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\n?```$")
_WHITESPACE = re.compile(r"\s+")

_MATCH_LIST = TypeAdapter(list[MatchResult])


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if any."""
    cleaned = (text or "").strip()
    cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def _load_json(raw_text: str, what: str) -> Any:
    cleaned = strip_code_fences(raw_text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise InvalidResponseError(
            f"Could not parse {what} response as JSON: {e.msg}", raw_text
        ) from e


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_geocode_result(raw_text: str) -> Coordinates:
    """
    Parse a geocoding answer.

    Raises:
        InvalidResponseError: If latitude or longitude is missing or not a number
    """
    data = _load_json(raw_text, "geocoding")

    if not isinstance(data, dict):
        raise InvalidResponseError("Invalid JSON structure in geocoding response.", raw_text)

    latitude = data.get("latitude")
    longitude = data.get("longitude")
    if not (_is_number(latitude) and _is_number(longitude)):
        raise InvalidResponseError("Invalid JSON structure in geocoding response.", raw_text)

    return Coordinates(latitude=latitude, longitude=longitude)


def parse_match_results(raw_text: str) -> list[MatchResult]:
    """
    Parse the matchmaker answer into validated MatchResult objects.

    Every element is checked; one malformed element rejects the whole
    response. Confidence scores outside [0, 1] are clamped.

    Raises:
        InvalidResponseError: If the payload is not a list of match objects
    """
    data = _load_json(raw_text, "matching")

    if not isinstance(data, list):
        raise InvalidResponseError("Invalid JSON structure in matching response.", raw_text)

    try:
        matches = _MATCH_LIST.validate_python(data)
    except ValidationError as e:
        raise InvalidResponseError(
            f"Invalid match object in matching response: {e.error_count()} error(s)",
            raw_text,
        ) from e

    for match in matches:
        score = match.confidence_score
        if not 0.0 <= score <= 1.0:
            clamped = min(1.0, max(0.0, score))
            logger.warning(
                "Confidence score out of range, clamped",
                demand_id=match.demand_id,
                rental_id=match.rental_id,
                original=score,
                clamped=clamped,
            )
            match.confidence_score = clamped

    return matches


def parse_address_text(raw_text: str) -> str:
    """
    Collapse the reverse-geocoding answer into a single line.

    Raises:
        InvalidResponseError: If nothing but whitespace came back
    """
    address = _WHITESPACE.sub(" ", (raw_text or "").strip())
    if not address:
        raise InvalidResponseError("Empty reverse geocoding response.", raw_text)
    return address


def extract_grounding_sources(response: Any) -> list[GroundingSource]:
    """Web and maps citations from the first candidate's grounding metadata."""
    sources: list[GroundingSource] = []

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return sources

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    for chunk in chunks:
        for kind in ("web", "maps"):
            ref = getattr(chunk, kind, None)
            if ref is not None and getattr(ref, "uri", None):
                sources.append(
                    GroundingSource(
                        kind=kind,
                        title=getattr(ref, "title", None) or ref.uri,
                        uri=ref.uri,
                    )
                )
                break

    return sources
