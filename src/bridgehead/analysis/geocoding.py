"""
Geocoding through Gemini.

- Forward: free-text address -> coordinates (JSON output)
- Reverse: coordinates -> one-line address, with a coordinate placeholder
  when the model cannot help
- Display helpers for addresses shown on post cards
"""

import re

import structlog

from bridgehead.analysis.errors import InvalidResponseError, UpstreamError
from bridgehead.analysis.gateway import AIGateway, GenerationOptions
from bridgehead.analysis.prompts import build_geocode_prompt, build_reverse_geocode_prompt
from bridgehead.analysis.validation import parse_address_text, parse_geocode_result
from bridgehead.models import AIResult, Coordinates, Failure, Success

logger = structlog.get_logger()

GEOCODE_FAILURE_MESSAGE = "Could not find coordinates for the provided address."
PLACEHOLDER_PREFIX = "Location at"

_COORDINATES_ONLY = re.compile(r"^[\d\s,.-]+$")


def coordinate_placeholder(coordinates: Coordinates) -> str:
    """Address stand-in used when reverse geocoding fails."""
    return f"{PLACEHOLDER_PREFIX} {coordinates.latitude:.4f}, {coordinates.longitude:.4f}"


def sanitize_location(address: str) -> str:
    """
    Shorten an address for cards.

    Placeholders and bare coordinates become "Location". Long addresses
    ("plot, area, city, state, pincode") keep area, city and state.
    """
    address = (address or "").strip()

    if PLACEHOLDER_PREFIX.lower() in address.lower():
        return "Location"
    if not address or _COORDINATES_ONLY.match(address):
        return "Location"

    parts = [p.strip() for p in address.split(",") if p.strip()]
    if len(parts) >= 4:
        return ", ".join(parts[-4:-1])
    return ", ".join(parts)


class Geocoder:
    """Forward and reverse geocoding with uniform result types."""

    def __init__(self, gateway: AIGateway):
        self.gateway = gateway
        self.model_name = gateway.settings.gemini_model

    async def geocode(self, address: str) -> AIResult[Coordinates]:
        """
        Coordinates for a free-text address.

        Args:
            address: Address typed by the user

        Returns:
            Success(Coordinates) or Failure with a user-facing message
        """
        prompt = build_geocode_prompt(address)

        try:
            response = await self.gateway.generate_content(
                prompt, GenerationOptions.for_json(self.model_name), task="geocode"
            )
            coordinates = parse_geocode_result(response.text)
        except (UpstreamError, InvalidResponseError) as e:
            logger.error("Geocoding failed", address=address, error=str(e))
            return Failure(error=e, message=GEOCODE_FAILURE_MESSAGE)

        logger.info(
            "Address geocoded",
            latitude=coordinates.latitude,
            longitude=coordinates.longitude,
        )
        return Success(coordinates)

    async def reverse_geocode(self, coordinates: Coordinates) -> AIResult[str]:
        """
        Human-readable address for coordinates.

        On failure the message is the coordinate placeholder, so callers
        can show it as-is.
        """
        prompt = build_reverse_geocode_prompt(coordinates)

        try:
            response = await self.gateway.generate_content(
                prompt, GenerationOptions.for_text(self.model_name), task="reverse_geocode"
            )
            address = parse_address_text(response.text)
        except (UpstreamError, InvalidResponseError) as e:
            logger.warning(
                "Reverse geocoding failed, using placeholder",
                latitude=coordinates.latitude,
                longitude=coordinates.longitude,
                error=str(e),
            )
            return Failure(error=e, message=coordinate_placeholder(coordinates))

        return Success(address)

    async def describe(self, coordinates: Coordinates) -> str:
        """Address for coordinates, or the placeholder when lookup fails."""
        result = await self.reverse_geocode(coordinates)
        if isinstance(result, Success):
            return result.value
        return result.message

