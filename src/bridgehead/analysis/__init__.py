"""
AI analysis module.

Prompts, the Gemini gateway, response validation, and the
geocoding / business idea / assistant chat operations built on them.
"""

from bridgehead.analysis.chat import AssistantChat, ChatMessage
from bridgehead.analysis.errors import (
    BridgeheadError,
    ConfigurationError,
    InvalidResponseError,
    PostsUnavailableError,
    UpstreamError,
)
from bridgehead.analysis.gateway import AIGateway, GenerationOptions, RawResponse
from bridgehead.analysis.geocoding import Geocoder, coordinate_placeholder, sanitize_location
from bridgehead.analysis.ideas import BusinessIdeaGenerator, format_sources
from bridgehead.analysis.tracker import RequestTracker

__all__ = [
    # Gateway
    "AIGateway",
    "GenerationOptions",
    "RawResponse",
    # Operations
    "Geocoder",
    "BusinessIdeaGenerator",
    "AssistantChat",
    "ChatMessage",
    "RequestTracker",
    # Helpers
    "coordinate_placeholder",
    "sanitize_location",
    "format_sources",
    # Errors
    "BridgeheadError",
    "ConfigurationError",
    "UpstreamError",
    "InvalidResponseError",
    "PostsUnavailableError",
]
