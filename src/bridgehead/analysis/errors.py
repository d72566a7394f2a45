"""Error taxonomy of the AI pipeline."""

from typing import Optional


class BridgeheadError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(BridgeheadError):
    """Required configuration (e.g. the Gemini API key) is missing."""


class UpstreamError(BridgeheadError):
    """The Gemini call failed: network, quota, timeout or vendor error."""


class InvalidResponseError(BridgeheadError):
    """The model answered, but not with the structure we asked for."""

    def __init__(self, message: str, raw_text: Optional[str] = None):
        super().__init__(message)
        # Truncated for logs
        self.raw_text = raw_text[:500] if raw_text else raw_text


class PostsUnavailableError(BridgeheadError):
    """The posts REST API could not be reached or answered with an error."""
