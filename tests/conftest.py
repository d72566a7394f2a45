"""
Pytest configuration for Bridgehead tests.

Sets up a test environment and global fixtures. No test talks to the
real Gemini API: the google-genai client is replaced by mocks.
"""
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# Test environment variables
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-api-key")
os.environ.setdefault("API_BASE_URL", "http://localhost:5001/api")

from bridgehead.analysis.gateway import AIGateway  # noqa: E402
from bridgehead.config import Settings  # noqa: E402
from bridgehead.models import DemandPost, RentalPost  # noqa: E402


def make_genai_response(text, chunks=None):
    """Shape of a google-genai GenerateContentResponse, as far as we read it."""
    metadata = SimpleNamespace(grounding_chunks=chunks) if chunks is not None else None
    candidate = SimpleNamespace(grounding_metadata=metadata)
    return SimpleNamespace(text=text, candidates=[candidate])


@pytest.fixture
def genai_response():
    return make_genai_response


@pytest.fixture
def settings():
    """Settings with a fake key and no backoff between retries."""
    return Settings(
        _env_file=None,
        gemini_api_key="test-gemini-api-key",
        ai_max_attempts=2,
        ai_retry_max_wait=0,
        ai_timeout_seconds=5,
    )


@pytest.fixture
def genai_client():
    """
    Mock google-genai client.
    Tests set `client.aio.models.generate_content.return_value`.
    """
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    client.aio.models.generate_content_stream = AsyncMock()
    return client


@pytest.fixture
def gateway(settings, genai_client):
    return AIGateway(settings, client=genai_client)


@pytest.fixture
def make_demand():
    def _make(demand_id, title="Neighborhood bakery", category="Bakery & Pastry Shop", upvotes=0):
        return DemandPost.model_validate({
            "id": demand_id,
            "title": title,
            "category": category,
            "description": f"We need a {title.lower()} around here",
            "location": {"latitude": 37.42, "longitude": -122.08, "address": "Mountain View, CA"},
            "images": [],
            "upvotes": upvotes,
            "createdAt": "2025-01-15T10:00:00.000Z",
            "openToCollaboration": True,
        })
    return _make


@pytest.fixture
def make_rental():
    def _make(rental_id, title="Corner retail space", category="Retail", price=3200.0, square_feet=1200):
        return RentalPost.model_validate({
            "id": rental_id,
            "title": title,
            "category": category,
            "description": "Bright corner unit with street frontage",
            "location": {"latitude": 37.41, "longitude": -122.09, "address": "Castro St, Mountain View, CA"},
            "images": [],
            "price": price,
            "squareFeet": square_feet,
            "createdAt": "2025-01-10T09:00:00.000Z",
            "openToCollaboration": False,
        })
    return _make
