"""
Gateway to Google Gemini.

One logical generation per invocation:
- Request configuration per task (model tier, JSON output, grounding tools)
- Bounded retries with jitter for transient failures
- Every SDK/network failure surfaces as UpstreamError
"""

import asyncio
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

import httpx
import structlog
from google import genai
from google.genai import errors, types
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

from bridgehead.analysis.errors import ConfigurationError, UpstreamError
from bridgehead.analysis.validation import extract_grounding_sources
from bridgehead.config import Settings, get_settings
from bridgehead.models import Coordinates, GroundingSource

logger = structlog.get_logger()

JSON_MIME_TYPE = "application/json"


@dataclass
class GenerationOptions:
    """Per-task request configuration."""

    model: str
    response_mime_type: Optional[str] = None
    system_instruction: Optional[str] = None
    temperature: Optional[float] = None
    use_search: bool = False
    use_maps: bool = False
    lat_lng: Optional[Coordinates] = None
    thinking_budget: Optional[int] = None

    @classmethod
    def for_json(cls, model: str) -> "GenerationOptions":
        return cls(model=model, response_mime_type=JSON_MIME_TYPE)

    @classmethod
    def for_text(
        cls, model: str, system_instruction: Optional[str] = None
    ) -> "GenerationOptions":
        return cls(model=model, system_instruction=system_instruction)

    @classmethod
    def for_ideas(
        cls, settings: Settings, location: Coordinates, deep_dive: bool
    ) -> "GenerationOptions":
        """
        Business ideas: search + maps grounding around the caller.

        Deep dive switches to the higher-capability model and gives it a
        thinking budget; the standard tier gets no thinking config.
        """
        return cls(
            model=settings.gemini_deep_model if deep_dive else settings.gemini_model,
            use_search=True,
            use_maps=True,
            lat_lng=Coordinates(latitude=location.latitude, longitude=location.longitude),
            thinking_budget=settings.deep_dive_thinking_budget if deep_dive else None,
        )

    def to_config(self) -> types.GenerateContentConfig:
        kwargs = {}
        if self.response_mime_type:
            kwargs["response_mime_type"] = self.response_mime_type
        if self.system_instruction:
            kwargs["system_instruction"] = self.system_instruction
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature

        tools = []
        if self.use_search:
            tools.append(types.Tool(google_search=types.GoogleSearch()))
        if self.use_maps:
            tools.append(types.Tool(google_maps=types.GoogleMaps()))
        if tools:
            kwargs["tools"] = tools

        if self.lat_lng is not None:
            kwargs["tool_config"] = types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(
                        latitude=self.lat_lng.latitude,
                        longitude=self.lat_lng.longitude,
                    )
                )
            )
        if self.thinking_budget is not None:
            kwargs["thinking_config"] = types.ThinkingConfig(
                thinking_budget=self.thinking_budget
            )

        return types.GenerateContentConfig(**kwargs)


@dataclass
class RawResponse:
    """Unvalidated model output."""

    text: str
    model: str
    sources: list[GroundingSource] = field(default_factory=list)


def _is_transient(exc: BaseException) -> bool:
    """Server errors, rate limits, timeouts and dropped connections; nothing else."""
    if isinstance(exc, errors.ClientError):
        return exc.code == 429
    return isinstance(
        exc,
        (errors.ServerError, asyncio.TimeoutError, OSError, httpx.TransportError),
    )


class AIGateway:
    """
    Thin wrapper over the google-genai async client.

    Settings are read once at construction; a missing API key fails
    here, before any request is attempted.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[genai.Client] = None,
    ):
        self.settings = settings or get_settings()

        if not self.settings.gemini_api_key:
            raise ConfigurationError(
                "Gemini API key is missing. Set GEMINI_API_KEY in your environment or .env file."
            )

        self.client = client or genai.Client(api_key=self.settings.gemini_api_key)
        logger.info(
            "AIGateway initialized",
            model=self.settings.gemini_model,
            deep_model=self.settings.gemini_deep_model,
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.settings.ai_max_attempts),
            wait=wait_random_exponential(multiplier=0.5, max=self.settings.ai_retry_max_wait),
            retry=retry_if_exception(_is_transient),
            reraise=True,
        )

    async def generate_content(
        self,
        prompt: str,
        options: GenerationOptions,
        task: str = "generate",
    ) -> RawResponse:
        """
        Run one generation request.

        Args:
            prompt: Full prompt text
            options: Model and request configuration
            task: Name used in logs (geocode, match, ideas...)

        Returns:
            RawResponse with the stripped text and any grounding sources

        Raises:
            UpstreamError: If every attempt failed or the error was not transient
        """
        config = options.to_config()

        try:
            async for attempt in self._retrying():
                with attempt:
                    number = attempt.retry_state.attempt_number
                    if number > 1:
                        logger.warning("Retrying Gemini call", task=task, attempt=number)
                    response = await asyncio.wait_for(
                        self.client.aio.models.generate_content(
                            model=options.model,
                            contents=prompt,
                            config=config,
                        ),
                        timeout=self.settings.ai_timeout_seconds,
                    )
        except Exception as e:
            logger.error(
                "Gemini call failed",
                task=task,
                model=options.model,
                error=str(e) or type(e).__name__,
            )
            raise UpstreamError(f"Gemini {task} request failed") from e

        text = (response.text or "").strip()
        sources = extract_grounding_sources(response)

        logger.debug(
            "Gemini response received",
            task=task,
            model=options.model,
            chars=len(text),
            sources=len(sources),
        )

        return RawResponse(text=text, model=options.model, sources=sources)

    async def stream_content(
        self,
        contents: list[types.Content],
        options: GenerationOptions,
        task: str = "chat",
    ) -> AsyncIterator[str]:
        """
        Stream a generation as text chunks.

        Not retried: chunks already yielded cannot be taken back.

        Raises:
            UpstreamError: If the stream could not be opened or broke midway
        """
        config = options.to_config()

        try:
            stream = await asyncio.wait_for(
                self.client.aio.models.generate_content_stream(
                    model=options.model,
                    contents=contents,
                    config=config,
                ),
                timeout=self.settings.ai_timeout_seconds,
            )
            async for chunk in stream:
                if chunk.text:
                    yield chunk.text
        except Exception as e:
            logger.error(
                "Gemini stream failed",
                task=task,
                model=options.model,
                error=str(e) or type(e).__name__,
            )
            raise UpstreamError(f"Gemini {task} stream failed") from e
