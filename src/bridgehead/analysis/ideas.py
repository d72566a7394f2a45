"""
Business idea generator.

Combines the caller's location, the community demands and live
Google Search / Maps grounding into 3-5 Markdown business ideas.
"""

from typing import Optional, Sequence

import structlog

from bridgehead.analysis.errors import InvalidResponseError, UpstreamError
from bridgehead.analysis.gateway import AIGateway, GenerationOptions
from bridgehead.analysis.prompts import IDEA_FAILURE_MARKDOWN, build_idea_prompt
from bridgehead.analysis.tracker import RequestTracker
from bridgehead.models import (
    AIResult,
    BusinessIdeas,
    Coordinates,
    DemandPost,
    Failure,
    GroundingSource,
    Success,
)

logger = structlog.get_logger()

IDEAS_ACTION = "ideas"


def format_sources(sources: Sequence[GroundingSource]) -> str:
    """Markdown list of grounding citations; empty string when there are none."""
    if not sources:
        return ""

    lines = ["### Sources"]
    for source in sources:
        icon = "Map" if source.kind == "maps" else "Web"
        lines.append(f"- [{source.title}]({source.uri}) ({icon})")
    return "\n".join(lines)


class BusinessIdeaGenerator:
    """
    Generates location-aware business ideas.

    Failures come back as Failure carrying IDEA_FAILURE_MARKDOWN, the
    same shape as every other pipeline operation.
    """

    def __init__(self, gateway: AIGateway, tracker: Optional[RequestTracker] = None):
        self.gateway = gateway
        self.settings = gateway.settings
        self.tracker = tracker or RequestTracker()

    async def generate(
        self,
        location: Coordinates,
        demands: Sequence[DemandPost],
        deep_dive: bool = False,
    ) -> AIResult[BusinessIdeas]:
        """
        Generate ideas for a location.

        Args:
            location: Caller coordinates (also sent as grounding lat/lng)
            demands: Community demands to take into account
            deep_dive: Use the higher-capability model with a thinking budget

        Returns:
            Success(BusinessIdeas) or Failure(message=IDEA_FAILURE_MARKDOWN)
        """
        prompt = build_idea_prompt(
            location,
            demands,
            deep_dive,
            limit=self.settings.idea_demand_limit,
            rank_by_upvotes=self.settings.idea_rank_demands_by_upvotes,
        )
        options = GenerationOptions.for_ideas(self.settings, location, deep_dive)

        try:
            response = await self.gateway.generate_content(prompt, options, task="ideas")
        except UpstreamError as e:
            logger.error("Business idea generation failed", deep_dive=deep_dive, error=str(e))
            return Failure(error=e, message=IDEA_FAILURE_MARKDOWN)

        if not response.text:
            error = InvalidResponseError("Empty business ideas response.", response.text)
            logger.error("Business idea generation returned no text", model=response.model)
            return Failure(error=error, message=IDEA_FAILURE_MARKDOWN)

        logger.info(
            "Business ideas generated",
            model=response.model,
            deep_dive=deep_dive,
            demands=len(demands),
            sources=len(response.sources),
        )

        return Success(
            BusinessIdeas(
                markdown=response.text,
                model=response.model,
                deep_dive=deep_dive,
                sources=response.sources,
            )
        )

    async def run(
        self,
        location: Coordinates,
        demands: Sequence[DemandPost],
        deep_dive: bool = False,
    ) -> Optional[AIResult[BusinessIdeas]]:
        """Like generate(), but returns None if a newer request superseded this one."""
        token = self.tracker.begin(IDEAS_ACTION)
        try:
            result = await self.generate(location, demands, deep_dive)
        finally:
            self.tracker.finish(IDEAS_ACTION, token)

        if not self.tracker.is_current(IDEAS_ACTION, token):
            logger.info("Discarding stale idea response", token=token)
            return None
        return result
