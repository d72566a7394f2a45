"""
AI matchmaking between community demands and rentals.

Flow:
1. Ask Gemini for demand/rental pairs (one JSON request)
2. Validate every returned match
3. Sort by confidence, best first
4. Resolve each match against the posts we sent, skipping unknown IDs
"""

from typing import Optional, Sequence

import structlog

from bridgehead.analysis.errors import InvalidResponseError, UpstreamError
from bridgehead.analysis.gateway import AIGateway, GenerationOptions
from bridgehead.analysis.prompts import build_match_prompt
from bridgehead.analysis.tracker import RequestTracker
from bridgehead.analysis.validation import parse_match_results
from bridgehead.models import (
    AIResult,
    DemandPost,
    Failure,
    MatchResult,
    RentalPost,
    ResolvedMatch,
    Success,
)

logger = structlog.get_logger()

MATCH_ACTION = "matches"

UNAVAILABLE_MESSAGE = "The AI matchmaker is currently unavailable. Please try again later."
MALFORMED_MESSAGE = (
    "The AI matchmaker had trouble understanding the response. Please try again."
)


def rank_matches(matches: Sequence[MatchResult]) -> list[MatchResult]:
    """New list ordered by confidence, highest first."""
    return sorted(matches, key=lambda m: m.confidence_score, reverse=True)


def resolve_matches(
    matches: Sequence[MatchResult],
    demands: Sequence[DemandPost],
    rentals: Sequence[RentalPost],
) -> list[ResolvedMatch]:
    """
    Join matches with their posts, keeping the order of `matches`.

    Matches that reference a demand or rental we don't have are skipped.
    """
    demands_by_id = {d.id: d for d in demands}
    rentals_by_id = {r.id: r for r in rentals}

    resolved = []
    for match in matches:
        demand = demands_by_id.get(match.demand_id)
        rental = rentals_by_id.get(match.rental_id)
        if demand is None or rental is None:
            logger.debug(
                "Skipping match with unknown post",
                demand_id=match.demand_id,
                rental_id=match.rental_id,
            )
            continue
        resolved.append(ResolvedMatch(match=match, demand=demand, rental=rental))

    return resolved


class MatchingEngine:
    """
    Matchmaker over in-memory posts.

    The posts come from the caller (usually fetched from the REST API);
    the engine never reads or writes them anywhere else.
    """

    def __init__(self, gateway: AIGateway, tracker: Optional[RequestTracker] = None):
        self.gateway = gateway
        self.model_name = gateway.settings.gemini_model
        self.tracker = tracker or RequestTracker()

    async def find_matches(
        self,
        demands: Sequence[DemandPost],
        rentals: Sequence[RentalPost],
    ) -> AIResult[list[MatchResult]]:
        """
        Ask the model for demand/rental pairs.

        Args:
            demands: Community demands
            rentals: Available rentals

        Returns:
            Success with validated (unsorted) matches, or Failure
        """
        if not demands or not rentals:
            logger.info(
                "Nothing to match",
                demands=len(demands),
                rentals=len(rentals),
            )
            return Success([])

        prompt = build_match_prompt(demands, rentals)

        try:
            response = await self.gateway.generate_content(
                prompt, GenerationOptions.for_json(self.model_name), task="match"
            )
            matches = parse_match_results(response.text)
        except UpstreamError as e:
            logger.error("Matchmaker call failed", error=str(e))
            return Failure(error=e, message=UNAVAILABLE_MESSAGE)
        except InvalidResponseError as e:
            logger.error("Matchmaker response rejected", error=str(e), response=e.raw_text)
            return Failure(error=e, message=MALFORMED_MESSAGE)

        logger.info(
            "Matches found",
            demands=len(demands),
            rentals=len(rentals),
            matches=len(matches),
        )
        return Success(matches)

    async def run(
        self,
        demands: Sequence[DemandPost],
        rentals: Sequence[RentalPost],
    ) -> Optional[AIResult[list[ResolvedMatch]]]:
        """
        Find, rank and resolve matches for display.

        Returns None when a newer run started before this one finished;
        its response is stale and should not be shown.
        """
        token = self.tracker.begin(MATCH_ACTION)
        try:
            result = await self.find_matches(demands, rentals)
        finally:
            self.tracker.finish(MATCH_ACTION, token)

        if not self.tracker.is_current(MATCH_ACTION, token):
            logger.info("Discarding stale match response", token=token)
            return None

        if isinstance(result, Failure):
            return result

        resolved = resolve_matches(rank_matches(result.value), demands, rentals)
        return Success(resolved)
