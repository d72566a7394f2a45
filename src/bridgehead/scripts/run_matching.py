"""
Script to run the AI matchmaker once.

Loads demands and rentals (JSON files or the REST API), asks Gemini
for matches and logs them best first.

Usage:
    python -m bridgehead.scripts.run_matching
    python -m bridgehead.scripts.run_matching --demands demands.json --rentals rentals.json
"""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from bridgehead.analysis import AIGateway, BridgeheadError
from bridgehead.config import get_settings
from bridgehead.matching import MatchingEngine
from bridgehead.models import Failure
from bridgehead.scripts import configure_logging, load_posts

logger = structlog.get_logger()


async def run_matching(demands_file=None, rentals_file=None) -> bool:
    """Run one matching cycle. Returns True on success."""
    settings = get_settings()
    demands, rentals = await load_posts(settings, demands_file, rentals_file)

    engine = MatchingEngine(AIGateway(settings))
    result = await engine.run(demands, rentals)

    if isinstance(result, Failure):
        logger.error("Matching failed", message=result.message)
        return False

    if not result.value:
        logger.info("No strong matches found")
        return True

    for resolved in result.value:
        logger.info(
            "Match",
            demand=resolved.demand.title,
            rental=resolved.rental.title,
            confidence=f"{resolved.confidence_percent}%",
            reasoning=resolved.match.reasoning,
        )
    return True


def main():
    """Script entry point."""
    parser = argparse.ArgumentParser(description="Match community demands with rentals")
    parser.add_argument("--demands", type=Path, help="JSON file with demand posts")
    parser.add_argument("--rentals", type=Path, help="JSON file with rental posts")
    args = parser.parse_args()

    configure_logging(get_settings())
    logger.info("Starting matching...")

    try:
        ok = asyncio.run(run_matching(args.demands, args.rentals))
        sys.exit(0 if ok else 1)

    except KeyboardInterrupt:
        logger.info("Matching interrupted by user")
        sys.exit(130)
    except BridgeheadError as e:
        logger.error("Fatal error in matching", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
