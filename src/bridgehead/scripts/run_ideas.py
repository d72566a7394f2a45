"""
Script to generate business ideas for a location.

Usage:
    python -m bridgehead.scripts.run_ideas --lat 37.422 --lng -122.084
    python -m bridgehead.scripts.run_ideas --lat 19.07 --lng 72.87 --deep-dive --demands demands.json
"""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from bridgehead.analysis import AIGateway, BridgeheadError, BusinessIdeaGenerator, format_sources
from bridgehead.config import get_settings
from bridgehead.database import PostsClient
from bridgehead.models import Coordinates, Failure
from bridgehead.scripts import configure_logging, load_demands_file

logger = structlog.get_logger()


async def run_ideas(location: Coordinates, deep_dive: bool, demands_file=None) -> bool:
    settings = get_settings()
    if demands_file:
        demands = load_demands_file(demands_file)
    else:
        demands = await PostsClient(settings=settings).fetch_demands()

    generator = BusinessIdeaGenerator(AIGateway(settings))
    result = await generator.generate(location, demands, deep_dive=deep_dive)

    # The failure message is Markdown too
    if isinstance(result, Failure):
        print(result.message)
        return False

    print(result.value.markdown)
    sources = format_sources(result.value.sources)
    if sources:
        print()
        print(sources)
    return True


def main():
    """Script entry point."""
    parser = argparse.ArgumentParser(description="Generate business ideas for a location")
    parser.add_argument("--lat", type=float, required=True, help="Latitude")
    parser.add_argument("--lng", type=float, required=True, help="Longitude")
    parser.add_argument("--deep-dive", action="store_true", help="Slower, more detailed analysis")
    parser.add_argument("--demands", type=Path, help="JSON file with demand posts")
    args = parser.parse_args()

    configure_logging(get_settings())
    location = Coordinates(latitude=args.lat, longitude=args.lng)

    try:
        ok = asyncio.run(run_ideas(location, args.deep_dive, args.demands))
        sys.exit(0 if ok else 1)

    except KeyboardInterrupt:
        sys.exit(130)
    except BridgeheadError as e:
        logger.error("Fatal error generating ideas", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
