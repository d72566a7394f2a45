"""
Script to geocode an address or reverse geocode coordinates.

Usage:
    python -m bridgehead.scripts.run_geocode --address "1600 Amphitheatre Parkway, Mountain View, CA"
    python -m bridgehead.scripts.run_geocode --lat 37.422 --lng -122.084
"""

import argparse
import asyncio
import sys

import structlog

from bridgehead.analysis import AIGateway, BridgeheadError, Geocoder, sanitize_location
from bridgehead.config import get_settings
from bridgehead.models import Coordinates, Failure
from bridgehead.scripts import configure_logging

logger = structlog.get_logger()


async def run_geocode(address=None, lat=None, lng=None) -> bool:
    geocoder = Geocoder(AIGateway(get_settings()))

    if address:
        result = await geocoder.geocode(address)
        if isinstance(result, Failure):
            print(result.message)
            return False
        print(f"{result.value.latitude}, {result.value.longitude}")
        return True

    result = await geocoder.reverse_geocode(Coordinates(latitude=lat, longitude=lng))
    if isinstance(result, Failure):
        # Placeholder "Location at ..." so there is always something to show
        print(result.message)
        return False
    print(result.value)
    print(f"Card label: {sanitize_location(result.value)}")
    return True


def main():
    """Script entry point."""
    parser = argparse.ArgumentParser(description="Geocode with Gemini")
    parser.add_argument("--address", help="Address to geocode")
    parser.add_argument("--lat", type=float, help="Latitude to reverse geocode")
    parser.add_argument("--lng", type=float, help="Longitude to reverse geocode")
    args = parser.parse_args()

    if not args.address and (args.lat is None or args.lng is None):
        parser.error("use --address, or both --lat and --lng")

    configure_logging(get_settings())

    try:
        ok = asyncio.run(run_geocode(args.address, args.lat, args.lng))
        sys.exit(0 if ok else 1)

    except KeyboardInterrupt:
        sys.exit(130)
    except BridgeheadError as e:
        logger.error("Fatal error in geocoding", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
