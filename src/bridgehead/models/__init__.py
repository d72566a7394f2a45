"""
Data models.

- Posts: DemandPost, RentalPost and their locations
- Results: match results, business ideas and pipeline outcomes
"""

from bridgehead.models.posts import Coordinates, DemandPost, Location, RentalPost
from bridgehead.models.results import (
    AIResult,
    BusinessIdeas,
    Failure,
    GroundingSource,
    MatchResult,
    ResolvedMatch,
    Success,
)

__all__ = [
    # Posts
    "Coordinates",
    "Location",
    "DemandPost",
    "RentalPost",
    # Results
    "MatchResult",
    "ResolvedMatch",
    "GroundingSource",
    "BusinessIdeas",
    "Success",
    "Failure",
    "AIResult",
]
