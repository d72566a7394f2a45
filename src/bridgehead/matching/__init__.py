"""
Matching engine.

Pairs community demands with available rentals through Gemini and
prepares the results for display.
"""

from bridgehead.matching.engine import MatchingEngine, rank_matches, resolve_matches

__all__ = [
    "MatchingEngine",
    "rank_matches",
    "resolve_matches",
]
