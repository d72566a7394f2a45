"""
Bridgehead AI core.

Matchmaking between community demands and rentals, location-aware
business ideas, geocoding and the assistant chat, all on Gemini.
"""

__version__ = "1.0.0"
