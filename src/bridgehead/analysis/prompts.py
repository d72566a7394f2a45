"""
Prompt templates for every Gemini task.

Pure string construction, no I/O:
- Geocoding and reverse geocoding
- Business idea generation (Markdown)
- Demand/rental matchmaking (JSON)
- Assistant chat system instruction
"""

import json
from typing import Sequence

from bridgehead.models import Coordinates, DemandPost, RentalPost

MAX_SUMMARIZED_DEMANDS = 10

GEOCODE_PROMPT_TEMPLATE = """Provide the latitude and longitude for the following address.
Address: "{address}"
Return ONLY a JSON object of the form {{"latitude": <number>, "longitude": <number>}}.
Do not add any other text or markdown formatting.
Example response:
{{
  "latitude": 37.422,
  "longitude": -122.084
}}"""

REVERSE_GEOCODE_PROMPT_TEMPLATE = """Based on the following coordinates, provide a single, concise, human-readable street address or well-known place name.
Latitude: {latitude}
Longitude: {longitude}
Do not add any preamble or explanation. Just return the address. For example: "1600 Amphitheatre Parkway, Mountain View, CA" or "Eiffel Tower, Paris, France"."""

NO_DEMANDS_FALLBACK = (
    "No specific demands listed yet. "
    "Consider general opportunities for a typical urban/suburban area."
)

IDEA_PROMPT_TEMPLATE = """You are a hyper-local business consultant AI. Your goal is to generate innovative and practical business ideas for an entrepreneur.

**Context:**
- The entrepreneur is looking for opportunities in a specific area.
- Current Location (Latitude, Longitude): {latitude}, {longitude}
- There is a list of existing business "demands" posted by the local community. These represent unmet needs.

**Existing Community Demands:**
{demand_summary}

**Your Task:**
Based on the provided location, community demands, and up-to-date information from Google Search and Maps, generate 3-5 concrete business suggestions. For each suggestion, provide:
1.  **Business Idea:** A catchy, descriptive name.
2.  **Concept:** A one-paragraph summary of the business.
3.  **Why it works here:** A brief explanation of why this idea is a good fit for the location, referencing specific demands and real-world data if possible.
4.  **Potential Target Audience:** Who are the primary customers?
5.  **Location Insight:** Suggest a specific, real-world neighborhood or type of commercial area that would be suitable, using Google Maps data.
{depth_instruction}
Format your response in well-structured Markdown. Use headings, bold text, and lists to make it easy to read."""

DEEP_DIVE_INSTRUCTION = """
This is a deep dive: for each idea also estimate startup costs, name the main local competitors you can find, and list the biggest risks.
"""

MATCH_PROMPT_TEMPLATE = """You are an expert commercial real estate matchmaker AI for an app called Bridgehead.
Your task is to analyze a list of community "Demands" (business ideas people want) and a list of "Rentals" (available commercial properties) and find the best potential matches.

Here are the demands:
{demands_json}

Here are the available rentals:
{rentals_json}

Analyze both lists and identify pairs of demands and rentals that are a good fit. Consider factors like:
- Category match (e.g., a "Food & Drink" demand in a former restaurant space).
- Location proximity.
- Description alignment (e.g., a demand for a "cozy bookstore" matching a "charming boutique spot").
- Space requirements hinted at in the demand description vs. the rental's square footage.

Return your findings as a JSON array of match objects. Each object in the array must have the following structure:
{{
  "demandId": string, // The ID of the matched demand
  "rentalId": string, // The ID of the matched rental
  "reasoning": string, // A concise, one-paragraph explanation of why this is a good match.
  "confidenceScore": number // A score from 0.0 to 1.0 indicating your confidence in the match.
}}

Return ONLY the JSON array. Do not include any other text, markdown formatting, or explanations outside of the JSON structure. If no good matches are found, return an empty array []."""

ASSISTANT_SYSTEM_INSTRUCTION = (
    "You are a helpful AI assistant for the Bridgehead app. Bridgehead connects "
    "community needs (demands) with entrepreneurs. Users can post demands for "
    "businesses they want, and entrepreneurs can find rental properties and get "
    "business ideas. Keep your answers concise and helpful. When providing "
    "instructions or steps, always use a numbered or bulleted list. Do not write "
    "steps in a single paragraph."
)

ASSISTANT_GREETING = "Hello! How can I help you with Bridgehead today?"

IDEA_FAILURE_MARKDOWN = (
    "## An Error Occurred\n\n"
    "Sorry, I was unable to generate business ideas at this time. "
    "Please check your API key and try again later."
)


def build_geocode_prompt(address: str) -> str:
    """Prompt asking for the coordinates of a free-text address."""
    if not address or not address.strip():
        raise ValueError("address must not be empty")
    return GEOCODE_PROMPT_TEMPLATE.format(address=address.strip())


def build_reverse_geocode_prompt(coordinates: Coordinates) -> str:
    return REVERSE_GEOCODE_PROMPT_TEMPLATE.format(
        latitude=coordinates.latitude,
        longitude=coordinates.longitude,
    )


def summarize_demands(
    demands: Sequence[DemandPost],
    limit: int = MAX_SUMMARIZED_DEMANDS,
    rank_by_upvotes: bool = False,
) -> list[str]:
    """
    One bullet line per demand, at most `limit` lines.

    Without ranking the first `limit` demands in input order are kept, so
    popular demands further down the list may be left out.
    """
    selected = list(demands)
    if rank_by_upvotes:
        selected.sort(key=lambda d: d.upvotes, reverse=True)

    return [
        f"- {d.title} (Category: {d.category}, Upvotes: {d.upvotes})"
        for d in selected[:limit]
    ]


def build_idea_prompt(
    location: Coordinates,
    demands: Sequence[DemandPost],
    deep_dive: bool,
    limit: int = MAX_SUMMARIZED_DEMANDS,
    rank_by_upvotes: bool = False,
) -> str:
    """
    Prompt for 3-5 Markdown business ideas around a location.

    Args:
        location: Where the entrepreneur is looking
        demands: Community demands, summarized into the prompt
        deep_dive: Ask for costs, competitors and risks as well
        limit: Maximum demands to summarize
        rank_by_upvotes: Keep the most upvoted demands instead of the first ones

    Returns:
        The prompt text
    """
    lines = summarize_demands(demands, limit=limit, rank_by_upvotes=rank_by_upvotes)
    return IDEA_PROMPT_TEMPLATE.format(
        latitude=location.latitude,
        longitude=location.longitude,
        demand_summary="\n".join(lines) if lines else NO_DEMANDS_FALLBACK,
        depth_instruction=DEEP_DIVE_INSTRUCTION if deep_dive else "",
    )


def _project_demand(demand: DemandPost) -> dict:
    return {
        "id": demand.id,
        "title": demand.title,
        "category": demand.category,
        "description": demand.description,
        "location": demand.location.as_lat_lng(),
    }


def _project_rental(rental: RentalPost) -> dict:
    return {
        "id": rental.id,
        "title": rental.title,
        "category": rental.category,
        "description": rental.description,
        "location": rental.location.as_lat_lng(),
        "price": rental.price,
        "squareFeet": rental.square_feet,
    }


def build_match_prompt(
    demands: Sequence[DemandPost],
    rentals: Sequence[RentalPost],
) -> str:
    """Prompt asking for a JSON array of demand/rental matches."""
    return MATCH_PROMPT_TEMPLATE.format(
        demands_json=json.dumps([_project_demand(d) for d in demands], indent=2),
        rentals_json=json.dumps([_project_rental(r) for r in rentals], indent=2),
    )
