"""
Tests for prompt construction.

Prompts are plain strings; these tests check that the data and the
output contract the parsers rely on are embedded in them.
"""

import json
import re

import pytest

from bridgehead.analysis.prompts import (
    NO_DEMANDS_FALLBACK,
    build_geocode_prompt,
    build_idea_prompt,
    build_match_prompt,
    build_reverse_geocode_prompt,
    summarize_demands,
)
from bridgehead.models import Coordinates


class TestGeocodePrompt:
    def test_includes_address_and_json_contract(self):
        address = "1600 Amphitheatre Parkway, Mountain View, CA"
        prompt = build_geocode_prompt(address)

        assert address in prompt
        assert '{"latitude": <number>, "longitude": <number>}' in prompt
        assert "ONLY" in prompt

    def test_includes_inline_example(self):
        prompt = build_geocode_prompt("Eiffel Tower")
        assert "37.422" in prompt
        assert "-122.084" in prompt

    @pytest.mark.parametrize("address", ["", "   "])
    def test_blank_address_rejected(self, address):
        with pytest.raises(ValueError):
            build_geocode_prompt(address)


class TestReverseGeocodePrompt:
    def test_includes_coordinates(self):
        prompt = build_reverse_geocode_prompt(Coordinates(latitude=48.8584, longitude=2.2945))
        assert "Latitude: 48.8584" in prompt
        assert "Longitude: 2.2945" in prompt
        assert "no preamble" in prompt.lower() or "do not add any preamble" in prompt.lower()


class TestSummarizeDemands:
    def test_line_format(self, make_demand):
        lines = summarize_demands([make_demand("d1", title="Vegan Cafe", category="Cafe", upvotes=7)])
        assert lines == ["- Vegan Cafe (Category: Cafe, Upvotes: 7)"]

    def test_truncates_to_first_ten_in_input_order(self, make_demand):
        demands = [make_demand(f"d{i}", title=f"Demand {i}", upvotes=i) for i in range(15)]

        lines = summarize_demands(demands)

        assert len(lines) == 10
        assert lines[0].startswith("- Demand 0 ")
        assert lines[-1].startswith("- Demand 9 ")

    def test_rank_by_upvotes_keeps_most_popular(self, make_demand):
        demands = [make_demand(f"d{i}", title=f"Demand {i}", upvotes=i) for i in range(15)]

        lines = summarize_demands(demands, rank_by_upvotes=True)

        assert len(lines) == 10
        assert lines[0].startswith("- Demand 14 ")
        assert not any(line.startswith("- Demand 0 ") for line in lines)

    def test_does_not_reorder_input(self, make_demand):
        demands = [make_demand("a", upvotes=1), make_demand("b", upvotes=5)]
        summarize_demands(demands, rank_by_upvotes=True)
        assert [d.id for d in demands] == ["a", "b"]


class TestIdeaPrompt:
    def test_embeds_location_and_demands(self, make_demand):
        prompt = build_idea_prompt(
            Coordinates(latitude=19.076, longitude=72.8777),
            [make_demand("d1", title="Board Game Cafe", category="Board Game Cafe", upvotes=12)],
            deep_dive=False,
        )
        assert "19.076, 72.8777" in prompt
        assert "- Board Game Cafe (Category: Board Game Cafe, Upvotes: 12)" in prompt
        assert "3-5" in prompt
        assert "Markdown" in prompt

    def test_no_demands_uses_fallback(self):
        prompt = build_idea_prompt(Coordinates(latitude=0, longitude=0), [], deep_dive=False)
        assert NO_DEMANDS_FALLBACK in prompt

    def test_deep_dive_asks_for_more(self):
        location = Coordinates(latitude=1, longitude=2)
        standard = build_idea_prompt(location, [], deep_dive=False)
        deep = build_idea_prompt(location, [], deep_dive=True)
        assert "deep dive" in deep.lower()
        assert "deep dive" not in standard.lower()

    def test_fifteen_demands_summarized_to_ten(self, make_demand):
        demands = [make_demand(f"d{i}", title=f"Demand {i}") for i in range(15)]
        prompt = build_idea_prompt(Coordinates(latitude=0, longitude=0), demands, deep_dive=False)
        assert len(re.findall(r"^- Demand \d+ ", prompt, flags=re.MULTILINE)) == 10


class TestMatchPrompt:
    def _embedded_lists(self, prompt):
        demands_part = prompt.split("Here are the demands:")[1].split("Here are the available rentals:")[0]
        rentals_part = prompt.split("Here are the available rentals:")[1].split("Analyze both lists")[0]
        return json.loads(demands_part), json.loads(rentals_part)

    def test_projects_posts_to_reduced_shape(self, make_demand, make_rental):
        prompt = build_match_prompt([make_demand("d1")], [make_rental("r1", price=2500.0, square_feet=900)])

        demands, rentals = self._embedded_lists(prompt)

        assert demands == [{
            "id": "d1",
            "title": "Neighborhood bakery",
            "category": "Bakery & Pastry Shop",
            "description": "We need a neighborhood bakery around here",
            "location": "37.42,-122.08",
        }]
        assert rentals[0]["id"] == "r1"
        assert rentals[0]["location"] == "37.41,-122.09"
        assert rentals[0]["price"] == 2500.0
        assert rentals[0]["squareFeet"] == 900
        assert "images" not in rentals[0]

    def test_states_output_contract(self, make_demand, make_rental):
        prompt = build_match_prompt([make_demand("d1")], [make_rental("r1")])
        for key in ("demandId", "rentalId", "reasoning", "confidenceScore"):
            assert f'"{key}"' in prompt
        assert "Return ONLY the JSON array" in prompt
        assert "empty array []" in prompt
