"""
Tests for the command line helpers and scripts.
"""

import json

import pytest

from bridgehead.analysis.errors import PostsUnavailableError
from bridgehead.scripts import load_demands_file, load_posts, load_rentals_file
from bridgehead.scripts import run_geocode as run_geocode_module
from bridgehead.scripts import run_matching as run_matching_module


@pytest.fixture
def posts_files(tmp_path):
    demands = tmp_path / "demands.json"
    rentals = tmp_path / "rentals.json"
    demands.write_text(json.dumps([{
        "id": "d1",
        "title": "Neighborhood bakery",
        "category": "Bakery & Pastry Shop",
        "location": {"latitude": 37.42, "longitude": -122.08},
        "upvotes": 3,
    }]), encoding="utf-8")
    rentals.write_text(json.dumps([{
        "id": "r1",
        "title": "Corner retail space",
        "category": "Retail",
        "location": {"latitude": 37.41, "longitude": -122.09},
        "price": 3200,
        "squareFeet": 1200,
    }]), encoding="utf-8")
    return demands, rentals


class TestLoadPosts:
    def test_load_files(self, posts_files):
        demands_file, rentals_file = posts_files
        assert load_demands_file(demands_file)[0].upvotes == 3
        assert load_rentals_file(rentals_file)[0].price == 3200

    @pytest.mark.parametrize("content", [
        "not json",
        '{"id": "d1"}',
        '[{"id": "d1", "title": "No location"}]',
    ])
    def test_bad_file(self, tmp_path, content):
        path = tmp_path / "demands.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(PostsUnavailableError):
            load_demands_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(PostsUnavailableError):
            load_rentals_file(tmp_path / "missing.json")

    @pytest.mark.asyncio
    async def test_files_skip_the_api(self, posts_files, settings):
        demands, rentals = await load_posts(settings, *posts_files)
        assert [d.id for d in demands] == ["d1"]
        assert [r.id for r in rentals] == ["r1"]


class TestRunMatching:
    @pytest.mark.asyncio
    async def test_success(self, monkeypatch, posts_files, settings, gateway, genai_client, genai_response):
        monkeypatch.setattr(run_matching_module, "get_settings", lambda: settings)
        monkeypatch.setattr(run_matching_module, "AIGateway", lambda s: gateway)
        genai_client.aio.models.generate_content.return_value = genai_response(
            '[{"demandId": "d1", "rentalId": "r1", "reasoning": "Storefront", "confidenceScore": 0.87}]'
        )

        assert await run_matching_module.run_matching(*posts_files) is True

    @pytest.mark.asyncio
    async def test_failure(self, monkeypatch, posts_files, settings, gateway, genai_client):
        monkeypatch.setattr(run_matching_module, "get_settings", lambda: settings)
        monkeypatch.setattr(run_matching_module, "AIGateway", lambda s: gateway)
        genai_client.aio.models.generate_content.side_effect = ConnectionError("down")

        assert await run_matching_module.run_matching(*posts_files) is False

    def test_bad_file_exits_with_error(self, monkeypatch, tmp_path, settings):
        bad = tmp_path / "demands.json"
        bad.write_text("not json", encoding="utf-8")
        monkeypatch.setattr(run_matching_module, "get_settings", lambda: settings)
        monkeypatch.setattr(run_matching_module, "configure_logging", lambda s: None)
        monkeypatch.setattr(
            "sys.argv", ["run_matching", "--demands", str(bad), "--rentals", str(bad)]
        )

        with pytest.raises(SystemExit) as exc_info:
            run_matching_module.main()

        assert exc_info.value.code == 1


class TestRunGeocode:
    def test_interrupt_exits_130(self, monkeypatch, settings):
        def interrupted(coro):
            coro.close()
            raise KeyboardInterrupt

        monkeypatch.setattr(run_geocode_module, "get_settings", lambda: settings)
        monkeypatch.setattr(run_geocode_module, "configure_logging", lambda s: None)
        monkeypatch.setattr(run_geocode_module.asyncio, "run", interrupted)
        monkeypatch.setattr("sys.argv", ["run_geocode", "--address", "Eiffel Tower"])

        with pytest.raises(SystemExit) as exc_info:
            run_geocode_module.main()

        assert exc_info.value.code == 130
