"""
Client for the Bridgehead posts REST API.

Read-only: the AI pipeline consumes demand and rental posts but
creating, updating and upvoting them belongs to the API itself.
"""

import asyncio
from typing import Optional, Type, TypeVar

import aiohttp
import structlog
from pydantic import BaseModel, ValidationError

from bridgehead.analysis.errors import PostsUnavailableError
from bridgehead.config import Settings, get_settings
from bridgehead.models import Coordinates, DemandPost, RentalPost

logger = structlog.get_logger()

PostT = TypeVar("PostT", bound=BaseModel)

DEMANDS_PATH = "/posts/demands"
RENTALS_PATH = "/posts/rentals"


class PostsClient:
    """
    Fetches posts over HTTP with aiohttp.

    Every request is bounded by `api_timeout_seconds`.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.api_timeout_seconds)

    @staticmethod
    def _near_params(near: Optional[Coordinates], radius_km: Optional[int]) -> dict:
        if near is None:
            return {}
        params = {"lat": str(near.latitude), "lng": str(near.longitude)}
        if radius_km is not None:
            params["radius"] = str(radius_km)
        return params

    async def _get_list(
        self,
        session: aiohttp.ClientSession,
        path: str,
        params: dict,
    ) -> list:
        url = f"{self.base_url}{path}"
        try:
            async with session.get(url, params=params) as response:
                if response.status >= 400:
                    raise PostsUnavailableError(f"GET {path} returned HTTP {response.status}")
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error("Posts API request failed", path=path, error=str(e) or type(e).__name__)
            raise PostsUnavailableError(f"Could not reach posts API at {url}") from e

        if not isinstance(data, list):
            raise PostsUnavailableError(f"GET {path} did not return a list")
        return data

    @staticmethod
    def _parse(items: list, model: Type[PostT]) -> list[PostT]:
        posts = []
        for item in items:
            try:
                posts.append(model.model_validate(item))
            except ValidationError as e:
                # One broken post must not drop the whole feed
                logger.warning(
                    "Skipping invalid post",
                    model=model.__name__,
                    post_id=item.get("id") if isinstance(item, dict) else None,
                    errors=e.error_count(),
                )
        return posts

    async def fetch_demands(
        self,
        near: Optional[Coordinates] = None,
        radius_km: Optional[int] = None,
    ) -> list[DemandPost]:
        """All demand posts, optionally limited to `radius_km` around `near`."""
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            items = await self._get_list(session, DEMANDS_PATH, self._near_params(near, radius_km))
        return self._parse(items, DemandPost)

    async def fetch_rentals(
        self,
        near: Optional[Coordinates] = None,
        radius_km: Optional[int] = None,
    ) -> list[RentalPost]:
        """All rental posts, optionally limited to `radius_km` around `near`."""
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            items = await self._get_list(session, RENTALS_PATH, self._near_params(near, radius_km))
        return self._parse(items, RentalPost)

    async def fetch_all(
        self,
        near: Optional[Coordinates] = None,
        radius_km: Optional[int] = None,
    ) -> tuple[list[DemandPost], list[RentalPost]]:
        """
        Demands and rentals, fetched concurrently.

        Raises:
            PostsUnavailableError: If either request fails
        """
        params = self._near_params(near, radius_km)
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            demand_items, rental_items = await asyncio.gather(
                self._get_list(session, DEMANDS_PATH, params),
                self._get_list(session, RENTALS_PATH, params),
            )

        demands = self._parse(demand_items, DemandPost)
        rentals = self._parse(rental_items, RentalPost)
        logger.info("Posts fetched", demands=len(demands), rentals=len(rentals))
        return demands, rentals
