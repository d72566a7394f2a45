"""
Command line entry points.

Shared helpers: structlog setup and loading posts from JSON files or
the REST API.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Type, TypeVar

import structlog

from bridgehead.analysis.errors import PostsUnavailableError
from bridgehead.config import Settings
from bridgehead.database import PostsClient
from bridgehead.models import DemandPost, RentalPost

PostT = TypeVar("PostT", DemandPost, RentalPost)


def configure_logging(settings: Settings) -> None:
    """Route structlog through stdlib logging at the configured level."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _load_file(path: Path, model: Type[PostT]) -> list[PostT]:
    """
    Posts from a JSON array file.

    Raises:
        PostsUnavailableError: If the file is unreadable, not JSON or holds invalid posts
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError("expected a JSON array of posts")
        return [model.model_validate(item) for item in data]
    except (OSError, ValueError) as e:
        raise PostsUnavailableError(f"Could not load posts from {path}: {e}") from e


def load_demands_file(path: Path) -> list[DemandPost]:
    return _load_file(path, DemandPost)


def load_rentals_file(path: Path) -> list[RentalPost]:
    return _load_file(path, RentalPost)


async def load_posts(
    settings: Settings,
    demands_file: Optional[Path] = None,
    rentals_file: Optional[Path] = None,
) -> tuple[list[DemandPost], list[RentalPost]]:
    """Posts from the given files; whatever is missing comes from the API."""
    if demands_file and rentals_file:
        return load_demands_file(demands_file), load_rentals_file(rentals_file)

    client = PostsClient(settings=settings)
    if demands_file:
        return load_demands_file(demands_file), await client.fetch_rentals()
    if rentals_file:
        return await client.fetch_demands(), load_rentals_file(rentals_file)
    return await client.fetch_all()
