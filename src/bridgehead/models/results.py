"""
Pipeline results.

- MatchResult: one AI-proposed demand/rental pairing (validated schema)
- ResolvedMatch: a MatchResult joined with the posts it references
- BusinessIdeas: Markdown ideas plus grounding sources
- Success / Failure: uniform outcome of every pipeline operation
"""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from bridgehead.models.posts import DemandPost, RentalPost

T = TypeVar("T")


class MatchResult(BaseModel):
    """
    Pairing returned by the matchmaker model.

    Ephemeral: never persisted. Key names follow the JSON contract
    requested in the prompt (camelCase).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    demand_id: StrictStr = Field(..., alias="demandId")
    rental_id: StrictStr = Field(..., alias="rentalId")
    reasoning: StrictStr = Field(..., description="Why the pair fits")
    confidence_score: float = Field(
        ..., alias="confidenceScore", description="Model confidence, 0.0 to 1.0"
    )

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _must_be_number(cls, value):
        # bool is an int subclass and numeric strings would coerce silently
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("confidenceScore must be a number")
        return value


@dataclass
class ResolvedMatch:
    """What a match card renders: the match and both posts."""

    match: MatchResult
    demand: DemandPost
    rental: RentalPost

    @property
    def confidence_percent(self) -> int:
        # Halves round up, as on the match cards
        return math.floor(self.match.confidence_score * 100 + 0.5)


@dataclass
class GroundingSource:
    """Citation attached by search or maps grounding."""

    kind: str  # "web" or "maps"
    title: str
    uri: str


@dataclass
class BusinessIdeas:
    """Generated business ideas for a location."""

    markdown: str
    model: str
    deep_dive: bool = False
    sources: list[GroundingSource] = field(default_factory=list)


@dataclass
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass
class Failure:
    """
    A failed pipeline call.

    `error` keeps the typed cause (UpstreamError vs InvalidResponseError)
    so callers can pick a remediation; `message` is safe to show users.
    """

    error: Exception
    message: str

    @property
    def ok(self) -> bool:
        return False


AIResult = Union[Success[T], Failure]
