"""
Marketplace posts.

Models for the community posts the AI pipeline reads:
- DemandPost: a business the community wants nearby
- RentalPost: a commercial space available for lease

They are fetched from the REST API (camelCase JSON) and never
mutated by the pipeline.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """Latitude/longitude pair."""

    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")

    def as_lat_lng(self) -> str:
        """Compact "lat,lng" form used inside prompts."""
        return f"{self.latitude},{self.longitude}"


class Location(Coordinates):
    """Coordinates plus the human readable address shown to users."""

    address: str = Field(default="", description="Street address or place name")

    def coordinates(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


class _Post(BaseModel):
    """Fields shared by demand and rental posts."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Post ID assigned by the API")
    title: str = Field(..., description="Post title")
    category: str = Field(..., description="Business category")
    description: str = Field(default="", description="Free text description")
    location: Location

    images: list[str] = Field(default_factory=list, description="Image URLs")
    created_at: Optional[str] = Field(None, alias="createdAt")

    # Contact
    phone: Optional[str] = None
    email: Optional[str] = None
    open_to_collaboration: bool = Field(default=False, alias="openToCollaboration")

    # ID, or the populated user document
    created_by: Optional[Union[str, dict]] = Field(None, alias="createdBy")


class DemandPost(_Post):
    """
    A community-voiced need for a kind of business at a location.

    `upvotes` changes through toggle actions handled by the REST API.
    """

    upvotes: int = Field(default=0, ge=0, description="Community upvotes")
    status: Optional[str] = Field(None, description="active or solved")


class RentalPost(_Post):
    """A commercial property listed for lease."""

    price: float = Field(..., ge=0, description="Monthly rent")
    square_feet: float = Field(..., ge=0, alias="squareFeet")
    status: Optional[str] = Field(None, description="active or rented")
