# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Wardrobe data models returned by the stylist service.

The backend answers structured requests with camelCase JSON. Models accept
either the JSON names or the snake_case attribute names and ignore fields
they do not know about.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class _BackendModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Category(str, Enum):
    """Clothing categories used across the wardrobe."""

    TOPS = "Tops"
    BOTTOMS = "Bottoms"
    SHOES = "Shoes"
    ACCESSORIES = "Accessories"
    OUTERWEAR = "Outerwear"
    DRESSES = "Dresses"


class GeoLocation(_BackendModel):
    """Latitude/longitude used to ground boutique searches."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class GroundingSource(_BackendModel):
    uri: str
    title: str = ""


class GroundingChunk(_BackendModel):
    """A web or maps source the backend used to ground its answer."""

    web: GroundingSource | None = None
    maps: GroundingSource | None = None


class ClothingCategorization(_BackendModel):
    """Attributes the backend extracted from a single clothing photo."""

    category: str | None = None
    color: str | None = None
    season: list[str] = Field(default_factory=list)
    occasion: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @property
    def known_category(self) -> Category | None:
        """The category as a Category member, or None if unrecognised."""
        try:
            return Category(self.category) if self.category else None
        except ValueError:
            return None


class SeparatedItem(ClothingCategorization):
    """A clothing item detected in a multi-item photo, with its source image."""

    image: str = ""


class ClothingItem(_BackendModel):
    """A catalogued wardrobe item."""

    id: str
    image_url: str = Field(default="", alias="imageUrl")
    category: Category
    color: str
    season: list[str] = Field(default_factory=list)
    occasion: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="createdAt"
    )
    is_liked: bool = Field(default=False, alias="isLiked")

    def context_line(self) -> str:
        """One-line description used in wardrobe prompts."""
        return f"{self.category.value}: {self.color} ({', '.join(self.tags)})"


class StyleProfile(_BackendModel):
    dominant_colors: list[str] = Field(default_factory=list, alias="dominantColors")
    top_occasions: list[str] = Field(default_factory=list, alias="topOccasions")
    core_aesthetic: str = Field(default="", alias="coreAesthetic")


class WardrobeGap(_BackendModel):
    category: str = ""
    reason: str = ""


class ItemSuggestion(_BackendModel):
    item_type: str = Field(default="", alias="itemType")
    why_it_fits: str = Field(default="", alias="whyItFits")
    styling_idea: str = Field(default="", alias="stylingIdea")


class BrandMatch(_BackendModel):
    name: str = ""
    style: str = ""
    url: str = ""


class ShoppingRecommendation(_BackendModel):
    """Wardrobe analysis with gaps, suggestions and matching brands."""

    wardrobe_analysis: str = Field(default="", alias="wardrobeAnalysis")
    style_profile: StyleProfile = Field(
        default_factory=StyleProfile, alias="styleProfile"
    )
    gaps: list[WardrobeGap] = Field(default_factory=list)
    suggestions: list[ItemSuggestion] = Field(default_factory=list)
    brand_matches: list[BrandMatch] = Field(default_factory=list, alias="brandMatches")
    sources: list[GroundingChunk] = Field(default_factory=list)


class BoutiqueResults(_BackendModel):
    """Nearby boutiques or tailors, with the places used as grounding."""

    text: str = ""
    places: list[GroundingChunk] = Field(default_factory=list)


__all__ = [
    "BoutiqueResults",
    "BrandMatch",
    "Category",
    "ClothingCategorization",
    "ClothingItem",
    "GeoLocation",
    "GroundingChunk",
    "GroundingSource",
    "ItemSuggestion",
    "SeparatedItem",
    "ShoppingRecommendation",
    "StyleProfile",
    "WardrobeGap",
]
