# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Pydantic models for wardrobe data and structured backend results."""

from .wardrobe import (
    BoutiqueResults,
    BrandMatch,
    Category,
    ClothingCategorization,
    ClothingItem,
    GeoLocation,
    GroundingChunk,
    GroundingSource,
    ItemSuggestion,
    SeparatedItem,
    ShoppingRecommendation,
    StyleProfile,
    WardrobeGap,
)

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
