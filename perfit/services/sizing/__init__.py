from .bottoms import calculate_bottom_recommendation
from .length import length_warning
from .models import (
    FitHint,
    GarmentCategory,
    ReferenceMeasurement,
    SecondarySize,
    ShopperProfile,
    SizeRecommendation,
    SizeTableRow,
)
from .shoes import calculate_shoe_recommendation
from .tops import calculate_top_recommendation
from .translator import parse_fit_hint, resolve_duplicate


__all__ = [
    "FitHint",
    "GarmentCategory",
    "ReferenceMeasurement",
    "SecondarySize",
    "ShopperProfile",
    "SizeRecommendation",
    "SizeTableRow",
    "calculate_bottom_recommendation",
    "calculate_shoe_recommendation",
    "calculate_top_recommendation",
    "length_warning",
    "parse_fit_hint",
    "resolve_duplicate",
]
