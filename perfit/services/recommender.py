from typing import Optional, Sequence, Union

import structlog

from ..config import settings
from .sizing import (
    FitHint,
    GarmentCategory,
    ReferenceMeasurement,
    ShopperProfile,
    SizeRecommendation,
    SizeTableRow,
    calculate_bottom_recommendation,
    calculate_shoe_recommendation,
    calculate_top_recommendation,
    length_warning,
    parse_fit_hint,
)
from .sizing.constants import UNKNOWN_CATEGORY_CONFIDENCE
from .sizing.translator import parse_measurement


logger = structlog.get_logger("perfit")


def _parse_category(category: Union[str, GarmentCategory, None]) -> GarmentCategory:
    if isinstance(category, GarmentCategory):
        return category
    try:
        return GarmentCategory((category or "unknown").strip().lower())
    except ValueError:
        return GarmentCategory.UNKNOWN


def _unknown_category(profile: ShopperProfile, rows: Sequence[SizeTableRow]) -> Optional[SizeRecommendation]:
    chest = parse_measurement(profile.chest)
    if chest is None:
        return None
    for row in rows:
        if row.chest >= chest:
            return SizeRecommendation(
                size=row.label,
                confidence=UNKNOWN_CATEGORY_CONFIDENCE,
                category=GarmentCategory.UNKNOWN,
                user_measurement=chest,
                target_measurement=row.chest,
                matched_row=row,
                strategy="chest_scan",
            )
    return None


def calculate_recommendation(
    profile: ShopperProfile,
    category: Union[str, GarmentCategory, None],
    rows: Optional[Sequence[SizeTableRow]] = None,
    fit_hint: Union[str, int, float, FitHint, None] = None,
    reference: Optional[ReferenceMeasurement] = None,
    offered_sizes: Optional[Sequence[str]] = None,
    fallback_chart: Optional[str] = None,
) -> Optional[SizeRecommendation]:
    """Dispatch to the engine for ``category`` and finish the result.

    Returns ``None`` when no size can be recommended. The result carries a
    length warning for tops and bottoms when the fit model's height differs a
    lot from the shopper's and the engine did not already say so.
    """
    cat = _parse_category(category)
    rows = list(rows or [])
    hint = parse_fit_hint(fit_hint)
    offered = list(offered_sizes or [])
    chart = fallback_chart or settings.fallback_chart

    if cat == GarmentCategory.TOP:
        result = calculate_top_recommendation(profile, rows, hint, reference, chart)
    elif cat == GarmentCategory.BOTTOM:
        result = calculate_bottom_recommendation(profile, rows, hint, reference, offered, chart)
    elif cat == GarmentCategory.SHOES:
        result = calculate_shoe_recommendation(profile, rows, hint, reference, offered)
    else:
        result = _unknown_category(profile, rows)

    if result is None:
        logger.info("recommendation_not_found", category=cat.value, rows=len(rows), offered=len(offered))
        return None

    updates = {}
    if cat in (GarmentCategory.TOP, GarmentCategory.BOTTOM) and not result.length_note:
        warning = length_warning(profile, reference)
        if warning:
            updates["length_note"] = warning
    if result.secondary is not None and result.secondary.size == result.size:
        updates["secondary"] = None
    if updates:
        result = result.model_copy(update=updates)

    logger.info(
        "recommendation_found",
        category=cat.value,
        size=result.size,
        confidence=result.confidence,
        strategy=result.strategy,
        secondary=result.secondary_size,
    )
    return result


class Recommender:
    def __init__(self, fallback_chart: Optional[str] = None) -> None:
        self.fallback_chart = fallback_chart or settings.fallback_chart

    def recommend(
        self,
        profile: ShopperProfile,
        category: Union[str, GarmentCategory, None],
        rows: Optional[Sequence[SizeTableRow]] = None,
        fit_hint: Union[str, int, float, FitHint, None] = None,
        reference: Optional[ReferenceMeasurement] = None,
        offered_sizes: Optional[Sequence[str]] = None,
    ) -> Optional[SizeRecommendation]:
        return calculate_recommendation(
            profile,
            category,
            rows=rows,
            fit_hint=fit_hint,
            reference=reference,
            offered_sizes=offered_sizes,
            fallback_chart=self.fallback_chart,
        )
