from typing import Optional

import structlog

from ..constants import (
    CM_PER_INCH,
    EMERGENCY_CONFIDENCE,
    EMERGENCY_TOLERANCE_INCHES,
    FIT_PREFERENCE_LOOSE_MIN,
    FIT_PREFERENCE_SLIM_MAX,
    UNIVERSAL_HIP_TOLERANCE_CM,
    UNIVERSAL_MAX_CONFIDENCE,
)
from ..models import FitHint, GarmentCategory, SizeRecommendation
from ..reference_tables import fallback_chart
from ..translator import closest_numeric_offered, format_cm, inches_to_cm, parse_fit_preference
from .base import BottomsContext
from .notes import join_notes


logger = structlog.get_logger("perfit")


def _preference(ctx: BottomsContext) -> str:
    cut = ctx.reference.cut
    if cut in ("relaxed", "slim"):
        return cut
    if ctx.fit_hint == FitHint.RUNS_SMALL:
        return "relaxed"
    if ctx.fit_hint == FitHint.RUNS_LARGE:
        return "slim"
    preference = parse_fit_preference(ctx.profile.fit_preference)
    if preference is not None:
        if preference <= FIT_PREFERENCE_SLIM_MAX:
            return "slim"
        if preference >= FIT_PREFERENCE_LOOSE_MIN:
            return "relaxed"
    return "regular"


class UniversalStrategy:
    """Generic chart by waist when the page offers neither a table nor model data."""

    name = "universal"

    def applies(self, ctx: BottomsContext) -> bool:
        return True

    def run(self, ctx: BottomsContext) -> Optional[SizeRecommendation]:
        if ctx.waist is None:
            logger.info("bottoms_invalid_waist", waist=ctx.profile.waist, strategy=self.name)
            return None

        chart = fallback_chart(ctx.chart)
        preference = _preference(ctx)
        index = None
        between = False
        for i, size in enumerate(chart):
            if ctx.waist <= size["waist"]:
                if i > 0 and ctx.waist > chart[i - 1]["waist"]:
                    between = True
                    index = i - 1 if preference == "slim" else i
                else:
                    index = i
                break
        if index is None:
            index = len(chart) - 1

        hip_note = None
        sized_for_hip = False
        smallest_hip = min(s["hip"] for s in chart)
        if ctx.hip is not None and smallest_hip - ctx.hip > UNIVERSAL_HIP_TOLERANCE_CM:
            hip_note = "Hip measurement ignored (smaller than standard)"
        elif ctx.hip is not None and ctx.hip - chart[index]["hip"] > UNIVERSAL_HIP_TOLERANCE_CM and index < len(chart) - 1:
            index += 1
            sized_for_hip = True

        matched = chart[index]
        between_note = None
        if between:
            between_note = "Sized down for slimmer fit" if preference == "slim" else "Sized up for comfort fit"
        fit_note = join_notes(
            f"Universal Match: Recommended based on general industry standards for your {ctx.waist}cm waist",
            between_note,
            "Sized up for your hip" if sized_for_hip else None,
            hip_note,
        )

        logger.info("bottoms_universal_match", size=matched["size"], waist=ctx.waist, preference=preference)
        return SizeRecommendation(
            size=matched["size"],
            confidence=UNIVERSAL_MAX_CONFIDENCE,
            category=GarmentCategory.BOTTOM,
            user_measurement=ctx.waist,
            target_measurement=matched["waist"],
            fit_note=fit_note,
            strategy=self.name,
            **ctx.measurements(),
        )


def emergency_fallback(ctx: BottomsContext) -> Optional[SizeRecommendation]:
    """Nearest purely numeric offered size, only within a tight inch tolerance."""
    closest = closest_numeric_offered(ctx.offered, ctx.waist)
    if closest is None or closest[2] > EMERGENCY_TOLERANCE_INCHES:
        logger.info(
            "bottoms_no_match",
            waist=ctx.waist,
            table_range=(ctx.rows[0].waist, ctx.rows[-1].waist) if ctx.rows else None,
            closest=closest[0] if closest else None,
        )
        return None

    label, inches, _diff = closest
    logger.info("bottoms_emergency_match", size=label, waist=ctx.waist)
    return SizeRecommendation(
        size=label,
        confidence=EMERGENCY_CONFIDENCE,
        category=GarmentCategory.BOTTOM,
        user_measurement=ctx.waist,
        target_measurement=inches_to_cm(inches),
        fit_note=(
            f"Calculated from your {ctx.waist}cm waist (≈{format_cm(ctx.waist / CM_PER_INCH)}\"). "
            "Your measurements fall outside the size chart"
        ),
        strategy="emergency",
        **ctx.measurements(),
    )
