from typing import Optional

import structlog

from ..constants import (
    TEXT_CONFIDENCE,
    TEXT_DUAL_CONFIDENCE,
    TEXT_DUAL_INSEAM_LONGER_CM,
    TEXT_DUAL_MODEL_TALLER_CM,
    TEXT_LONG_INSEAM_CM,
    TEXT_SHORT_INSEAM_CM,
)
from ..models import FitHint, GarmentCategory, SecondarySize, SizeRecommendation
from ..reference_tables import LETTER_SCALE
from ..translator import format_cm
from .base import BottomsContext
from .notes import join_notes


logger = structlog.get_logger("perfit")

# (upper bound exclusive, letter)
_WAIST_BUCKETS = ((74, "XS"), (80, "S"), (86, "M"), (94, "L"), (102, "XL"), (110, "XXL"))


def waist_bucket(waist: int) -> str:
    for bound, letter in _WAIST_BUCKETS:
        if waist < bound:
            return letter
    return "XXXL"


class TextStrategy:
    """Waist-anchored estimate from model and inseam text when the page has no table."""

    name = "text"

    def applies(self, ctx: BottomsContext) -> bool:
        return bool(ctx.reference.model_height or ctx.reference.inseam_length)

    def run(self, ctx: BottomsContext) -> Optional[SizeRecommendation]:
        if ctx.waist is None:
            logger.info("bottoms_invalid_waist", waist=ctx.profile.waist, strategy=self.name)
            return None

        scale = list(LETTER_SCALE)
        index = scale.index(waist_bucket(ctx.waist))

        shift_note = None
        brand = ctx.brand_suggestion
        if brand == 0 and ctx.fit_hint is not None:
            brand = 1 if ctx.fit_hint == FitHint.RUNS_SMALL else -1
        if brand > 0 and index < len(scale) - 1:
            index += 1
            shift_note = "Sized up because item runs small"
        elif brand < 0 and index > 0:
            index -= 1
            shift_note = "Sized down because item runs large"

        product_inseam = ctx.reference.inseam_length or ctx.reference.item_length
        inseam_diff = 0.0
        inseam_note = None
        if ctx.inseam and product_inseam:
            inseam_diff = product_inseam - ctx.inseam
            if inseam_diff < TEXT_SHORT_INSEAM_CM:
                inseam_note = "May be short in the legs"
            elif inseam_diff > TEXT_LONG_INSEAM_CM:
                inseam_note = "Long legs, can be hemmed"

        size = scale[index]
        height_diff = ctx.reference.model_height - ctx.height if ctx.reference.model_height and ctx.height else 0
        if height_diff >= TEXT_DUAL_MODEL_TALLER_CM and inseam_diff > TEXT_DUAL_INSEAM_LONGER_CM and index > 0:
            shorter = scale[index - 1]
            stretchy = bool(ctx.reference.stretch and ctx.reference.stretch > 0)
            length_note = (
                f"You are {format_cm(height_diff)}cm shorter than the model. Size {size} fits your waist, "
                f"but Size {shorter} might prevent the legs from being too long"
                f"{' if the fabric is stretchy' if stretchy else ''}."
            )
            logger.info("bottoms_text_dual", size=size, secondary=shorter, height_diff=height_diff)
            return SizeRecommendation(
                size=size,
                confidence=TEXT_DUAL_CONFIDENCE,
                category=GarmentCategory.BOTTOM,
                user_measurement=ctx.waist,
                target_measurement=ctx.waist,
                fit_note=join_notes("Best Waist Fit", shift_note, inseam_note),
                length_note=length_note,
                secondary=SecondarySize(size=shorter, note="Shorter length"),
                strategy=self.name,
                **ctx.measurements(),
            )

        logger.info("bottoms_text_match", size=size, waist=ctx.waist)
        return SizeRecommendation(
            size=size,
            confidence=TEXT_CONFIDENCE,
            category=GarmentCategory.BOTTOM,
            user_measurement=ctx.waist,
            target_measurement=ctx.waist,
            fit_note=join_notes(shift_note, inseam_note) or "Estimated from waist measurement",
            strategy=self.name,
            **ctx.measurements(),
        )
