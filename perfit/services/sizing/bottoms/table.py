"""Waist/hip matching against the store's own size table.

Adjustment precedence: model anchor, then brand size suggestion, then the
generic fit hint, then the plain table match. Only one of them moves the
result; lower layers are skipped once a higher one applies.
"""
from typing import List, Optional, Sequence

import structlog

from ..constants import BRAND_SHIFT_CM, MODEL_ANCHOR_CONFIDENCE
from ..models import FitHint, GarmentCategory, SizeRecommendation, SizeTableRow
from .base import BottomsContext
from .dropdown import prioritize
from .fallback import emergency_fallback
from .model_anchor import model_anchor
from .notes import belt_note, inseam_anchor_note, join_notes, row_inseam_note, stretch_note


logger = structlog.get_logger("perfit")

HIP_IGNORED_NOTE = "Hip measurement ignored (smaller than size chart)"


def should_ignore_hip(user_hip: Optional[int], rows: Sequence[SizeTableRow]) -> bool:
    """Dynamic hip filtering.

    Hip is dropped from matching when the shopper gave none, when the table has
    no hip column, or when the shopper's hip is below the table's smallest hip.
    """
    hips = [row.hip for row in rows if row.hip > 0]
    if user_hip is None or not hips:
        return True
    return user_hip < min(hips)


def qualifying_indices(rows: Sequence[SizeTableRow], waist: float, hip: Optional[float], ignore_hip: bool) -> List[int]:
    return [
        i for i, row in enumerate(rows)
        if row.waist >= waist and (ignore_hip or row.hip >= hip)
    ]


class TableStrategy:
    name = "table"

    def applies(self, ctx: BottomsContext) -> bool:
        return bool(ctx.rows)

    def run(self, ctx: BottomsContext) -> Optional[SizeRecommendation]:
        if ctx.waist is None:
            logger.info("bottoms_invalid_waist", waist=ctx.profile.waist, strategy=self.name)
            return None

        rows = ctx.rows
        reference = ctx.reference
        user_waist = ctx.waist
        ignore_hip = should_ignore_hip(ctx.hip, rows)
        if ignore_hip and ctx.hip is not None:
            logger.debug("bottoms_hip_ignored", hip=ctx.hip)

        # Fit hint only moves the measurements when the store gave no brand suggestion.
        brand = ctx.brand_suggestion
        waist: float = user_waist
        hip: Optional[float] = ctx.hip
        hint_note = None
        if brand == 0 and ctx.fit_hint is not None:
            shift = BRAND_SHIFT_CM if ctx.fit_hint == FitHint.RUNS_SMALL else -BRAND_SHIFT_CM
            waist += shift
            if hip is not None:
                hip += shift
            hint_note = "Sized up because item runs small" if shift > 0 else "Sized down because item runs large"

        matches = qualifying_indices(rows, waist, hip, ignore_hip)
        if not matches:
            logger.info("bottoms_table_no_row", waist=waist, hip=hip, ignore_hip=ignore_hip)
            return emergency_fallback(ctx)

        relaxed = reference.cut in ("relaxed", "regular")
        natural = matches[0]
        confidence = 1.0
        secondary: Optional[SizeTableRow] = None
        secondary_note: Optional[str] = None
        lead_note: Optional[str] = None

        anchor = model_anchor(rows, reference, user_waist, ctx.height, relaxed)
        if anchor is not None:
            primary = anchor.row
            confidence = MODEL_ANCHOR_CONFIDENCE
            lead_note = anchor.note
            table_row = rows[natural]
            if table_row.label != primary.label:
                secondary = table_row
                if table_row.waist > primary.waist:
                    secondary_note = f"Roomier in the waist ({table_row.waist:g}cm), but may be slightly long"
                else:
                    secondary_note = f"Size chart match ({table_row.waist:g}cm waist)"
        elif relaxed:
            primary = rows[natural]
            if brand < 0 and natural > 0:
                primary = rows[natural - 1]
                secondary = rows[natural]
                secondary_note = "Size chart match"
                lead_note = f"Sized down to {primary.label}: the brand says this item runs large"
            else:
                if brand > 0:
                    logger.debug("bottoms_brand_upsize_ignored", cut=reference.cut)
                if len(matches) > 1:
                    secondary = rows[matches[1]]
                    secondary_note = "Roomier - one size up"
                fit = reference.fit or "Relaxed"
                if secondary is not None:
                    lead_note = f"Best Fit ({fit})"
                else:
                    lead_note = f"Recommended {primary.label} based on {fit} Fit and your {user_waist}cm waist"
        else:
            target = max(0, min(len(rows) - 1, natural + brand))
            primary = rows[target]
            if target != natural:
                secondary = rows[natural]
                secondary_note = "Size chart match (without brand adjustment)"
                direction = "up" if brand > 0 else "down"
                reason = "runs small" if brand > 0 else "runs large"
                lead_note = f"Sized {direction} to {primary.label}: the brand says this item {reason}"
            elif not ctx.has_model_data:
                lead_note = f"Recommended {primary.label} based on {reference.fit or 'fit type'} and your {user_waist}cm waist"

        anchor_note, confirmed = inseam_anchor_note(reference.inseam_length, ctx.inseam)
        if confirmed:
            confidence = 1.0
        length_note = anchor_note or row_inseam_note(primary, ctx.inseam, reference.is_ankle_length)

        fit_note = join_notes(
            lead_note,
            hint_note,
            length_note,
            belt_note(primary, user_waist),
            stretch_note(reference.stretch, primary, user_waist),
            HIP_IGNORED_NOTE if ignore_hip and ctx.hip is not None else None,
        )

        label, second = prioritize(primary, secondary, secondary_note, ctx.offered, user_waist)
        logger.info(
            "bottoms_table_match",
            size=label,
            table_size=primary.label,
            secondary=second.size if second else None,
            anchored=anchor is not None,
            relaxed=relaxed,
            brand=brand,
        )
        return SizeRecommendation(
            size=label,
            confidence=confidence,
            category=GarmentCategory.BOTTOM,
            user_measurement=user_waist,
            target_measurement=primary.waist,
            matched_row=primary,
            fit_note=fit_note,
            secondary=second,
            strategy="model_anchor" if anchor is not None else self.name,
            **ctx.measurements(),
        )
