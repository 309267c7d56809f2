"""Jeans sized as waist x length inches (``"32x34"``, ``"W32 L34"``)."""
from typing import List, NamedTuple, Optional, Tuple

import structlog

from ..constants import (
    AGGRESSIVE_ROUNDING_STEPS,
    BRAND_SHIFT_CM,
    CM_PER_INCH,
    INSEAM_PER_HEIGHT,
    INSEAM_STEP_CM,
    LENGTH_STEP_INCHES,
    WXL_BRAND_SHIFT_INCHES,
    WXL_EASE_CM,
    WXL_LOOSE_CONFIDENCE,
    WXL_MAX_WAIST_DIFF_INCHES,
)
from ..models import FitHint, GarmentCategory, SecondarySize, SizeRecommendation, SizeTableRow
from ..reference_tables import waist_cm_for_numeric
from ..translator import cm_to_inches, format_cm, inches_to_cm, parse_wxl, round_away_from_zero, round_half_up
from .base import BottomsContext
from .notes import inseam_anchor_note, join_notes


logger = structlog.get_logger("perfit")


class WxLLabel(NamedTuple):
    label: str
    waist: int
    length: int


class WxLTarget(NamedTuple):
    waist: int
    length: Optional[int]
    rounded_down: bool
    note: Optional[str]


def wxl_labels(ctx: BottomsContext) -> List[WxLLabel]:
    """Offered W x L labels, or the table's labels when the picker has none."""
    out = []
    for source in (ctx.offered, [row.label for row in ctx.rows]):
        for label in source:
            parsed = parse_wxl(label)
            if parsed is not None:
                out.append(WxLLabel(label, parsed[0], parsed[1]))
        if out:
            break
    return out


def length_steps(inseam_diff_cm: float) -> int:
    """Whole length steps for an inseam difference.

    Half steps round away from zero; past 1.3 steps any fraction does.
    """
    steps = inseam_diff_cm / INSEAM_STEP_CM
    if abs(steps) > AGGRESSIVE_ROUNDING_STEPS:
        return round_away_from_zero(steps)
    magnitude = round_half_up(abs(steps))
    return magnitude if steps >= 0 else -magnitude


def target_length(ctx: BottomsContext) -> Optional[int]:
    reference = ctx.reference
    product = parse_wxl(reference.inseam_length_size)
    if ctx.inseam and reference.inseam_length and product is not None:
        steps = length_steps(ctx.inseam - reference.inseam_length)
        return product[1] + steps * LENGTH_STEP_INCHES
    if ctx.inseam:
        return cm_to_inches(ctx.inseam + WXL_EASE_CM)
    if ctx.height:
        return cm_to_inches(ctx.height * INSEAM_PER_HEIGHT + WXL_EASE_CM)
    return None


def target_waist(ctx: BottomsContext) -> WxLTarget:
    waist_cm: float = ctx.waist
    note = None
    brand = ctx.brand_suggestion
    if brand == 0 and ctx.fit_hint is not None:
        small = ctx.fit_hint == FitHint.RUNS_SMALL
        waist_cm += BRAND_SHIFT_CM if small else -BRAND_SHIFT_CM
        note = "Sized up because item runs small" if small else "Sized down because item runs large"

    raw = waist_cm / CM_PER_INCH
    waist = cm_to_inches(waist_cm)
    rounded_down = waist < raw
    if brand:
        waist += brand * WXL_BRAND_SHIFT_INCHES
        note = "Sized up because the brand says it runs small" if brand > 0 else "Sized down because the brand says it runs large"
    return WxLTarget(waist=waist, length=target_length(ctx), rounded_down=rounded_down, note=note)


def find_match(labels: List[WxLLabel], target: WxLTarget) -> Optional[Tuple[WxLLabel, bool]]:
    """Best label and whether it is an exact waist and length pair."""
    if target.length is not None:
        for item in labels:
            if item.waist == target.waist and item.length == target.length:
                return item, True
        same_length = [i for i in labels if i.length == target.length]
        if same_length:
            best = min(same_length, key=lambda i: abs(i.waist - target.waist))
            if abs(best.waist - target.waist) <= WXL_MAX_WAIST_DIFF_INCHES:
                return best, False

    def distance(item: WxLLabel) -> Tuple[int, int]:
        length_diff = abs(item.length - target.length) if target.length is not None else 0
        return abs(item.waist - target.waist), length_diff

    if not labels:
        return None
    best = min(labels, key=distance)
    if abs(best.waist - target.waist) > WXL_MAX_WAIST_DIFF_INCHES:
        return None
    exact = target.length is None and best.waist == target.waist
    return best, exact


def dual_neighbour(labels: List[WxLLabel], chosen: WxLLabel, roomier: bool) -> Optional[WxLLabel]:
    same_length = [i for i in labels if i.length == chosen.length and i.label != chosen.label]
    if roomier:
        larger = [i for i in same_length if i.waist > chosen.waist]
        return min(larger, key=lambda i: i.waist) if larger else None
    smaller = [i for i in same_length if i.waist < chosen.waist]
    return max(smaller, key=lambda i: i.waist) if smaller else None


def _closest_row(rows: List[SizeTableRow], waist_inches: int) -> Optional[SizeTableRow]:
    if not rows:
        return None
    waist_cm = waist_cm_for_numeric(waist_inches)
    return min(rows, key=lambda row: abs(row.waist - waist_cm))


class WxLStrategy:
    name = "wxl"

    def applies(self, ctx: BottomsContext) -> bool:
        return bool(wxl_labels(ctx))

    def run(self, ctx: BottomsContext) -> Optional[SizeRecommendation]:
        if ctx.waist is None:
            logger.info("bottoms_invalid_waist", waist=ctx.profile.waist, strategy=self.name)
            return None
        labels = wxl_labels(ctx)
        target = target_waist(ctx)
        found = find_match(labels, target)
        if found is None:
            logger.info("bottoms_wxl_no_match", target_waist=target.waist, target_length=target.length)
            return None
        chosen, exact = found

        neighbour = dual_neighbour(labels, chosen, roomier=target.rounded_down)
        secondary = None
        if neighbour is not None:
            note = f"Roomier waist (W{neighbour.waist})" if neighbour.waist > chosen.waist else f"Tighter waist (W{neighbour.waist})"
            secondary = SecondarySize(size=neighbour.label, note=note)

        anchor_note, _confirmed = inseam_anchor_note(ctx.reference.inseam_length, ctx.inseam)
        match_note = None
        if not exact:
            diffs = []
            if chosen.waist != target.waist:
                diffs.append(f"waist {abs(chosen.waist - target.waist)}\" difference")
            if target.length is not None and chosen.length != target.length:
                diffs.append(f"length {abs(chosen.length - target.length)}\" difference")
            match_note = "Closest W/L match" + (f" ({', '.join(diffs)})" if diffs else "")
        else:
            match_note = f"W{chosen.waist} fits your {ctx.waist}cm waist" + (
                f", L{chosen.length} your {format_cm(ctx.inseam)}cm inseam" if ctx.inseam else ""
            )

        logger.info(
            "bottoms_wxl_match",
            size=chosen.label,
            exact=exact,
            target_waist=target.waist,
            target_length=target.length,
            secondary=secondary.size if secondary else None,
        )
        return SizeRecommendation(
            size=chosen.label,
            confidence=1.0 if exact else WXL_LOOSE_CONFIDENCE,
            category=GarmentCategory.BOTTOM,
            user_measurement=ctx.waist,
            target_measurement=inches_to_cm(chosen.waist),
            matched_row=_closest_row(ctx.rows, chosen.waist),
            fit_note=join_notes(target.note, match_note, anchor_note),
            secondary=secondary,
            strategy=self.name,
            **ctx.measurements(),
        )
