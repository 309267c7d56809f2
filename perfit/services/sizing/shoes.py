"""Foot-length sizing with construction-aware buffers.

Slip-ons (moccasins, loafers, laceless boots) have nothing but the last to
hold the heel, so they are sized snug. Laced shoes can absorb a little extra
length and width.
"""
from typing import List, Optional, Sequence, Tuple

import structlog

from .constants import (
    LACED_ADJUSTMENT_CM,
    LACED_MAX_BUFFER_CM,
    LACED_MIN_BUFFER_CM,
    LACELESS_BOOT_MIN_BUFFER_CM,
    SHOE_BORDER_CASE_CM,
    SHOE_CHART_CONFIDENCE,
    SHOE_CONFIDENCE,
    SHOE_DUAL_MAX_GAP_CM,
    SHOE_DUAL_MIN_GAP_CM,
    SHOE_EXPERT_OVERRIDE_CM,
    SHOE_RUNS_LARGE_SHIFT_CM,
    SHOE_RUNS_SMALL_SHIFT_CM,
    SHOE_SIZE_NUMERIC_CONFIDENCE,
    SHOE_SIZE_TOLERANCE,
    SHOE_SLIP_ON_CONFIDENCE,
    SHOE_SNUG_PREFERENCE_CM,
    SLIP_ON_ADJUSTMENT_CM,
    SLIP_ON_MAX_BUFFER_CM,
    SLIP_ON_MIN_BUFFER_CM,
    SLIP_ON_WIDE_ADJUSTMENT_CM,
    SLIP_ON_WIDE_MAX_BUFFER_CM,
)
from .models import (
    FitHint,
    GarmentCategory,
    ReferenceMeasurement,
    SecondarySize,
    ShoeCandidate,
    ShopperProfile,
    SizeRecommendation,
    SizeTableRow,
)
from .reference_tables import MENS_SHOE_MAPPING, shoe_chart_points
from .translator import format_size_for_display, interpolate_foot_length, parse_decimal, parse_size_to_number


logger = structlog.get_logger("perfit")

_SAME_SIZE = 0.01


def is_slip_on(reference: ReferenceMeasurement) -> bool:
    if reference.manual_override is not None:
        return reference.manual_override
    return reference.is_moccasin or (reference.is_leather_boot and not reference.has_laces)


def _min_buffer(reference: ReferenceMeasurement, slip_on: bool) -> float:
    """How far the shoe may fall short of the foot before it is too small."""
    if not slip_on:
        return LACED_MIN_BUFFER_CM
    if reference.is_moccasin or reference.manual_override:
        return SLIP_ON_MIN_BUFFER_CM
    return LACELESS_BOOT_MIN_BUFFER_CM


def _find(candidates: Sequence[ShoeCandidate], label: Optional[str]) -> Optional[ShoeCandidate]:
    value = parse_size_to_number(label)
    if value is None:
        return None
    for candidate in candidates:
        if abs(candidate.value - value) < _SAME_SIZE:
            return candidate
    return None


def build_candidates(rows: Sequence[SizeTableRow], offered: Sequence[str]) -> Tuple[List[ShoeCandidate], bool]:
    """Sizes to choose from, and whether foot lengths came from the reference chart.

    Table rows with a foot length are used as they are; offered sizes that fall
    between two of them are interpolated. A table without foot lengths falls
    back to the men's EU chart.
    """
    table: List[ShoeCandidate] = []
    for row in rows:
        value = parse_size_to_number(row.label)
        if row.foot_length and row.foot_length > 0 and value is not None:
            table.append(ShoeCandidate(label=row.label.strip(), value=value, foot_length=row.foot_length, row_index=row.row_index))
    table.sort(key=lambda c: c.value)

    if table:
        known = [(c.value, c.foot_length) for c in table]
        candidates = list(table)
        for label in offered:
            value = parse_size_to_number(label)
            if value is None or _find(candidates, label) is not None:
                continue
            foot_length = interpolate_foot_length(value, known)
            if foot_length is not None:
                candidates.append(ShoeCandidate(label=label.strip(), value=value, foot_length=foot_length, interpolated=True))
                logger.debug("shoes_interpolated", size=label, foot_length=foot_length)
        candidates.sort(key=lambda c: c.value)
        return candidates, False

    chart = [(float(size), length) for size, length in shoe_chart_points()]
    labels = list(offered) or [row.label for row in rows] or list(MENS_SHOE_MAPPING)
    candidates = []
    for label in labels:
        value = parse_size_to_number(label)
        if value is None:
            continue
        exact = [length for size, length in chart if abs(size - value) < _SAME_SIZE]
        foot_length = exact[0] if exact else interpolate_foot_length(value, chart)
        if foot_length is not None:
            candidates.append(ShoeCandidate(label=label.strip(), value=value, foot_length=foot_length, interpolated=not exact))
    candidates.sort(key=lambda c: c.value)
    return candidates, True


def _matched_row(candidate: ShoeCandidate) -> SizeTableRow:
    return SizeTableRow(label=candidate.label, foot_length=candidate.foot_length, row_index=candidate.row_index)


def _match_shoe_size(profile: ShopperProfile, candidates: Sequence[ShoeCandidate]) -> Optional[SizeRecommendation]:
    shoe_size = parse_size_to_number(str(profile.shoe_size)) if profile.shoe_size is not None else None
    if shoe_size is None or shoe_size <= 0:
        logger.info("shoes_no_foot_data", foot_length=profile.foot_length, shoe_size=profile.shoe_size)
        return None

    best = min(candidates, key=lambda c: (abs(c.value - shoe_size), c.value))
    diff = abs(best.value - shoe_size)
    if diff < _SAME_SIZE:
        confidence = 1.0
        note = f"Matches your usual size {best.label}"
    elif diff <= SHOE_SIZE_TOLERANCE:
        confidence = SHOE_SIZE_NUMERIC_CONFIDENCE
        note = f"Closest size to your usual {profile.shoe_size}"
    else:
        logger.info("shoes_no_size_match", shoe_size=shoe_size)
        return None

    return SizeRecommendation(
        size=best.label,
        confidence=confidence,
        category=GarmentCategory.SHOES,
        user_measurement=shoe_size,
        target_measurement=best.value,
        matched_row=_matched_row(best),
        fit_note=note,
        strategy="shoe_size",
    )


def _store_check(
    store: str, candidates: Sequence[ShoeCandidate], foot: float, min_buffer: float, max_buffer: float
) -> str:
    candidate = _find(candidates, store)
    if candidate is None:
        return f"Store suggests {store}, which is not in the size chart"
    buffer = candidate.foot_length - foot
    if buffer > max_buffer:
        return f"Store suggests {store}, but it's too large (+{buffer:.1f}cm buffer exceeds max {max_buffer}cm)"
    if buffer < min_buffer:
        return f"Store suggests {store}, but it may be too small ({buffer:+.1f}cm buffer, min {min_buffer}cm)"
    return f"Store recommendation ({store}) is safe ({buffer:+.1f}cm)"


def calculate_shoe_recommendation(
    profile: ShopperProfile,
    rows: Sequence[SizeTableRow],
    fit_hint: Optional[FitHint] = None,
    reference: Optional[ReferenceMeasurement] = None,
    offered: Optional[Sequence[str]] = None,
) -> Optional[SizeRecommendation]:
    reference = reference or ReferenceMeasurement()
    candidates, from_chart = build_candidates(rows, offered or [])
    if not candidates:
        logger.info("shoes_no_candidates", rows=len(rows))
        return None

    foot = parse_decimal(profile.foot_length)
    if foot is None:
        return _match_shoe_size(profile, candidates)

    # 1. Construction
    slip_on = is_slip_on(reference)
    wide = (profile.foot_width or "").strip().lower() == "wide"
    if slip_on and wide:
        adjustment, max_buffer = SLIP_ON_WIDE_ADJUSTMENT_CM, SLIP_ON_WIDE_MAX_BUFFER_CM
    elif slip_on:
        adjustment, max_buffer = SLIP_ON_ADJUSTMENT_CM, SLIP_ON_MAX_BUFFER_CM
    else:
        # Laces take up width, so a wide foot changes nothing here
        adjustment, max_buffer = LACED_ADJUSTMENT_CM, LACED_MAX_BUFFER_CM
    min_buffer = _min_buffer(reference, slip_on)

    if fit_hint == FitHint.RUNS_LARGE:
        adjustment += SHOE_RUNS_LARGE_SHIFT_CM
    elif fit_hint == FitHint.RUNS_SMALL:
        adjustment += SHOE_RUNS_SMALL_SHIFT_CM
    target = foot + adjustment

    # 2. Rank within the buffer
    allowed = [c for c in candidates if min_buffer <= c.foot_length - foot <= max_buffer]
    buffer_warning = None
    if not allowed:
        allowed = list(candidates)
    ranked = sorted(allowed, key=lambda c: (abs(c.foot_length - target), c.foot_length))
    best = ranked[0]
    second = ranked[1] if len(ranked) > 1 else None
    best_buffer = best.foot_length - foot
    if best_buffer > max_buffer:
        buffer_warning = f"WARNING: Buffer of +{best_buffer:.1f}cm exceeds recommended max ({max_buffer}cm)"
        logger.warning("shoes_buffer_exceeded", size=best.label, buffer=best_buffer, max_buffer=max_buffer)
    elif best_buffer < min_buffer:
        buffer_warning = (
            f"WARNING: Size {best.label} may be too small "
            f"({-best_buffer:.1f}cm under foot length, min: {min_buffer}cm)"
        )
        logger.warning("shoes_buffer_too_small", size=best.label, buffer=best_buffer, min_buffer=min_buffer)

    # 3. Expert override
    technical: Optional[ShoeCandidate] = None
    expert = _find(candidates, reference.recommended_size) if reference.recommended_size else None
    if expert is not None and abs(expert.foot_length - foot) <= SHOE_EXPERT_OVERRIDE_CM:
        if expert.label != best.label:
            technical = best
        best = expert
        logger.info("shoes_expert_override", size=expert.label, technical=technical.label if technical else None)
    else:
        expert = None

    # 4. Slip-on snug preference
    snug_chosen = False
    if expert is None and slip_on and second is not None:
        smaller = min(best, second, key=lambda c: c.foot_length)
        best_diff = abs(best.foot_length - target)
        second_diff = abs(second.foot_length - target)
        if abs(best_diff - second_diff) < SHOE_BORDER_CASE_CM or abs(smaller.foot_length - target) < SHOE_SNUG_PREFERENCE_CM:
            snug_chosen = smaller is not best
            best = smaller

    # 5. Dual output
    secondary: Optional[SecondarySize] = None
    runs_large_adjusted = False
    if expert is not None:
        if technical is not None:
            secondary = SecondarySize(size=technical.label, note="Technical match for your foot length")
    elif fit_hint == FitHint.RUNS_LARGE and second is not None:
        best, technical = sorted((ranked[0], second), key=lambda c: c.foot_length)
        runs_large_adjusted = True
        secondary = SecondarySize(size=technical.label, note="Technical size (item runs large)")
    elif slip_on and not wide and second is not None:
        smaller, larger = sorted((ranked[0], second), key=lambda c: c.foot_length)
        if SHOE_DUAL_MIN_GAP_CM <= larger.foot_length - smaller.foot_length <= SHOE_DUAL_MAX_GAP_CM:
            best = smaller
            secondary = SecondarySize(size=larger.label, note="Comfort Fit")

    # 6. Note
    buffer = best.foot_length - foot
    material = reference.material_info or "leather"
    if expert is not None:
        fit_note = f"Following expert recommendation: size {expert.label}"
    elif runs_large_adjusted:
        fit_note = f"Item runs large - recommending {best.label} (technical match: {technical.label})"
    elif slip_on and secondary is not None:
        fit_note = f"Snug Fit: slip-on {material} stretches over time"
    elif slip_on:
        fit_note = f"Chose {best.label} as slip-on {material} stretches and would otherwise cause heel slip"
    elif fit_hint == FitHint.RUNS_LARGE:
        fit_note = "Item runs large - sized down accordingly"
    else:
        grade = "PERFECT" if buffer <= 0.2 else "IDEAL" if buffer <= 0.4 else "ROOMY"
        fit_note = f"Laced (laces provide secure fit) - {grade} fit ({buffer:+.1f}cm)"
    if best.interpolated:
        fit_note += f" • Foot length for {format_size_for_display(best.label)} estimated between chart sizes"
    if buffer_warning:
        fit_note = f"{buffer_warning} • {fit_note}"

    store_note = None
    if reference.store_suggestion:
        store_note = _store_check(reference.store_suggestion, candidates, foot, min_buffer, max_buffer)

    if from_chart:
        confidence = SHOE_CHART_CONFIDENCE
    else:
        confidence = SHOE_SLIP_ON_CONFIDENCE if slip_on else SHOE_CONFIDENCE

    logger.info(
        "shoes_match",
        size=best.label,
        foot_length=foot,
        target=round(target, 2),
        slip_on=slip_on,
        snug=snug_chosen,
        secondary=secondary.size if secondary else None,
    )
    return SizeRecommendation(
        size=best.label,
        confidence=confidence,
        category=GarmentCategory.SHOES,
        user_measurement=foot,
        target_measurement=best.foot_length,
        buffer=adjustment,
        matched_row=_matched_row(best),
        fit_note=fit_note,
        secondary=secondary,
        strategy="chart" if from_chart else "foot_length",
        user_foot_length=foot,
        technical_size=technical.label if technical else None,
        runs_large_adjusted=runs_large_adjusted,
        store_suggestion=reference.store_suggestion,
        store_suggestion_note=store_note,
    )
