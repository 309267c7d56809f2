"""Chest-based sizing for shirts, sweaters and jackets."""
from typing import Optional, Sequence

import structlog

from .constants import (
    FIT_PREFERENCE_DEFAULT,
    FIT_PREFERENCE_LOOSE_MIN,
    FIT_PREFERENCE_SLIM_MAX,
    TOP_CHEST_SAFEGUARD_CM,
    TOP_FIT_HINT_SHIFT_CM,
    TOP_IDEAL_LENGTH_OVER_TORSO_CM,
    TOP_LEEWAY_CM,
    TOP_LEEWAY_CONFIDENCE,
    TOP_LENGTH_NOTE_THRESHOLD_CM,
    TOP_MODEL_SIMILARITY_CM,
    TOP_TEXT_CHEST_CONFIDENCE,
    TOP_TEXT_CONFIDENCE,
    TOP_TEXT_HEIGHT_VALIDATION_CM,
    TOP_TEXT_LENGTH_CONFIDENCE,
    UNIVERSAL_MAX_CONFIDENCE,
)
from .models import FitHint, GarmentCategory, ReferenceMeasurement, ShopperProfile, SizeRecommendation, SizeTableRow
from .reference_tables import LETTER_SCALE, fallback_chart
from .translator import format_cm, parse_fit_preference, parse_measurement


logger = structlog.get_logger("perfit")


def calculate_top_recommendation(
    profile: ShopperProfile,
    rows: Sequence[SizeTableRow],
    fit_hint: Optional[FitHint] = None,
    reference: Optional[ReferenceMeasurement] = None,
    chart: str = "mens",
) -> Optional[SizeRecommendation]:
    if not rows:
        if reference is not None and reference.model_height and reference.model_size:
            return calculate_text_top_recommendation(profile, reference, fit_hint)
        return calculate_universal_top_fallback(profile, _fallback_preference(reference, fit_hint), chart)

    user_chest = parse_measurement(profile.chest)
    if user_chest is None:
        logger.info("tops_invalid_chest", chest=profile.chest)
        return None
    user_height = parse_measurement(profile.height)

    # 1. Effective chest
    effective_chest: float = user_chest
    if fit_hint == FitHint.RUNS_LARGE:
        effective_chest = user_chest - TOP_FIT_HINT_SHIFT_CM
    elif fit_hint == FitHint.RUNS_SMALL:
        effective_chest = user_chest + TOP_FIT_HINT_SHIFT_CM

    # 2. Model similarity
    height_diff: Optional[float] = None
    model_similar = False
    if reference is not None and reference.model_height and user_height:
        height_diff = abs(user_height - reference.model_height)
        model_similar = height_diff <= TOP_MODEL_SIMILARITY_CM

    # 3. Leeway
    leeway = TOP_LEEWAY_CM if fit_hint == FitHint.RUNS_LARGE or model_similar else 0.0

    # 4. Smallest row that fits, exact or within leeway
    match: Optional[SizeTableRow] = None
    used_leeway = False
    for row in rows:
        if row.chest >= effective_chest:
            match = row
            break
        if leeway > 0 and row.chest >= effective_chest - leeway:
            match = row
            used_leeway = True
            break

    if match is None:
        logger.info("tops_no_match", effective_chest=effective_chest, largest=rows[-1].chest)
        return None

    # 5. Note
    fit_note = None
    if used_leeway:
        gap = effective_chest - match.chest
        fit_note = f"Chose {match.label} due to marginal difference ({gap:.1f}cm)"
        if model_similar and reference is not None and reference.model_size:
            fit_note += f" and model similarity (height ±{format_cm(height_diff)}cm)"
        elif fit_hint == FitHint.RUNS_LARGE:
            fit_note += " and because item runs large"
    elif fit_hint == FitHint.RUNS_LARGE:
        fit_note = f"Sized down for 'runs large' ({user_chest}cm → {format_cm(effective_chest)}cm effective)"
    elif fit_hint == FitHint.RUNS_SMALL:
        fit_note = f"Sized up for 'runs small' ({user_chest}cm → {format_cm(effective_chest)}cm effective)"

    logger.info("tops_match", size=match.label, chest=match.chest, effective_chest=effective_chest, leeway=used_leeway)
    return SizeRecommendation(
        size=match.label,
        confidence=TOP_LEEWAY_CONFIDENCE if used_leeway else 1.0,
        category=GarmentCategory.TOP,
        user_measurement=user_chest,
        target_measurement=match.chest,
        matched_row=match,
        fit_note=fit_note,
        user_height=user_height,
        strategy="table",
    )


def _chest_bucket(chest: int) -> str:
    if chest < 90:
        return "S"
    if chest < 106:
        # 100-105 sits on the M/L boundary and starts at M
        return "M"
    if chest < 110:
        return "L"
    return "XL"


def calculate_text_top_recommendation(
    profile: ShopperProfile,
    reference: ReferenceMeasurement,
    fit_hint: Optional[FitHint] = None,
) -> Optional[SizeRecommendation]:
    """Estimate a top size from the fit model when the page has no table.

    Chest is the anchor. The model's worn size is only the starting point when
    the shopper gave no chest. Height can confirm a smaller size but never
    forces a larger one, and a chest of 101cm or more never resolves below M.
    """
    user_chest = parse_measurement(profile.chest)
    user_height = parse_measurement(profile.height)
    user_torso = parse_measurement(profile.torso_length)
    scale = list(LETTER_SCALE)
    medium = scale.index("M")

    chest_based = user_chest is not None
    if user_chest is not None:
        index = scale.index(_chest_bucket(user_chest))
    else:
        model_size = (reference.model_size or "").strip().upper()
        if model_size not in scale:
            logger.info("tops_text_no_anchor", model_size=reference.model_size)
            return None
        index = scale.index(model_size)

    fit_note = None

    if fit_hint == FitHint.RUNS_LARGE:
        if user_chest is not None and 100 <= user_chest < 106 and index == medium:
            fit_note = f"Chose Medium for chest ({user_chest}cm) and because item runs large (will fit Relaxed)"
        elif index > medium:
            index -= 1
            fit_note = f"Chose {scale[index]} because item runs large"
    elif fit_hint == FitHint.RUNS_SMALL and index < len(scale) - 1:
        index += 1
        fit_note = f"Chose {scale[index]} because item runs small"

    if reference.model_height and user_height and fit_note is None:
        height_diff = user_height - reference.model_height
        if height_diff < -TOP_TEXT_HEIGHT_VALIDATION_CM and index > scale.index("S"):
            if chest_based:
                fit_note = (
                    f"Chose {scale[index]} for chest ({user_chest}cm). "
                    f"Height difference of {format_cm(-height_diff)}cm confirms choice"
                )
        elif height_diff > TOP_TEXT_HEIGHT_VALIDATION_CM and not chest_based:
            fit_note = f"Based on height difference (+{format_cm(height_diff)}cm)"

    if user_torso and reference.item_length and fit_note is None:
        ideal_length = user_torso + TOP_IDEAL_LENGTH_OVER_TORSO_CM
        if abs(reference.item_length - ideal_length) > TOP_LENGTH_NOTE_THRESHOLD_CM:
            fit_note = f"Based on total length {format_cm(reference.item_length)}cm vs your torso {user_torso}cm"

    preference = parse_fit_preference(profile.fit_preference) or FIT_PREFERENCE_DEFAULT
    if preference <= FIT_PREFERENCE_SLIM_MAX and index > 0:
        index -= 1
    elif preference >= FIT_PREFERENCE_LOOSE_MIN and index < len(scale) - 1:
        index += 1

    if user_chest is not None and user_chest >= TOP_CHEST_SAFEGUARD_CM and index < medium:
        logger.info("tops_chest_safeguard", chest=user_chest, size=scale[index])
        index = medium
        if fit_note is None:
            height_gap = abs(reference.model_height - user_height) if user_height else 0
            if height_gap > 0:
                fit_note = f"Recommending Medium for chest ({user_chest}cm), despite height difference of {format_cm(height_gap)}cm"
            else:
                fit_note = f"Recommending Medium to ensure proper fit across shoulders and chest ({user_chest}cm)"

    index = max(0, min(len(scale) - 1, index))
    if chest_based:
        confidence = TOP_TEXT_CHEST_CONFIDENCE
    elif user_torso and reference.item_length:
        confidence = TOP_TEXT_LENGTH_CONFIDENCE
    else:
        confidence = TOP_TEXT_CONFIDENCE

    anchor = user_chest if user_chest is not None else user_height
    logger.info("tops_text_match", size=scale[index], chest_based=chest_based, fit_hint=fit_hint)
    return SizeRecommendation(
        size=scale[index],
        confidence=confidence,
        category=GarmentCategory.TOP,
        user_measurement=anchor,
        target_measurement=anchor,
        fit_note=fit_note or (f"Based on chest measurement ({user_chest}cm)" if chest_based else f"Based on model size {scale[index]}"),
        user_height=user_height,
        strategy="text",
    )


def _fallback_preference(reference: Optional[ReferenceMeasurement], fit_hint: Optional[FitHint]) -> str:
    cut = reference.cut if reference is not None else ""
    if cut in ("relaxed", "slim"):
        return cut
    if fit_hint == FitHint.RUNS_SMALL:
        return "relaxed"
    if fit_hint == FitHint.RUNS_LARGE:
        return "slim"
    return "regular"


def calculate_universal_top_fallback(
    profile: ShopperProfile,
    preference: str = "regular",
    chart: str = "mens",
) -> Optional[SizeRecommendation]:
    user_chest = parse_measurement(profile.chest)
    if user_chest is None:
        return None

    table = fallback_chart(chart)
    matched = None
    between = False
    for i, size in enumerate(table):
        if user_chest <= size["chest"]:
            if i > 0 and user_chest > table[i - 1]["chest"]:
                between = True
                matched = table[i - 1] if preference == "slim" else size
            else:
                matched = size
            break
    if matched is None:
        matched = table[-1]

    fit_note = f"Universal Match: Recommended based on general industry standards for your {user_chest}cm chest"
    if between:
        fit_note += " • Sized down for slimmer fit" if preference == "slim" else " • Sized up for comfort fit"

    logger.info("tops_universal_match", size=matched["size"], chest=user_chest, preference=preference)
    return SizeRecommendation(
        size=matched["size"],
        confidence=UNIVERSAL_MAX_CONFIDENCE,
        category=GarmentCategory.TOP,
        user_measurement=user_chest,
        target_measurement=matched["chest"],
        fit_note=fit_note,
        strategy="universal",
    )
