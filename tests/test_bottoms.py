import pytest

from perfit.services.sizing import (
    FitHint,
    ReferenceMeasurement,
    ShopperProfile,
    SizeTableRow,
    calculate_bottom_recommendation,
)
from perfit.services.sizing.bottoms import BottomsContext, select_strategy
from perfit.services.sizing.bottoms.table import HIP_IGNORED_NOTE, should_ignore_hip
from perfit.services.sizing.bottoms.wxl import length_steps


ROWS = [
    SizeTableRow(label="S", waist=80, hip=88, row_index=0),
    SizeTableRow(label="M", waist=86, hip=94, row_index=1),
    SizeTableRow(label="L", waist=92, hip=100, row_index=2),
]

WXL_OFFERED = ["32x32", "33x32", "34x32", "36x32"]


def _strategy_name(profile, rows=None, reference=None, offered=None):
    ctx = BottomsContext.build(profile, rows, None, reference, offered)
    return select_strategy(ctx).name


def test_strategy_order():
    profile = ShopperProfile(waist=86)
    assert _strategy_name(profile, ROWS, offered=WXL_OFFERED) == "wxl"
    assert _strategy_name(profile, ROWS) == "table"
    assert _strategy_name(profile, ROWS, reference=ReferenceMeasurement(inseam_length_size="32x32")) == "table"
    assert _strategy_name(profile, reference=ReferenceMeasurement(model_height=185)) == "text"
    assert _strategy_name(profile, reference=ReferenceMeasurement(inseam_length=80)) == "text"
    assert _strategy_name(profile) == "universal"


# --- tabular tier ---


def test_table_waist_and_hip_match():
    result = calculate_bottom_recommendation(ShopperProfile(waist=86, hip=92), ROWS)
    assert result.size == "M"
    assert result.confidence == 1.0
    assert result.strategy == "table"
    assert result.matched_row.row_index == 1
    assert not result.is_dual


def test_table_hip_drives_size_up():
    result = calculate_bottom_recommendation(ShopperProfile(waist=80, hip=95), ROWS)
    assert result.size == "L"
    assert "belt" in result.fit_note


def test_table_hip_below_chart_is_ignored():
    result = calculate_bottom_recommendation(ShopperProfile(waist=86, hip=80), ROWS)
    assert result.size == "M"
    assert HIP_IGNORED_NOTE in result.fit_note


def test_should_ignore_hip():
    assert should_ignore_hip(None, ROWS)
    assert should_ignore_hip(80, ROWS)
    assert not should_ignore_hip(92, ROWS)
    assert should_ignore_hip(92, [SizeTableRow(label="M", waist=86)])


def test_brand_runs_small_is_dual_one_size_up():
    reference = ReferenceMeasurement(brand_size_suggestion=1)
    result = calculate_bottom_recommendation(ShopperProfile(waist=86, hip=92), ROWS, reference=reference)
    assert result.size == "L"
    assert result.secondary_size == "M"
    assert result.is_dual
    assert result.confidence >= 0.9


def test_brand_runs_large_is_dual_one_size_down():
    reference = ReferenceMeasurement(brand_size_suggestion=-1)
    result = calculate_bottom_recommendation(ShopperProfile(waist=86, hip=92), ROWS, reference=reference)
    assert result.size == "S"
    assert result.secondary_size == "M"


def test_brand_shift_clamped_to_table():
    reference = ReferenceMeasurement(brand_size_suggestion=1)
    result = calculate_bottom_recommendation(ShopperProfile(waist=92, hip=98), ROWS, reference=reference)
    assert result.size == "L"
    assert not result.is_dual


def test_brand_suggestion_beats_fit_hint():
    reference = ReferenceMeasurement(brand_size_suggestion=-1)
    result = calculate_bottom_recommendation(
        ShopperProfile(waist=85), ROWS, FitHint.RUNS_SMALL, reference=reference
    )
    assert result.size == "S"
    assert result.secondary_size == "M"


def test_fit_hint_shifts_waist_without_brand_suggestion():
    result = calculate_bottom_recommendation(ShopperProfile(waist=85), ROWS, FitHint.RUNS_SMALL)
    assert result.size == "L"
    assert "runs small" in result.fit_note


def test_duplicate_after_translation_cancels_dual():
    reference = ReferenceMeasurement(brand_size_suggestion=1)
    result = calculate_bottom_recommendation(
        ShopperProfile(waist=86, hip=92), ROWS, reference=reference, offered=["34"]
    )
    assert result.size == "34"
    assert not result.is_dual


def test_duplicate_after_translation_bumps_secondary():
    reference = ReferenceMeasurement(brand_size_suggestion=1)
    result = calculate_bottom_recommendation(
        ShopperProfile(waist=86, hip=92), ROWS, reference=reference, offered=["34", "36"]
    )
    assert result.size == "34"
    assert result.secondary_size == "36"


def test_table_label_translated_to_offered_numeric():
    result = calculate_bottom_recommendation(
        ShopperProfile(waist=86, hip=92), ROWS, offered=["30", "32", "34", "36"]
    )
    assert result.size == "32"
    assert result.matched_row.label == "M"


def test_relaxed_cut_prefers_smallest_with_roomier_secondary():
    reference = ReferenceMeasurement(fit="Relaxed")
    result = calculate_bottom_recommendation(ShopperProfile(waist=84, hip=90), ROWS, reference=reference)
    assert result.size == "M"
    assert result.secondary_size == "L"
    assert result.secondary.note == "Roomier - one size up"


def test_model_anchor_adopts_model_size():
    reference = ReferenceMeasurement(fit="Relaxed", model_height=185, model_size="S")
    result = calculate_bottom_recommendation(ShopperProfile(waist=82, height=180), ROWS, reference=reference)
    assert result.size == "S"
    assert result.secondary_size == "M"
    assert result.confidence == pytest.approx(0.98)
    assert result.strategy == "model_anchor"


def test_model_anchor_tolerance_tighter_for_standard_cut():
    reference = ReferenceMeasurement(model_height=185, model_size="S")
    result = calculate_bottom_recommendation(ShopperProfile(waist=82, height=180), ROWS, reference=reference)
    assert result.size == "M"
    assert result.strategy == "table"


def test_model_anchor_needs_model_at_least_as_tall():
    reference = ReferenceMeasurement(fit="Relaxed", model_height=175, model_size="S")
    result = calculate_bottom_recommendation(ShopperProfile(waist=82, height=180), ROWS, reference=reference)
    assert result.size == "M"
    assert result.strategy == "table"


def test_confirmed_inseam_locks_confidence():
    reference = ReferenceMeasurement(inseam_length=81)
    result = calculate_bottom_recommendation(ShopperProfile(waist=86, inseam=80), ROWS, reference=reference)
    assert result.confidence == 1.0
    assert "Confirmed length" in result.fit_note


def test_long_inseam_warns_of_hemming():
    reference = ReferenceMeasurement(inseam_length=90)
    result = calculate_bottom_recommendation(ShopperProfile(waist=86, inseam=80), ROWS, reference=reference)
    assert "May need hemming" in result.fit_note


def test_missing_waist_is_no_match():
    assert calculate_bottom_recommendation(ShopperProfile(hip=92), ROWS) is None
    assert calculate_bottom_recommendation(ShopperProfile(waist="n/a"), ROWS) is None


# --- emergency fallback ---


def test_emergency_fallback_within_tolerance():
    result = calculate_bottom_recommendation(ShopperProfile(waist=100), ROWS, offered=["38", "40"])
    assert result.size == "40"
    assert result.confidence == pytest.approx(0.75)
    assert result.strategy == "emergency"
    assert result.target_measurement == pytest.approx(101.6)


def test_emergency_fallback_refuses_to_guess():
    assert calculate_bottom_recommendation(ShopperProfile(waist=120), ROWS, offered=["38", "40"]) is None
    assert calculate_bottom_recommendation(ShopperProfile(waist=100), ROWS) is None


# --- W x L tier ---


def test_wxl_targets_waist_inches_at_same_length():
    reference = ReferenceMeasurement(inseam_length=81, inseam_length_size="32x32")
    result = calculate_bottom_recommendation(
        ShopperProfile(waist=86, inseam=81), [], reference=reference, offered=WXL_OFFERED
    )
    assert result.size == "34x32"
    assert result.size != "32x32"
    assert result.confidence == 1.0
    assert result.strategy == "wxl"
    assert result.secondary_size == "33x32"
    assert result.is_dual


def test_wxl_brand_runs_large_shifts_one_inch():
    reference = ReferenceMeasurement(inseam_length=81, inseam_length_size="32x32", brand_size_suggestion=-1)
    result = calculate_bottom_recommendation(
        ShopperProfile(waist=86, inseam=81), [], reference=reference, offered=WXL_OFFERED
    )
    assert result.size == "33x32"
    assert "runs large" in result.fit_note


def test_wxl_label_format_from_inseam():
    offered = ["W32 L32", "W34 L32", "W34 L34"]
    result = calculate_bottom_recommendation(ShopperProfile(waist=86, inseam=80), [], offered=offered)
    assert result.size == "W34 L32"


def test_wxl_product_inseam_without_wxl_sizes_uses_table():
    reference = ReferenceMeasurement(inseam_length=81, inseam_length_size="32x32")
    result = calculate_bottom_recommendation(
        ShopperProfile(waist=86, hip=92), ROWS, reference=reference, offered=["S", "M", "L"]
    )
    assert result.size == "M"
    assert result.strategy == "table"


def test_wxl_table_labels_used_when_picker_has_none():
    rows = [
        SizeTableRow(label="32x32", waist=81, row_index=0),
        SizeTableRow(label="34x32", waist=86, row_index=1),
    ]
    result = calculate_bottom_recommendation(ShopperProfile(waist=86, inseam=80), rows)
    assert result.size == "34x32"
    assert result.strategy == "wxl"
    assert result.target_measurement == pytest.approx(86.36)


def test_wxl_too_far_is_no_match():
    result = calculate_bottom_recommendation(ShopperProfile(waist=110, inseam=81), [], offered=WXL_OFFERED)
    assert result is None


@pytest.mark.parametrize(
    "diff_cm,steps",
    [(0, 0), (5.08, 1), (2.54, 1), (-2.54, -1), (6.0, 1), (7.0, 2), (-7.0, -2), (1.0, 0)],
)
def test_length_steps(diff_cm, steps):
    assert length_steps(diff_cm) == steps


# --- text tier ---


def test_text_dual_offers_shorter_length():
    reference = ReferenceMeasurement(model_height=188, inseam_length=86)
    result = calculate_bottom_recommendation(
        ShopperProfile(waist=84, height=178, inseam=80), [], reference=reference
    )
    assert result.size == "M"
    assert result.secondary_size == "S"
    assert result.secondary.note == "Shorter length"
    assert result.confidence == pytest.approx(0.75)
    assert result.strategy == "text"


def test_text_single_size_when_model_similar():
    reference = ReferenceMeasurement(model_height=180, inseam_length=82)
    result = calculate_bottom_recommendation(
        ShopperProfile(waist=84, height=178, inseam=80), [], reference=reference
    )
    assert result.size == "M"
    assert not result.is_dual
    assert result.confidence == pytest.approx(0.7)


def test_text_fit_hint_moves_one_letter():
    reference = ReferenceMeasurement(model_height=180)
    result = calculate_bottom_recommendation(ShopperProfile(waist=84), [], FitHint.RUNS_LARGE, reference)
    assert result.size == "S"


# --- universal fallback ---


def test_universal_waist_match():
    result = calculate_bottom_recommendation(ShopperProfile(waist=83), [])
    assert result.size == "M"
    assert result.confidence <= 0.6
    assert result.strategy == "universal"


def test_universal_slim_preference_sizes_down():
    result = calculate_bottom_recommendation(ShopperProfile(waist=83, fit_preference=2), [])
    assert result.size == "S"


def test_universal_unreadable_preference_uses_default():
    for preference in ("loose", 0, 11):
        result = calculate_bottom_recommendation(ShopperProfile(waist=83, fit_preference=preference), [])
        assert result.size == "M"


def test_universal_hip_sizes_up():
    result = calculate_bottom_recommendation(ShopperProfile(waist=83, hip=110), [])
    assert result.size == "L"
    assert "hip" in result.fit_note


def test_universal_small_hip_ignored():
    result = calculate_bottom_recommendation(ShopperProfile(waist=83, hip=80), [])
    assert result.size == "M"
    assert "Hip measurement ignored" in result.fit_note


def test_universal_womens_chart():
    result = calculate_bottom_recommendation(ShopperProfile(waist=70), [], chart="womens")
    assert result.size == "M"
    assert result.confidence <= 0.6
