import pytest

from perfit.services.sizing import (
    FitHint,
    ReferenceMeasurement,
    ShopperProfile,
    SizeTableRow,
    calculate_top_recommendation,
)
from perfit.services.sizing.tops import calculate_text_top_recommendation, calculate_universal_top_fallback


ROWS = [
    SizeTableRow(label="S", chest=96, row_index=0),
    SizeTableRow(label="M", chest=102, row_index=1),
    SizeTableRow(label="L", chest=108, row_index=2),
]


@pytest.mark.parametrize(
    "chest,expected",
    [(90, "S"), (96, "S"), (97, "M"), (102, "M"), (103, "L"), (108, "L"), (109, None)],
)
def test_smallest_row_that_fits_or_none(chest, expected):
    """Without a fit hint the first row with chest >= shopper chest wins, else no match."""
    result = calculate_top_recommendation(ShopperProfile(chest=chest), ROWS)
    if expected is None:
        assert result is None
    else:
        assert result.size == expected
        assert result.confidence == 1.0
        assert result.matched_row.label == expected
        assert result.strategy == "table"


def test_runs_large_lowers_effective_chest():
    result = calculate_top_recommendation(ShopperProfile(chest=103), ROWS, FitHint.RUNS_LARGE)
    assert result.size == "M"
    assert result.confidence == 1.0
    assert "Sized down" in result.fit_note


def test_runs_small_raises_effective_chest():
    result = calculate_top_recommendation(ShopperProfile(chest=101), ROWS, FitHint.RUNS_SMALL)
    assert result.size == "L"
    assert "Sized up" in result.fit_note


def test_leeway_from_model_similarity():
    reference = ReferenceMeasurement(model_height=182, model_size="M")
    result = calculate_top_recommendation(ShopperProfile(chest=103, height=180), ROWS, reference=reference)
    assert result.size == "M"
    assert result.confidence == 0.95
    assert "marginal difference" in result.fit_note
    assert "model similarity" in result.fit_note


def test_no_leeway_when_model_differs_in_height():
    reference = ReferenceMeasurement(model_height=192, model_size="M")
    result = calculate_top_recommendation(ShopperProfile(chest=103, height=180), ROWS, reference=reference)
    assert result.size == "L"
    assert result.confidence == 1.0


def test_leeway_from_runs_large():
    result = calculate_top_recommendation(ShopperProfile(chest=106), ROWS, FitHint.RUNS_LARGE)
    assert result.size == "M"
    assert result.confidence == 0.95
    assert "runs large" in result.fit_note


def test_leeway_never_reaches_past_largest_row():
    # 113 - 2.5 = 110.5, and 110.5 - 1.5 is still above L's 108
    result = calculate_top_recommendation(ShopperProfile(chest=113), ROWS, FitHint.RUNS_LARGE)
    assert result is None


def test_invalid_chest_is_no_match():
    assert calculate_top_recommendation(ShopperProfile(chest="abc"), ROWS) is None
    assert calculate_top_recommendation(ShopperProfile(), ROWS) is None


@pytest.mark.parametrize("chest,expected", [(85, "S"), (95, "M"), (104, "M"), (107, "L"), (115, "XL")])
def test_text_chest_buckets(chest, expected):
    reference = ReferenceMeasurement(model_height=185, model_size="M")
    result = calculate_text_top_recommendation(ShopperProfile(chest=chest), reference)
    assert result.size == expected
    assert result.confidence == 0.85
    assert result.strategy == "text"


def test_text_path_used_when_table_missing():
    reference = ReferenceMeasurement(model_height=185, model_size="M")
    result = calculate_top_recommendation(ShopperProfile(chest=95), [], reference=reference)
    assert result.size == "M"
    assert result.strategy == "text"


def test_text_runs_large_keeps_medium_on_boundary():
    reference = ReferenceMeasurement(model_height=185, model_size="M")
    result = calculate_text_top_recommendation(ShopperProfile(chest=102), reference, FitHint.RUNS_LARGE)
    assert result.size == "M"
    assert "runs large" in result.fit_note


def test_text_chest_safeguard_never_below_medium():
    reference = ReferenceMeasurement(model_height=185, model_size="S")
    result = calculate_text_top_recommendation(ShopperProfile(chest=102, fit_preference=1), reference)
    assert result.size == "M"
    assert "Recommending Medium" in result.fit_note


def test_text_taller_shopper_only_notes_height():
    reference = ReferenceMeasurement(model_height=180, model_size="M")
    result = calculate_text_top_recommendation(ShopperProfile(height=195), reference)
    assert result.size == "M"
    assert result.confidence == 0.7
    assert "height difference" in result.fit_note


def test_text_without_chest_or_known_model_size():
    reference = ReferenceMeasurement(model_height=180, model_size="38")
    assert calculate_text_top_recommendation(ShopperProfile(height=180), reference) is None


def test_universal_fallback_confidence_capped():
    result = calculate_top_recommendation(ShopperProfile(chest=97), [])
    assert result.size == "M"
    assert result.confidence <= 0.6
    assert result.strategy == "universal"
    assert "comfort fit" in result.fit_note


def test_universal_fallback_slim_preference():
    result = calculate_universal_top_fallback(ShopperProfile(chest=97), "slim")
    assert result.size == "S"
    assert "slimmer fit" in result.fit_note


def test_universal_fallback_largest_size_for_big_chest():
    result = calculate_universal_top_fallback(ShopperProfile(chest=130))
    assert result.size == "XL"
