from functools import cmp_to_key

import pytest

from perfit.services.sizing.models import FitHint, SecondarySize
from perfit.services.sizing.translator import (
    clean_shoe_size,
    closest_numeric_offered,
    cm_to_inches,
    compare_sizes,
    format_cm,
    format_size_for_display,
    interpolate_foot_length,
    numeric_waist_sizes,
    parse_fit_hint,
    parse_fit_preference,
    parse_measurement,
    parse_wxl,
    resolve_duplicate,
    round_away_from_zero,
    round_half_up,
    translate_letter_to_numeric,
)


def test_cm_to_inches_rounds_half_up():
    assert cm_to_inches(81) == 32
    assert cm_to_inches(86) == 34
    assert round_half_up(2.5) == 3
    assert round_away_from_zero(-0.2) == -1
    assert round_away_from_zero(1.1) == 2


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("86", 86),
        ("86,7 cm", 86),
        (" 92.4 ", 92),
        (101, 101),
        ("abc", None),
        ("", None),
        (0, None),
        (-4, None),
        (None, None),
    ],
)
def test_parse_measurement_never_raises(raw, expected):
    assert parse_measurement(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Runs small", FitHint.RUNS_SMALL),
        ("Liten i storleken", FitHint.RUNS_SMALL),
        ("runs_large", FitHint.RUNS_LARGE),
        ("Stor i storleken", FitHint.RUNS_LARGE),
        ("we suggest you size down", FitHint.RUNS_LARGE),
        (1, FitHint.RUNS_SMALL),
        ("-1", FitHint.RUNS_LARGE),
        (0, None),
        ("true to size", None),
        (None, None),
    ],
)
def test_parse_fit_hint(raw, expected):
    assert parse_fit_hint(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [("7", 7), (1, 1), (10, 10), ("loose", None), ("0", None), (11, None), (None, None)],
)
def test_parse_fit_preference_out_of_range_is_missing(raw, expected):
    assert parse_fit_preference(raw) == expected


def test_compare_sizes_orders_letters_then_numbers():
    assert compare_sizes("S", "M") == -1
    assert compare_sizes("XL", "L") == 1
    assert compare_sizes("32", "30") == 1
    assert compare_sizes("42.5", "42.5") == 0
    assert sorted(["L", "XS", "M"], key=cmp_to_key(compare_sizes)) == ["XS", "M", "L"]


def test_letter_to_numeric_prefers_offered_candidates():
    # M maps to 31 or 32; only 32 is offered
    assert translate_letter_to_numeric("M", 79, ["30", "32", "34"]) == "32"


def test_letter_to_numeric_closest_waist_without_offered():
    assert translate_letter_to_numeric("M", 79) == "31"
    assert translate_letter_to_numeric("M", 82) == "32"


def test_letter_to_numeric_tie_keeps_first_candidate():
    # 30 -> 76cm and 29 -> 74cm; 75cm is equidistant
    assert translate_letter_to_numeric("S", 75) == "29"


def test_letter_to_numeric_is_idempotent():
    offered = ["30", "31", "32", "33", "34"]
    first = translate_letter_to_numeric("L", 86, offered)
    assert first == "34"
    assert translate_letter_to_numeric(first, 86, offered) == first
    assert translate_letter_to_numeric("L", 86, offered) == first


def test_unmapped_letter_is_returned_unchanged():
    assert translate_letter_to_numeric("XXXL", 120) == "XXXL"


def test_numeric_waist_sizes_skip_wxl_and_out_of_range():
    assert numeric_waist_sizes(["W32", "30", "S", "34x32", "50"]) == [("W32", 32), ("30", 30)]


def test_closest_numeric_offered():
    label, inches, diff = closest_numeric_offered(["30", "32", "34x32"], 81)
    assert label == "32"
    assert inches == 32
    assert diff == pytest.approx(0.11, abs=0.01)
    assert closest_numeric_offered(["S", "M"], 81) is None


@pytest.mark.parametrize(
    "label,expected",
    [
        ("32x32", (32, 32)),
        ("W32 L34", (32, 34)),
        ("32/34", (32, 34)),
        ("W33 x L30", (33, 30)),
        ("M", None),
        ("42", None),
        ("10x10", None),
        (None, None),
    ],
)
def test_parse_wxl(label, expected):
    assert parse_wxl(label) == expected


def test_clean_shoe_size():
    assert clean_shoe_size("43 1/3") == "43.33"
    assert clean_shoe_size("43,5") == "43.5"
    assert clean_shoe_size(" 42 ") == "42"


def test_format_size_for_display():
    assert format_size_for_display(43.33) == "43 1/3"
    assert format_size_for_display(43.67) == "43 2/3"
    assert format_size_for_display("43.5") == "43 1/2"
    assert format_size_for_display(42.0) == "42"
    assert format_size_for_display("43 1/3") == "43 1/3"


def test_interpolate_foot_length_between_whole_sizes():
    known = [(42.0, 26.7), (43.0, 27.6)]
    assert interpolate_foot_length(42.5, known) == pytest.approx(27.15)
    assert interpolate_foot_length(42.0, known) == pytest.approx(26.7)


def test_interpolate_outside_span_is_none():
    known = [(42.0, 26.7), (43.0, 27.6)]
    assert interpolate_foot_length(44.0, known) is None
    assert interpolate_foot_length(41.5, known) is None
    assert interpolate_foot_length(42.5, known[:1]) is None


def test_resolve_duplicate_bumps_to_next_offered():
    secondary = SecondarySize(size="32", note="Roomier")
    bumped = resolve_duplicate("32", secondary, ["30", "32", "34"])
    assert bumped.size == "34"
    assert bumped.note == "Roomier"


def test_resolve_duplicate_cancels_without_larger_size():
    assert resolve_duplicate("34", SecondarySize(size="34"), ["30", "32", "34"]) is None
    assert resolve_duplicate("32", SecondarySize(size="32")) is None


def test_resolve_duplicate_keeps_distinct_pair():
    secondary = SecondarySize(size="30")
    assert resolve_duplicate("32", secondary, ["30", "32"]) is secondary


def test_format_cm():
    assert format_cm(86.0) == "86"
    assert format_cm(2.54) == "2.5"
