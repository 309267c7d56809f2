"""Size-format conversions shared by every engine.

Nothing in here raises on bad input: unparsable values come back as ``None``
and the calling engine treats that as a missing measurement.
"""
import math
import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import structlog

from .constants import CM_PER_INCH, FIT_PREFERENCE_MAX, FIT_PREFERENCE_MIN, NUMERIC_WAIST_MAX, NUMERIC_WAIST_MIN
from .models import FitHint, SecondarySize
from .reference_tables import LETTER_TO_NUMERIC, SIZE_ORDER, waist_cm_for_numeric


logger = structlog.get_logger("perfit")

_MEASUREMENT_RE = re.compile(r"^\s*(\d+(?:[.,]\d+)?)\s*(?:cm)?\s*$", re.IGNORECASE)
_FRACTION_RE = re.compile(r"(\d+)\s+(\d+)/(\d+)")
_WXL_RE = re.compile(r"(?:W)?\s*(\d+)\s*[x×X/\-\s]+(?:L)?\s*(\d+)", re.IGNORECASE)
_DIGITS_RE = re.compile(r"\D")

_SMALL_WORDS = ("small", "liten", "tight", "size up")
_LARGE_WORDS = ("large", "stor", "big", "size down")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_away_from_zero(value: float) -> int:
    return int(math.copysign(math.ceil(abs(value)), value))


def cm_to_inches(cm: float) -> int:
    return round_half_up(cm / CM_PER_INCH)


def inches_to_cm(inches: float) -> float:
    return inches * CM_PER_INCH


def parse_decimal(value: Union[str, int, float, None]) -> Optional[float]:
    """Parse a positive measurement such as ``"27,3"``, ``"86 cm"`` or ``86``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _MEASUREMENT_RE.match(str(value))
        if not match:
            return None
        number = float(match.group(1).replace(",", "."))
    if math.isnan(number) or math.isinf(number) or number <= 0:
        return None
    return number


def parse_measurement(value: Union[str, int, float, None]) -> Optional[int]:
    """Whole-centimetre body measurement; decimals are truncated."""
    number = parse_decimal(value)
    if number is None:
        return None
    whole = int(number)
    return whole if whole > 0 else None


def parse_fit_preference(value: Union[str, int, float, None]) -> Optional[int]:
    """Shopper fit preference on the 1..10 scale; anything else is missing."""
    preference = parse_measurement(value)
    if preference is None or not FIT_PREFERENCE_MIN <= preference <= FIT_PREFERENCE_MAX:
        return None
    return preference


def parse_fit_hint(value: Union[str, int, float, FitHint, None]) -> Optional[FitHint]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, FitHint):
        return value
    if isinstance(value, (int, float)):
        if value > 0:
            return FitHint.RUNS_SMALL
        if value < 0:
            return FitHint.RUNS_LARGE
        return None
    text = str(value).strip().lower()
    if not text:
        return None
    if text in (FitHint.RUNS_SMALL.value, FitHint.RUNS_LARGE.value):
        return FitHint(text)
    try:
        return parse_fit_hint(float(text))
    except ValueError:
        pass
    if any(word in text for word in _SMALL_WORDS):
        return FitHint.RUNS_SMALL
    if any(word in text for word in _LARGE_WORDS):
        return FitHint.RUNS_LARGE
    return None


def is_letter_size(label: Optional[str]) -> bool:
    return bool(label) and label.strip().upper() in SIZE_ORDER


def compare_sizes(size1: str, size2: str) -> int:
    """-1, 0 or 1; letter order first, then numeric, then plain string order."""
    upper1 = size1.strip().upper()
    upper2 = size2.strip().upper()
    if upper1 in SIZE_ORDER and upper2 in SIZE_ORDER:
        idx1, idx2 = SIZE_ORDER.index(upper1), SIZE_ORDER.index(upper2)
        return (idx1 > idx2) - (idx1 < idx2)
    num1 = parse_size_to_number(size1)
    num2 = parse_size_to_number(size2)
    if num1 is not None and num2 is not None:
        return (num1 > num2) - (num1 < num2)
    return (size1 > size2) - (size1 < size2)


def translate_letter_to_numeric(letter: str, waist_cm: float, offered: Optional[Sequence[str]] = None) -> str:
    """Translate a letter size (``"M"``) to a numeric waist size (``"32"``).

    Candidates are narrowed to the offered sizes when any of them is offered,
    then the candidate whose mapped waist is closest to ``waist_cm`` wins.
    Ties keep the first (smaller) candidate. Labels with no mapping come back
    unchanged, which makes repeated translation idempotent.
    """
    candidates = LETTER_TO_NUMERIC.get((letter or "").strip().upper())
    if not candidates:
        return letter

    pool: List[str] = list(candidates)
    if offered:
        stripped = {s.strip(): s for s in offered}
        available = [stripped[c] for c in candidates if c in stripped]
        if available:
            pool = available

    best = pool[0]
    best_diff = math.inf
    for candidate in pool:
        diff = abs(waist_cm_for_numeric(int(candidate.strip())) - waist_cm)
        if diff < best_diff:
            best_diff = diff
            best = candidate
    logger.debug("letter_translated", letter=letter, result=best, waist_cm=waist_cm, candidates=pool)
    return best


def numeric_waist_sizes(offered: Optional[Iterable[str]]) -> List[Tuple[str, int]]:
    """Offered labels that read as a single jeans waist size (``"32"``, ``"W32"``)."""
    out: List[Tuple[str, int]] = []
    for label in offered or []:
        if is_wxl_label(label):
            continue
        digits = _DIGITS_RE.sub("", label)
        if not digits:
            continue
        number = int(digits)
        if NUMERIC_WAIST_MIN <= number <= NUMERIC_WAIST_MAX:
            out.append((label, number))
    return out


def letter_sizes(offered: Optional[Iterable[str]]) -> List[str]:
    return [s for s in offered or [] if is_letter_size(s)]


def closest_numeric_offered(offered: Optional[Iterable[str]], waist_cm: float) -> Optional[Tuple[str, int, float]]:
    """(label, waist inches, distance in inches) of the nearest numeric offered size."""
    target = waist_cm / CM_PER_INCH
    best: Optional[Tuple[str, int, float]] = None
    for label, number in numeric_waist_sizes(offered):
        diff = abs(number - target)
        if best is None or diff < best[2]:
            best = (label, number, diff)
    return best


def parse_wxl(label: Optional[str]) -> Optional[Tuple[int, int]]:
    """Waist and length inches from labels like ``"W32 L34"``, ``"32x34"`` or ``"32/34"``."""
    if not label:
        return None
    match = _WXL_RE.search(label)
    if not match:
        return None
    waist, length = int(match.group(1)), int(match.group(2))
    if not (20 <= waist <= 60 and 24 <= length <= 40):
        return None
    return waist, length


def is_wxl_label(label: Optional[str]) -> bool:
    return parse_wxl(label) is not None


def clean_shoe_size(size: str) -> str:
    """``"43 1/3"`` -> ``"43.33"``, ``"43,5"`` -> ``"43.5"``."""
    size = (size or "").strip()
    match = _FRACTION_RE.search(size)
    if match:
        whole, numerator, denominator = (int(g) for g in match.groups())
        if denominator:
            return f"{whole + numerator / denominator:.2f}"
    return size.replace(",", ".")


def parse_size_to_number(size: Optional[str]) -> Optional[float]:
    if size is None:
        return None
    cleaned = clean_shoe_size(str(size))
    try:
        number = float(cleaned)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def format_size_for_display(size: Union[str, float]) -> str:
    """``43.33`` -> ``"43 1/3"``; ``43.5`` -> ``"43 1/2"``; ``43.0`` -> ``"43"``."""
    if isinstance(size, str):
        if _FRACTION_RE.search(size):
            return size.strip()
        number = parse_size_to_number(size)
        if number is None:
            return size
    else:
        number = float(size)

    whole = math.floor(number)
    decimal = number - whole
    if abs(decimal - 0.333) < 0.02:
        return f"{whole} 1/3"
    if abs(decimal - 0.667) < 0.02:
        return f"{whole} 2/3"
    if abs(decimal - 0.5) < 0.02:
        return f"{whole} 1/2"
    if decimal < 0.02:
        return str(whole)
    return f"{number:.1f}"


def interpolate_foot_length(size: float, known: Sequence[Tuple[float, float]]) -> Optional[float]:
    """Linear foot length for ``size`` between the two known sizes around it.

    ``known`` is ``(size, foot_length)`` pairs in ascending size order. Sizes
    outside the span cannot be interpolated.
    """
    if len(known) < 2:
        return None
    for (lower, lower_foot), (upper, upper_foot) in zip(known, known[1:]):
        if lower <= size <= upper and upper > lower:
            ratio = (size - lower) / (upper - lower)
            return round(lower_foot + (upper_foot - lower_foot) * ratio, 2)
    return None


def resolve_duplicate(primary: str, secondary: Optional[SecondarySize], offered: Optional[Sequence[str]] = None) -> Optional[SecondarySize]:
    """Keep a dual pair distinct after translation.

    A secondary that collides with the primary is bumped to the next larger
    distinct offered size; without one the secondary is cancelled.
    """
    if secondary is None or secondary.size != primary:
        return secondary
    if offered:
        labels = [s.strip() for s in offered]
        if primary in labels:
            for label in labels[labels.index(primary) + 1:]:
                if label != primary:
                    logger.debug("dual_secondary_bumped", primary=primary, secondary=label)
                    return SecondarySize(size=label, note=secondary.note)
    logger.debug("dual_cancelled_duplicate", size=primary)
    return None


def format_cm(value: float) -> str:
    """``86.0`` -> ``"86"``, ``2.54`` -> ``"2.5"``."""
    rounded = round(value, 1)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.1f}"
