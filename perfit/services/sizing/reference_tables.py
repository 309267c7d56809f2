"""Industry-standard reference data used when a store exposes no table of its own."""
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple


SIZE_ORDER: Tuple[str, ...] = ("XXS", "XS", "S", "M", "L", "XL", "XXL", "XXXL")

# Letter scale used by the text-based estimators (no XXS).
LETTER_SCALE: Tuple[str, ...] = ("XS", "S", "M", "L", "XL", "XXL", "XXXL")

# EU men's shoe size -> foot length (cm)
MENS_SHOE_MAPPING: Mapping[str, float] = MappingProxyType({
    "39": 25.1,
    "40": 25.4,
    "40.5": 25.8,
    "41": 26.3,
    "42": 26.7,
    "42.5": 27.1,
    "43": 27.6,
    "44": 28.0,
    "44.5": 28.4,
    "45": 28.9,
    "46": 29.3,
    "46.5": 29.7,
    "47": 30.1,
    "48": 30.6,
})

# Jeans waist (inches) -> body waist (cm)
MENS_JEANS_WAIST_MAPPING: Mapping[int, float] = MappingProxyType({
    28: 71,
    29: 74,
    30: 76,
    31: 79,
    32: 81,
    33: 84,
    34: 86,
    36: 92,
    38: 97,
    40: 102,
    42: 107,
})

# Letter size -> candidate numeric waist sizes, smallest first
LETTER_TO_NUMERIC: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "XS": ("28",),
    "S": ("29", "30"),
    "M": ("31", "32"),
    "L": ("33", "34"),
    "XL": ("36", "38"),
    "XXL": ("40", "42"),
})

# Garment waist (cm) ranges per letter, inclusive
WAIST_TO_LETTER: Tuple[Tuple[str, float, float], ...] = (
    ("XS", 0, 76),
    ("S", 77, 81),
    ("M", 82, 86),
    ("L", 87, 91),
    ("XL", 92, 100),
    ("XXL", 101, 110),
)

# Generic body-measurement charts (chest, waist, hip in cm)
MENS_UNIVERSAL_FALLBACK: Tuple[Mapping[str, float], ...] = (
    MappingProxyType({"size": "XS", "chest": 88, "waist": 74, "hip": 90}),
    MappingProxyType({"size": "S", "chest": 94, "waist": 80, "hip": 96}),
    MappingProxyType({"size": "M", "chest": 100, "waist": 86, "hip": 102}),
    MappingProxyType({"size": "L", "chest": 106, "waist": 92, "hip": 108}),
    MappingProxyType({"size": "XL", "chest": 112, "waist": 98, "hip": 114}),
)

WOMENS_UNIVERSAL_FALLBACK: Tuple[Mapping[str, float], ...] = (
    MappingProxyType({"size": "XS", "chest": 80, "waist": 64, "hip": 88}),
    MappingProxyType({"size": "S", "chest": 84, "waist": 68, "hip": 92}),
    MappingProxyType({"size": "M", "chest": 90, "waist": 74, "hip": 98}),
    MappingProxyType({"size": "L", "chest": 96, "waist": 80, "hip": 104}),
)

FALLBACK_CHARTS: Mapping[str, Tuple[Mapping[str, float], ...]] = MappingProxyType({
    "mens": MENS_UNIVERSAL_FALLBACK,
    "womens": WOMENS_UNIVERSAL_FALLBACK,
})


def fallback_chart(name: str) -> Tuple[Mapping[str, float], ...]:
    return FALLBACK_CHARTS.get((name or "mens").lower(), MENS_UNIVERSAL_FALLBACK)


def shoe_chart_points() -> List[Tuple[str, float]]:
    return sorted(MENS_SHOE_MAPPING.items(), key=lambda kv: float(kv[0]))


def waist_cm_for_numeric(size: int) -> float:
    return MENS_JEANS_WAIST_MAPPING.get(size, size * 2.54)


def letter_for_waist(waist_cm: float) -> Optional[str]:
    # Ranges are contiguous in whole cm; fractional waists fall to the next range up.
    for letter, _low, high in WAIST_TO_LETTER:
        if waist_cm <= high:
            return letter
    return None
