"""Fit-note builders for bottoms. Each returns ``None`` when it has nothing to say."""
from typing import Optional, Tuple

from ..constants import (
    BELT_THRESHOLD_CM,
    INSEAM_ANCHOR_CONFIRMED_CM,
    INSEAM_ANCHOR_GOOD_CM,
    ROW_INSEAM_HEMMING_CM,
    ROW_INSEAM_MAY_HEM_CM,
    ROW_INSEAM_SHORT_CM,
)
from ..models import SizeTableRow
from ..translator import format_cm


def join_notes(*parts: Optional[str]) -> Optional[str]:
    text = " • ".join(p for p in parts if p)
    return text or None


def inseam_anchor_note(product_inseam: Optional[float], user_inseam: Optional[int]) -> Tuple[Optional[str], bool]:
    """Compare the product's stated inseam with the shopper's.

    Returns the note and whether the length counts as confirmed.
    """
    if not product_inseam or not user_inseam:
        return None, False
    diff = product_inseam - user_inseam
    if abs(diff) <= INSEAM_ANCHOR_CONFIRMED_CM:
        return f"Confirmed length: item inseam {format_cm(product_inseam)}cm matches your {user_inseam}cm inseam", True
    if abs(diff) <= INSEAM_ANCHOR_GOOD_CM:
        return f"Your inseam: {user_inseam}cm • Item inseam: {format_cm(product_inseam)}cm → Good fit", False
    if diff > 0:
        return f"Your inseam: {user_inseam}cm • Item inseam: {format_cm(product_inseam)}cm → May need hemming", False
    return f"Your inseam: {user_inseam}cm • Item inseam: {format_cm(product_inseam)}cm → May be short", False


def row_inseam_note(row: SizeTableRow, user_inseam: Optional[int], ankle_length: bool = False) -> Optional[str]:
    if not user_inseam or not row.inseam:
        return None
    if ankle_length:
        return "Designed to end at the ankle"
    diff = row.inseam - user_inseam
    if diff > ROW_INSEAM_HEMMING_CM:
        return f"Warning: Inseam is {diff:.1f}cm longer than your {user_inseam}cm legs - may need hemming"
    if diff < ROW_INSEAM_SHORT_CM:
        return "May be slightly short in the legs"
    if diff > ROW_INSEAM_MAY_HEM_CM:
        return f"Pants are {diff:.1f}cm longer, can be hemmed if needed"
    return None


def belt_note(row: SizeTableRow, user_waist: int) -> Optional[str]:
    extra = row.waist - user_waist
    if extra <= BELT_THRESHOLD_CM:
        return None
    return (
        f"We chose {row.label} so the length works for you. The waist may be "
        f"{extra:.1f}cm roomier, so you might need a belt"
    )


def stretch_note(stretch: Optional[float], row: SizeTableRow, user_waist: int) -> Optional[str]:
    if stretch == 0 and row.waist == user_waist:
        return "No stretch - may feel tight"
    return None
