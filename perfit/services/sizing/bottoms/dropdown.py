"""Re-express a table label in the numeric or letter sizes of the store's own picker.

W x L pickers never get here: the W x L tier owns them.
"""
from functools import cmp_to_key
from typing import List, Optional, Sequence, Tuple

import structlog

from ..models import SecondarySize, SizeTableRow
from ..reference_tables import letter_for_waist
from ..translator import (
    closest_numeric_offered,
    compare_sizes,
    is_letter_size,
    letter_sizes,
    numeric_waist_sizes,
    resolve_duplicate,
    translate_letter_to_numeric,
)


logger = structlog.get_logger("perfit")


def _offered_format(offered: Sequence[str]) -> Optional[str]:
    if numeric_waist_sizes(offered):
        return "numeric"
    if letter_sizes(offered):
        return "letter"
    return None


def _to_numeric(row: SizeTableRow, user_waist: int, offered: Sequence[str]) -> str:
    stripped = [s.strip() for s in offered]
    if row.label.strip() in stripped:
        return row.label
    if is_letter_size(row.label):
        translated = translate_letter_to_numeric(row.label, user_waist, offered)
        if translated.strip() in stripped:
            return translated
    closest = closest_numeric_offered(offered, row.waist)
    return closest[0] if closest else row.label


def _to_letter(row: SizeTableRow, offered: Sequence[str]) -> str:
    letters = {s.strip().upper(): s for s in letter_sizes(offered)}
    if row.label.strip().upper() in letters:
        return letters[row.label.strip().upper()]
    letter = letter_for_waist(row.waist)
    if letter and letter in letters:
        return letters[letter]
    return row.label


def _translate(row: SizeTableRow, fmt: Optional[str], user_waist: int, offered: Sequence[str]) -> str:
    if fmt == "numeric":
        return _to_numeric(row, user_waist, offered)
    if fmt == "letter":
        return _to_letter(row, offered)
    return row.label


def sorted_offered(offered: Sequence[str]) -> List[str]:
    return sorted((s.strip() for s in offered), key=cmp_to_key(compare_sizes))


def prioritize(
    primary: SizeTableRow,
    secondary: Optional[SizeTableRow],
    secondary_note: Optional[str],
    offered: Sequence[str],
    user_waist: int,
) -> Tuple[str, Optional[SecondarySize]]:
    """Display labels for a primary row and optional secondary row.

    Without offered sizes the table labels are shown as they are.
    """
    fmt = _offered_format(offered) if offered else None
    label = _translate(primary, fmt, user_waist, offered)
    second = None
    if secondary is not None:
        second = SecondarySize(size=_translate(secondary, fmt, user_waist, offered), note=secondary_note)
        second = resolve_duplicate(label, second, sorted_offered(offered) if offered else None)

    if fmt is not None:
        logger.debug(
            "dropdown_prioritized",
            format=fmt,
            table_size=primary.label,
            display_size=label,
            secondary=second.size if second else None,
        )
    return label, second
