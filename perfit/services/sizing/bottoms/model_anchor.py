from typing import NamedTuple, Optional, Sequence

import structlog

from ..constants import (
    MODEL_ANCHOR_MIN_GAP_CM,
    MODEL_ANCHOR_RELAXED_TOLERANCE_CM,
    MODEL_ANCHOR_TOLERANCE_CM,
)
from ..models import ReferenceMeasurement, SizeTableRow
from ..translator import format_cm


logger = structlog.get_logger("perfit")


class ModelAnchor(NamedTuple):
    row: SizeTableRow
    waist_gap: float
    note: str


def find_model_row(rows: Sequence[SizeTableRow], model_size: Optional[str]) -> Optional[SizeTableRow]:
    wanted = (model_size or "").strip().upper()
    if not wanted:
        return None
    for row in rows:
        if row.label.strip().upper() == wanted:
            return row
    return None


def model_anchor(
    rows: Sequence[SizeTableRow],
    reference: ReferenceMeasurement,
    user_waist: int,
    user_height: Optional[int],
    relaxed: bool,
) -> Optional[ModelAnchor]:
    """Adopt the fit model's worn size when the model is a close stand-in.

    The model must be at least as tall as the shopper, and the model size's
    waist may be at most 2cm roomier or a few cm tighter than the shopper's
    waist (more for relaxed cuts, which forgive a narrower waist).
    """
    if not reference.model_size or not reference.model_height or not user_height:
        return None
    height_diff = reference.model_height - user_height
    if height_diff < 0:
        logger.debug("model_anchor_skipped", reason="model_shorter", height_diff=height_diff)
        return None

    row = find_model_row(rows, reference.model_size)
    if row is None:
        logger.debug("model_anchor_skipped", reason="model_size_not_in_table", model_size=reference.model_size)
        return None

    tolerance = MODEL_ANCHOR_RELAXED_TOLERANCE_CM if relaxed else MODEL_ANCHOR_TOLERANCE_CM
    gap = user_waist - row.waist
    if not MODEL_ANCHOR_MIN_GAP_CM <= gap <= tolerance:
        logger.debug("model_anchor_skipped", reason="waist_gap", gap=gap, tolerance=tolerance)
        return None

    height = format_cm(reference.model_height)
    if gap > 0:
        note = (
            f"We recommend {row.label} because the model ({height}cm) is taller than you and wears it. "
            f"The waist is {gap:.1f}cm narrower than yours, which this cut absorbs"
        )
    else:
        note = f"We recommend {row.label} based on the model's height ({height}cm). Matches both length and waist"
    logger.info("model_anchor_applied", size=row.label, gap=gap, height_diff=height_diff, relaxed=relaxed)
    return ModelAnchor(row=row, waist_gap=gap, note=note)
