from typing import Optional

import structlog

from .constants import LENGTH_WARNING_CM
from .models import ReferenceMeasurement, ShopperProfile
from .translator import format_cm, parse_measurement


logger = structlog.get_logger("perfit")


def length_warning(profile: ShopperProfile, reference: Optional[ReferenceMeasurement]) -> Optional[str]:
    """Warn when the fit model is much taller or shorter than the shopper.

    Width may still fit; this only flags that the garment will hang differently.
    """
    if reference is None or not reference.model_height or reference.model_height <= 0:
        return None
    user_height = parse_measurement(profile.height)
    if user_height is None:
        return None

    diff = reference.model_height - user_height
    if diff > LENGTH_WARNING_CM:
        logger.debug("length_warning", direction="model_taller", diff=diff)
        return f"Model is {format_cm(diff)}cm taller than you. Even if the width fits, the garment may feel longer on you."
    if diff < -LENGTH_WARNING_CM:
        logger.debug("length_warning", direction="shopper_taller", diff=diff)
        return f"You are {format_cm(-diff)}cm taller than the model. The garment may feel shorter on you."
    return None
