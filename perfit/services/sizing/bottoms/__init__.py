from typing import Optional, Sequence, Tuple

import structlog

from ..models import FitHint, ReferenceMeasurement, ShopperProfile, SizeRecommendation, SizeTableRow
from .base import BottomsContext, BottomsStrategy
from .fallback import UniversalStrategy, emergency_fallback
from .table import TableStrategy
from .text import TextStrategy
from .wxl import WxLStrategy


logger = structlog.get_logger("perfit")

# Tried in order; the first tier that applies owns the answer, including "no match".
STRATEGIES: Tuple[BottomsStrategy, ...] = (
    WxLStrategy(),
    TableStrategy(),
    TextStrategy(),
    UniversalStrategy(),
)


def select_strategy(ctx: BottomsContext) -> Optional[BottomsStrategy]:
    for strategy in STRATEGIES:
        if strategy.applies(ctx):
            return strategy
    return None


def calculate_bottom_recommendation(
    profile: ShopperProfile,
    rows: Optional[Sequence[SizeTableRow]] = None,
    fit_hint: Optional[FitHint] = None,
    reference: Optional[ReferenceMeasurement] = None,
    offered: Optional[Sequence[str]] = None,
    chart: str = "mens",
) -> Optional[SizeRecommendation]:
    ctx = BottomsContext.build(profile, rows, fit_hint, reference, offered, chart)
    strategy = select_strategy(ctx)
    if strategy is None:
        return None
    logger.debug("bottoms_strategy_selected", strategy=strategy.name, rows=len(ctx.rows), offered=len(ctx.offered))
    return strategy.run(ctx)


__all__ = [
    "BottomsContext",
    "BottomsStrategy",
    "STRATEGIES",
    "calculate_bottom_recommendation",
    "emergency_fallback",
    "select_strategy",
]
