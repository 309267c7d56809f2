import threading
import time
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException

from ..config import settings
from ..schemas.recommend import RecommendRequest, RecommendResponse
from ..security import verify_api_key
from ..services.recommender import Recommender


logger = structlog.get_logger("perfit")

router = APIRouter(prefix="/recommend", tags=["recommend"], dependencies=[Depends(verify_api_key)])

# Last successful recommendation, kept for the widget to re-read after a page reload
_last: Optional[RecommendResponse] = None
_last_exp: float = 0.0
_last_lock = threading.Lock()


def _last_get() -> Optional[RecommendResponse]:
    global _last, _last_exp
    with _last_lock:
        if _last is not None and _last_exp > time.time():
            return _last
        _last = None
        _last_exp = 0.0
        return None


def _last_set(value: RecommendResponse, ttl: int) -> None:
    global _last, _last_exp
    with _last_lock:
        _last = value
        _last_exp = time.time() + ttl


def _last_clear() -> None:
    global _last, _last_exp
    with _last_lock:
        _last = None
        _last_exp = 0.0


@router.post("", response_model=RecommendResponse)
async def recommend(body: RecommendRequest) -> RecommendResponse:
    recommender = Recommender(fallback_chart=settings.fallback_chart)
    result = recommender.recommend(
        body.profile,
        body.category,
        rows=body.rows,
        fit_hint=body.fit_hint,
        reference=body.reference,
        offered_sizes=body.offered_sizes,
    )
    response = RecommendResponse(found=result is not None, recommendation=result)
    if result is not None:
        _last_set(response, settings.cache_ttl_seconds)
    return response


@router.get("/last", response_model=RecommendResponse)
async def last_recommendation() -> RecommendResponse:
    cached = _last_get()
    if cached is None:
        raise HTTPException(status_code=404, detail="No recent recommendation")
    logger.debug("last_recommendation_served", size=cached.recommendation.size if cached.recommendation else None)
    return cached
