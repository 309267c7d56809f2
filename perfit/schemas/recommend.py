from typing import List, Optional, Union
from pydantic import BaseModel, Field

from ..services.sizing.models import (
    GarmentCategory,
    ReferenceMeasurement,
    ShopperProfile,
    SizeRecommendation,
    SizeTableRow,
)


class RecommendRequest(BaseModel):
    profile: ShopperProfile
    category: GarmentCategory = GarmentCategory.UNKNOWN
    rows: List[SizeTableRow] = Field(default_factory=list)
    fit_hint: Optional[Union[str, int, float]] = None
    reference: Optional[ReferenceMeasurement] = None
    offered_sizes: List[str] = Field(default_factory=list)


class RecommendResponse(BaseModel):
    found: bool
    recommendation: Optional[SizeRecommendation] = None
