from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


# Shopper values arrive as whatever the profile form stored; parse with translator.parse_*.
RawMeasurement = Optional[Union[str, int, float]]


class GarmentCategory(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    SHOES = "shoes"
    UNKNOWN = "unknown"


class FitHint(str, Enum):
    RUNS_SMALL = "runs_small"
    RUNS_LARGE = "runs_large"


class ShopperProfile(BaseModel):
    chest: RawMeasurement = None
    waist: RawMeasurement = None
    hip: RawMeasurement = None
    arm_length: RawMeasurement = None
    inseam: RawMeasurement = None
    torso_length: RawMeasurement = None
    height: RawMeasurement = None
    foot_length: RawMeasurement = None
    foot_width: Optional[str] = None  # narrow | average | wide
    shoe_size: RawMeasurement = None
    fit_preference: RawMeasurement = None  # 1 (slim) .. 10 (loose)


class SizeTableRow(BaseModel):
    label: str
    chest: float = 0.0
    waist: float = 0.0
    hip: float = 0.0
    foot_length: Optional[float] = None
    inseam: Optional[float] = None
    row_index: int = -1


class ReferenceMeasurement(BaseModel):
    """Descriptive signals scraped from the product page."""

    model_config = ConfigDict(protected_namespaces=())

    model_height: Optional[float] = None
    model_size: Optional[str] = None
    item_length: Optional[float] = None
    item_length_size: Optional[str] = None
    inseam_length: Optional[float] = None
    inseam_length_size: Optional[str] = None
    is_ankle_length: bool = False
    fit: Optional[str] = None  # garment cut: slim | regular | relaxed
    stretch: Optional[float] = None
    brand_size_suggestion: int = 0  # +1 runs small, -1 runs large
    is_moccasin: bool = False
    is_leather_boot: bool = False
    has_laces: bool = False
    manual_override: Optional[bool] = None
    recommended_size: Optional[str] = None
    store_suggestion: Optional[str] = None
    material_info: Optional[str] = None

    @property
    def cut(self) -> str:
        return (self.fit or "").strip().lower()


class SecondarySize(BaseModel):
    size: str
    note: Optional[str] = None


class SizeRecommendation(BaseModel):
    size: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    category: GarmentCategory
    user_measurement: Optional[float] = None
    target_measurement: Optional[float] = None
    buffer: float = 0.0
    matched_row: Optional[SizeTableRow] = None
    fit_note: Optional[str] = None
    length_note: Optional[str] = None
    secondary: Optional[SecondarySize] = None
    strategy: Optional[str] = None

    user_waist: Optional[float] = None
    user_hip: Optional[float] = None
    user_inseam: Optional[float] = None
    user_height: Optional[float] = None
    user_foot_length: Optional[float] = None
    inseam_length: Optional[float] = None
    inseam_length_size: Optional[str] = None

    technical_size: Optional[str] = None
    runs_large_adjusted: bool = False
    store_suggestion: Optional[str] = None
    store_suggestion_note: Optional[str] = None

    @model_validator(mode="after")
    def _drop_duplicate_secondary(self) -> "SizeRecommendation":
        # A "dual" that shows the same label twice is never emitted.
        if self.secondary is not None and self.secondary.size == self.size:
            self.secondary = None
        return self

    @computed_field  # type: ignore[misc]
    @property
    def is_dual(self) -> bool:
        return self.secondary is not None

    @property
    def secondary_size(self) -> Optional[str]:
        return self.secondary.size if self.secondary else None


class ShoeCandidate(BaseModel):
    label: str
    value: float
    foot_length: float
    interpolated: bool = False
    row_index: int = -1

