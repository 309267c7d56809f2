from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from ..models import FitHint, ReferenceMeasurement, ShopperProfile, SizeRecommendation, SizeTableRow
from ..translator import parse_measurement


@dataclass(frozen=True)
class BottomsContext:
    profile: ShopperProfile
    rows: List[SizeTableRow]
    reference: ReferenceMeasurement
    offered: List[str] = field(default_factory=list)
    fit_hint: Optional[FitHint] = None
    chart: str = "mens"
    waist: Optional[int] = None
    hip: Optional[int] = None
    inseam: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def build(
        cls,
        profile: ShopperProfile,
        rows: Optional[Sequence[SizeTableRow]] = None,
        fit_hint: Optional[FitHint] = None,
        reference: Optional[ReferenceMeasurement] = None,
        offered: Optional[Sequence[str]] = None,
        chart: str = "mens",
    ) -> "BottomsContext":
        return cls(
            profile=profile,
            rows=list(rows or []),
            reference=reference or ReferenceMeasurement(),
            offered=[s for s in (offered or []) if s and s.strip()],
            fit_hint=fit_hint,
            chart=chart,
            waist=parse_measurement(profile.waist),
            hip=parse_measurement(profile.hip),
            inseam=parse_measurement(profile.inseam),
            height=parse_measurement(profile.height),
        )

    @property
    def brand_suggestion(self) -> int:
        """Store-authored index shift, clamped to -1, 0 or +1."""
        value = self.reference.brand_size_suggestion
        return (value > 0) - (value < 0)

    @property
    def has_model_data(self) -> bool:
        return bool(self.reference.model_height)

    def measurements(self) -> dict:
        return {
            "user_waist": self.waist,
            "user_hip": self.hip,
            "user_inseam": self.inseam,
            "user_height": self.height,
            "inseam_length": self.reference.inseam_length,
            "inseam_length_size": self.reference.inseam_length_size,
        }


class BottomsStrategy(Protocol):
    name: str

    def applies(self, ctx: BottomsContext) -> bool:
        ...

    def run(self, ctx: BottomsContext) -> Optional[SizeRecommendation]:  # None = no match, final
        ...
