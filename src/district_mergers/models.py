"""
Record types for district budgets, enrollment, anchors and consolidation results.

Each dataset is a JSON object keyed by district key (see normalize.py). The
models here validate one record each and accept the JSON field names of the
published artifacts (camelCase for budgets, anchors and results; the state
enrollment file's own names for enrollment). All records are frozen: the maps
are loaded once and shared read-only.
"""

from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

AnchorType = Literal["high_school", "elementary_school", "fallback"]


class _CamelRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )

    def to_dict(self) -> dict:
        """JSON-ready dict using the published field names."""
        return self.model_dump(by_alias=True, mode="json")


# --- Budgets ---

class BudgetComponents(_CamelRecord):
    """The two spending lines that make up central administration."""
    district_management: float = 0.0
    program_operations_management: float = 0.0


class DistrictBudget(_CamelRecord):
    """
    One district's budget extract for a single fiscal year.

    Attributes:
        total_expenditures: Total spending in dollars; 0 means unknown
        central_administration: Raw admin spend (district management +
            program/operations management), may be negative
        central_administration_model: Admin spend used for projections:
            negative components clamped to 0 and outlier shares capped
        admin_share_of_total: Raw admin / total, None when total is 0
        admin_share_of_total_model: Modeled admin / total, None when total is 0
        flags: Data-quality flags raised during extraction
    """
    display_name: str
    source_file: str = ""
    fiscal_year: str = ""
    total_expenditures: float = Field(ge=0)
    central_administration: float = 0.0
    central_administration_model: float = Field(ge=0)
    admin_share_of_total: Optional[float] = None
    admin_share_of_total_model: Optional[float] = None
    components: BudgetComponents = BudgetComponents()
    components_model: BudgetComponents = BudgetComponents()
    flags: Tuple[str, ...] = ()


# --- Enrollment ---

class Demographics(BaseModel):
    """Headcounts by race/ethnicity and gender, keyed like the state file (WHITE, FEMALE, ...)."""
    model_config = ConfigDict(
        alias_generator=lambda name: name.upper().replace("_", ""),
        populate_by_name=True,
        frozen=True,
    )

    native: Optional[int] = Field(None, ge=0)
    asian: Optional[int] = Field(None, ge=0)
    black: Optional[int] = Field(None, ge=0)
    hispanic: Optional[int] = Field(None, ge=0)
    multirace: Optional[int] = Field(None, ge=0)
    pacific_islander: Optional[int] = Field(None, ge=0)
    white: Optional[int] = Field(None, ge=0)
    female: Optional[int] = Field(None, ge=0)
    male: Optional[int] = Field(None, ge=0)
    other: Optional[int] = Field(None, ge=0)


class DistrictEnrollment(BaseModel):
    """
    District (LEA) enrollment snapshot.

    Sub-population counts: free/reduced lunch (FRL), limited English (LEP),
    individualized education program (IEP) and vocational education (VOCED).
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    distcode: str = ""
    distname: str = ""
    total: int = Field(ge=0)
    elem_enrollment: Optional[int] = Field(None, ge=0)
    sec_enrollment: Optional[int] = Field(None, ge=0)
    frl: Optional[int] = Field(None, ge=0, alias="FRL")
    lep: Optional[int] = Field(None, ge=0, alias="LEP")
    iep: Optional[int] = Field(None, ge=0, alias="IEP")
    voced: Optional[int] = Field(None, ge=0, alias="VOCED")
    demographics: Optional[Demographics] = None
    grades: Optional[Dict[str, int]] = None

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


# --- Anchors ---

class AnchorSchool(_CamelRecord):
    """The school whose location a district anchor was taken from."""
    name: str
    nces_id: str = ""
    enrollment: Optional[int] = None
    grade_low: Optional[int] = None
    grade_high: Optional[int] = None
    grade_bucket: str = ""
    district_geoid: str = ""
    district_name: str = ""


class DistrictAnchor(_CamelRecord):
    """Representative point for a district, normally its largest public high school."""
    display_name: str
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    anchor_type: AnchorType
    anchor_school: Optional[AnchorSchool] = None
    flags: Tuple[str, ...] = ()

    @model_validator(mode="after")
    def _school_required_unless_fallback(self):
        if self.anchor_type != "fallback" and self.anchor_school is None:
            raise ValueError(f"{self.anchor_type} anchor requires anchorSchool")
        return self

    @property
    def point(self) -> Dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


# --- Consolidation ---

class ConsolidationParams(_CamelRecord):
    """
    User-tunable assumptions for a consolidation estimate.

    Values are stored as given; the estimator clamps them before use.

    Attributes:
        admin_reduction_rate: Share of spoke admin spend eliminated, [0, 1]
        affected_share: Share of spoke enrollment bused further, [0, 1]
        cost_per_student_mile: Dollars per affected student per added mile, >= 0
    """
    model_config = ConfigDict(allow_inf_nan=True)

    admin_reduction_rate: float
    affected_share: float
    cost_per_student_mile: float


class SpokeDetail(_CamelRecord):
    """Per-spoke transportation figures; distance and cost are rounded for display."""
    model_config = ConfigDict(allow_inf_nan=True)

    key: str
    name: str
    enrollment: int
    distance_miles: float
    cost: float


class MissingData(_CamelRecord):
    """District keys absent from each dataset (or with no positive enrollment)."""
    budgets: Tuple[str, ...] = ()
    enrollment: Tuple[str, ...] = ()
    anchors: Tuple[str, ...] = ()

    @property
    def any(self) -> bool:
        return bool(self.budgets or self.enrollment or self.anchors)


class ConsolidationResult(_CamelRecord):
    """
    Outcome of a consolidation estimate.

    When ``ok`` is False only ``warnings`` and ``missing`` are meaningful and
    every numeric field keeps its zero default. Percentages are fractions
    (0.01 == 1%).
    """
    model_config = ConfigDict(allow_inf_nan=True)

    ok: bool = False
    hub_key: str = ""
    hub_name: str = ""
    combined_enrollment: int = 0
    combined_spending: float = 0.0
    hub_spending: float = 0.0
    spokes_spending: float = 0.0
    baseline_per_pupil: float = 0.0
    admin_baseline_hub: float = 0.0
    admin_baseline_spokes: float = 0.0
    admin_savings: float = 0.0
    transportation_increase: float = 0.0
    net_impact: float = 0.0
    projected_spending: float = 0.0
    projected_per_pupil: float = 0.0
    admin_savings_pct_combined: float = 0.0
    transport_increase_pct_combined: float = 0.0
    net_impact_pct_combined: float = 0.0
    admin_savings_pct_spokes_spending: float = 0.0
    transport_increase_pct_spokes_spending: float = 0.0
    net_impact_pct_spokes_spending: float = 0.0
    spoke_breakdown: Tuple[SpokeDetail, ...] = ()
    warnings: Tuple[str, ...] = ()
    missing: MissingData = MissingData()

    @classmethod
    def not_ok(
        cls,
        warnings: Tuple[str, ...] = (),
        missing: Optional[MissingData] = None
    ) -> "ConsolidationResult":
        """Result for a selection that could not be estimated."""
        return cls(warnings=tuple(warnings), missing=missing or MissingData())
