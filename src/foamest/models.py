from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

# Keep tuple structure to preserve order for UI display
GENERAL = "General"
EXTERIOR_WALLS = "Exterior Walls"
ROOF_DECK = "Roof Deck"
GABLE = "Gable"
AREA_TYPES: Tuple[str, ...] = (GENERAL, EXTERIOR_WALLS, ROOF_DECK, GABLE)

OPEN_CELL = "Open"
CLOSED_CELL = "Closed"
FOAM_TYPES: Tuple[str, ...] = (OPEN_CELL, CLOSED_CELL)

OVERHEAD_CATEGORIES: Tuple[str, ...] = (
    "salaries",
    "rent",
    "rig_lease",
    "truck_lease",
    "insurance",
    "marketing",
    "software",
    "other",
)

ACTUAL_FIELDS: Tuple[str, ...] = (
    "actual_labor_hours",
    "actual_open_gallons",
    "actual_closed_gallons",
)


def _compress(value: object) -> str:
    return "".join(str(value).split()).lower()


def normalize_area_type(value: object) -> Optional[str]:
    """
    Map an area type spelling onto its canonical display name.

    Accepts ``"Roof Deck"``, ``"RoofDeck"``, ``"roof deck"`` and the like.
    Returns ``None`` when the value is not a known area type.
    """

    if value is None:
        return None
    compressed = _compress(value)
    if not compressed:
        return None
    for name in AREA_TYPES:
        if compressed == _compress(name):
            return name
    return None


def normalize_foam_type(value: object) -> Optional[str]:
    """Map ``"open"``, ``"Open Cell"``, ``"closed-cell"`` etc. onto ``Open``/``Closed``."""

    if value is None:
        return None
    compressed = _compress(value).replace("-", "").replace("_", "")
    if compressed.endswith("cell"):
        compressed = compressed[: -len("cell")]
    for name in FOAM_TYPES:
        if compressed == name.lower():
            return name
    return None


@dataclass(frozen=True)
class FoamApplication:
    """One layer of foam sprayed over an area."""

    id: int
    foam_type: str = OPEN_CELL
    foam_thickness: float = 6.0
    material_price: float = 1870.0
    material_markup: float = 75.0
    board_feet_per_set: float = 14000.0


@dataclass(frozen=True)
class Area:
    """A surface to insulate, described either by square footage or by dimensions."""

    id: int
    name: str
    foam_applications: Tuple[FoamApplication, ...]
    area_sqft: float = 0.0
    length: float = 0.0
    width: float = 0.0
    area_type: str = GENERAL
    roof_pitch: str = "4/12"
    apply_pitch_to_manual_area: bool = False


@dataclass(frozen=True)
class GlobalInputs:
    labor_hours: float = 0.0
    manual_labor_rate: float = 0.0
    labor_markup: float = 0.0
    travel_distance: float = 0.0
    travel_rate: float = 0.0
    waste_disposal: float = 0.0
    equipment_rental: float = 0.0


@dataclass(frozen=True)
class BusinessSettings:
    """Monthly overhead and targets used to allocate overhead to a job."""

    salaries: float = 0.0
    rent: float = 0.0
    rig_lease: float = 0.0
    truck_lease: float = 0.0
    insurance: float = 0.0
    marketing: float = 0.0
    software: float = 0.0
    other: float = 0.0
    expected_monthly_hours: float = 160.0
    target_net_margin: float = 20.0


@dataclass(frozen=True)
class Actuals:
    """Post-job measurements; ``None`` means not recorded and falls back to the estimate."""

    actual_labor_hours: Optional[float] = None
    actual_open_gallons: Optional[float] = None
    actual_closed_gallons: Optional[float] = None


@dataclass(frozen=True)
class EstimateMetadata:
    job_name: str = ""
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    job_address: str = ""
    estimate_date: str = ""
    notes: str = ""


@dataclass(frozen=True)
class FoamTotals:
    """Open/closed split of a material quantity."""

    open: float = 0.0
    closed: float = 0.0

    @property
    def total(self) -> float:
        return self.open + self.closed

    def add(self, foam_type: str, amount: float) -> "FoamTotals":
        if foam_type == CLOSED_CELL:
            return FoamTotals(open=self.open, closed=self.closed + amount)
        return FoamTotals(open=self.open + amount, closed=self.closed)


@dataclass(frozen=True)
class ApplicationBreakdown:
    """Normalized cost view of a single foam application."""

    area_id: int
    application_id: int
    foam_type: str
    foam_thickness: float
    sqft: float
    board_feet: float
    sets: float
    gallons: float
    material_cost_per_set: float
    base_material_cost: float
    markup_amount: float
    raw_total: float
    total_cost: float
    r_value: float
    price_per_sqft: float


@dataclass(frozen=True)
class AreaBreakdown:
    area_id: int
    name: str
    area_type: str
    sqft: float
    applications: Tuple[ApplicationBreakdown, ...] = ()
    error: Optional[str] = None

    @property
    def total_cost(self) -> float:
        return sum(app.total_cost for app in self.applications)


@dataclass(frozen=True)
class CommissionResult:
    net_profit_before_commission: float
    margin_before_commission: float
    commission_rate: float
    commission: float
    final_profit: float
    final_margin: float


@dataclass(frozen=True)
class OverheadResult:
    total_monthly_overhead: float
    overhead_per_hour: float
    break_even_revenue: float
    job_overhead: float
    true_net_profit: float


@dataclass(frozen=True)
class EstimateResult:
    """Job-level totals for the estimate as quoted."""

    total_gallons: FoamTotals
    total_sets: FoamTotals
    base_material_cost: float
    material_markup_amount: float
    fuel_cost: float
    base_labor_cost: float
    total_base_cost: float
    labor_markup_amount: float
    customer_cost: float
    commission: CommissionResult
    overhead: OverheadResult
    areas: Tuple[AreaBreakdown, ...] = ()

    @property
    def final_profit(self) -> float:
        return self.commission.final_profit

    @property
    def final_margin(self) -> float:
        return self.commission.final_margin

    @property
    def job_overhead(self) -> float:
        return self.overhead.job_overhead

    @property
    def true_net_profit(self) -> float:
        return self.overhead.true_net_profit

    @property
    def applications(self) -> Tuple[ApplicationBreakdown, ...]:
        return tuple(app for area in self.areas for app in area.applications)


@dataclass(frozen=True)
class ActualResult:
    """Job-level totals recomputed from recorded actuals."""

    labor_hours: float
    total_gallons: FoamTotals
    material_cost: float
    labor_cost: float
    fuel_cost: float
    waste_disposal: float
    equipment_rental: float
    total_base_cost: float
    customer_cost: float
    commission: CommissionResult
    overhead: OverheadResult

    @property
    def final_profit(self) -> float:
        return self.commission.final_profit

    @property
    def final_margin(self) -> float:
        return self.commission.final_margin

    @property
    def job_overhead(self) -> float:
        return self.overhead.job_overhead

    @property
    def true_net_profit(self) -> float:
        return self.overhead.true_net_profit


@dataclass(frozen=True)
class ComparisonLine:
    metric: str
    estimate: float
    actual: float

    @property
    def delta(self) -> float:
        return self.actual - self.estimate


@dataclass(frozen=True)
class Comparison:
    estimate: EstimateResult
    actual: ActualResult
    lines: Tuple[ComparisonLine, ...] = field(default_factory=tuple)

    def line(self, metric: str) -> ComparisonLine:
        for entry in self.lines:
            if entry.metric == metric:
                return entry
        raise KeyError(metric)

    def deltas(self) -> Dict[str, float]:
        return {entry.metric: entry.delta for entry in self.lines}
