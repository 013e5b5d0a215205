from __future__ import annotations

import operator
from enum import Enum
from typing import Annotated, Literal, TypedDict

from pydantic import BaseModel, Field


Probability = Literal["high", "medium", "low"]
ConfidenceLevel = Literal["high", "medium", "low"]
StabilityRating = Literal["stable", "moderate", "challenging"]

# Sort key for re-ranking diagnosed causes (lower sorts first)
PROBABILITY_ORDER: dict[str, int] = {"high": 0, "medium": 1, "low": 2}


class MaterialType(str, Enum):
    """Film resins covered by the material table (table order)."""
    HDPE = "HDPE"
    LDPE = "LDPE"
    LLDPE = "LLDPE"
    EVOH = "EVOH"


class DefectType(str, Enum):
    """Film defects covered by the defect-cause table (table order)."""
    MELT_FRACTURE = "melt_fracture"
    SHARK_SKIN = "shark_skin"
    DIE_LINES = "die_lines"
    VOIDS_BUBBLES = "voids_bubbles"
    WARPING = "warping"
    INCONSISTENT_WALL_THICKNESS = "inconsistent_wall_thickness"
    SURFACE_ROUGHNESS = "surface_roughness"
    GAUGE_BANDS = "gauge_bands"
    WRINKLES = "wrinkles"
    BLOCKING = "blocking"
    GELS = "gels"
    POOR_CLARITY = "poor_clarity"
    BUBBLE_INSTABILITY = "bubble_instability"


class CauseTag(str, Enum):
    """Structured category of a defect cause, used by the escalation rules."""
    TEMPERATURE_LOW = "temperature_low"
    TEMPERATURE_HIGH = "temperature_high"
    THROUGHPUT = "throughput"
    MOISTURE = "moisture"


class Error(BaseModel):
    """Structured error reported by the CLI."""
    node: str
    type: str
    message: str


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------

class OptimizeRequest(BaseModel):
    """Target film dimensions and output. Units: inches, mils, lbs/hr."""
    material: MaterialType
    target_od: float = Field(gt=0, allow_inf_nan=False)
    target_gauge: float = Field(gt=0, allow_inf_nan=False)
    production_rate: float = Field(gt=0, allow_inf_nan=False)


class CurrentSettings(BaseModel):
    """Live line settings. Units: °F, RPM, ft/min."""
    melt_temp: float = Field(ge=0, allow_inf_nan=False)
    screw_speed: float = Field(ge=0, allow_inf_nan=False)
    line_speed: float = Field(ge=0, allow_inf_nan=False)
    die_temp: float = Field(ge=0, allow_inf_nan=False)


class DiagnoseRequest(BaseModel):
    material: MaterialType
    current_settings: CurrentSettings
    defect: DefectType


# -----------------------------------------------------------------------------
# Optimizer output
# -----------------------------------------------------------------------------

class BarrelTempSettings(BaseModel):
    feed: int
    compression: int
    metering: int
    die: int


class SpeedRange(BaseModel):
    min: int
    max: int
    recommended: int


class PressureTarget(BaseModel):
    min: int
    max: int
    target: int


class AirRingSettings(BaseModel):
    lip_gap: str
    air_velocity: str
    cooling_capacity: str


class HeightRange(BaseModel):
    min: int
    max: int


class FrostLineSettings(BaseModel):
    height_range: str
    height_inches: HeightRange
    optimal_inches: int
    notes: str


class NipRollerSettings(BaseModel):
    speed: str
    pressure: str
    temperature: str


class IBCRecommendation(BaseModel):
    recommended: bool
    air_flow: str
    notes: str


class GaugeControlPlan(BaseModel):
    target_variation: str
    die_gap_setting: str
    recommendations: list[str] = Field(default_factory=list)


class BubbleStability(BaseModel):
    rating: StabilityRating
    score: int
    factors: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class ConfidenceAssessment(BaseModel):
    level: ConfidenceLevel
    score: int
    reasons: list[str] = Field(default_factory=list)


class RecommendedSettings(BaseModel):
    """Full machine-settings recommendation for one OptimizeRequest."""
    barrel_temps: BarrelTempSettings
    screw_speed: SpeedRange
    line_speed: SpeedRange
    melt_pressure: PressureTarget
    air_ring: AirRingSettings
    blow_up_ratio: float
    die_diameter: int
    layflat_width: float
    frost_line: FrostLineSettings
    nip_rollers: NipRollerSettings
    ibc: IBCRecommendation
    gauge_control: GaugeControlPlan
    bubble_stability: BubbleStability
    confidence: ConfidenceLevel
    confidence_score: int
    notes: list[str] = Field(default_factory=list)
    critical_parameters: list[str] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Diagnoser output
# -----------------------------------------------------------------------------

class SettingsFlags(BaseModel):
    """Current settings compared against the material's processing window."""
    die_temp_low: bool = False
    die_temp_high: bool = False
    melt_temp_low: bool = False
    melt_temp_high: bool = False
    screw_speed_high: bool = False


class RankedCause(BaseModel):
    cause: str
    probability: Probability
    explanation: str
    adjustments: list[str] = Field(default_factory=list)
    tags: list[CauseTag] = Field(default_factory=list)
    escalated: bool = False  # True when live settings raised the probability or annotated it


class DiagnoseResult(BaseModel):
    defect: DefectType
    defect_name: str
    description: str
    causes: list[RankedCause] = Field(default_factory=list)
    general_recommendations: list[str] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Graph states (trace uses a reducer: nodes return delta lists)
# -----------------------------------------------------------------------------

class OptimizeState(TypedDict, total=False):
    request: OptimizeRequest

    # sizing
    die_diameter: int
    blow_up_ratio: float  # clamped, unrounded
    layflat_width: float
    barrel_temps: BarrelTempSettings
    screw_speed: SpeedRange
    line_speed: SpeedRange
    melt_pressure: PressureTarget

    # cooling
    air_ring: AirRingSettings
    frost_line: FrostLineSettings
    nip_rollers: NipRollerSettings
    ibc: IBCRecommendation

    # assessment
    gauge_control: GaugeControlPlan
    bubble_stability: BubbleStability
    confidence: ConfidenceAssessment
    critical_parameters: list[str]

    result: RecommendedSettings
    trace: Annotated[list[str], operator.add]


class DiagnoseState(TypedDict, total=False):
    request: DiagnoseRequest
    flags: SettingsFlags
    causes: list[RankedCause]
    general_recommendations: list[str]
    result: DiagnoseResult
    trace: Annotated[list[str], operator.add]
