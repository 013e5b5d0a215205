"""Fixed constants and qualitative bands used by the optimizer rules.

Qualitative outputs (air ring, nip rollers, IBC, frost line notes, gauge
tolerance) are chosen from the closed sets below; callers may compare
against these exact strings.
"""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from advisor.state import MaterialType

# ---------------------------------------------------------------------------
# Scaling constants
# ---------------------------------------------------------------------------
SPECIFIC_OUTPUT = 5.0  # lbs/hr per RPM, standard 24:1 L/D screw
SCREW_BAND_LOW = 0.8
SCREW_BAND_HIGH = 1.2
LINE_SPEED_TOLERANCE = 0.15
REFERENCE_OUTPUT = 200.0  # lbs/hr where melt pressure sits mid-window
HIGH_OUTPUT_RATE = 300.0  # lbs/hr
HIGH_OUTPUT_TEMP_OFFSET = 10  # °F on compression, metering, die
DIE_GAP_MULTIPLIER = 15  # die gap (mils) per mil of final gauge
INCHES_PER_FOOT = 12
MILS_PER_INCH = 1000

# (max OD inclusive, die diameter) in inches
DIE_SIZES: tuple[tuple[float, int], ...] = ((10, 4), (20, 6), (35, 8), (50, 10))
LARGEST_DIE = 12

# Frost line height as multiples of die diameter
FROST_LINE_MULTIPLES = {"min": 3.0, "optimal": 4.5, "max": 6.0}
FROST_LINE_FAST_RATE = 300.0
FROST_LINE_SLOW_RATE = 100.0
FROST_LINE_FAST_ADJ = 1.1
FROST_LINE_SLOW_ADJ = 0.9

# IBC triggers
IBC_COOLING_LOAD = 4000.0
IBC_HEAVY_GAUGE = 3.0
IBC_HIGH_OUTPUT = 250.0

# ---------------------------------------------------------------------------
# Threshold bands: (exclusive upper bound, label); the default applies above the last bound
# ---------------------------------------------------------------------------
LIP_GAP_BANDS: tuple[tuple[float, str], ...] = (
    (150, '0.030-0.040"'),
    (300, '0.040-0.060"'),
)
LIP_GAP_DEFAULT = '0.060-0.080"'

COOLING_CAPACITY_BANDS: tuple[tuple[float, str], ...] = (
    (2000, "Standard single-lip"),
    (5000, "Dual-lip recommended"),
)
COOLING_CAPACITY_DEFAULT = "Dual-lip with IBC recommended"

NIP_PRESSURE_BANDS: tuple[tuple[float, str], ...] = (
    (1, "Light (15-25 PSI) - thin gauge sensitive to crushing"),
    (3, "Medium (25-40 PSI) - standard operating range"),
)
NIP_PRESSURE_DEFAULT = "Medium-High (35-50 PSI) - heavier gauge needs more nip force"

GAUGE_VARIATION_BANDS: tuple[tuple[float, str], ...] = (
    (1, "±5% (tight control required for thin gauge)"),
    (3, "±5-7% (standard tolerance)"),
)
GAUGE_VARIATION_DEFAULT = "±7-10% (relaxed tolerance acceptable)"

# ---------------------------------------------------------------------------
# Material-keyed messages
# ---------------------------------------------------------------------------
AIR_VELOCITY: dict[MaterialType, str] = {
    MaterialType.HDPE: "High (fast crystallization)",
    MaterialType.EVOH: "Moderate (prevent rapid quench)",
}
AIR_VELOCITY_DEFAULT = "Medium-High"

FROST_LINE_NOTES: dict[MaterialType, str] = {
    MaterialType.HDPE: "HDPE requires higher frost line for proper crystallinity development",
    MaterialType.EVOH: "EVOH sensitive to frost line - maintain consistent height for barrier properties",
    MaterialType.LLDPE: "LLDPE tolerates wider frost line range than HDPE",
    MaterialType.LDPE: "LDPE very forgiving - frost line height less critical",
}

NIP_TEMPERATURE: dict[MaterialType, str] = {
    MaterialType.HDPE: "Ambient to 80°F - avoid heating crystalline film",
    MaterialType.EVOH: "Ambient (60-75°F) - prevent moisture pickup",
}
NIP_TEMPERATURE_DEFAULT = "Ambient to 100°F - slight warming can improve layflat"

# (air flow, notes) when IBC is recommended
IBC_SETTINGS: dict[MaterialType, tuple[str, str]] = {
    MaterialType.HDPE: (
        "High flow rate (match or exceed external cooling)",
        "HDPE benefits significantly from IBC - improves output capacity 20-40%",
    ),
    MaterialType.EVOH: (
        "Moderate flow - balanced with external cooling",
        "IBC helps maintain uniform cooling for consistent barrier properties",
    ),
}
IBC_SETTINGS_DEFAULT = (
    "Medium-High flow rate",
    "IBC enables higher output rates and improved gauge uniformity",
)
IBC_NOT_REQUIRED = (
    "Not required for this application",
    "External air ring cooling sufficient for current parameters",
)

# Bubble stability: (score delta, factor, recommendation or None)
STABILITY_MATERIAL_EFFECTS: dict[MaterialType, tuple[int, str, str | None]] = {
    MaterialType.LLDPE: (-5, "LLDPE has higher melt strength - generally stable", None),
    MaterialType.LDPE: (0, "LDPE excellent bubble stability", None),
    MaterialType.HDPE: (-10, "HDPE lower melt strength - monitor closely", "Maintain consistent melt temperature"),
    MaterialType.EVOH: (-15, "EVOH narrow processing window affects stability", "Precise temperature control essential"),
}

# Score -> label, checked top-down (inclusive lower bounds)
STABILITY_RATINGS: tuple[tuple[int, str], ...] = ((75, "stable"), (50, "moderate"))
STABILITY_RATING_FLOOR = "challenging"
CONFIDENCE_LEVELS: tuple[tuple[int, str], ...] = ((80, "high"), (60, "medium"))
CONFIDENCE_LEVEL_FLOOR = "low"


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def fixed(value: float, places: int) -> str:
    """Fixed-point text of value, ties rounded up (22.5 -> "23")."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def band_label(value: float, bands: tuple[tuple[float, str], ...], default: str) -> str:
    """First label whose upper bound is strictly greater than value, else default."""
    for upper, label in bands:
        if value < upper:
            return label
    return default


def score_label(score: int, levels: tuple[tuple[int, str], ...], floor: str) -> str:
    for lower, label in levels:
        if score >= lower:
            return label
    return floor
