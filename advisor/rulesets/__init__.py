from __future__ import annotations

from advisor.rulesets.assessment import bubble_stability, confidence, critical_parameters, gauge_control
from advisor.rulesets.cooling import air_ring, cooling_load, frost_line, ibc, nip_rollers
from advisor.rulesets.diagnosis import general_recommendations, rank_causes, settings_flags
from advisor.rulesets.sizing import (
    barrel_temperatures,
    blow_up_ratio,
    layflat_note,
    layflat_width,
    line_speed,
    melt_pressure,
    screw_speed,
    select_die_size,
)

__all__ = [
    "air_ring",
    "barrel_temperatures",
    "blow_up_ratio",
    "bubble_stability",
    "confidence",
    "cooling_load",
    "critical_parameters",
    "frost_line",
    "gauge_control",
    "general_recommendations",
    "ibc",
    "layflat_note",
    "layflat_width",
    "line_speed",
    "melt_pressure",
    "nip_rollers",
    "rank_causes",
    "screw_speed",
    "select_die_size",
    "settings_flags",
]
