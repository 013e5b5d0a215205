"""Extruder and die sizing rules: closed-form scaling from the target film dimensions.

All functions are pure. Dimensions in inches, gauge in mils, output in lbs/hr.
"""
from __future__ import annotations

import math

from advisor.materials import MaterialProfile
from advisor.rulesets.bands import (
    DIE_SIZES,
    HIGH_OUTPUT_RATE,
    HIGH_OUTPUT_TEMP_OFFSET,
    INCHES_PER_FOOT,
    LARGEST_DIE,
    LINE_SPEED_TOLERANCE,
    MILS_PER_INCH,
    REFERENCE_OUTPUT,
    SCREW_BAND_HIGH,
    SCREW_BAND_LOW,
    SPECIFIC_OUTPUT,
    fixed,
    round_half_up,
)
from advisor.state import BarrelTempSettings, PressureTarget, SpeedRange


def layflat_width(target_od: float) -> float:
    """Half the bubble circumference."""
    return (math.pi * target_od) / 2


def layflat_note(width: float) -> str:
    return f'Target layflat width: {fixed(width, 2)}" ({fixed(width * 2, 2)}" full width)'


def select_die_size(target_od: float) -> int:
    for max_od, die in DIE_SIZES:
        if target_od <= max_od:
            return die
    return LARGEST_DIE


def blow_up_ratio(target_od: float, profile: MaterialProfile) -> float:
    """OD / die diameter, clamped into the material's BUR window (unrounded)."""
    return profile.blow_up_ratio_range.clamp(target_od / select_die_size(target_od))


def screw_speed(production_rate: float, profile: MaterialProfile) -> SpeedRange:
    """
    RPM window from the specific-output baseline.

    The ±20% band is clamped into the material window so min <= recommended <= max
    also holds when the baseline itself falls outside the window. Below the window
    max is the window min instead of baseline x 1.2 (HDPE at 50 lbs/hr: 30, not 12);
    above it min is the window max instead of baseline x 0.8.
    """
    window = profile.screw_speed_range
    base_rpm = production_rate / SPECIFIC_OUTPUT
    return SpeedRange(
        min=round_half_up(window.clamp(base_rpm * SCREW_BAND_LOW)),
        max=round_half_up(window.clamp(base_rpm * SCREW_BAND_HIGH)),
        recommended=round_half_up(window.clamp(base_rpm)),
    )


def mass_per_foot(target_od: float, target_gauge: float, profile: MaterialProfile) -> float:
    """lbs of film per foot of tube."""
    film_area = math.pi * target_od * (target_gauge / MILS_PER_INCH)
    return film_area * INCHES_PER_FOOT * profile.density


def line_speed(production_rate: float, target_od: float, target_gauge: float, profile: MaterialProfile) -> SpeedRange:
    """Haul-off speed in ft/min that carries the production rate at the target dimensions."""
    target = production_rate / mass_per_foot(target_od, target_gauge, profile) / 60
    return SpeedRange(
        min=round_half_up(target * (1 - LINE_SPEED_TOLERANCE)),
        max=round_half_up(target * (1 + LINE_SPEED_TOLERANCE)),
        recommended=round_half_up(target),
    )


def melt_pressure(production_rate: float, profile: MaterialProfile) -> PressureTarget:
    # Square-root scaling around the window midpoint at the reference output
    window = profile.melt_pressure_range
    target = window.midpoint * math.sqrt(production_rate / REFERENCE_OUTPUT)
    return PressureTarget(
        min=round_half_up(window.min),
        max=round_half_up(window.max),
        target=round_half_up(window.clamp(target)),
    )


def barrel_temperatures(production_rate: float, profile: MaterialProfile) -> BarrelTempSettings:
    """Recommended zone set points; feed is never offset."""
    offset = HIGH_OUTPUT_TEMP_OFFSET if production_rate > HIGH_OUTPUT_RATE else 0
    zones = profile.barrel_temperatures
    return BarrelTempSettings(
        feed=round_half_up(zones.feed.recommended),
        compression=round_half_up(zones.compression.recommended + offset),
        metering=round_half_up(zones.metering.recommended + offset),
        die=round_half_up(zones.die.recommended + offset),
    )
