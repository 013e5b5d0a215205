from __future__ import annotations

from advisor.materials import MaterialProfile
from advisor.rulesets.bands import (
    AIR_VELOCITY,
    AIR_VELOCITY_DEFAULT,
    COOLING_CAPACITY_BANDS,
    COOLING_CAPACITY_DEFAULT,
    FROST_LINE_FAST_ADJ,
    FROST_LINE_FAST_RATE,
    FROST_LINE_MULTIPLES,
    FROST_LINE_NOTES,
    FROST_LINE_SLOW_ADJ,
    FROST_LINE_SLOW_RATE,
    IBC_COOLING_LOAD,
    IBC_HEAVY_GAUGE,
    IBC_HIGH_OUTPUT,
    IBC_NOT_REQUIRED,
    IBC_SETTINGS,
    IBC_SETTINGS_DEFAULT,
    LIP_GAP_BANDS,
    LIP_GAP_DEFAULT,
    NIP_PRESSURE_BANDS,
    NIP_PRESSURE_DEFAULT,
    NIP_TEMPERATURE,
    NIP_TEMPERATURE_DEFAULT,
    band_label,
    round_half_up,
)
from advisor.rulesets.sizing import select_die_size
from advisor.state import (
    AirRingSettings,
    FrostLineSettings,
    HeightRange,
    IBCRecommendation,
    MaterialType,
    NipRollerSettings,
    SpeedRange,
)


def cooling_load(production_rate: float, target_od: float) -> float:
    """Heat-removal proxy: output x bubble diameter."""
    return production_rate * target_od


def air_ring(production_rate: float, material: MaterialType, target_od: float) -> AirRingSettings:
    return AirRingSettings(
        lip_gap=band_label(production_rate, LIP_GAP_BANDS, LIP_GAP_DEFAULT),
        # Crystallization rate drives quench intensity
        air_velocity=AIR_VELOCITY.get(material, AIR_VELOCITY_DEFAULT),
        cooling_capacity=band_label(
            cooling_load(production_rate, target_od), COOLING_CAPACITY_BANDS, COOLING_CAPACITY_DEFAULT
        ),
    )


def frost_line_rate_adjustment(production_rate: float) -> float:
    if production_rate > FROST_LINE_FAST_RATE:
        return FROST_LINE_FAST_ADJ
    if production_rate < FROST_LINE_SLOW_RATE:
        return FROST_LINE_SLOW_ADJ
    return 1.0


def frost_line(target_od: float, profile: MaterialProfile, production_rate: float) -> FrostLineSettings:
    """Frost line at 3-6x die diameter, scaled by material factor and output."""
    die = select_die_size(target_od)
    factor = profile.frost_line_height_factor
    rate_adj = frost_line_rate_adjustment(production_rate)

    def height(multiple: str) -> int:
        return round_half_up(die * FROST_LINE_MULTIPLES[multiple] * factor * rate_adj)

    low, high, optimal = height("min"), height("max"), height("optimal")
    return FrostLineSettings(
        height_range=f'{low}-{high}" (optimal: ~{optimal}")',
        height_inches=HeightRange(min=low, max=high),
        optimal_inches=optimal,
        notes=FROST_LINE_NOTES[profile.id],
    )


def nip_rollers(line: SpeedRange, target_gauge: float, material: MaterialType) -> NipRollerSettings:
    return NipRollerSettings(
        speed=f"Match line speed ({line.recommended} ft/min) with 1-3% draw",
        pressure=band_label(target_gauge, NIP_PRESSURE_BANDS, NIP_PRESSURE_DEFAULT),
        temperature=NIP_TEMPERATURE.get(material, NIP_TEMPERATURE_DEFAULT),
    )


def ibc_required(production_rate: float, target_od: float, target_gauge: float) -> bool:
    heavy_and_fast = target_gauge > IBC_HEAVY_GAUGE and production_rate > IBC_HIGH_OUTPUT
    return cooling_load(production_rate, target_od) > IBC_COOLING_LOAD or heavy_and_fast


def ibc(production_rate: float, target_od: float, target_gauge: float, material: MaterialType) -> IBCRecommendation:
    recommended = ibc_required(production_rate, target_od, target_gauge)
    if recommended:
        air_flow, notes = IBC_SETTINGS.get(material, IBC_SETTINGS_DEFAULT)
    else:
        air_flow, notes = IBC_NOT_REQUIRED
    return IBCRecommendation(recommended=recommended, air_flow=air_flow, notes=notes)
