"""Defect diagnosis rules: re-rank a defect's causes against live settings."""
from __future__ import annotations

from advisor.defects import CauseEntry, DefectProfile
from advisor.materials import MaterialProfile
from advisor.state import (
    PROBABILITY_ORDER,
    CauseTag,
    CurrentSettings,
    MaterialType,
    RankedCause,
    SettingsFlags,
)

SCREW_SPEED_HIGH_FRACTION = 0.9  # of the material's max RPM

HYGROSCOPIC_MATERIALS = frozenset({MaterialType.EVOH})

NOTE_LOW_TEMPERATURE = " [Current settings confirm low temperature condition]"
NOTE_HIGH_TEMPERATURE = " [Current settings confirm high temperature condition]"
NOTE_SCREW_SPEED_HIGH = " [Current screw speed is near upper limit]"
NOTE_HYGROSCOPIC = " [EVOH is hygroscopic - moisture is common issue]"


def settings_flags(settings: CurrentSettings, profile: MaterialProfile) -> SettingsFlags:
    die_window = profile.barrel_temperatures.die
    return SettingsFlags(
        die_temp_low=settings.die_temp < die_window.min,
        die_temp_high=settings.die_temp > die_window.max,
        melt_temp_low=settings.melt_temp < profile.melt_temp_range.min,
        melt_temp_high=settings.melt_temp > profile.melt_temp_range.max,
        screw_speed_high=settings.screw_speed > profile.screw_speed_range.max * SCREW_SPEED_HIGH_FRACTION,
    )


def assess_cause(entry: CauseEntry, flags: SettingsFlags, material: MaterialType) -> RankedCause:
    """Copy one table entry, escalating to high and annotating when settings confirm it."""
    probability = entry.probability
    explanation = entry.explanation
    escalated = False

    # Rule order fixes annotation order when several rules fire
    if entry.has_tag(CauseTag.TEMPERATURE_LOW) and (flags.melt_temp_low or flags.die_temp_low):
        probability, explanation, escalated = "high", explanation + NOTE_LOW_TEMPERATURE, True
    if entry.has_tag(CauseTag.TEMPERATURE_HIGH) and (flags.melt_temp_high or flags.die_temp_high):
        probability, explanation, escalated = "high", explanation + NOTE_HIGH_TEMPERATURE, True
    if entry.has_tag(CauseTag.THROUGHPUT) and flags.screw_speed_high:
        probability, explanation, escalated = "high", explanation + NOTE_SCREW_SPEED_HIGH, True
    if entry.has_tag(CauseTag.MOISTURE) and material in HYGROSCOPIC_MATERIALS:
        probability, explanation, escalated = "high", explanation + NOTE_HYGROSCOPIC, True

    return RankedCause(
        cause=entry.cause,
        probability=probability,
        explanation=explanation,
        adjustments=list(entry.adjustments),
        tags=sorted(entry.tags, key=lambda t: t.value),
        escalated=escalated,
    )


def rank_causes(defect: DefectProfile, flags: SettingsFlags, material: MaterialType) -> list[RankedCause]:
    """Assess every cause, then stable-sort by probability tier (high first)."""
    assessed = [assess_cause(entry, flags, material) for entry in defect.causes]
    return sorted(assessed, key=lambda c: PROBABILITY_ORDER[c.probability])


def general_recommendations(defect: DefectProfile, profile: MaterialProfile) -> list[str]:
    """Defect-general advice, then material advisories, then defect process checks."""
    return [
        *defect.general_recommendations,
        *profile.troubleshooting_notes,
        *defect.process_checks,
    ]
