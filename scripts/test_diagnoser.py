#!/usr/bin/env python3
"""Tests for diagnose_defect: settings flags, cause escalation, ranking, recommendations."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))

from advisor import diagnose_defect, get_defect, get_material, make_diagnose_request, run_diagnose  # noqa: E402
from advisor.errors import InvalidInputError, UnknownDefectError, UnknownMaterialError  # noqa: E402
from advisor.rulesets import settings_flags  # noqa: E402
from advisor.rulesets.diagnosis import (  # noqa: E402
    NOTE_HIGH_TEMPERATURE,
    NOTE_HYGROSCOPIC,
    NOTE_LOW_TEMPERATURE,
    NOTE_SCREW_SPEED_HIGH,
)
from advisor.state import CurrentSettings, DefectType, MaterialType  # noqa: E402

# Inside each material's melt, die and screw windows
NORMAL_SETTINGS = {
    "LDPE": {"melt_temp": 400, "screw_speed": 60, "line_speed": 80, "die_temp": 400},
    "HDPE": {"melt_temp": 450, "screw_speed": 60, "line_speed": 80, "die_temp": 445},
    "EVOH": {"melt_temp": 410, "screw_speed": 40, "line_speed": 80, "die_temp": 415},
}


def _diagnose(material, defect, **overrides):
    settings = {**NORMAL_SETTINGS[material], **overrides}
    return diagnose_defect(make_diagnose_request(material, defect, **settings))


def _by_cause(result):
    return {c.cause: c for c in result.causes}


def test_settings_flags():
    ldpe = get_material("LDPE")
    calm = settings_flags(CurrentSettings(**NORMAL_SETTINGS["LDPE"]), ldpe)
    assert not any(calm.model_dump().values())

    hot = settings_flags(CurrentSettings(melt_temp=460, screw_speed=136, line_speed=80, die_temp=445), ldpe)
    assert hot.melt_temp_high and hot.die_temp_high and hot.screw_speed_high
    assert not hot.melt_temp_low and not hot.die_temp_low

    # 0.9 x 150 RPM is not above the threshold
    edge = settings_flags(CurrentSettings(melt_temp=340, screw_speed=135, line_speed=80, die_temp=370), ldpe)
    assert not any(edge.model_dump().values())


def test_evoh_moisture_escalation():
    result = _diagnose("EVOH", DefectType.VOIDS_BUBBLES)
    first = result.causes[0]
    assert first.cause == "Moisture in material"
    assert first.probability == "high"
    assert first.escalated is True
    assert first.explanation.endswith(NOTE_HYGROSCOPIC)
    assert [c.cause for c in result.causes] == [
        "Moisture in material",
        "Feed throat problems",
        "Melt temperature too high",
        "Volatile additives",
    ]


def test_moisture_not_escalated_for_other_resins():
    causes = _by_cause(_diagnose("LDPE", DefectType.VOIDS_BUBBLES))
    assert causes["Moisture in material"].escalated is False
    assert NOTE_HYGROSCOPIC not in causes["Moisture in material"].explanation


def test_evoh_moisture_reorders_poor_clarity():
    result = _diagnose("EVOH", DefectType.POOR_CLARITY)
    assert [c.cause for c in result.causes] == [
        "Excessive crystallinity",
        "Surface roughness",
        "Moisture in material",
        "Additive bloom",
    ]
    assert result.causes[2].probability == "high"


def test_low_melt_temperature_confirms_cause():
    result = _diagnose("LDPE", DefectType.MELT_FRACTURE, melt_temp=300)
    causes = _by_cause(result)
    low = causes["Melt temperature too low"]
    assert low.probability == "high"
    assert low.explanation.endswith(NOTE_LOW_TEMPERATURE)
    assert causes["Excessive output rate"].escalated is False
    # Stable within a tier
    assert [c.cause for c in result.causes] == [
        "Excessive output rate",
        "Melt temperature too low",
        "Die land length insufficient",
        "Sharp die entry angle",
    ]


def test_low_die_temperature_alone_confirms_cause():
    causes = _by_cause(_diagnose("HDPE", DefectType.SHARK_SKIN, die_temp=400))
    assert causes["Die lip temperature too low"].explanation.endswith(NOTE_LOW_TEMPERATURE)
    assert causes["Output rate near critical limit"].escalated is False


def test_high_melt_temperature_escalates_medium_cause():
    causes = _by_cause(_diagnose("LDPE", DefectType.VOIDS_BUBBLES, melt_temp=460))
    hot = causes["Melt temperature too high"]
    assert get_defect(DefectType.VOIDS_BUBBLES).causes[2].probability == "medium"
    assert hot.probability == "high"
    assert hot.explanation.endswith(NOTE_HIGH_TEMPERATURE)


def test_screw_speed_escalation_reorders_causes():
    result = _diagnose("LDPE", DefectType.GAUGE_BANDS, screw_speed=140)
    assert [c.cause for c in result.causes] == [
        "Air ring instability",
        "Extruder output surging",
        "Haul-off speed variation",
        "Die bolt pattern interference",
    ]
    causes = _by_cause(result)
    assert causes["Extruder output surging"].explanation.endswith(NOTE_SCREW_SPEED_HIGH)
    assert causes["Haul-off speed variation"].probability == "high"
    assert causes["Die bolt pattern interference"].escalated is False


def test_untagged_defect_matches_table():
    result = _diagnose("LDPE", DefectType.WRINKLES, melt_temp=300, screw_speed=149, die_temp=300)
    table = get_defect(DefectType.WRINKLES)
    assert [(c.cause, c.probability, c.explanation) for c in result.causes] == [
        (e.cause, e.probability, e.explanation) for e in table.causes
    ]
    assert result.defect_name == table.name
    assert result.description == table.description


def test_general_recommendation_order():
    for material, defect in (("HDPE", DefectType.MELT_FRACTURE), ("EVOH", DefectType.GELS)):
        result = _diagnose(material, defect)
        table = get_defect(defect)
        assert result.general_recommendations == [
            *table.general_recommendations,
            *get_material(material).troubleshooting_notes,
            *table.process_checks,
        ]
    assert "Consider purging with LDPE before and after EVOH runs" in _diagnose(
        "EVOH", DefectType.GELS
    ).general_recommendations


def test_table_not_modified_by_diagnosis():
    before = get_defect(DefectType.VOIDS_BUBBLES)
    snapshot = [(e.probability, e.explanation) for e in before.causes]
    _diagnose("EVOH", DefectType.VOIDS_BUBBLES, melt_temp=500)
    _diagnose("EVOH", DefectType.VOIDS_BUBBLES, melt_temp=500)
    after = get_defect(DefectType.VOIDS_BUBBLES)
    assert [(e.probability, e.explanation) for e in after.causes] == snapshot
    assert NOTE_HYGROSCOPIC not in after.causes[0].explanation


def test_repeat_calls_are_identical():
    first = _diagnose("HDPE", DefectType.SURFACE_ROUGHNESS, melt_temp=380)
    second = _diagnose("HDPE", DefectType.SURFACE_ROUGHNESS, melt_temp=380)
    assert first == second


def test_run_diagnose_trace():
    request = make_diagnose_request("EVOH", "voids_bubbles", 410, 40, 80, 415)
    state = run_diagnose(request)
    assert state["trace"][0] == "Diagnose started"
    assert "Settings within material window" in state["trace"]
    assert any("Moisture in material" in line for line in state["trace"])
    assert state["trace"][-1] == "Diagnosis assembled"


def test_request_validation():
    with pytest.raises(UnknownDefectError):
        make_diagnose_request("LDPE", "fish_eyes", 400, 60, 80, 400)
    with pytest.raises(UnknownMaterialError):
        make_diagnose_request("PP", "gels", 400, 60, 80, 400)
    with pytest.raises(InvalidInputError):
        make_diagnose_request("LDPE", "gels", 400, -5, 80, 400)
    with pytest.raises(InvalidInputError):
        make_diagnose_request("LDPE", "gels", float("nan"), 60, 80, 400)

    # Defect codes are case-insensitive; a stopped line is still a valid reading
    request = make_diagnose_request(MaterialType.LDPE, "GELS", 0, 0, 0, 0)
    assert request.defect == DefectType.GELS


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-q"]))
