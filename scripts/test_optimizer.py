#!/usr/bin/env python3
"""End-to-end tests for optimize_parameters: worked scenarios and output invariants."""
from __future__ import annotations

import itertools
import math
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))

from advisor import get_all_materials, get_material, make_optimize_request, optimize_parameters, run_optimize  # noqa: E402
from advisor.errors import InvalidInputError, UnknownMaterialError  # noqa: E402
from advisor.state import MaterialType  # noqa: E402


def _optimize(material, od, gauge, rate):
    return optimize_parameters(make_optimize_request(material, od, gauge, rate))


def test_ldpe_reference_scenario():
    result = _optimize("LDPE", 20, 1.5, 200)
    assert result.die_diameter == 6
    assert result.blow_up_ratio == 3.33
    assert result.layflat_width == 31.42
    assert (result.line_speed.min, result.line_speed.recommended, result.line_speed.max) == (76, 89, 103)
    assert result.melt_pressure.target == 3250
    assert result.frost_line.height_range == '18-36" (optimal: ~27")'
    assert result.ibc.recommended is False
    assert result.bubble_stability.rating == "stable"
    assert (result.confidence, result.confidence_score) == ("high", 100)
    assert result.notes[0] == 'Target layflat width: 31.42" (62.83" full width)'
    assert result.notes[1:] == list(get_material("LDPE").notes)


@pytest.mark.parametrize(
    "material,od,bur",
    [("HDPE", 25, 3.13), ("LLDPE", 21, 2.63)],
)
def test_blow_up_ratio_ties_round_up(material, od, bur):
    # 25/8 = 3.125 and 21/8 = 2.625 sit exactly on the half
    assert _optimize(material, od, 1.5, 200).blow_up_ratio == bur


def test_evoh_confidence_and_barrier_notes():
    result = _optimize("EVOH", 20, 1.5, 250)
    assert result.confidence_score == 90
    assert result.confidence == "high"
    assert "EVOH requires careful moisture control" in result.notes
    assert result.notes[-1] == "EVOH requires careful moisture control"
    assert result.ibc.recommended is True
    assert "barrier properties" in result.ibc.notes
    assert result.critical_parameters[:2] == [
        "Material drying (target <0.05% moisture)",
        "Die temperature uniformity (±5°F)",
    ]


@pytest.mark.parametrize("material", list(MaterialType))
def test_high_output_raises_hot_zones(material):
    zones = get_material(material).barrel_temperatures
    at_threshold = _optimize(material, 20, 1.5, 300).barrel_temps
    fast = _optimize(material, 20, 1.5, 350).barrel_temps

    assert at_threshold.compression == round(zones.compression.recommended)
    assert fast.feed == at_threshold.feed == round(zones.feed.recommended)
    assert fast.compression == at_threshold.compression + 10
    assert fast.metering == at_threshold.metering + 10
    assert fast.die == at_threshold.die + 10


def test_range_invariants_hold_across_inputs():
    ods = [3, 10, 20, 45, 80]
    gauges = [0.3, 1.5, 4, 12]
    rates = [20, 50, 200, 600, 1500]
    for material, od, gauge, rate in itertools.product(get_all_materials(), ods, gauges, rates):
        result = _optimize(material, od, gauge, rate)
        profile = get_material(material)
        label = (material.value, od, gauge, rate)

        assert result.screw_speed.min <= result.screw_speed.recommended <= result.screw_speed.max, label
        assert result.line_speed.min <= result.line_speed.recommended <= result.line_speed.max, label
        assert result.melt_pressure.min <= result.melt_pressure.target <= result.melt_pressure.max, label
        assert result.frost_line.height_inches.min <= result.frost_line.height_inches.max, label
        assert profile.blow_up_ratio_range.contains(result.blow_up_ratio), label
        assert profile.screw_speed_range.contains(result.screw_speed.recommended), label
        assert 0 <= result.bubble_stability.score <= 100, label
        assert result.notes[0].startswith("Target layflat width:"), label
        assert result.critical_parameters[-2:] == [
            "Die gap uniformity for gauge control",
            "Frost line height consistency",
        ], label


def test_confidence_never_improves_past_high_output():
    baseline = _optimize("HDPE", 20, 1.5, 500).confidence_score
    for rate in (501, 750, 1000, 5000):
        assert _optimize("HDPE", 20, 1.5, rate).confidence_score <= baseline


def test_repeat_calls_are_identical():
    first = _optimize("LLDPE", 30, 2.0, 275)
    second = _optimize("LLDPE", 30, 2.0, 275)
    assert first == second
    assert first.model_dump() == second.model_dump()


def test_run_optimize_trace():
    state = run_optimize(make_optimize_request("HDPE", 20, 1.5, 350))
    trace = state["trace"]
    assert trace[0] == "Optimize started"
    assert trace[-1] == "Settings assembled"
    assert any("high output" in line for line in trace)
    assert state["result"].die_diameter == 6


@pytest.mark.parametrize(
    "od,gauge,rate",
    [(0, 1.5, 200), (20, -1, 200), (20, 1.5, 0), (math.nan, 1.5, 200), (20, 1.5, math.inf)],
)
def test_invalid_dimensions_rejected(od, gauge, rate):
    with pytest.raises(InvalidInputError) as excinfo:
        make_optimize_request("LDPE", od, gauge, rate)
    assert excinfo.value.errors
    assert isinstance(excinfo.value, ValueError)


def test_unknown_material_rejected():
    with pytest.raises(UnknownMaterialError):
        make_optimize_request("PET", 20, 1.5, 200)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-q"]))
