#!/usr/bin/env python3
"""Tests for the defect-cause table and its structured cause tags."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))

from advisor.defects import get_all_defects, get_defect, get_defect_display_name  # noqa: E402
from advisor.errors import UnknownDefectError  # noqa: E402
from advisor.state import PROBABILITY_ORDER, CauseTag, DefectType  # noqa: E402

DEFECTS_WITH_PROCESS_CHECKS = {
    DefectType.MELT_FRACTURE,
    DefectType.SHARK_SKIN,
    DefectType.DIE_LINES,
    DefectType.VOIDS_BUBBLES,
    DefectType.WARPING,
    DefectType.INCONSISTENT_WALL_THICKNESS,
    DefectType.SURFACE_ROUGHNESS,
}


def label_keyword_tags(label: str) -> frozenset[CauseTag]:
    """Tags implied by the wording of a cause label."""
    text = label.lower()
    tags = set()
    if "temperature" in text or "temp" in text:
        if "low" in text:
            tags.add(CauseTag.TEMPERATURE_LOW)
        if "high" in text:
            tags.add(CauseTag.TEMPERATURE_HIGH)
    if "output" in text or "rate" in text or "speed" in text:
        tags.add(CauseTag.THROUGHPUT)
    if "moisture" in text:
        tags.add(CauseTag.MOISTURE)
    return frozenset(tags)


def test_thirteen_defects_in_order():
    defects = get_all_defects()
    assert len(defects) == 13
    assert defects == list(DefectType)
    assert defects[0] == DefectType.MELT_FRACTURE
    assert defects[-1] == DefectType.BUBBLE_INSTABILITY


def test_display_names():
    assert get_defect_display_name(DefectType.MELT_FRACTURE) == "Melt Fracture"
    assert get_defect_display_name("voids_bubbles") == get_defect(DefectType.VOIDS_BUBBLES).name
    for defect in get_all_defects():
        assert get_defect_display_name(defect)


def test_unknown_defect_raises():
    with pytest.raises(UnknownDefectError):
        get_defect("fish_eyes")
    with pytest.raises(KeyError):
        get_defect_display_name("")


def test_every_defect_has_valid_causes():
    for defect in get_all_defects():
        profile = get_defect(defect)
        assert profile.causes, defect
        assert profile.general_recommendations, defect
        for entry in profile.causes:
            assert entry.probability in PROBABILITY_ORDER
            assert entry.adjustments, entry.cause


def test_process_checks_only_where_defined():
    for defect in get_all_defects():
        has_checks = bool(get_defect(defect).process_checks)
        assert has_checks == (defect in DEFECTS_WITH_PROCESS_CHECKS), defect


def test_tags_match_cause_wording():
    """Structured tags classify every cause the same way its label wording does."""
    for defect in get_all_defects():
        for entry in get_defect(defect).causes:
            assert entry.tags == label_keyword_tags(entry.cause), (defect, entry.cause)


def test_tagged_causes():
    melt_fracture = {c.cause: c.tags for c in get_defect(DefectType.MELT_FRACTURE).causes}
    assert melt_fracture["Excessive output rate"] == {CauseTag.THROUGHPUT}
    assert melt_fracture["Melt temperature too low"] == {CauseTag.TEMPERATURE_LOW}
    assert melt_fracture["Sharp die entry angle"] == frozenset()

    voids = {c.cause: c.tags for c in get_defect(DefectType.VOIDS_BUBBLES).causes}
    assert voids["Moisture in material"] == {CauseTag.MOISTURE}
    assert voids["Melt temperature too high"] == {CauseTag.TEMPERATURE_HIGH}


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-q"]))
