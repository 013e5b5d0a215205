"""
Defect-cause table and accessors.

Loaded from data/defects/defect_causes.json. Each cause carries structured
tags (temperature_low, temperature_high, throughput, moisture) that the
diagnoser switches on when re-ranking causes against live settings.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from advisor.config import CONFIG
from advisor.errors import TableDataError, UnknownDefectError
from advisor.state import PROBABILITY_ORDER, CauseTag, DefectType, Probability
from advisor.utils.filetrace import traced_open

logger = logging.getLogger(__name__)

_DEFECT_PROFILES_CACHE: Optional[dict[DefectType, DefectProfile]] = None


@dataclass(frozen=True)
class CauseEntry:
    """One candidate cause of a defect."""
    cause: str
    probability: Probability
    explanation: str
    adjustments: tuple[str, ...]
    tags: frozenset[CauseTag] = frozenset()

    @classmethod
    def from_dict(cls, data: dict) -> CauseEntry:
        probability = data["probability"]
        if probability not in PROBABILITY_ORDER:
            raise TableDataError(f"Cause {data.get('cause')!r}: unknown probability {probability!r}")
        try:
            tags = frozenset(CauseTag(t) for t in data.get("tags") or ())
        except ValueError as e:
            raise TableDataError(f"Cause {data.get('cause')!r}: {e}") from e
        return cls(
            cause=data["cause"],
            probability=probability,
            explanation=data["explanation"],
            adjustments=tuple(data.get("adjustments") or ()),
            tags=tags,
        )

    def has_tag(self, tag: CauseTag) -> bool:
        return tag in self.tags


@dataclass(frozen=True)
class DefectProfile:
    id: DefectType
    name: str
    description: str
    causes: tuple[CauseEntry, ...]
    general_recommendations: tuple[str, ...]
    process_checks: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> DefectProfile:
        """Create from dict (from JSON)."""
        try:
            defect = DefectType(data["id"])
        except ValueError as e:
            raise TableDataError(f"Defect table lists unknown defect {data.get('id')!r}") from e
        return cls(
            id=defect,
            name=data["name"],
            description=data["description"],
            causes=tuple(CauseEntry.from_dict(c) for c in data["causes"]),
            general_recommendations=tuple(data.get("general_recommendations") or ()),
            process_checks=tuple(data.get("process_checks") or ()),
        )


def _default_path() -> Path:
    return CONFIG.resolved_data_dir() / "defects" / "defect_causes.json"


def load_defect_profiles(path: Optional[Path] = None) -> dict[DefectType, DefectProfile]:
    """Load defect profiles from JSON, keyed by DefectType in table order. Default table is cached."""
    global _DEFECT_PROFILES_CACHE

    if path is None and _DEFECT_PROFILES_CACHE is not None:
        return _DEFECT_PROFILES_CACHE

    source = Path(path) if path is not None else _default_path()
    if not source.exists():
        raise FileNotFoundError(f"Defect table file not found: {source}")

    with traced_open(source, encoding="utf-8") as f:
        data = json.load(f)

    profiles: dict[DefectType, DefectProfile] = {}
    problems: list[str] = []
    for raw in data["defects"]:
        profile = DefectProfile.from_dict(raw)
        if profile.id in profiles:
            problems.append(f"duplicate defect {profile.id.value}")
        if not profile.causes:
            problems.append(f"{profile.id.value}: no causes")
        profiles[profile.id] = profile

    missing = [d.value for d in DefectType if d not in profiles]
    if missing:
        problems.append(f"missing defects: {', '.join(missing)}")
    if problems:
        raise TableDataError(f"Invalid defect table {source}: " + "; ".join(problems))

    ordered = {d: profiles[d] for d in DefectType}
    logger.debug("Loaded %d defect profiles from %s", len(ordered), source)
    if path is None:
        _DEFECT_PROFILES_CACHE = ordered
    return ordered


def resolve_defect_type(defect: DefectType | str) -> DefectType:
    """Map a DefectType or its code (case-insensitive) to DefectType; fail fast otherwise."""
    if isinstance(defect, DefectType):
        return defect
    if isinstance(defect, str):
        code = defect.strip().lower()
        for d in DefectType:
            if d.value == code:
                return d
    raise UnknownDefectError(defect)


def get_defect(defect: DefectType | str) -> DefectProfile:
    return load_defect_profiles()[resolve_defect_type(defect)]


def get_all_defects() -> list[DefectType]:
    """Defect identities in table order."""
    return list(load_defect_profiles().keys())


def get_defect_display_name(defect: DefectType | str) -> str:
    return get_defect(defect).name
