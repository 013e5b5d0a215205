"""
Film resin property table and accessors.

Profiles are loaded from data/materials/film_materials.json on first use and
cached for the life of the process. The table is read-only: accessors hand out
frozen records, and every code in MaterialType must have exactly one profile.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from advisor.config import CONFIG
from advisor.errors import TableDataError, UnknownMaterialError
from advisor.state import MaterialType
from advisor.utils.filetrace import traced_open

logger = logging.getLogger(__name__)

# Module-level cache for material profiles (deterministic singleton)
_MATERIAL_PROFILES_CACHE: Optional[dict[MaterialType, MaterialProfile]] = None

BARREL_ZONES = ("feed", "compression", "metering", "die")


@dataclass(frozen=True)
class ValueRange:
    """Closed interval {min, max}."""
    min: float
    max: float

    @classmethod
    def from_dict(cls, data: dict) -> ValueRange:
        return cls(min=float(data["min"]), max=float(data["max"]))

    def clamp(self, value: float) -> float:
        return max(self.min, min(value, self.max))

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2


@dataclass(frozen=True)
class ZoneTemperature:
    """Barrel zone window in °F."""
    min: float
    max: float
    recommended: float

    @classmethod
    def from_dict(cls, data: dict) -> ZoneTemperature:
        return cls(min=float(data["min"]), max=float(data["max"]), recommended=float(data["recommended"]))


@dataclass(frozen=True)
class BarrelTemperatures:
    feed: ZoneTemperature
    compression: ZoneTemperature
    metering: ZoneTemperature
    die: ZoneTemperature

    @classmethod
    def from_dict(cls, data: dict) -> BarrelTemperatures:
        return cls(**{zone: ZoneTemperature.from_dict(data[zone]) for zone in BARREL_ZONES})

    def zones(self) -> list[tuple[str, ZoneTemperature]]:
        """Zones in flow order, feed -> die."""
        return [(zone, getattr(self, zone)) for zone in BARREL_ZONES]


@dataclass(frozen=True)
class MaterialProfile:
    """Processing window for one film resin."""
    id: MaterialType
    label: str
    melt_temp_range: ValueRange
    processing_temp_range: ValueRange
    barrel_temperatures: BarrelTemperatures
    screw_speed_range: ValueRange
    melt_pressure_range: ValueRange
    blow_up_ratio_range: ValueRange
    frost_line_height_factor: float
    density: float  # lb/in³
    notes: tuple[str, ...]
    troubleshooting_notes: tuple[str, ...]

    @property
    def name(self) -> str:
        return self.id.value

    @classmethod
    def from_dict(cls, data: dict) -> MaterialProfile:
        """Create from dict (from JSON)."""
        try:
            material = MaterialType(data["id"])
        except ValueError as e:
            raise TableDataError(f"Material table lists unknown material {data.get('id')!r}") from e
        return cls(
            id=material,
            label=data["label"],
            melt_temp_range=ValueRange.from_dict(data["melt_temp_range"]),
            processing_temp_range=ValueRange.from_dict(data["processing_temp_range"]),
            barrel_temperatures=BarrelTemperatures.from_dict(data["barrel_temperatures"]),
            screw_speed_range=ValueRange.from_dict(data["screw_speed_range"]),
            melt_pressure_range=ValueRange.from_dict(data["melt_pressure_range"]),
            blow_up_ratio_range=ValueRange.from_dict(data["blow_up_ratio_range"]),
            frost_line_height_factor=float(data["frost_line_height_factor"]),
            density=float(data["density"]),
            notes=tuple(data.get("notes") or ()),
            troubleshooting_notes=tuple(data.get("troubleshooting_notes") or ()),
        )


def validate_profile(profile: MaterialProfile) -> list[str]:
    """Return invariant violations for one profile (empty when valid)."""
    problems: list[str] = []
    ranges = {
        "melt_temp_range": profile.melt_temp_range,
        "processing_temp_range": profile.processing_temp_range,
        "screw_speed_range": profile.screw_speed_range,
        "melt_pressure_range": profile.melt_pressure_range,
        "blow_up_ratio_range": profile.blow_up_ratio_range,
    }
    for name, rng in ranges.items():
        if rng.min > rng.max:
            problems.append(f"{profile.name}.{name}: min {rng.min} > max {rng.max}")

    previous: Optional[float] = None
    for zone, temps in profile.barrel_temperatures.zones():
        if not (temps.min <= temps.recommended <= temps.max):
            problems.append(
                f"{profile.name}.barrel_temperatures.{zone}: recommended {temps.recommended} "
                f"outside [{temps.min}, {temps.max}]"
            )
        if previous is not None and temps.recommended < previous:
            problems.append(f"{profile.name}.barrel_temperatures.{zone}: recommended decreases toward die")
        previous = temps.recommended

    if profile.frost_line_height_factor <= 0:
        problems.append(f"{profile.name}.frost_line_height_factor must be positive")
    if profile.density <= 0:
        problems.append(f"{profile.name}.density must be positive")
    return problems


def _default_path() -> Path:
    return CONFIG.resolved_data_dir() / "materials" / "film_materials.json"


def load_material_profiles(path: Optional[Path] = None) -> dict[MaterialType, MaterialProfile]:
    """
    Load material profiles from JSON, keyed by MaterialType in table order.

    Default path: advisor/data/materials/film_materials.json (or ADVISOR_DATA_DIR).
    The default table is cached in a module-level singleton; an explicit path is
    always read fresh and never replaces the cache.
    """
    global _MATERIAL_PROFILES_CACHE

    if path is None and _MATERIAL_PROFILES_CACHE is not None:
        return _MATERIAL_PROFILES_CACHE

    source = Path(path) if path is not None else _default_path()
    if not source.exists():
        raise FileNotFoundError(f"Material profiles file not found: {source}")

    with traced_open(source, encoding="utf-8") as f:
        data = json.load(f)

    profiles: dict[MaterialType, MaterialProfile] = {}
    problems: list[str] = []
    for raw in data["profiles"]:
        profile = MaterialProfile.from_dict(raw)
        if profile.id in profiles:
            problems.append(f"duplicate profile {profile.name}")
        profiles[profile.id] = profile
        problems.extend(validate_profile(profile))

    missing = [m.value for m in MaterialType if m not in profiles]
    if missing:
        problems.append(f"missing profiles: {', '.join(missing)}")
    if problems:
        raise TableDataError(f"Invalid material table {source}: " + "; ".join(problems))

    # Enumeration order, independent of file order
    ordered = {m: profiles[m] for m in MaterialType}
    logger.debug("Loaded %d material profiles from %s", len(ordered), source)
    if path is None:
        _MATERIAL_PROFILES_CACHE = ordered
    return ordered


def resolve_material_type(material: MaterialType | str) -> MaterialType:
    """Map a MaterialType or its code (case-insensitive) to MaterialType; fail fast otherwise."""
    if isinstance(material, MaterialType):
        return material
    if isinstance(material, str):
        code = material.strip().upper()
        for m in MaterialType:
            if m.value == code:
                return m
    raise UnknownMaterialError(material)


def get_material(material: MaterialType | str) -> MaterialProfile:
    return load_material_profiles()[resolve_material_type(material)]


def get_all_materials() -> list[MaterialType]:
    """Material identities in table order."""
    return list(load_material_profiles().keys())
