"""Graph nodes for the settings optimizer: sizing -> cooling -> assessment -> assemble."""
from __future__ import annotations

from advisor.materials import get_material
from advisor.rulesets import (
    air_ring,
    barrel_temperatures,
    blow_up_ratio,
    bubble_stability,
    confidence,
    critical_parameters,
    frost_line,
    gauge_control,
    ibc,
    layflat_note,
    layflat_width,
    line_speed,
    melt_pressure,
    nip_rollers,
    screw_speed,
    select_die_size,
)
from advisor.rulesets.bands import HIGH_OUTPUT_RATE, fixed
from advisor.state import OptimizeState, RecommendedSettings


def sizing_node(state: OptimizeState) -> dict:
    req = state["request"]
    profile = get_material(req.material)

    die = select_die_size(req.target_od)
    bur = blow_up_ratio(req.target_od, profile)
    screw = screw_speed(req.production_rate, profile)
    line = line_speed(req.production_rate, req.target_od, req.target_gauge, profile)
    pressure = melt_pressure(req.production_rate, profile)

    trace = [
        f'Rule triggered: die {die}" selected for OD {req.target_od:g}"',
        f"Rule triggered: BUR {bur:.2f} (window {profile.blow_up_ratio_range.min:g}-{profile.blow_up_ratio_range.max:g})",
        f"Rule triggered: screw speed {screw.recommended} RPM ({screw.min}-{screw.max})",
        f"Rule triggered: line speed {line.recommended} ft/min ({line.min}-{line.max})",
        f"Rule triggered: melt pressure target {pressure.target} PSI",
    ]
    if req.production_rate > HIGH_OUTPUT_RATE:
        trace.append("Rule triggered: high output -> +10°F on compression, metering, die")

    return {
        "die_diameter": die,
        "blow_up_ratio": bur,
        "layflat_width": layflat_width(req.target_od),
        "barrel_temps": barrel_temperatures(req.production_rate, profile),
        "screw_speed": screw,
        "line_speed": line,
        "melt_pressure": pressure,
        "trace": trace,
    }


def cooling_node(state: OptimizeState) -> dict:
    req = state["request"]
    profile = get_material(req.material)

    ring = air_ring(req.production_rate, req.material, req.target_od)
    frost = frost_line(req.target_od, profile, req.production_rate)
    nip = nip_rollers(state["line_speed"], req.target_gauge, req.material)
    ibc_rec = ibc(req.production_rate, req.target_od, req.target_gauge, req.material)

    trace = [
        f"Rule triggered: air ring lip gap {ring.lip_gap}, {ring.cooling_capacity}",
        f"Rule triggered: frost line {frost.height_range}",
        f"Rule triggered: IBC {'recommended' if ibc_rec.recommended else 'not required'}",
    ]
    return {
        "air_ring": ring,
        "frost_line": frost,
        "nip_rollers": nip,
        "ibc": ibc_rec,
        "trace": trace,
    }


def assessment_node(state: OptimizeState) -> dict:
    req = state["request"]

    stability = bubble_stability(req, state["blow_up_ratio"])
    conf = confidence(req)

    trace = [
        f"Rule triggered: bubble stability {stability.rating} (score {stability.score})",
        f"Rule triggered: confidence {conf.level} (score {conf.score})",
    ]
    trace.extend(f"Confidence deduction: {r}" for r in conf.reasons)
    return {
        "gauge_control": gauge_control(req.target_gauge, req.target_od, req.material),
        "bubble_stability": stability,
        "confidence": conf,
        "critical_parameters": critical_parameters(req),
        "trace": trace,
    }


def assemble_node(state: OptimizeState) -> dict:
    """Build RecommendedSettings: layflat note first, then material notes, then confidence reasons."""
    req = state["request"]
    profile = get_material(req.material)
    conf = state["confidence"]
    width = state["layflat_width"]

    notes = [layflat_note(width), *profile.notes, *conf.reasons]

    result = RecommendedSettings(
        barrel_temps=state["barrel_temps"],
        screw_speed=state["screw_speed"],
        line_speed=state["line_speed"],
        melt_pressure=state["melt_pressure"],
        air_ring=state["air_ring"],
        blow_up_ratio=float(fixed(state["blow_up_ratio"], 2)),
        die_diameter=state["die_diameter"],
        layflat_width=float(fixed(width, 2)),
        frost_line=state["frost_line"],
        nip_rollers=state["nip_rollers"],
        ibc=state["ibc"],
        gauge_control=state["gauge_control"],
        bubble_stability=state["bubble_stability"],
        confidence=conf.level,
        confidence_score=conf.score,
        notes=notes,
        critical_parameters=list(state["critical_parameters"]),
    )
    return {"result": result, "trace": ["Settings assembled"]}
