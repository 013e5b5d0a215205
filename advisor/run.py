"""Public call/return interface of the extrusion advisor.

Every call is independent: results are a pure function of the request and the
static tables. Unknown identities raise UnknownMaterialError/UnknownDefectError;
requests built through make_*_request raise InvalidInputError.
"""
from __future__ import annotations

import logging

from pydantic import ValidationError

from advisor.defects import get_all_defects, get_defect, get_defect_display_name, resolve_defect_type
from advisor.errors import InvalidInputError
from advisor.graph import build_diagnose_graph, build_optimize_graph
from advisor.materials import get_all_materials, get_material, resolve_material_type
from advisor.state import (
    CurrentSettings,
    DiagnoseRequest,
    DiagnoseResult,
    DiagnoseState,
    OptimizeRequest,
    OptimizeState,
    RecommendedSettings,
)

logger = logging.getLogger(__name__)

__all__ = [
    "diagnose_defect",
    "get_all_defects",
    "get_all_materials",
    "get_defect",
    "get_defect_display_name",
    "get_material",
    "make_diagnose_request",
    "make_optimize_request",
    "optimize_parameters",
    "run_diagnose",
    "run_optimize",
]


def _format_validation_error(e: ValidationError) -> list[str]:
    out = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        out.append(f"{loc}: {err.get('msg', 'invalid')}")
    return out


def make_optimize_request(material, target_od, target_gauge, production_rate) -> OptimizeRequest:
    """Validate caller input into an OptimizeRequest."""
    material_type = resolve_material_type(material)
    try:
        return OptimizeRequest(
            material=material_type,
            target_od=target_od,
            target_gauge=target_gauge,
            production_rate=production_rate,
        )
    except ValidationError as e:
        errors = _format_validation_error(e)
        raise InvalidInputError("Invalid optimize request: " + "; ".join(errors), errors) from e


def make_diagnose_request(material, defect, melt_temp, screw_speed, line_speed, die_temp) -> DiagnoseRequest:
    """Validate caller input into a DiagnoseRequest."""
    material_type = resolve_material_type(material)
    defect_type = resolve_defect_type(defect)
    try:
        return DiagnoseRequest(
            material=material_type,
            defect=defect_type,
            current_settings=CurrentSettings(
                melt_temp=melt_temp,
                screw_speed=screw_speed,
                line_speed=line_speed,
                die_temp=die_temp,
            ),
        )
    except ValidationError as e:
        errors = _format_validation_error(e)
        raise InvalidInputError("Invalid diagnose request: " + "; ".join(errors), errors) from e


def _log_trace(kind: str, trace: list[str]) -> None:
    for line in trace:
        logger.debug("%s: %s", kind, line)


def run_optimize(request: OptimizeRequest) -> OptimizeState:
    """Run the optimizer graph and return its final state (result + trace)."""
    graph = build_optimize_graph()
    state: OptimizeState = {"request": request, "trace": ["Optimize started"]}
    out: OptimizeState = graph.invoke(state)
    _log_trace("optimize", out.get("trace", []))
    return out


def run_diagnose(request: DiagnoseRequest) -> DiagnoseState:
    """Run the diagnoser graph and return its final state (result + trace)."""
    graph = build_diagnose_graph()
    state: DiagnoseState = {"request": request, "trace": ["Diagnose started"]}
    out: DiagnoseState = graph.invoke(state)
    _log_trace("diagnose", out.get("trace", []))
    return out


def optimize_parameters(request: OptimizeRequest) -> RecommendedSettings:
    return run_optimize(request)["result"]


def diagnose_defect(request: DiagnoseRequest) -> DiagnoseResult:
    return run_diagnose(request)["result"]
