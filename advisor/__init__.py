"""Blown film extrusion advisor: settings optimizer and defect diagnoser."""
from __future__ import annotations

from advisor.run import (
    diagnose_defect,
    get_all_defects,
    get_all_materials,
    get_defect,
    get_defect_display_name,
    get_material,
    make_diagnose_request,
    make_optimize_request,
    optimize_parameters,
    run_diagnose,
    run_optimize,
)

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
