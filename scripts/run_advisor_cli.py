#!/usr/bin/env python3
"""
Minimal end-user CLI for the blown film advisor (optimize / diagnose / list tables).
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))

from advisor.config import CONFIG  # noqa: E402
from advisor.errors import AdvisorError  # noqa: E402
from advisor.state import Error  # noqa: E402


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=CONFIG.json_indent or None, ensure_ascii=False))


def _print_trace(trace: list[str]) -> None:
    for line in trace:
        print(f"[trace] {line}", file=sys.stderr)


def cmd_optimize(args: argparse.Namespace) -> int:
    from advisor.run import make_optimize_request, run_optimize

    request = make_optimize_request(args.material, args.od, args.gauge, args.rate)
    state = run_optimize(request)
    if args.trace:
        _print_trace(state.get("trace", []))
    _print_json(state["result"].model_dump(mode="json"))
    return 0


def cmd_diagnose(args: argparse.Namespace) -> int:
    from advisor.run import make_diagnose_request, run_diagnose

    request = make_diagnose_request(
        args.material,
        args.defect,
        melt_temp=args.melt_temp,
        screw_speed=args.screw_speed,
        line_speed=args.line_speed,
        die_temp=args.die_temp,
    )
    state = run_diagnose(request)
    if args.trace:
        _print_trace(state.get("trace", []))
    _print_json(state["result"].model_dump(mode="json"))
    return 0


def cmd_materials(args: argparse.Namespace) -> int:
    from advisor.run import get_all_materials, get_material

    _print_json([{"id": m.value, "label": get_material(m).label} for m in get_all_materials()])
    return 0


def cmd_defects(args: argparse.Namespace) -> int:
    from advisor.run import get_all_defects, get_defect_display_name

    _print_json([{"id": d.value, "name": get_defect_display_name(d)} for d in get_all_defects()])
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Blown film extrusion settings advisor")
    parser.add_argument("--log-level", default=CONFIG.log_level, help="Logging level (default: ADVISOR_LOG_LEVEL or WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    opt = sub.add_parser("optimize", help="Recommend machine settings for a target film")
    opt.add_argument("--material", "-m", required=True, help="HDPE | LDPE | LLDPE | EVOH")
    opt.add_argument("--od", type=float, required=True, help="Target bubble OD (inches)")
    opt.add_argument("--gauge", type=float, required=True, help="Target gauge (mils)")
    opt.add_argument("--rate", type=float, required=True, help="Production rate (lbs/hr)")
    opt.add_argument("--trace", action="store_true", help="Print rule trace to stderr")
    opt.set_defaults(func=cmd_optimize)

    diag = sub.add_parser("diagnose", help="Rank probable causes of a film defect")
    diag.add_argument("--material", "-m", required=True, help="HDPE | LDPE | LLDPE | EVOH")
    diag.add_argument("--defect", "-d", required=True, help="Defect code (see 'defects')")
    diag.add_argument("--melt-temp", type=float, required=True, dest="melt_temp", help="Melt temperature (°F)")
    diag.add_argument("--screw-speed", type=float, required=True, dest="screw_speed", help="Screw speed (RPM)")
    diag.add_argument("--line-speed", type=float, required=True, dest="line_speed", help="Line speed (ft/min)")
    diag.add_argument("--die-temp", type=float, required=True, dest="die_temp", help="Die temperature (°F)")
    diag.add_argument("--trace", action="store_true", help="Print rule trace to stderr")
    diag.set_defaults(func=cmd_diagnose)

    mats = sub.add_parser("materials", help="List supported materials")
    mats.set_defaults(func=cmd_materials)

    defs = sub.add_parser("defects", help="List supported defects")
    defs.set_defaults(func=cmd_defects)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except AdvisorError as e:
        err = Error(node=args.command, type=type(e).__name__, message=str(e))
        print(json.dumps(err.model_dump(), indent=CONFIG.json_indent or None), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
