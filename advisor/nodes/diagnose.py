"""Graph nodes for the defect diagnoser: settings_flags -> rank_causes -> recommendations -> assemble."""
from __future__ import annotations

from advisor.defects import get_defect
from advisor.materials import get_material
from advisor.rulesets import general_recommendations, rank_causes, settings_flags
from advisor.state import DiagnoseResult, DiagnoseState


def settings_flags_node(state: DiagnoseState) -> dict:
    req = state["request"]
    flags = settings_flags(req.current_settings, get_material(req.material))
    raised = [name for name, value in flags.model_dump().items() if value]
    trace = [f"Settings flag: {name}" for name in raised] or ["Settings within material window"]
    return {"flags": flags, "trace": trace}


def rank_causes_node(state: DiagnoseState) -> dict:
    req = state["request"]
    causes = rank_causes(get_defect(req.defect), state["flags"], req.material)
    trace = [f"Rule triggered: '{c.cause}' escalated to {c.probability}" for c in causes if c.escalated]
    return {"causes": causes, "trace": trace}


def recommendations_node(state: DiagnoseState) -> dict:
    req = state["request"]
    recs = general_recommendations(get_defect(req.defect), get_material(req.material))
    return {"general_recommendations": recs, "trace": [f"{len(recs)} recommendations collected"]}


def assemble_node(state: DiagnoseState) -> dict:
    req = state["request"]
    defect = get_defect(req.defect)
    result = DiagnoseResult(
        defect=defect.id,
        defect_name=defect.name,
        description=defect.description,
        causes=list(state["causes"]),
        general_recommendations=list(state["general_recommendations"]),
    )
    return {"result": result, "trace": ["Diagnosis assembled"]}
