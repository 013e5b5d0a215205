from __future__ import annotations

from langgraph.graph import END, START, StateGraph

from advisor.nodes import diagnose as diagnose_nodes
from advisor.nodes import optimize as optimize_nodes
from advisor.state import DiagnoseState, OptimizeState


def build_optimize_graph():
    """sizing -> cooling -> assessment -> assemble. Cooling reads the line speed computed by sizing."""
    g = StateGraph(OptimizeState)

    g.add_node("sizing", optimize_nodes.sizing_node)
    g.add_node("cooling", optimize_nodes.cooling_node)
    g.add_node("assessment", optimize_nodes.assessment_node)
    g.add_node("assemble", optimize_nodes.assemble_node)

    g.add_edge(START, "sizing")
    g.add_edge("sizing", "cooling")
    g.add_edge("cooling", "assessment")
    g.add_edge("assessment", "assemble")
    g.add_edge("assemble", END)
    return g.compile()


def build_diagnose_graph():
    g = StateGraph(DiagnoseState)

    g.add_node("settings_flags", diagnose_nodes.settings_flags_node)
    g.add_node("rank_causes", diagnose_nodes.rank_causes_node)
    g.add_node("recommendations", diagnose_nodes.recommendations_node)
    g.add_node("assemble", diagnose_nodes.assemble_node)

    g.add_edge(START, "settings_flags")
    g.add_edge("settings_flags", "rank_causes")
    g.add_edge("rank_causes", "recommendations")
    g.add_edge("recommendations", "assemble")
    g.add_edge("assemble", END)
    return g.compile()
