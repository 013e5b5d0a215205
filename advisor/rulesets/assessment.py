"""Gauge control, bubble stability, confidence and critical-parameter rules.

Scores start at 100 and rules deduct from them; factor and reason lists are
built in rule order, which is part of the output contract.
"""
from __future__ import annotations

from advisor.rulesets.bands import (
    CONFIDENCE_LEVEL_FLOOR,
    CONFIDENCE_LEVELS,
    DIE_GAP_MULTIPLIER,
    GAUGE_VARIATION_BANDS,
    GAUGE_VARIATION_DEFAULT,
    HIGH_OUTPUT_RATE,
    MILS_PER_INCH,
    STABILITY_MATERIAL_EFFECTS,
    STABILITY_RATING_FLOOR,
    STABILITY_RATINGS,
    band_label,
    fixed,
    score_label,
)
from advisor.rulesets.sizing import select_die_size
from advisor.state import (
    BubbleStability,
    ConfidenceAssessment,
    GaugeControlPlan,
    MaterialType,
    OptimizeRequest,
)


def gauge_control(target_gauge: float, target_od: float, material: MaterialType) -> GaugeControlPlan:
    die = select_die_size(target_od)
    # Die gap runs roughly 10-20x final gauge at typical BUR
    gap_mils = target_gauge * DIE_GAP_MULTIPLIER
    recommendations = [
        "Measure gauge at minimum 8 points around circumference",
        "Use automatic gauge control (AGC) if available",
        f'Verify die gap uniformity (target ±0.001" on {die}" die)',
    ]
    if material == MaterialType.HDPE:
        recommendations.append("HDPE gauge sensitive to cooling - balance air ring first")
    if target_gauge < 1:
        recommendations.append("Thin gauge: small die adjustments have large effect")
    return GaugeControlPlan(
        target_variation=band_label(target_gauge, GAUGE_VARIATION_BANDS, GAUGE_VARIATION_DEFAULT),
        die_gap_setting=f'~{fixed(gap_mils, 0)} mils ({fixed(gap_mils / MILS_PER_INCH, 3)}")',
        recommendations=recommendations,
    )


def bubble_stability(request: OptimizeRequest, bur: float) -> BubbleStability:
    """Rate bubble stability from BUR, gauge, output, resin and diameter."""
    score = 100
    factors: list[str] = []
    recommendations: list[str] = []

    if bur > 3.5:
        score -= 20
        factors.append("High BUR increases bubble sensitivity")
        recommendations.append("Ensure uniform air ring cooling at high BUR")
    elif bur < 2.0:
        score -= 10
        factors.append("Low BUR may cause MD/TD imbalance")

    if request.target_gauge < 0.75:
        score -= 25
        factors.append("Very thin gauge highly sensitive to disturbances")
        recommendations.append("Minimize drafts and air currents around tower")
        recommendations.append("Consider bubble cage or guide system")
    elif request.target_gauge < 1.5:
        score -= 10
        factors.append("Thin gauge moderately sensitive")

    if request.production_rate > 400:
        score -= 15
        factors.append("High output rate can challenge stability")
        recommendations.append("Verify adequate cooling capacity")

    delta, factor, recommendation = STABILITY_MATERIAL_EFFECTS[request.material]
    score += delta
    factors.append(factor)
    if recommendation:
        recommendations.append(recommendation)

    if request.target_od > 40:
        score -= 10
        factors.append("Large bubble diameter more prone to oscillation")
        recommendations.append("Consider IBC for improved stability")

    recommendations.append("Maintain steady extruder output (consistent melt pressure)")

    return BubbleStability(
        rating=score_label(score, STABILITY_RATINGS, STABILITY_RATING_FLOOR),
        score=score,
        factors=factors,
        recommendations=recommendations,
    )


def confidence(request: OptimizeRequest) -> ConfidenceAssessment:
    """Confidence in the recommendation; reasons are surfaced as notes."""
    score = 100
    reasons: list[str] = []

    if request.production_rate < 50:
        score -= 20
        reasons.append("Low production rate may require special considerations")
    if request.production_rate > 500:
        score -= 15
        reasons.append("High production rate - verify equipment capacity")

    if request.target_gauge < 0.5:
        score -= 25
        reasons.append("Very thin gauge - process stability may be challenging")
    if request.target_gauge > 10:
        score -= 15
        reasons.append("Heavy gauge - monitor cooling capacity")

    if request.target_od < 5:
        score -= 10
        reasons.append("Small diameter - BUR may be limited")
    if request.target_od > 60:
        score -= 10
        reasons.append("Large diameter - ensure adequate die size")

    if request.material == MaterialType.EVOH:
        score -= 10
        reasons.append("EVOH requires careful moisture control")

    return ConfidenceAssessment(
        level=score_label(score, CONFIDENCE_LEVELS, CONFIDENCE_LEVEL_FLOOR),
        score=score,
        reasons=reasons,
    )


def critical_parameters(request: OptimizeRequest) -> list[str]:
    critical: list[str] = []
    if request.material == MaterialType.EVOH:
        critical.append("Material drying (target <0.05% moisture)")
        critical.append("Die temperature uniformity (±5°F)")
    if request.material == MaterialType.HDPE:
        critical.append("Melt temperature control (melt fracture prevention)")
        critical.append("Cooling rate (crystallinity control)")
    if request.target_gauge < 1:
        critical.append("Bubble stability (thin gauge sensitivity)")
        critical.append("Line speed consistency")
    if request.production_rate > HIGH_OUTPUT_RATE:
        critical.append("Melt pressure monitoring")
        critical.append("Adequate cooling capacity")
    critical.append("Die gap uniformity for gauge control")
    critical.append("Frost line height consistency")
    return critical
