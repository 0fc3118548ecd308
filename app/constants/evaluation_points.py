"""Scoring rubric used in agent evaluation forms and reports.

The catalog is static: entries are read, never mutated. Each ``id`` is
stable and unique across the whole catalog because stored scores refer to
rubric entries by id.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EvaluationPointSection:
    id: str
    label: str
    description: str
    category: str


@dataclass(frozen=True)
class CoreCriterion:
    """A weekly sub-score stored on ``AgentEvaluation`` (1 to 5 points)."""

    id: str
    label: str
    description: str
    score_field: str
    remarks_field: str


TRADING_TASKS = "Trading Tasks"
DISCIPLINE_COMPLIANCE = "Discipline & Compliance"
ATTITUDE_CONDUCT = "Attitude & Professional Conduct"
CLIENT_METRICS = "Client Metrics"

CATEGORIES: tuple[str, ...] = (
    TRADING_TASKS,
    DISCIPLINE_COMPLIANCE,
    ATTITUDE_CONDUCT,
    CLIENT_METRICS,
)

EVALUATION_POINTS: tuple[EvaluationPointSection, ...] = (
    EvaluationPointSection(
        id="daily_trade_calls",
        label="Daily Trade Calls",
        description="Timely calls to clients regarding assigned products.",
        category=TRADING_TASKS,
    ),
    EvaluationPointSection(
        id="stop_loss_accuracy",
        label="Stop-Loss Placement Accuracy",
        description="Target accuracy of 9/10 (only one error permitted).",
        category=TRADING_TASKS,
    ),
    EvaluationPointSection(
        id="exposure_management",
        label="Exposure Management",
        description="Maintain exposure at 50% of total equity.",
        category=TRADING_TASKS,
    ),
    EvaluationPointSection(
        id="not_achievement",
        label="NOT (Numbers & Targets) Achievement",
        description="Daily + monthly NOTs achieved (weighted at 30%).",
        category=TRADING_TASKS,
    ),
    EvaluationPointSection(
        id="accurate_trade_execution",
        label="Accurate Trade Execution",
        description="Zero-error execution of all trades.",
        category=DISCIPLINE_COMPLIANCE,
    ),
    EvaluationPointSection(
        id="correct_order_placement",
        label="Correct Order Placement",
        description="All orders placed correctly with documentation.",
        category=DISCIPLINE_COMPLIANCE,
    ),
    EvaluationPointSection(
        id="protocol_adherence",
        label="Protocol & PMEX Rule Adherence",
        description="Full compliance with SOPs, company rules, PMEX rules.",
        category=DISCIPLINE_COMPLIANCE,
    ),
    EvaluationPointSection(
        id="task_timeliness",
        label="Timely Completion of Tasks",
        description="All assignments completed on schedule.",
        category=DISCIPLINE_COMPLIANCE,
    ),
    EvaluationPointSection(
        id="record_maintenance",
        label="Record & Log Maintenance",
        description="Accurate client records, call logs, and trade logs.",
        category=DISCIPLINE_COMPLIANCE,
    ),
    EvaluationPointSection(
        id="client_professionalism",
        label="Professional Interaction",
        description="Patience, respectful tone, and professionalism.",
        category=ATTITUDE_CONDUCT,
    ),
    EvaluationPointSection(
        id="call_quality",
        label="Call Quality & Market Updates",
        description="Effective calls; timely and accurate market updates.",
        category=ATTITUDE_CONDUCT,
    ),
    EvaluationPointSection(
        id="pressure_handling",
        label="Pressure Handling",
        description="Ability to manage client pressure situations.",
        category=ATTITUDE_CONDUCT,
    ),
    EvaluationPointSection(
        id="client_retention",
        label="Client Retention",
        description="Retention performance against a 60% required benchmark.",
        category=CLIENT_METRICS,
    ),
    EvaluationPointSection(
        id="margin_in",
        label="Margin In",
        description="Achieved margin-in vs target of 30%.",
        category=CLIENT_METRICS,
    ),
)

CORE_CRITERIA: tuple[CoreCriterion, ...] = (
    CoreCriterion(
        id="compliance",
        label="Compliance",
        description="Calls only via company lines, SOP followed, no WhatsApp advice, privacy ensured.",
        score_field="compliance_score",
        remarks_field="compliance_remarks",
    ),
    CoreCriterion(
        id="tone_clarity",
        label="Tone & Clarity",
        description="Professional, polite, confident, empathetic; clear and composed communication.",
        score_field="tone_clarity_score",
        remarks_field="tone_remarks",
    ),
    CoreCriterion(
        id="relevance",
        label="Relevance",
        description="Advice matches client profile & needs, correct product selection, proper risk checks.",
        score_field="relevance_score",
        remarks_field="relevance_remarks",
    ),
    CoreCriterion(
        id="client_satisfaction",
        label="Client Satisfaction",
        description="Queries resolved, value delivered, client feels supported, informed, and secure.",
        score_field="client_satisfaction_score",
        remarks_field="satisfaction_remarks",
    ),
    CoreCriterion(
        id="portfolio_revenue",
        label="Portfolio & Revenue Impact",
        description="Weekly equity trend, NOTs achieved, exposure within SOP limits, visible retention effort.",
        score_field="portfolio_revenue_score",
        remarks_field="portfolio_remarks",
    ),
)

_POINTS_BY_ID = {point.id: point for point in EVALUATION_POINTS}


def categories() -> tuple[str, ...]:
    return CATEGORIES


def points_by_category() -> dict[str, list[EvaluationPointSection]]:
    grouped: dict[str, list[EvaluationPointSection]] = {category: [] for category in CATEGORIES}
    for point in EVALUATION_POINTS:
        grouped[point.category].append(point)
    return grouped


def get_point(point_id: str) -> EvaluationPointSection:
    try:
        return _POINTS_BY_ID[point_id]
    except KeyError:
        raise KeyError(f"Unknown evaluation point: {point_id}") from None
