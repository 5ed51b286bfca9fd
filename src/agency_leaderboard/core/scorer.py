"""Per-agent metric scoring for the agency leaderboard."""

import logging
import math
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .collector import AgentRecords
from .config import DEFAULT_WEIGHTS, ScoreWeights
from .errors import InvalidMetricError
from .records import Agent

logger = logging.getLogger(__name__)

ENGAGEMENT_WINDOW_DAYS = 30


class MetricKey(Enum):
    """Rankable metrics. Values double as AgentMetrics attribute names."""
    OVERALL = "overall"
    HEALTH_SCORE = "health_score"
    RETENTION = "retention"
    ENGAGEMENT = "engagement"
    CONVERSION = "conversion"
    ONBOARDING = "onboarding"
    LICENSES = "licenses"
    CONTRACTS = "contracts"
    TASKS = "tasks"

    @classmethod
    def parse(cls, value: Union["MetricKey", str]) -> "MetricKey":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidMetricError(value, [m.value for m in cls]) from None


METRIC_LABELS = {
    MetricKey.OVERALL: "Overall Score",
    MetricKey.HEALTH_SCORE: "Client Health Score",
    MetricKey.RETENTION: "Client Retention",
    MetricKey.ENGAGEMENT: "Proactive Engagement",
    MetricKey.CONVERSION: "Opportunity Conversion",
    MetricKey.ONBOARDING: "Onboarding Progress",
    MetricKey.LICENSES: "License Compliance",
    MetricKey.CONTRACTS: "Contracts Secured",
    MetricKey.TASKS: "Tasks Completed",
}


def round_half_up(value: float) -> int:
    """Round .5 away from negative infinity, unlike Python's banker's round()."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class AgentMetrics:
    """Derived scores and raw counters for one agent."""

    # Scores (0-100, except engagement which is unbounded)
    overall: int = 0
    onboarding: int = 0
    licenses: int = 0
    contracts: int = 0
    tasks: int = 0
    health_score: int = 0
    retention: int = 0
    engagement: int = 0
    conversion: int = 0

    # Raw counters for drill-down
    total_commissions: float = 0
    active_contracts: int = 0
    active_licenses: int = 0
    completed_tasks: int = 0
    total_tasks: int = 0
    active_clients: int = 0
    churned: int = 0
    total_clients: int = 0
    proactive_interactions: int = 0
    successful_outreach: int = 0
    resolved_risks: int = 0
    completed_opportunities: int = 0

    def value(self, metric: Union[MetricKey, str]) -> int:
        return getattr(self, MetricKey.parse(metric).value)

    def scores(self) -> Dict[MetricKey, int]:
        return {metric: getattr(self, metric.value) for metric in MetricKey}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AgentWithMetrics:
    """An agent paired with its computed metrics."""
    agent: Agent
    metrics: AgentMetrics

    def to_dict(self) -> Dict[str, Any]:
        return {**self.agent.to_dict(), 'metrics': self.metrics.to_dict()}


class MetricScorer:
    """Score agents from their related back-office records.

    Scoring is a pure function of the records, the weights and the
    reference time; nothing is cached between calls.
    """

    def __init__(
        self,
        weights: Optional[ScoreWeights] = None,
        engagement_window_days: int = ENGAGEMENT_WINDOW_DAYS
    ):
        self.weights = (weights or DEFAULT_WEIGHTS).validate()
        self.engagement_window_days = engagement_window_days

    def score(self, records: AgentRecords, as_of: Optional[datetime] = None) -> AgentMetrics:
        """Compute every sub-score and the weighted overall score for one agent."""
        as_of = _as_utc(as_of)
        w = self.weights

        active_licenses = sum(1 for l in records.licenses if l.is_active)
        license_score = round_half_up((active_licenses / (len(records.licenses) or 1)) * 100)

        active_contracts = sum(1 for c in records.contracts if c.is_active)
        contract_score = min(active_contracts * 20, 100)

        completed_checklist = sum(1 for c in records.checklist_items if c.is_completed)
        onboarding_score = round_half_up((completed_checklist / (len(records.checklist_items) or 1)) * 100)

        completed_tasks = sum(1 for t in records.tasks if t.is_completed)
        task_score = round_half_up((completed_tasks / (len(records.tasks) or 1)) * 100)

        total_commissions = sum(c.amount for c in records.commissions)

        clients = records.clients
        health_score = 0
        retention_rate = 0
        active_clients = sum(1 for c in clients if c.status == "active")
        churned = sum(1 for c in clients if c.status == "churned")
        if clients:
            health_score = round_half_up(sum(c.sentiment_score * 100 for c in clients) / len(clients))
            retention_rate = round_half_up(((len(clients) - churned) / len(clients)) * 100)

        window_start = as_of - timedelta(days=self.engagement_window_days)
        proactive_interactions = sum(
            1 for i in records.interactions
            if i.interaction_date is not None
            and _as_utc(i.interaction_date) >= window_start
            and i.is_outbound
        )
        successful_outreach = sum(
            1 for o in records.outreach if o.response_received and o.is_completed
        )
        # Not clamped: outbound touches can outnumber clients
        engagement_score = round_half_up(
            ((proactive_interactions / (len(clients) or 1)) * 50)
            + ((successful_outreach / (len(records.outreach) or 1)) * 50)
        )

        resolved_risks = sum(1 for r in records.risk_assessments if r.is_resolved)
        risk_resolution_rate = round_half_up((resolved_risks / (len(records.risk_assessments) or 1)) * 100)

        opportunities = [o for o in records.outreach if o.is_opportunity]
        completed_opportunities = sum(1 for o in opportunities if o.is_completed)
        opportunity_conversion = round_half_up((completed_opportunities / (len(opportunities) or 1)) * 100)

        conversion_score = round_half_up((risk_resolution_rate * 0.4) + (opportunity_conversion * 0.6))

        overall_score = round_half_up(
            (license_score * w.licenses)
            + (contract_score * w.contracts)
            + (onboarding_score * w.onboarding)
            + (task_score * w.tasks)
            + (health_score * w.health_score)
            + (retention_rate * w.retention)
            + (engagement_score * w.engagement)
            + (conversion_score * w.conversion)
        )

        return AgentMetrics(
            overall=overall_score,
            onboarding=onboarding_score,
            licenses=license_score,
            contracts=contract_score,
            tasks=task_score,
            health_score=health_score,
            retention=retention_rate,
            engagement=engagement_score,
            conversion=conversion_score,
            total_commissions=total_commissions,
            active_contracts=active_contracts,
            active_licenses=active_licenses,
            completed_tasks=completed_tasks,
            total_tasks=len(records.tasks),
            active_clients=active_clients,
            churned=churned,
            total_clients=len(clients),
            proactive_interactions=proactive_interactions,
            successful_outreach=successful_outreach,
            resolved_risks=resolved_risks,
            completed_opportunities=completed_opportunities,
        )

    def score_all(
        self,
        bundles: List[AgentRecords],
        as_of: Optional[datetime] = None
    ) -> List[AgentWithMetrics]:
        """Score every agent bundle against the same reference time."""
        as_of = _as_utc(as_of)
        scored = [AgentWithMetrics(agent=b.agent, metrics=self.score(b, as_of)) for b in bundles]
        logger.debug(f"Scored {len(scored)} agents as of {as_of.isoformat()}")
        return scored


def _as_utc(when: Optional[datetime]) -> datetime:
    """Aware UTC datetime; None means now and naive values are read as UTC."""
    if when is None:
        return datetime.now(timezone.utc)
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when


def score_agent(
    records: AgentRecords,
    as_of: Optional[datetime] = None,
    weights: Optional[ScoreWeights] = None
) -> AgentMetrics:
    """Score a single agent with the default window."""
    return MetricScorer(weights).score(records, as_of)
