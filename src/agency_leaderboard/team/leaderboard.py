"""Agent performance leaderboard: scoring, team baselines and ranking in one call."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from ..core.collector import collect_agent_records
from ..core.config import ScoreWeights
from ..core.records import (
    Agent,
    Client,
    ClientInteraction,
    Commission,
    Contract,
    License,
    OnboardingChecklistItem,
    ProactiveOutreach,
    RiskAssessment,
    Task,
)
from ..core.scorer import ENGAGEMENT_WINDOW_DAYS, AgentWithMetrics, MetricKey, MetricScorer
from .aggregator import team_averages
from .ranker import ALL_STATUSES, RankedAgent, SortDirection, rank_agents

logger = logging.getLogger(__name__)


@dataclass
class LeaderboardResult:
    """Ranked agents plus the team averages they are compared against."""
    ranked_agents: List[RankedAgent]
    team_averages: Dict[MetricKey, int]
    sort_metric: MetricKey = MetricKey.OVERALL
    sort_direction: SortDirection = SortDirection.DESC
    status_filter: str = ALL_STATUSES
    generated_at: datetime = field(default_factory=datetime.now)

    def find(self, agent_id: str) -> Optional[RankedAgent]:
        for ranked in self.ranked_agents:
            if ranked.agent.id == agent_id:
                return ranked
        return None

    def is_above_average(self, ranked: RankedAgent) -> bool:
        """Whether an agent meets the team average on the sorted metric."""
        return ranked.metrics.value(self.sort_metric) >= self.team_averages.get(self.sort_metric, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sort_metric': self.sort_metric.value,
            'sort_direction': self.sort_direction.value,
            'status_filter': self.status_filter,
            'generated_at': self.generated_at.isoformat(),
            'team_averages': {m.value: v for m, v in self.team_averages.items()},
            'ranked_agents': [r.to_dict() for r in self.ranked_agents],
        }


def score_agents(
    agents: Sequence[Agent],
    licenses: Sequence[License],
    contracts: Sequence[Contract],
    checklist_items: Sequence[OnboardingChecklistItem],
    tasks: Sequence[Task],
    commissions: Sequence[Commission],
    clients: Sequence[Client],
    interactions: Sequence[ClientInteraction],
    risk_assessments: Sequence[RiskAssessment],
    outreach: Sequence[ProactiveOutreach],
    as_of: Optional[datetime] = None,
    weights: Optional[ScoreWeights] = None,
    engagement_window_days: int = ENGAGEMENT_WINDOW_DAYS
) -> List[AgentWithMetrics]:
    """Score every agent on the roster."""
    bundles = collect_agent_records(
        agents, licenses, contracts, checklist_items, tasks,
        commissions, clients, interactions, risk_assessments, outreach
    )
    return MetricScorer(weights, engagement_window_days).score_all(bundles, as_of)


def compute_leaderboard(
    agents: Sequence[Agent],
    licenses: Sequence[License],
    contracts: Sequence[Contract],
    checklist_items: Sequence[OnboardingChecklistItem],
    tasks: Sequence[Task],
    commissions: Sequence[Commission],
    clients: Sequence[Client],
    interactions: Sequence[ClientInteraction],
    risk_assessments: Sequence[RiskAssessment],
    outreach: Sequence[ProactiveOutreach],
    status_filter: str = ALL_STATUSES,
    sort_metric: Union[MetricKey, str] = MetricKey.OVERALL,
    sort_direction: Union[SortDirection, str] = SortDirection.DESC,
    *,
    as_of: Optional[datetime] = None,
    weights: Optional[ScoreWeights] = None,
    engagement_window_days: int = ENGAGEMENT_WINDOW_DAYS,
    limit: Optional[int] = None
) -> LeaderboardResult:
    """Score, average and rank agents.

    Team averages always cover the whole roster, before the status filter
    narrows the ranked list.
    """
    metric = MetricKey.parse(sort_metric)
    direction = SortDirection.parse(sort_direction)

    scored = score_agents(
        agents, licenses, contracts, checklist_items, tasks,
        commissions, clients, interactions, risk_assessments, outreach,
        as_of=as_of, weights=weights, engagement_window_days=engagement_window_days
    )

    result = LeaderboardResult(
        ranked_agents=rank_agents(scored, status_filter, metric, direction, limit),
        team_averages=team_averages(scored),
        sort_metric=metric,
        sort_direction=direction,
        status_filter=status_filter,
    )

    logger.debug(
        f"Leaderboard computed: {len(result.ranked_agents)} ranked, "
        f"sorted by {metric.value} {direction.value}"
    )
    return result


def top_performers(scored: Sequence[AgentWithMetrics]) -> Dict[MetricKey, RankedAgent]:
    """Leader on each metric."""
    leaders = {}
    for metric in MetricKey:
        ranked = rank_agents(scored, sort_metric=metric, limit=1)
        if ranked:
            leaders[metric] = ranked[0]
    return leaders


def generate_leaderboard_report(
    scored: Sequence[AgentWithMetrics],
    status_filter: str = ALL_STATUSES,
    limit: int = 10
) -> Dict[str, Any]:
    """Generate a report covering every metric's leaderboard."""
    leaderboards = {}
    for metric in MetricKey:
        entries = rank_agents(scored, status_filter, metric, limit=limit)
        leaderboards[metric.value] = [
            {
                'rank': e.rank,
                'agent': e.agent.full_name,
                'value': e.metrics.value(metric),
            }
            for e in entries
        ]

    return {
        'status_filter': status_filter,
        'generated_at': datetime.now().isoformat(),
        'team_averages': {m.value: v for m, v in team_averages(scored).items()},
        'top_performers': {
            metric.value: {
                'agent_id': leader.agent.id,
                'agent_name': leader.agent.full_name,
                'value': leader.metrics.value(metric),
            }
            for metric, leader in top_performers(scored).items()
        },
        'leaderboards': leaderboards,
    }
