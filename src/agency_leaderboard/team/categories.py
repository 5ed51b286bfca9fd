"""Category leaderboards with rank movement against the last recorded ranks."""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Union

from ..core.collector import group_by_agent, require
from ..core.errors import InvalidCategoryError
from ..core.records import (
    Agent,
    AgentPoints,
    Client,
    Commission,
    LeaderboardCategory,
    License,
    UNRANKED,
)

logger = logging.getLogger(__name__)

CATEGORY_LABELS = {
    LeaderboardCategory.SALES: "Sales Volume",
    LeaderboardCategory.SATISFACTION: "Client Satisfaction",
    LeaderboardCategory.COMPLIANCE: "Compliance Score",
    LeaderboardCategory.RETENTION: "Client Retention",
    LeaderboardCategory.OVERALL: "Overall Performance",
}

LICENSE_POINTS = 20
AHIP_POINTS = 30


def parse_category(value: Union[LeaderboardCategory, str]) -> LeaderboardCategory:
    if isinstance(value, LeaderboardCategory):
        return value
    try:
        return LeaderboardCategory(value)
    except ValueError:
        raise InvalidCategoryError(value, [c.value for c in LeaderboardCategory]) from None


@dataclass
class CategoryEntry:
    """An agent's standing on a category leaderboard."""
    rank: int
    agent: Agent
    scores: Dict[LeaderboardCategory, float]
    previous_rank: int
    points: float = 0
    total_points: float = 0
    streak: int = 0
    level: int = 1
    change: int = field(init=False)
    trend: str = field(init=False)

    def __post_init__(self):
        # Positive change means the agent moved toward rank 1
        self.change = self.previous_rank - self.rank
        if self.change > 0:
            self.trend = "up"
        elif self.change < 0:
            self.trend = "down"
        else:
            self.trend = "same"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rank': self.rank,
            'agent_id': self.agent.id,
            'agent_name': self.agent.full_name,
            'scores': {c.value: v for c, v in self.scores.items()},
            'points': self.points,
            'total_points': self.total_points,
            'streak': self.streak,
            'level': self.level,
            'previous_rank': self.previous_rank,
            'change': self.change,
            'trend': self.trend,
        }


def category_scores(
    agent: Agent,
    points: Optional[AgentPoints],
    commissions: Sequence[Commission],
    clients: Sequence[Client],
    licenses: Sequence[License]
) -> Dict[LeaderboardCategory, float]:
    """Raw category scores for one agent from that agent's records."""
    monthly_points = points.monthly_points if points else 0

    sales_total = sum(c.amount for c in commissions)

    satisfaction = [c.satisfaction_score for c in clients if c.satisfaction_score]
    avg_satisfaction = sum(satisfaction) / len(satisfaction) if satisfaction else 0

    active_licenses = sum(1 for l in licenses if l.is_active)
    compliance = active_licenses * LICENSE_POINTS + (AHIP_POINTS if agent.ahip_completion_date else 0)

    active_clients = sum(1 for c in clients if c.status == "active")
    retention = (active_clients / len(clients)) * 100 if clients else 0

    overall = monthly_points + (sales_total / 100) + (avg_satisfaction * 10) + compliance

    return {
        LeaderboardCategory.SALES: sales_total,
        LeaderboardCategory.SATISFACTION: avg_satisfaction * 10,
        LeaderboardCategory.COMPLIANCE: compliance,
        LeaderboardCategory.RETENTION: retention,
        LeaderboardCategory.OVERALL: overall,
    }


def category_leaderboard(
    agents: Sequence[Agent],
    agent_points: Sequence[AgentPoints],
    commissions: Sequence[Commission],
    clients: Sequence[Client],
    licenses: Sequence[License],
    category: Union[LeaderboardCategory, str] = LeaderboardCategory.OVERALL,
    limit: Optional[int] = None
) -> List[CategoryEntry]:
    """Rank agents in one category and compute movement since the last recorded ranks.

    Agents without a stored rank in the category are treated as coming from
    rank 999.
    """
    category = parse_category(category)

    points_by_agent = {p.agent_id: p for p in require('agent_points', agent_points)}
    commissions_by_agent = group_by_agent('commissions', commissions)
    clients_by_agent = group_by_agent('clients', clients)
    licenses_by_agent = group_by_agent('licenses', licenses)

    rows = []
    for agent in require('agents', agents):
        points = points_by_agent.get(agent.id)
        scores = category_scores(
            agent,
            points,
            commissions_by_agent.get(agent.id, []),
            clients_by_agent.get(agent.id, []),
            licenses_by_agent.get(agent.id, []),
        )
        rows.append((agent, points, scores))

    rows.sort(key=lambda row: row[2][category], reverse=True)

    entries = []
    for i, (agent, points, scores) in enumerate(rows):
        entries.append(CategoryEntry(
            rank=i + 1,
            agent=agent,
            scores=scores,
            previous_rank=points.previous_rank(category) if points else UNRANKED,
            points=points.monthly_points if points else 0,
            total_points=points.total_earned if points else 0,
            streak=points.current_streak if points else 0,
            level=points.level if points else 1,
        ))

    logger.debug(f"Built {category.value} leaderboard for {len(entries)} agents")

    if limit is not None:
        entries = entries[:limit]
    return entries


def find_entry(entries: Sequence[CategoryEntry], agent_id: str) -> Optional[CategoryEntry]:
    """The entry for one agent, e.g. to highlight the signed-in agent."""
    for entry in entries:
        if entry.agent.id == agent_id:
            return entry
    return None


def record_ranks(
    entries: Sequence[CategoryEntry],
    agent_points: Sequence[AgentPoints],
    category: Union[LeaderboardCategory, str]
) -> List[AgentPoints]:
    """Store each entry's current rank as the agent's previous rank for the category.

    Returns new points records; agents without one get a fresh record.
    """
    category = parse_category(category)
    current = {e.agent.id: e.rank for e in entries}

    updated = []
    seen = set()
    for points in agent_points:
        seen.add(points.agent_id)
        if points.agent_id in current:
            ranks = dict(points.ranks)
            ranks[category] = current[points.agent_id]
            points = replace(points, ranks=ranks)
        updated.append(points)

    for entry in entries:
        if entry.agent.id not in seen:
            updated.append(AgentPoints(agent_id=entry.agent.id, ranks={category: entry.rank}))

    logger.info(f"Recorded {category.value} ranks for {len(current)} agents")
    return updated
