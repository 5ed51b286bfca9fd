"""Sort and rank agents by a chosen metric."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from ..core.collector import require
from ..core.errors import InvalidSortDirectionError
from ..core.records import Agent
from ..core.scorer import AgentMetrics, AgentWithMetrics, MetricKey

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"

PODIUM_BADGES = {1: "gold", 2: "silver", 3: "bronze"}


class SortDirection(Enum):
    """Sort direction for leaderboards."""
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Union["SortDirection", str]) -> "SortDirection":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidSortDirectionError(value) from None


@dataclass(frozen=True)
class RankedAgent:
    """An agent's position on the leaderboard."""
    rank: int
    agent: Agent
    metrics: AgentMetrics

    @property
    def badge(self) -> Optional[str]:
        return rank_badge(self.rank)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rank': self.rank,
            'badge': self.badge,
            **self.agent.to_dict(),
            'metrics': self.metrics.to_dict(),
        }


def rank_badge(rank: int) -> Optional[str]:
    """Podium badge for the top three positions."""
    return PODIUM_BADGES.get(rank)


def rank_agents(
    agents: Sequence[AgentWithMetrics],
    status_filter: str = ALL_STATUSES,
    sort_metric: Union[MetricKey, str] = MetricKey.OVERALL,
    sort_direction: Union[SortDirection, str] = SortDirection.DESC,
    limit: Optional[int] = None
) -> List[RankedAgent]:
    """Filter by onboarding status, sort by a metric and assign positional ranks.

    The sort is stable in both directions. Tied values keep their input order
    and still receive consecutive ranks.
    """
    metric = MetricKey.parse(sort_metric)
    direction = SortDirection.parse(sort_direction)

    filtered = list(require('agents', agents))
    if status_filter != ALL_STATUSES:
        filtered = [a for a in filtered if a.agent.onboarding_status == status_filter]

    ordered = sorted(
        filtered,
        key=lambda a: a.metrics.value(metric),
        reverse=direction == SortDirection.DESC
    )

    ranked = [
        RankedAgent(rank=i + 1, agent=a.agent, metrics=a.metrics)
        for i, a in enumerate(ordered)
    ]

    logger.debug(
        f"Ranked {len(ranked)} of {len(agents)} agents by {metric.value} {direction.value}"
    )

    if limit is not None:
        ranked = ranked[:limit]
    return ranked
