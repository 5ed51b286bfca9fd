"""Team baselines for above/below-average comparisons."""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from ..core.scorer import AgentMetrics, AgentWithMetrics, MetricKey, round_half_up


@dataclass(frozen=True)
class MetricComparison:
    """One agent metric against the team average."""
    metric: MetricKey
    value: int
    team_average: int

    @property
    def difference(self) -> int:
        return self.value - self.team_average

    @property
    def above_average(self) -> bool:
        return self.value >= self.team_average


def team_averages(agents: Sequence[AgentWithMetrics]) -> Dict[MetricKey, int]:
    """Mean of each rankable metric over every agent; empty when there are no agents."""
    if not agents:
        return {}

    count = len(agents)
    return {
        metric: round_half_up(sum(a.metrics.value(metric) for a in agents) / count)
        for metric in MetricKey
    }


def team_average(averages: Dict[MetricKey, int], metric: MetricKey) -> int:
    """A single average, with missing averages read as 0."""
    return averages.get(metric, 0)


def compare_to_team(
    metrics: AgentMetrics,
    averages: Dict[MetricKey, int]
) -> List[MetricComparison]:
    """Compare every rankable metric of one agent to the team."""
    return [
        MetricComparison(
            metric=metric,
            value=metrics.value(metric),
            team_average=team_average(averages, metric),
        )
        for metric in MetricKey
    ]
