"""Training leaderboard: points first, then modules completed, then average score."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.collector import group_by_agent, require
from ..core.records import Agent, AgentAchievement, AgentPoints, TrainingSession
from ..core.scorer import round_half_up


@dataclass
class TrainingEntry:
    """An agent's standing on the training leaderboard."""
    rank: int
    agent: Agent
    total_points: float
    completed_modules: int
    average_score: int
    achievements: int

    @property
    def sort_key(self):
        return (self.total_points, self.completed_modules, self.average_score)


def training_leaderboard(
    agents: Sequence[Agent],
    sessions: Sequence[TrainingSession],
    achievements: Sequence[AgentAchievement],
    agent_points: Sequence[AgentPoints],
    limit: Optional[int] = None
) -> List[TrainingEntry]:
    """Rank agents by total points, breaking ties on completed modules then average score.

    Agents tied on all three keys keep their roster order.
    """
    sessions_by_agent = group_by_agent('sessions', sessions)
    achievements_by_agent = group_by_agent('achievements', achievements)

    points_by_agent = {}
    for points in require('agent_points', agent_points):
        points_by_agent.setdefault(points.agent_id, points)

    rows = []
    for agent in require('agents', agents):
        completed = [s for s in sessions_by_agent.get(agent.id, []) if s.completed]
        average = round_half_up(sum(s.score for s in completed) / len(completed)) if completed else 0
        points = points_by_agent.get(agent.id)
        rows.append(TrainingEntry(
            rank=0,
            agent=agent,
            total_points=points.total_points if points else 0,
            completed_modules=len(completed),
            average_score=average,
            achievements=len(achievements_by_agent.get(agent.id, [])),
        ))

    rows.sort(key=lambda e: e.sort_key, reverse=True)
    for i, entry in enumerate(rows):
        entry.rank = i + 1

    if limit is not None:
        rows = rows[:limit]
    return rows
