"""Onboarding leaderboard: badge points plus checklist progress."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.collector import group_by_agent, require
from ..core.records import Agent, AgentBadge, OnboardingChecklistItem
from ..core.scorer import round_half_up

# Checklist length assumed for agents whose checklist hasn't been created yet
EXPECTED_CHECKLIST_ITEMS = 10
POINTS_PER_PERCENT = 5


@dataclass
class OnboardingEntry:
    """An agent's standing on the onboarding leaderboard."""
    rank: int
    agent: Agent
    badge_count: int
    badge_points: float
    progress_percent: int

    @property
    def total_score(self) -> float:
        return self.badge_points + self.progress_percent * POINTS_PER_PERCENT


def onboarding_leaderboard(
    agents: Sequence[Agent],
    badges: Sequence[AgentBadge],
    checklist_items: Sequence[OnboardingChecklistItem],
    limit: Optional[int] = None
) -> List[OnboardingEntry]:
    """Rank agents by badge points plus five points per percent of checklist done."""
    badges_by_agent = group_by_agent('badges', badges)
    checklist_by_agent = group_by_agent('checklist_items', checklist_items)

    rows = []
    for agent in require('agents', agents):
        agent_badges = badges_by_agent.get(agent.id, [])
        checklist = checklist_by_agent.get(agent.id, [])
        completed = sum(1 for c in checklist if c.is_completed)
        progress = round_half_up((completed / (len(checklist) or EXPECTED_CHECKLIST_ITEMS)) * 100)
        rows.append(OnboardingEntry(
            rank=0,
            agent=agent,
            badge_count=len(agent_badges),
            badge_points=sum(b.points for b in agent_badges),
            progress_percent=progress,
        ))

    rows.sort(key=lambda e: e.total_score, reverse=True)
    for i, entry in enumerate(rows):
        entry.rank = i + 1

    if limit is not None:
        rows = rows[:limit]
    return rows
