"""JSON snapshot of the back-office collections the leaderboard reads."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.records import (
    Agent,
    AgentAchievement,
    AgentBadge,
    AgentPoints,
    Client,
    ClientInteraction,
    Commission,
    Contract,
    License,
    OnboardingChecklistItem,
    ProactiveOutreach,
    RiskAssessment,
    Task,
    TrainingSession,
)

logger = logging.getLogger(__name__)

# Snapshot key -> record type
COLLECTIONS = {
    'agents': Agent,
    'licenses': License,
    'contracts': Contract,
    'checklist_items': OnboardingChecklistItem,
    'tasks': Task,
    'commissions': Commission,
    'clients': Client,
    'interactions': ClientInteraction,
    'risk_assessments': RiskAssessment,
    'outreach': ProactiveOutreach,
    'agent_points': AgentPoints,
    'badges': AgentBadge,
    'training_sessions': TrainingSession,
    'achievements': AgentAchievement,
}


@dataclass
class EntitySnapshot:
    """Every collection the leaderboards consume, fully loaded."""
    agents: List[Agent] = field(default_factory=list)
    licenses: List[License] = field(default_factory=list)
    contracts: List[Contract] = field(default_factory=list)
    checklist_items: List[OnboardingChecklistItem] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    commissions: List[Commission] = field(default_factory=list)
    clients: List[Client] = field(default_factory=list)
    interactions: List[ClientInteraction] = field(default_factory=list)
    risk_assessments: List[RiskAssessment] = field(default_factory=list)
    outreach: List[ProactiveOutreach] = field(default_factory=list)
    agent_points: List[AgentPoints] = field(default_factory=list)
    badges: List[AgentBadge] = field(default_factory=list)
    training_sessions: List[TrainingSession] = field(default_factory=list)
    achievements: List[AgentAchievement] = field(default_factory=list)

    @property
    def scoring_collections(self) -> Dict[str, list]:
        """Keyword arguments for compute_leaderboard / score_agents."""
        return {
            'agents': self.agents,
            'licenses': self.licenses,
            'contracts': self.contracts,
            'checklist_items': self.checklist_items,
            'tasks': self.tasks,
            'commissions': self.commissions,
            'clients': self.clients,
            'interactions': self.interactions,
            'risk_assessments': self.risk_assessments,
            'outreach': self.outreach,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EntitySnapshot":
        snapshot = cls()
        for key, record_type in COLLECTIONS.items():
            setattr(snapshot, key, [record_type.from_dict(r) for r in data.get(key) or []])
        return snapshot


class EntityStore:
    """Load collections from a JSON snapshot and persist rank updates.

    A missing file reads as an empty snapshot, the same as collections that
    are still loading.
    """

    def __init__(self, data_path: Optional[Path] = None):
        self.data_path = Path(data_path) if data_path else Path.home() / ".agency-leaderboard" / "snapshot.json"
        self.raw: Dict[str, Any] = {}
        self.snapshot = EntitySnapshot()

        self._load_data()

    def _load_data(self):
        """Load the snapshot from storage."""
        if self.data_path.exists():
            try:
                with open(self.data_path, 'r') as f:
                    self.raw = json.load(f)
                self.snapshot = EntitySnapshot.from_dict(self.raw)
                logger.debug(
                    f"Loaded {len(self.snapshot.agents)} agents from {self.data_path}"
                )
            except Exception as e:
                logger.error(f"Error loading snapshot {self.data_path}: {e}")
                self.raw = {}
        else:
            logger.warning(f"No snapshot at {self.data_path}; using empty collections")

    def _save_data(self):
        """Save the snapshot to storage."""
        self.data_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.data_path, 'w') as f:
            json.dump(self.raw, f, indent=2)

    def save_agent_points(self, agent_points: List[AgentPoints]):
        """Replace the stored points records, keeping any fields this engine doesn't model."""
        existing = {str(p.get('agent_id')): p for p in self.raw.get('agent_points') or []}
        merged = []
        for points in agent_points:
            merged.append({**existing.get(points.agent_id, {}), **points.to_dict()})

        self.raw['agent_points'] = merged
        self.snapshot.agent_points = list(agent_points)
        self._save_data()
