"""Record shapes consumed by the leaderboard engine.

Records arrive from the agency back-office store as flat dicts. They are
read-only here: ``from_dict`` tolerates missing keys and malformed numbers
so that scoring never fails on present-but-messy data.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class LeaderboardCategory(Enum):
    """Categories of the gamified category leaderboard."""
    SALES = "sales"
    SATISFACTION = "satisfaction"
    COMPLIANCE = "compliance"
    RETENTION = "retention"
    OVERALL = "overall"


ACTIVE_CONTRACT_STATUSES = frozenset({"active", "contract_signed"})
OPPORTUNITY_TYPES = frozenset({"market_opportunity", "cost_savings", "coverage_gap"})

# Rank assumed for agents with no stored rank in a category
UNRANKED = 999


def as_number(value: Any) -> float:
    """Coerce a loosely-typed numeric field, treating missing or bad values as 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are taken as UTC. Returns None when the value is missing
    or unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Agent:
    """An agent on the agency roster."""
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    onboarding_status: str = ""
    state: str = ""
    ahip_completion_date: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Agent":
        return cls(
            id=str(data.get('id') or ''),
            first_name=data.get('first_name') or '',
            last_name=data.get('last_name') or '',
            email=data.get('email') or '',
            onboarding_status=data.get('onboarding_status') or '',
            state=data.get('state') or '',
            ahip_completion_date=data.get('ahip_completion_date') or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'onboarding_status': self.onboarding_status,
            'state': self.state,
            'ahip_completion_date': self.ahip_completion_date,
        }


@dataclass
class License:
    """A state insurance license held by an agent."""
    agent_id: str
    status: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "License":
        return cls(agent_id=str(data.get('agent_id') or ''), status=data.get('status') or '')


@dataclass
class Contract:
    """A carrier contract for an agent."""
    agent_id: str
    contract_status: str = ""

    @property
    def is_active(self) -> bool:
        return self.contract_status in ACTIVE_CONTRACT_STATUSES

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Contract":
        return cls(
            agent_id=str(data.get('agent_id') or ''),
            contract_status=data.get('contract_status') or '',
        )


@dataclass
class OnboardingChecklistItem:
    """One onboarding checklist step."""
    agent_id: str
    is_completed: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OnboardingChecklistItem":
        return cls(
            agent_id=str(data.get('agent_id') or ''),
            is_completed=bool(data.get('is_completed')),
        )


@dataclass
class Task:
    """A task assigned to an agent."""
    agent_id: str
    status: str = ""

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(agent_id=str(data.get('agent_id') or ''), status=data.get('status') or '')


@dataclass
class Commission:
    """A commission payment in dollars."""
    agent_id: str
    amount: float = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Commission":
        return cls(agent_id=str(data.get('agent_id') or ''), amount=as_number(data.get('amount')))


@dataclass
class Client:
    """A client in an agent's book of business."""
    agent_id: str
    status: str = ""
    sentiment_score: float = 0  # 0..1 relationship health
    satisfaction_score: float = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Client":
        return cls(
            agent_id=str(data.get('agent_id') or ''),
            status=data.get('status') or '',
            sentiment_score=as_number(data.get('sentiment_score')),
            satisfaction_score=as_number(data.get('satisfaction_score')),
        )


@dataclass
class ClientInteraction:
    """A logged call, email or meeting with a client."""
    agent_id: str
    direction: str = ""
    interaction_date: Optional[datetime] = None

    @property
    def is_outbound(self) -> bool:
        return self.direction == "outbound"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientInteraction":
        return cls(
            agent_id=str(data.get('agent_id') or ''),
            direction=data.get('direction') or '',
            interaction_date=parse_datetime(data.get('interaction_date')),
        )


@dataclass
class ProactiveOutreach:
    """An outreach campaign touch initiated by the agent."""
    agent_id: str
    response_received: bool = False
    status: str = ""
    opportunity_type: str = ""

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @property
    def is_opportunity(self) -> bool:
        return self.opportunity_type in OPPORTUNITY_TYPES

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProactiveOutreach":
        return cls(
            agent_id=str(data.get('agent_id') or ''),
            response_received=bool(data.get('response_received')),
            status=data.get('status') or '',
            opportunity_type=data.get('opportunity_type') or '',
        )


@dataclass
class RiskAssessment:
    """A churn or coverage risk flagged on one of the agent's clients."""
    agent_id: str
    status: str = ""

    @property
    def is_resolved(self) -> bool:
        return self.status == "resolved"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RiskAssessment":
        return cls(agent_id=str(data.get('agent_id') or ''), status=data.get('status') or '')


@dataclass
class TrainingSession:
    """One training module attempt by an agent."""
    agent_id: str
    completed: bool = False
    score: float = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrainingSession":
        return cls(
            agent_id=str(data.get('agent_id') or ''),
            completed=bool(data.get('completed')),
            score=as_number(data.get('score')),
        )


@dataclass
class AgentAchievement:
    """A training achievement unlocked by an agent."""
    agent_id: str
    name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AgentAchievement":
        return cls(agent_id=str(data.get('agent_id') or ''), name=data.get('name') or '')


@dataclass
class AgentBadge:
    """A gamification badge awarded to an agent."""
    agent_id: str
    points: float = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AgentBadge":
        return cls(agent_id=str(data.get('agent_id') or ''), points=as_number(data.get('points')))


@dataclass
class AgentPoints:
    """Gamification points for an agent, with the last recorded rank per category."""
    agent_id: str
    monthly_points: float = 0
    total_earned: float = 0
    total_points: float = 0
    current_streak: int = 0
    level: int = 1
    ranks: Dict[LeaderboardCategory, int] = field(default_factory=dict)

    def previous_rank(self, category: LeaderboardCategory) -> int:
        """Last recorded rank in a category, or UNRANKED if none was stored."""
        return self.ranks.get(category) or UNRANKED

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AgentPoints":
        ranks = {}
        for category in LeaderboardCategory:
            value = int(as_number(data.get(f"rank_{category.value}")))
            if value:
                ranks[category] = value

        return cls(
            agent_id=str(data.get('agent_id') or ''),
            monthly_points=as_number(data.get('monthly_points')),
            total_earned=as_number(data.get('total_earned')),
            total_points=as_number(data.get('total_points')),
            current_streak=int(as_number(data.get('current_streak'))),
            level=int(as_number(data.get('level'))) or 1,
            ranks=ranks,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'agent_id': self.agent_id,
            'monthly_points': self.monthly_points,
            'total_earned': self.total_earned,
            'total_points': self.total_points,
            'current_streak': self.current_streak,
            'level': self.level,
        }
        for category, rank in self.ranks.items():
            data[f"rank_{category.value}"] = rank
        return data
