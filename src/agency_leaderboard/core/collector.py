"""Group flat back-office collections into per-agent record bundles."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, TypeVar

from .errors import MissingCollectionError
from .records import (
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

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class AgentRecords:
    """All records belonging to a single agent."""
    agent: Agent
    licenses: List[License] = field(default_factory=list)
    contracts: List[Contract] = field(default_factory=list)
    checklist_items: List[OnboardingChecklistItem] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    commissions: List[Commission] = field(default_factory=list)
    clients: List[Client] = field(default_factory=list)
    interactions: List[ClientInteraction] = field(default_factory=list)
    risk_assessments: List[RiskAssessment] = field(default_factory=list)
    outreach: List[ProactiveOutreach] = field(default_factory=list)


def require(name: str, collection: Sequence[T]) -> Sequence[T]:
    """Reject a None collection; an empty one is fine."""
    if collection is None:
        raise MissingCollectionError(name)
    return collection


def group_by_agent(name: str, collection: Sequence[T]) -> Dict[str, List[T]]:
    """Index a collection by agent_id, keeping the original record order."""
    grouped: Dict[str, List[T]] = defaultdict(list)
    for record in require(name, collection):
        grouped[record.agent_id].append(record)
    return grouped


def collect_agent_records(
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
) -> List[AgentRecords]:
    """Bundle each agent with its related records, in roster order.

    Records whose agent_id matches no agent are ignored. Agents with no
    records in a collection get an empty list for it.
    """
    by_agent = {
        'licenses': group_by_agent('licenses', licenses),
        'contracts': group_by_agent('contracts', contracts),
        'checklist_items': group_by_agent('checklist_items', checklist_items),
        'tasks': group_by_agent('tasks', tasks),
        'commissions': group_by_agent('commissions', commissions),
        'clients': group_by_agent('clients', clients),
        'interactions': group_by_agent('interactions', interactions),
        'risk_assessments': group_by_agent('risk_assessments', risk_assessments),
        'outreach': group_by_agent('outreach', outreach),
    }

    bundles = [
        AgentRecords(
            agent=agent,
            **{name: list(grouped.get(agent.id, [])) for name, grouped in by_agent.items()}
        )
        for agent in require('agents', agents)
    ]

    logger.debug(f"Collected records for {len(bundles)} agents")
    return bundles
