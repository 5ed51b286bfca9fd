"""Core scoring engine for agent leaderboards."""

from .collector import AgentRecords, collect_agent_records
from .config import DEFAULT_WEIGHTS, LeaderboardConfig, LeaderboardConfigManager, ScoreWeights
from .errors import (
    InvalidCategoryError,
    InvalidMetricError,
    InvalidSortDirectionError,
    InvalidWeightsError,
    LeaderboardError,
    MissingCollectionError,
)
from .records import (
    Agent,
    AgentAchievement,
    AgentBadge,
    AgentPoints,
    Client,
    ClientInteraction,
    Commission,
    Contract,
    LeaderboardCategory,
    License,
    OnboardingChecklistItem,
    ProactiveOutreach,
    RiskAssessment,
    Task,
    TrainingSession,
)
from .scorer import AgentMetrics, AgentWithMetrics, MetricKey, MetricScorer, METRIC_LABELS, score_agent

__all__ = [
    "AgentRecords",
    "collect_agent_records",
    "DEFAULT_WEIGHTS",
    "LeaderboardConfig",
    "LeaderboardConfigManager",
    "ScoreWeights",
    "InvalidCategoryError",
    "InvalidMetricError",
    "InvalidSortDirectionError",
    "InvalidWeightsError",
    "LeaderboardError",
    "MissingCollectionError",
    "Agent",
    "AgentAchievement",
    "AgentBadge",
    "AgentPoints",
    "Client",
    "ClientInteraction",
    "Commission",
    "Contract",
    "LeaderboardCategory",
    "License",
    "OnboardingChecklistItem",
    "ProactiveOutreach",
    "RiskAssessment",
    "Task",
    "TrainingSession",
    "AgentMetrics",
    "AgentWithMetrics",
    "MetricKey",
    "MetricScorer",
    "METRIC_LABELS",
    "score_agent",
]
