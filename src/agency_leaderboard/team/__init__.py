"""Team leaderboards for agency agents."""

from .aggregator import MetricComparison, compare_to_team, team_average, team_averages
from .categories import (
    CATEGORY_LABELS,
    CategoryEntry,
    category_leaderboard,
    category_scores,
    find_entry,
    record_ranks,
)
from .leaderboard import (
    LeaderboardResult,
    compute_leaderboard,
    generate_leaderboard_report,
    score_agents,
    top_performers,
)
from .onboarding import OnboardingEntry, onboarding_leaderboard
from .ranker import ALL_STATUSES, RankedAgent, SortDirection, rank_agents, rank_badge
from .training import TrainingEntry, training_leaderboard

__all__ = [
    'MetricComparison',
    'compare_to_team',
    'team_average',
    'team_averages',
    'CATEGORY_LABELS',
    'CategoryEntry',
    'category_leaderboard',
    'category_scores',
    'find_entry',
    'record_ranks',
    'LeaderboardResult',
    'compute_leaderboard',
    'generate_leaderboard_report',
    'score_agents',
    'top_performers',
    'OnboardingEntry',
    'onboarding_leaderboard',
    'ALL_STATUSES',
    'RankedAgent',
    'SortDirection',
    'rank_agents',
    'rank_badge',
    'TrainingEntry',
    'training_leaderboard',
]
