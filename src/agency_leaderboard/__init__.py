"""Agent scoring and leaderboards for insurance agency back-offices."""

from .team.leaderboard import LeaderboardResult, compute_leaderboard

__version__ = "1.0.0"

__all__ = ["LeaderboardResult", "compute_leaderboard", "__version__"]
