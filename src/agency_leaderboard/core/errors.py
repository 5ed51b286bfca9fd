"""Errors raised by the leaderboard engine.

The engine normalizes malformed-but-present data instead of raising. These
exceptions are reserved for programmer errors such as an unknown metric key
or a missing collection, and always surface synchronously to the caller.
"""

from typing import Any, Dict, Iterable, Optional


class LeaderboardError(ValueError):
    """Base exception for all leaderboard engine errors."""

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details: Dict[str, Any] = details or {}


class InvalidMetricError(LeaderboardError):
    """Raised when a sort metric is not one of the rankable metric keys."""

    def __init__(self, metric: Any, valid: Iterable[str] = ()):
        valid = list(valid)
        super().__init__(
            f"Unknown metric '{metric}'. Expected one of: {', '.join(valid)}",
            {"metric": metric, "valid": valid},
        )
        self.metric = metric


class InvalidSortDirectionError(LeaderboardError):
    """Raised when a sort direction is neither 'asc' nor 'desc'."""

    def __init__(self, direction: Any):
        super().__init__(
            f"Unknown sort direction '{direction}'. Expected 'asc' or 'desc'",
            {"direction": direction},
        )
        self.direction = direction


class InvalidCategoryError(LeaderboardError):
    """Raised when a category leaderboard is requested for an unknown category."""

    def __init__(self, category: Any, valid: Iterable[str] = ()):
        valid = list(valid)
        super().__init__(
            f"Unknown leaderboard category '{category}'. Expected one of: {', '.join(valid)}",
            {"category": category, "valid": valid},
        )
        self.category = category


class MissingCollectionError(LeaderboardError):
    """Raised when a required record collection is None instead of a list."""

    def __init__(self, name: str):
        super().__init__(
            f"Collection '{name}' is required; pass an empty list when nothing is loaded",
            {"collection": name},
        )
        self.collection = name


class InvalidWeightsError(LeaderboardError):
    """Raised when overall-score weights do not sum to 1.00."""

    def __init__(self, total: float):
        super().__init__(
            f"Score weights must sum to 1.00, got {total:.4f}",
            {"total": total},
        )
        self.total = total
