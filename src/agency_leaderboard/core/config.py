"""Leaderboard weights and persisted display configuration."""

import json
import logging
import math
import os
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Dict, Optional, Any
from datetime import datetime

from .errors import InvalidWeightsError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "AGENCY_LEADERBOARD_CONFIG"


@dataclass(frozen=True)
class ScoreWeights:
    """Weights of each sub-score in the overall score. Must sum to 1.00."""

    licenses: float = 0.15
    contracts: float = 0.15
    onboarding: float = 0.10
    tasks: float = 0.10
    health_score: float = 0.20
    retention: float = 0.15
    engagement: float = 0.10
    conversion: float = 0.05

    @property
    def total(self) -> float:
        return sum(getattr(self, f.name) for f in fields(self))

    def validate(self) -> "ScoreWeights":
        total = self.total
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise InvalidWeightsError(total)
        return self

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreWeights":
        known = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in data.items() if k in known}).validate()


DEFAULT_WEIGHTS = ScoreWeights()


@dataclass
class LeaderboardConfig:
    """Display defaults and scoring knobs for the leaderboard."""

    # Default board view
    sort_metric: str = "overall"
    sort_direction: str = "desc"
    status_filter: str = "all"
    display_limit: int = 10

    # Outbound interactions newer than this count toward engagement
    engagement_window_days: int = 30

    # JSON snapshot of the back-office collections
    data_path: Optional[str] = None

    weights: ScoreWeights = field(default_factory=ScoreWeights)

    updated_at: datetime = field(default_factory=datetime.now)


def default_config_path() -> Path:
    """Config location, overridable through AGENCY_LEADERBOARD_CONFIG."""
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".agency-leaderboard" / "config.json"


class LeaderboardConfigManager:
    """Manage and persist leaderboard configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager."""
        self.config_path = Path(config_path) if config_path else default_config_path()
        self.config = self._load_config()

    def _load_config(self) -> LeaderboardConfig:
        """Load configuration from file."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                    return LeaderboardConfig(
                        sort_metric=data.get("sort_metric", "overall"),
                        sort_direction=data.get("sort_direction", "desc"),
                        status_filter=data.get("status_filter", "all"),
                        display_limit=int(data.get("display_limit", 10)),
                        engagement_window_days=int(data.get("engagement_window_days", 30)),
                        data_path=data.get("data_path"),
                        weights=ScoreWeights.from_dict(data.get("weights", {})),
                        updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else datetime.now(),
                    )
            except Exception as e:
                logger.error(f"Error loading leaderboard config: {e}")

        return LeaderboardConfig()

    def save_config(self):
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config.updated_at = datetime.now()
        data = {
            "sort_metric": self.config.sort_metric,
            "sort_direction": self.config.sort_direction,
            "status_filter": self.config.status_filter,
            "display_limit": self.config.display_limit,
            "engagement_window_days": self.config.engagement_window_days,
            "data_path": self.config.data_path,
            "weights": self.config.weights.to_dict(),
            "updated_at": self.config.updated_at.isoformat(),
        }
        with open(self.config_path, 'w') as f:
            json.dump(data, f, indent=2)

    def update(self, **changes) -> LeaderboardConfig:
        """Apply changes to the config and persist them."""
        for key, value in changes.items():
            if not hasattr(self.config, key):
                raise KeyError(f"Unknown config setting: {key}")
            setattr(self.config, key, value)
        self.save_config()
        logger.info(f"Leaderboard config updated: {', '.join(changes)}")
        return self.config

    def set_weights(self, weights: ScoreWeights) -> LeaderboardConfig:
        """Replace the overall-score weights after validating them."""
        return self.update(weights=weights.validate())

    def reset(self) -> LeaderboardConfig:
        """Restore defaults."""
        self.config = LeaderboardConfig()
        self.save_config()
        return self.config
