"""Snapshot storage for leaderboard input collections."""

from .store import COLLECTIONS, EntitySnapshot, EntityStore

__all__ = ["COLLECTIONS", "EntitySnapshot", "EntityStore"]
