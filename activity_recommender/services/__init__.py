"""Collaborator abstractions: stores, cache, and in-memory implementations."""

from .cache import Cache, InMemoryCache
from .memory import (
    InMemoryCandidateStore,
    InMemoryDataset,
    InMemoryEventLog,
    InMemorySocialGraph,
    InMemoryUserStore,
)
from .stores import CandidateStore, EventLog, SocialGraph, UserStore

__all__ = [
    "Cache",
    "CandidateStore",
    "EventLog",
    "InMemoryCache",
    "InMemoryCandidateStore",
    "InMemoryDataset",
    "InMemoryEventLog",
    "InMemorySocialGraph",
    "InMemoryUserStore",
    "SocialGraph",
    "UserStore",
]
