"""Non-human players."""
from .base import Agent, Observation
from .heuristic import HeuristicAgent, RiskProfile, PROFILES, get_profile

__all__ = [
    "Agent",
    "Observation",
    "HeuristicAgent",
    "RiskProfile",
    "PROFILES",
    "get_profile",
]
