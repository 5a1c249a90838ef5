"""Stoppa: rules engine and heuristic opponents for the Italian betting card game."""

__version__ = "0.1.0"
