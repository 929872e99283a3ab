"""Deterministic, budget-aware architecture maps for source repositories."""

__version__ = "0.1.0"
