"""Squash tournament tracking: scheduling, score entry and pool standings."""

__version__ = "0.1.0"
