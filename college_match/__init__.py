"""Deterministic scoring and matching for college, scholarship and aid planning."""

__version__ = "0.1.0"
