"""Counselor-facing status, cohort statistics and display formatting."""
