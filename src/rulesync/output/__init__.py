"""Outcome reporters — rich terminal and JSON."""
