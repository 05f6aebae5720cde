"""Hashing, grouping and aggregation of duplicate candidates."""
