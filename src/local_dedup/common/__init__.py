"""Shared helpers: constants, exceptions and logging."""
