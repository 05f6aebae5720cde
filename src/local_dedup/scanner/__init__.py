"""Filesystem traversal and candidate filtering."""
