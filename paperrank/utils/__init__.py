"""Shared helpers: exception hierarchy and score arithmetic."""
