"""Persisted task-list preferences and a reactive task view."""

__version__ = "0.1.0"
