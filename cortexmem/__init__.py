"""Persistent, searchable memory for AI coding agents: tagging, deduplication, tiers, search and sync."""

__version__ = "1.4.0"