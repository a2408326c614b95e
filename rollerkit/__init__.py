"""Helpers for configuring and operating RollApp nodes and their services."""

__version__ = "0.1.0"