"""Plugin registry and tool-call dispatch host for a live AI agent."""

__version__ = "0.3.0"
