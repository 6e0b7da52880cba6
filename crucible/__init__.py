"""Declarative workstation state: declarations, templates and progress display."""

__version__ = "0.1.0"