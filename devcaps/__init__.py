"""Capability request dispatch and event emission for connected devices."""

__version__ = "0.1.0"
