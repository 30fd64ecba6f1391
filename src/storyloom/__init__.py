"""Narrative graph runtime: paced story stepping, hub exclusion and graph preview."""

__version__ = "0.1.0"
