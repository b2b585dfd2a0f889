"""Source CSV ingestion.

This package reads the wide quarterly disease CSV, resolves its period
header, and synthesizes normalized per-quarter disease records.
"""
