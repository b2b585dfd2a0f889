"""Columnar store layer.

This package owns the ClickHouse diseases table schema, row
serialization, and the single-insert batch used to load a run.
"""
