"""Healthisis ETL exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class HealthisisError(Exception):
    """Base exception for all Healthisis ETL failures."""


class HealthisisConfigError(HealthisisError):
    """Raised for invalid runtime configuration."""


class HealthisisIngestError(HealthisisError):
    """Raised when a source CSV cannot be opened or read."""


class HealthisisStoreError(HealthisisError):
    """Raised for ClickHouse connection, schema, and batch failures."""


class HealthisisDependencyError(HealthisisError):
    """Raised when an optional runtime dependency is missing."""


class HealthisisPipelineError(HealthisisError):
    """Raised when an import run aborts on a fatal stage failure.

    Attributes:
        step: Name of the pipeline step that failed.
    """

    def __init__(self, step: str, message: str) -> None:
        super().__init__(f"Import failed at step '{step}': {message}")
        self.step = step
