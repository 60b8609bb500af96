"""Orchestrator module."""
from .processor import StatementImporter, ImportResult, ImportStatus

__all__ = ["StatementImporter", "ImportResult", "ImportStatus"]
