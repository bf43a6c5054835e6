# src/retainer/core/retention/__init__.py
"""Retention execution for backup stores.

Provides PurgeManager for deleting the files the expiration engine
selected.
"""

from retainer.core.retention.purge import PurgeManager, PurgeResult

__all__ = ["PurgeManager", "PurgeResult"]
