"""
Retainer: dependency-aware expiration of backup archives on remote stores.

Decides which full/incremental backup archives are safe to delete without
breaking the restore chain of any archive still inside its retention window.
"""

__version__ = "0.3.0"
