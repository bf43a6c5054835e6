"""Dependency chains: which backups each backup needs in order to restore."""

from retainer.core.chains.builder import build_forests
from retainer.core.chains.forest import DependencyForest
from retainer.core.chains.models import DANGLING_PARENT, ORPHAN_INCREMENTAL, ChainWarning

__all__ = [
    "DANGLING_PARENT",
    "ORPHAN_INCREMENTAL",
    "ChainWarning",
    "DependencyForest",
    "build_forests",
]
