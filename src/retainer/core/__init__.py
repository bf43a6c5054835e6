# src/retainer/core/__init__.py
"""Core infrastructure: naming, chains, expiry, retention, configuration, logging."""

from retainer.core.chains import ChainWarning, DependencyForest, build_forests
from retainer.core.clock import DEFAULT_CLOCK, Clock, MockClock, SystemClock
from retainer.core.config import (
    ExecutionSettings,
    ExpirySettings,
    RemoteSettings,
    RetainerSettings,
    load_settings,
)
from retainer.core.expiry import ExpiryFilter, evaluate, expire
from retainer.core.logging import configure_logging, get_logger
from retainer.core.naming import DashedNameGrammar, DuplicityNameGrammar, get_grammar

__all__ = [
    "DEFAULT_CLOCK",
    "ChainWarning",
    "Clock",
    "DashedNameGrammar",
    "DependencyForest",
    "DuplicityNameGrammar",
    "ExecutionSettings",
    "ExpiryFilter",
    "ExpirySettings",
    "MockClock",
    "RemoteSettings",
    "RetainerSettings",
    "SystemClock",
    "build_forests",
    "configure_logging",
    "evaluate",
    "expire",
    "get_grammar",
    "get_logger",
    "load_settings",
]
