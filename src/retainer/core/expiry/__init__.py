"""Expiration: computing the deletable subset of a backup listing."""

from retainer.core.expiry.engine import evaluate, expire, is_age_eligible, validate_threshold
from retainer.core.expiry.filter import ExpiryFilter, resolve_scope

__all__ = [
    "ExpiryFilter",
    "evaluate",
    "expire",
    "is_age_eligible",
    "resolve_scope",
    "validate_threshold",
]
