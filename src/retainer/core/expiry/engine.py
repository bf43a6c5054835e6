# src/retainer/core/expiry/engine.py
"""Expiration engine: age eligibility combined with dependency protection.

A record is deletable only when it is old enough AND nothing that must be
kept depends on it. Protection flows from dependents to parents, so each
forest is walked leaves first:

    protected(r) = not age_eligible(r) or any(protected(d) for d in dependents(r))
    deletable(r) = age_eligible(r) and not protected(r)

Every ancestor of a kept backup is therefore kept too, which is why full
backups routinely outlive the retention window: they stay until the last
incremental built on them expires.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta

from retainer.contracts.enums import VerdictReason
from retainer.contracts.errors import InvalidThresholdError
from retainer.contracts.records import BackupRecord, ExpirationVerdict
from retainer.core.chains.forest import DependencyForest


def validate_threshold(max_age_days: int) -> None:
    """Reject negative age thresholds.

    Raises:
        InvalidThresholdError: If max_age_days < 0.
    """
    if max_age_days < 0:
        raise InvalidThresholdError(max_age_days)


def is_age_eligible(record: BackupRecord, now: datetime, threshold: timedelta) -> bool:
    """True when the record is at least ``threshold`` old (boundary inclusive)."""
    return now - record.timestamp >= threshold


def _evaluate_forest(
    forest: DependencyForest,
    threshold: timedelta,
    now: datetime,
) -> dict[str, ExpirationVerdict]:
    protected: dict[str, bool] = {}
    verdicts: dict[str, ExpirationVerdict] = {}

    for raw_name in forest.leaves_first():
        eligible = is_age_eligible(forest.record(raw_name), now, threshold)
        # leaves_first() guarantees every dependent was visited already
        needed_by_kept = any(protected[dependent] for dependent in forest.dependents_of(raw_name))
        protected[raw_name] = not eligible or needed_by_kept

        if not eligible:
            reason = VerdictReason.WITHIN_RETENTION
        elif needed_by_kept:
            reason = VerdictReason.PROTECTED_BY_DEPENDENT
        else:
            reason = VerdictReason.EXPIRED
        verdicts[raw_name] = ExpirationVerdict(raw_name, reason)

    return verdicts


def evaluate(
    forests: Mapping[str, DependencyForest],
    max_age_days: int,
    profile_filter: str | None = None,
    *,
    now: datetime,
) -> dict[str, ExpirationVerdict]:
    """Compute a verdict for every record in every forest.

    Args:
        forests: Dependency forests keyed by profile
        max_age_days: Minimum age, in days, for a backup to expire
        profile_filter: Restrict deletion to this profile; None means all
        now: Reference instant for age computation

    Returns:
        Verdict per raw name. Records of other profiles are OUT_OF_SCOPE.

    Raises:
        InvalidThresholdError: If max_age_days is negative.
    """
    validate_threshold(max_age_days)
    threshold = timedelta(days=max_age_days)

    verdicts: dict[str, ExpirationVerdict] = {}
    for profile, forest in forests.items():
        if profile_filter is not None and profile != profile_filter:
            for record in forest.records():
                verdicts[record.raw_name] = ExpirationVerdict(record.raw_name, VerdictReason.OUT_OF_SCOPE)
            continue
        verdicts.update(_evaluate_forest(forest, threshold, now))
    return verdicts


def expire(
    forests: Mapping[str, DependencyForest],
    max_age_days: int,
    profile_filter: str | None = None,
    *,
    now: datetime,
) -> list[str]:
    """Return the raw names that can be deleted, oldest first.

    Order is ascending by (timestamp, raw name) and therefore identical for
    identical input. An empty listing or an unmatched profile yields [].

    Raises:
        InvalidThresholdError: If max_age_days is negative.
    """
    verdicts = evaluate(forests, max_age_days, profile_filter, now=now)
    deletable: list[BackupRecord] = []
    for profile, forest in forests.items():
        if profile_filter is not None and profile != profile_filter:
            continue
        deletable.extend(record for record in forest.records() if verdicts[record.raw_name].deletable)
    deletable.sort(key=lambda r: r.sort_key)
    return [record.raw_name for record in deletable]
