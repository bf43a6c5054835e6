# src/retainer/core/expiry/filter.py
"""ExpiryFilter: the stateful facade the CLI talks to.

Owns one parse -> build -> expire pipeline per call. set_files() replaces
the listing wholesale; nothing accumulates across calls. Verbosity changes
what gets logged, never what gets returned.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from retainer.contracts.enums import VerdictReason
from retainer.contracts.errors import AmbiguousScopeError, NoScopeSelectedError
from retainer.contracts.grammar import NameGrammar
from retainer.contracts.records import BackupRecord, ExpirationVerdict, Unrecognized
from retainer.core.chains.builder import build_forests
from retainer.core.chains.forest import DependencyForest
from retainer.core.clock import DEFAULT_CLOCK, Clock
from retainer.core.expiry.engine import evaluate, expire, validate_threshold
from retainer.core.logging import get_logger
from retainer.core.naming.registry import get_grammar

logger = get_logger(__name__)

# Directory markers some listings include
_LISTING_MARKERS = frozenset({"", ".", ".."})


@dataclass(frozen=True, slots=True)
class _ParsedListing:
    records: tuple[BackupRecord, ...]
    unrecognized: tuple[Unrecognized, ...]


def resolve_scope(profile: str | None, all_profiles: bool) -> str | None:
    """Turn the (profile, all_profiles) request into a profile filter.

    Returns:
        The profile name, or None for all profiles.

    Raises:
        NoScopeSelectedError: If neither was requested.
        AmbiguousScopeError: If both were requested.
    """
    if profile is not None and all_profiles:
        raise AmbiguousScopeError(profile)
    if profile is None and not all_profiles:
        raise NoScopeSelectedError()
    return profile


class ExpiryFilter:
    """Decides which files of a listing may be deleted.

    Example:
        expiry = ExpiryFilter()
        expiry.set_files(store.list_names())
        doomed = expiry.expire(30, profile="home")
    """

    def __init__(
        self,
        grammar: NameGrammar | None = None,
        *,
        clock: Clock | None = None,
        verbose: bool = False,
    ) -> None:
        """Initialize the filter with an empty listing.

        Args:
            grammar: Filename grammar (default: the dashed grammar)
            clock: Source of "now" (default: system clock)
            verbose: Log per-file diagnostics
        """
        self._grammar = grammar if grammar is not None else get_grammar()
        self._clock = clock if clock is not None else DEFAULT_CLOCK
        self._verbose = verbose
        self._files: tuple[str, ...] = ()

    @property
    def files(self) -> tuple[str, ...]:
        return self._files

    @property
    def verbose(self) -> bool:
        return self._verbose

    def set_files(self, filenames: Iterable[str]) -> None:
        """Replace the current listing."""
        self._files = tuple(name for name in filenames if name not in _LISTING_MARKERS)

    def set_verbose(self, verbose: bool) -> None:
        self._verbose = verbose

    def expire(
        self,
        max_age_days: int,
        profile: str | None = None,
        *,
        all_profiles: bool = False,
    ) -> list[str]:
        """Return the deletable filenames of the current listing, oldest first.

        Args:
            max_age_days: Minimum age, in days, for a backup to expire
            profile: Only consider this profile
            all_profiles: Consider every profile (mutually exclusive with profile)

        Raises:
            NoScopeSelectedError: Neither profile nor all_profiles given.
            AmbiguousScopeError: Both given.
            InvalidThresholdError: max_age_days is negative.
        """
        profile_filter = resolve_scope(profile, all_profiles)
        validate_threshold(max_age_days)

        forests = self._build(self._parse())
        now = self._clock.now()
        deletable = expire(forests, max_age_days, profile_filter, now=now)
        if self._verbose:
            self._report(evaluate(forests, max_age_days, profile_filter, now=now))
            logger.info(
                "expiry_computed",
                files=len(self._files),
                deletable=len(deletable),
                max_age_days=max_age_days,
                profile=profile_filter or "*",
            )
        return deletable

    def verdicts(
        self,
        max_age_days: int,
        profile: str | None = None,
        *,
        all_profiles: bool = False,
    ) -> list[ExpirationVerdict]:
        """Return a verdict for every listed file, including unrecognized ones.

        Ordered like the listing. Raises the same errors as expire().
        """
        profile_filter = resolve_scope(profile, all_profiles)
        validate_threshold(max_age_days)

        parsed = self._parse()
        forests = self._build(parsed)
        by_name = evaluate(forests, max_age_days, profile_filter, now=self._clock.now())
        for item in parsed.unrecognized:
            by_name[item.raw_name] = ExpirationVerdict(item.raw_name, VerdictReason.UNRECOGNIZED)
        if self._verbose:
            self._report(by_name)

        ordered: list[ExpirationVerdict] = []
        emitted: set[str] = set()
        for name in self._files:
            if name not in emitted:
                emitted.add(name)
                ordered.append(by_name[name])
        return ordered

    def _parse(self) -> _ParsedListing:
        records: list[BackupRecord] = []
        unrecognized: list[Unrecognized] = []
        for name in self._files:
            result = self._grammar.parse(name)
            if isinstance(result, Unrecognized):
                unrecognized.append(result)
                if self._verbose:
                    logger.info("unrecognized_filename", name=name, reason=result.reason, grammar=self._grammar.name)
            else:
                records.append(result)
        return _ParsedListing(tuple(records), tuple(unrecognized))

    def _build(self, parsed: _ParsedListing) -> dict[str, DependencyForest]:
        forests = build_forests(parsed.records)
        if self._verbose:
            for forest in forests.values():
                for warning in forest.warnings:
                    logger.warning(
                        "chain_warning",
                        profile=forest.profile,
                        code=warning.code,
                        detail=warning.message,
                    )
        return forests

    def _report(self, verdicts: dict[str, ExpirationVerdict]) -> None:
        for raw_name in sorted(verdicts):
            verdict = verdicts[raw_name]
            logger.debug("verdict", name=raw_name, reason=verdict.reason.value, deletable=verdict.deletable)
