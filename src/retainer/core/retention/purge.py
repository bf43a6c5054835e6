# src/retainer/core/retention/purge.py
"""Purge manager: carries out a computed delete list against a store.

The expiration engine only decides; this module acts. Each file is handled
independently so one failed deletion does not stop the rest, and every
failure is recorded in the result for the caller to report.
"""

from dataclasses import dataclass, field
from time import perf_counter

from retainer.contracts.errors import StoreOperationError
from retainer.core.logging import get_logger
from retainer.transport.protocols import RemoteStore

logger = get_logger(__name__)


@dataclass
class PurgeResult:
    """Result of a purge operation."""

    deleted_count: int
    truncated_count: int
    skipped_count: int  # Files already gone from the store
    failed_names: list[str]  # Files that existed but could not be removed
    duration_seconds: float
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed_names


class PurgeManager:
    """Deletes expired backup files from a RemoteStore."""

    def __init__(self, store: RemoteStore) -> None:
        """Initialize PurgeManager.

        Args:
            store: Open store the names were listed from
        """
        self._store = store

    def purge_files(self, names: list[str], *, truncate_first: bool = False) -> PurgeResult:
        """Delete each file, optionally emptying it first.

        Truncating before deleting frees quota immediately on stores that
        keep deleted files in a trash area.

        Args:
            names: Files to delete, in deletion order
            truncate_first: Empty each file before deleting it

        Returns:
            PurgeResult. skipped_count counts files that no longer existed;
            failed_names lists files that existed but could not be removed.
        """
        start_time = perf_counter()

        deleted_count = 0
        truncated_count = 0
        skipped_count = 0
        failed_names: list[str] = []
        errors: dict[str, str] = {}

        for name in names:
            try:
                if not self._store.exists(name):
                    skipped_count += 1
                    logger.info("purge_skipped", name=name, reason="not_found")
                    continue
                if truncate_first:
                    self._store.truncate(name)
                    truncated_count += 1
                self._store.delete(name)
            except StoreOperationError as e:
                failed_names.append(name)
                errors[name] = str(e)
                logger.error("purge_failed", name=name, error=str(e))
                continue

            deleted_count += 1
            logger.info("purge_deleted", name=name, truncated=truncate_first)

        duration_seconds = perf_counter() - start_time
        logger.info(
            "purge_completed",
            deleted=deleted_count,
            skipped=skipped_count,
            failed=len(failed_names),
            duration_seconds=round(duration_seconds, 3),
        )

        return PurgeResult(
            deleted_count=deleted_count,
            truncated_count=truncated_count,
            skipped_count=skipped_count,
            failed_names=failed_names,
            duration_seconds=duration_seconds,
            errors=errors,
        )
