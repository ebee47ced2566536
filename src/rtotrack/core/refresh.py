"""Periodic status refresh for all records."""

import logging
import time
from datetime import date, datetime
from typing import Iterable, Optional

from rtotrack.core.status import classify_string
from rtotrack.exceptions import InvalidDateFormatError
from rtotrack.kinds import list_kinds
from rtotrack.models import AppConfig, RefreshSummary, StatusType
from rtotrack.storage import Database, RecordRepository
from rtotrack.storage.repository import StatusChange, StatusSnapshot

logger = logging.getLogger(__name__)


class StatusRefreshJob:
    """Recomputes cached statuses and writes back only the stale ones.

    The job holds no state between runs and writes nothing but the status
    column, so it can overlap with renewals and be re-run at any time.
    Storage errors propagate to the caller; the scheduler logs them and
    the next run picks up where this one stopped.
    """

    def __init__(self, database: Database, config: Optional[AppConfig] = None) -> None:
        self.database = database
        self.config = config or AppConfig()

    def run(
        self,
        reference_date: Optional[date | datetime] = None,
        kinds: Optional[Iterable[str]] = None,
    ) -> RefreshSummary:
        """Refresh statuses for the given kinds (default: all).

        Args:
            reference_date: "Today" for classification; defaults to now
            kinds: Kind names to refresh

        Returns:
            Summary of scanned, updated and unchanged records
        """
        reference = reference_date or datetime.now()
        started = time.monotonic()
        summary = RefreshSummary()

        for kind in list_kinds() if kinds is None else kinds:
            summary = summary.merge(self._refresh_kind(kind, reference))

        summary = summary.model_copy(
            update={"duration_ms": int((time.monotonic() - started) * 1000)}
        )
        logger.info(
            "Status refresh done in %dms: scanned=%d updated=%d skipped=%d unparseable=%d",
            summary.duration_ms,
            summary.total_scanned,
            summary.updated_count,
            summary.skipped_count,
            summary.unparseable_count,
        )
        return summary

    def _refresh_kind(self, kind: str, reference: date | datetime) -> RefreshSummary:
        policy = self.config.policy_for(kind)

        with self.database.session() as session:
            snapshots = RecordRepository(session).status_snapshots(policy.name)

        if not snapshots:
            logger.debug("No %s records to refresh", policy.name)
            return RefreshSummary()

        changes: list[StatusChange] = []
        unparseable = 0
        for snap in snapshots:
            target, parsed = self._target_status(snap, reference, policy.refresh_window_days)
            if not parsed:
                unparseable += 1
            if target.value != snap.status:
                changes.append(StatusChange(snap.id, snap.status, snap.is_renewed, target.value))

        updated = 0
        batch_size = self.config.refresh_batch_size
        for start in range(0, len(changes), batch_size):
            batch = changes[start:start + batch_size]
            with self.database.transaction() as session:
                written = RecordRepository(session).apply_status_changes(batch)
            if written != len(batch):
                logger.debug(
                    "%s: %d of %d status writes matched (rows changed concurrently)",
                    policy.name,
                    written,
                    len(batch),
                )
            updated += written

        logger.debug(
            "%s: scanned=%d queued=%d updated=%d window=%dd",
            policy.name,
            len(snapshots),
            len(changes),
            updated,
            policy.refresh_window_days,
        )
        return RefreshSummary(
            total_scanned=len(snapshots),
            updated_count=updated,
            skipped_count=len(snapshots) - len(changes),
            unparseable_count=unparseable,
            by_kind={policy.name: updated} if updated else {},
        )

    @staticmethod
    def _target_status(
        snap: StatusSnapshot,
        reference: date | datetime,
        window_days: int,
    ) -> tuple[StatusType, bool]:
        """Status a row should have, and whether its valid_to parsed.

        Renewed rows are pinned to expired: retirement is authoritative.
        Rows with an unreadable valid_to are treated as expired.
        """
        if snap.is_renewed:
            return StatusType.EXPIRED, True
        try:
            return classify_string(snap.valid_to, reference, window_days), True
        except InvalidDateFormatError:
            logger.warning("Record %s has unparseable valid_to %r", snap.id, snap.valid_to)
            return StatusType.EXPIRED, False
