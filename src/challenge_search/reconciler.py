"""
Bulk reconciliation against the authoritative record set.

Every id in the raw data hash that the record store no longer knows is
removed, then every current record is upserted. This is a full rebuild,
not a diff, and it is what repairs partially applied writes.

Every log line emitted during one pass carries the same `reconcile_run`
id.
"""

import uuid
from typing import Iterable

from core.logging import bind_context, get_logger, unbind_context
from challenge_search.models import Challenge, ReconcileResult
from challenge_search.writer import IndexWriter

logger = get_logger(__name__)


class BulkReconciler:
    """Resyncs the index with the full list of challenges."""

    def __init__(self, writer: IndexWriter):
        self.writer = writer

    def stale_ids(self, challenges: Iterable[Challenge]) -> list:
        current = {c.challenge_id for c in challenges}
        return sorted(set(self.writer.indexed_ids()) - current)

    def reconcile(self, challenges: Iterable[Challenge]) -> ReconcileResult:
        challenges = list(challenges)
        bind_context(reconcile_run=uuid.uuid4().hex[:12])
        try:
            stale = self.stale_ids(challenges)
            logger.info("Reconciling search index", records=len(challenges), stale=len(stale))

            for record_id in stale:
                self.writer.remove(record_id)

            for challenge in challenges:
                self.writer.upsert(challenge)

            result = ReconcileResult(removed_ids=stale, upserted=len(challenges))
            logger.info("Reconciled search index", removed=len(result.removed_ids), upserted=result.upserted)
            return result
        finally:
            unbind_context("reconcile_run")
