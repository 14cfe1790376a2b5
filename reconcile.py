"""Merges a broadcast outcome back into the per-row summary."""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from messages import EntryStatus, SummaryEntry


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BroadcastOutcome:
    success: bool
    tx_hash: Optional[str] = None
    raw_log: Optional[str] = None

    @classmethod
    def failed(cls, raw_log: str) -> "BroadcastOutcome":
        return cls(success=False, raw_log=raw_log)


def reconcile(summary: Sequence[SummaryEntry], outcome: BroadcastOutcome) -> List[SummaryEntry]:
    """
    Return a new summary with every READY entry resolved against the outcome.

    On success READY entries become SENT and carry the tx hash; on failure they
    become FAILED. Any other entry is returned as the same object, so applying
    this twice is a no-op.
    """
    if outcome.success:
        resolved = {"status": EntryStatus.SENT, "tx_hash": outcome.tx_hash}
    else:
        resolved = {"status": EntryStatus.FAILED}

    reconciled: List[SummaryEntry] = []
    touched = 0
    for entry in summary:
        if entry.status is EntryStatus.READY:
            reconciled.append(dataclasses.replace(entry, **resolved))
            touched += 1
        else:
            reconciled.append(entry)

    logger.debug("Reconciled %d ready entr%s as %s.", touched, "y" if touched == 1 else "ies", resolved["status"].value)
    return reconciled
