"""Leak sweeper: the final verified-removal pass over bitstreams.

Deleting a bitstream only sets its `deleted` flag, so after teardown the
records (and their bytes) are still there. The sweeper enumerates every
bitstream the persistence layer knows about, not only the ones tracked
builders created, and expunges them in one transaction.

A record that is still live at this point was created by something that
never deleted it. In strict mode this fails the run with `LeakDetectedError`
(after purging it, so the next run starts clean).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from repobuilder.domain.errors import DomainError
from repobuilder.interfaces.assetstore import AssetStoreError

from .errors import LeakDetectedError, LeakSweepError

if TYPE_CHECKING:
    from repobuilder.interfaces.session import AbstractSession

    from .locator import ServiceHandles, ServiceLocator

logger = logging.getLogger(__name__)

STORAGE_ERRORS = (DomainError, AssetStoreError, OSError, SQLAlchemyError)


@dataclass(frozen=True)
class SweepReport:
    """What a sweep purged.

    Attributes:
        purged: Ids of every expunged bitstream.
        undeleted: The subset of `purged` that had never been deleted.
    """

    purged: tuple[str, ...] = field(default_factory=tuple)
    undeleted: tuple[str, ...] = field(default_factory=tuple)

    @property
    def clean(self) -> bool:
        """True if there was nothing to purge."""
        return not self.purged


class LeakSweeper:
    """Force-purges every bitstream left in storage.

    Args:
        locator: Service locator of the current run.
        strict: Raise `LeakDetectedError` when live (never deleted)
            bitstreams are found. When False they are purged with a warning.
    """

    def __init__(self, locator: ServiceLocator, *, strict: bool = True) -> None:
        self.locator = locator
        self.strict = strict

    def sweep(self) -> SweepReport:
        """Expunge every bitstream record and its bytes, then commit.

        Bytes are removed only after the records' deletion has committed, so
        a sweep that fails part-way leaves both records and bytes in place.
        If removing bytes fails after the commit, the records stay purged and
        the failure is still raised.

        Raises:
            LeakSweepError: If bitstreams cannot be enumerated or purged,
                including database errors. The sweep's session is rolled back.
            LeakDetectedError: In strict mode, if live bitstreams were found.
        """
        handles = self.locator.handles
        purged: list[str] = []
        undeleted: list[str] = []

        try:
            with handles.new_session() as session:
                try:
                    found = handles.bitstreams.find_all(session)
                except STORAGE_ERRORS as e:
                    raise LeakSweepError(f"cannot enumerate bitstreams: {e}") from e

                with session.authorization_bypassed():
                    for bitstream in found:
                        was_live = self._expunge(handles, session, bitstream.id)
                        if was_live is None:
                            continue
                        purged.append(bitstream.id)
                        if was_live:
                            undeleted.append(bitstream.id)
                session.commit()
        except STORAGE_ERRORS as e:
            raise LeakSweepError(f"leak sweep failed: {e}") from e

        report = SweepReport(purged=tuple(purged), undeleted=tuple(undeleted))
        if report.purged:
            logger.info("Expunged %d leftover bitstream(s)", len(report.purged))
        if report.undeleted:
            if self.strict:
                raise LeakDetectedError(report.undeleted)
            logger.warning(
                "Purged %d bitstream(s) that were never deleted: %s",
                len(report.undeleted),
                ", ".join(report.undeleted),
            )
        return report

    @staticmethod
    def _expunge(
        handles: ServiceHandles, session: AbstractSession, bitstream_id: str
    ) -> bool | None:
        """Reload and expunge one bitstream.

        Returns:
            None if the record vanished in the meantime, otherwise whether it
            was still live (not soft-deleted) when found.
        """
        service = handles.bitstreams
        try:
            current = service.find(session, bitstream_id)
            if current is None:
                return None
            was_live = not current.deleted
            if was_live:
                service.delete(session, current)
                current = service.find(session, bitstream_id) or current
            service.expunge(session, current)
        except STORAGE_ERRORS as e:
            raise LeakSweepError(f"cannot purge bitstream {bitstream_id}: {e}") from e
        logger.debug("Expunged bitstream %s", bitstream_id)
        return was_live
