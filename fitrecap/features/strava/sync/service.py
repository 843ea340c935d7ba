"""
Strava sync orchestration.

Full resync of one user:
1. Fetch the complete activity history (ActivityFetcher)
2. Load the Strava IDs already stored for the user
3. Map each payload to a record and classify it as insert or update
4. Write the operations in chunks of BULK_WRITE_BATCH_SIZE

Writes are unordered: a failing operation does not stop the others in
its chunk. Each chunk is tried as one bulk round-trip inside a savepoint;
if that fails the chunk is replayed one operation per savepoint.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from pydantic import ValidationError
from sqlalchemy import bindparam, insert, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fitrecap.features.activities import Activity, ActivityRepository
from fitrecap.features.users import User
from ..client import StravaClient
from ..tokens import TokenManager
from .config import SyncConfig
from .fetcher import ActivityFetcher
from .mapper import build_activity_record

logger = logging.getLogger(__name__)

_activities = Activity.__table__


class OperationKind(str, Enum):
    INSERT = "insert"
    UPDATE = "update"


@dataclass
class WriteOperation:
    """One pending insert or full-record update."""

    kind: OperationKind
    record: dict


@dataclass
class SyncResult:
    """Counts reported after a sync."""

    inserted: int = 0
    updated: int = 0
    total_fetched: int = 0
    failed: int = 0


def plan_operations(
    fetched: Iterable[dict],
    existing_ids: set[int],
    user_id: str
) -> list[WriteOperation]:
    """
    Classify fetched payloads into inserts and updates, in fetch order.

    An ID seen twice in one fetch is inserted once and then updated, so the
    later payload wins. Payloads that cannot be mapped are logged and left
    out.
    """
    known = set(existing_ids)
    operations = []
    for data in fetched:
        try:
            record = build_activity_record(data, user_id)
        except ValidationError as e:
            logger.error(f"Skipping unmappable activity {data.get('id')}: {e}")
            continue
        strava_id = record["strava_id"]
        if strava_id in known:
            operations.append(WriteOperation(OperationKind.UPDATE, record))
        else:
            operations.append(WriteOperation(OperationKind.INSERT, record))
            known.add(strava_id)
    return operations


class StravaSyncService:
    """
    Reconciles Strava activities with the local store.

    Usage:
        service = StravaSyncService(db)
        result = await service.sync(user)
    """

    def __init__(
        self,
        db: AsyncSession,
        client: Optional[StravaClient] = None,
        tokens: Optional[TokenManager] = None,
        fetcher: Optional[ActivityFetcher] = None,
        batch_size: int = SyncConfig.BULK_WRITE_BATCH_SIZE,
    ):
        self.db = db
        self.tokens = tokens or TokenManager(db)
        self.fetcher = fetcher or ActivityFetcher(client or StravaClient(), self.tokens)
        self.activities = ActivityRepository(db)
        self.batch_size = batch_size

    async def sync(self, user: User) -> SyncResult:
        """
        Bring the user's stored activities up to date with Strava.

        Fetch errors (auth, rate limit, network) propagate unchanged.
        """
        fetched = await self.fetcher.fetch_all_activities(user)
        if not fetched:
            logger.info(f"No activities returned for user {user.id}")
            return SyncResult()

        existing_ids = await self.activities.get_strava_ids(user.id)
        operations = plan_operations(fetched, existing_ids, user.id)

        failed: list[WriteOperation] = []
        for start in range(0, len(operations), self.batch_size):
            failed += await self._write_batch(operations[start:start + self.batch_size])

        await self.db.commit()

        unmapped = len(fetched) - len(operations)
        failed_ids = {id(op) for op in failed}
        written = [op for op in operations if id(op) not in failed_ids]
        inserted = sum(1 for op in written if op.kind is OperationKind.INSERT)
        result = SyncResult(
            inserted=inserted,
            updated=len(written) - inserted,
            total_fetched=len(fetched),
            failed=len(failed) + unmapped,
        )

        logger.info(
            f"Synced user {user.id}: fetched={result.total_fetched}, "
            f"inserted={result.inserted}, updated={result.updated}, "
            f"failed={result.failed}"
        )
        return result

    async def _write_batch(
        self,
        operations: list[WriteOperation]
    ) -> list[WriteOperation]:
        """Write one chunk. Returns the operations that failed."""
        try:
            async with self.db.begin_nested():
                await self._execute(operations)
            return []
        except SQLAlchemyError as e:
            logger.warning(
                f"Bulk write of {len(operations)} operations failed, "
                f"replaying individually: {e}"
            )

        failed = []
        for operation in operations:
            try:
                async with self.db.begin_nested():
                    await self._execute([operation])
            except SQLAlchemyError as e:
                failed.append(operation)
                logger.error(
                    f"Failed to {operation.kind.value} activity "
                    f"{operation.record['strava_id']}: {e}"
                )
        return failed

    async def _execute(self, operations: list[WriteOperation]) -> None:
        # Inserts go first so a later duplicate (planned as update) lands on top
        inserts = [op.record for op in operations if op.kind is OperationKind.INSERT]
        updates = [
            {"b_strava_id": op.record["strava_id"], **op.record}
            for op in operations if op.kind is OperationKind.UPDATE
        ]

        if inserts:
            await self.db.execute(insert(_activities), inserts)
        if updates:
            await self.db.execute(
                update(_activities).where(
                    _activities.c.strava_id == bindparam("b_strava_id")
                ),
                updates,
            )
