"""Event ledger: per-user notes with day-scoped list, count and delete."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone, tzinfo

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from postbot.database import open_session
from postbot.models.event import Event

logger = logging.getLogger(__name__)


def day_bounds(reference: datetime, tz: tzinfo | None) -> tuple[datetime, datetime]:
    """Inclusive [00:00:00.000, 23:59:59.999] window of the reference's day in tz.

    tz=None is the host process's zone, looked up for each bound so DST
    changes are followed. A naive reference is read as wall time in the zone.
    """
    if tz is None:
        local = reference.astimezone()
        start = local.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None).astimezone()
        end = local.replace(hour=23, minute=59, second=59, microsecond=999_000, tzinfo=None).astimezone()
        return start, end

    if reference.tzinfo is None:
        local = reference.replace(tzinfo=tz)
    else:
        local = reference.astimezone(tz)
    start = local.replace(hour=0, minute=0, second=0, microsecond=0)
    end = local.replace(hour=23, minute=59, second=59, microsecond=999_000)
    return start, end


def _local_now(tz: tzinfo | None) -> datetime:
    if tz is None:
        return datetime.now().astimezone()
    return datetime.now(tz)


class EventLedger:

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._session_factory = session_factory
        self.tz = tz
        self._clock = clock or (lambda: _local_now(tz))

    def now(self) -> datetime:
        return self._clock()

    def _day_filter(self, owner_id: int, day: datetime | None):
        # Bounds are never cached
        start, end = day_bounds(day or self.now(), self.tz)
        return (
            Event.telegram_id == owner_id,
            Event.created_at >= start.astimezone(timezone.utc),
            Event.created_at <= end.astimezone(timezone.utc),
        )

    async def record(self, owner_id: int, text: str) -> Event:
        created_at = self.now()
        if created_at.tzinfo is None and self.tz is not None:
            created_at = created_at.replace(tzinfo=self.tz)
        event = Event(
            telegram_id=owner_id,
            text=text,
            created_at=created_at.astimezone(timezone.utc),
        )
        async with open_session(self._session_factory) as session:
            session.add(event)
            await session.commit()
        logger.info("Event %s recorded for user %s", event.id, owner_id)
        return event

    async def list_for_day(self, owner_id: int, day: datetime | None = None) -> list[Event]:
        async with open_session(self._session_factory) as session:
            rows = await session.execute(
                select(Event)
                .where(*self._day_filter(owner_id, day))
                .order_by(Event.id)
            )
            return list(rows.scalars().all())

    async def count_for_day(self, owner_id: int, day: datetime | None = None) -> int:
        async with open_session(self._session_factory) as session:
            return await session.scalar(
                select(func.count(Event.id)).where(*self._day_filter(owner_id, day))
            ) or 0

    async def delete_for_day(self, owner_id: int, day: datetime | None = None) -> int:
        async with open_session(self._session_factory) as session:
            result = await session.execute(
                delete(Event).where(*self._day_filter(owner_id, day))
            )
            await session.commit()
            deleted = result.rowcount
        logger.info("Deleted %d event(s) for user %s", deleted, owner_id)
        return deleted
