from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import pytest

from postbot.database import create_engine, create_session_factory, init_db

# Fixed offset keeps day-boundary tests independent of the host zone
TZ = timezone(timedelta(hours=3))


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def store(tmp_path):
    """Async context manager yielding a session factory over a fresh SQLite file."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'postbot.db'}"

    @asynccontextmanager
    async def _open():
        engine = create_engine(url)
        await init_db(engine)
        try:
            yield create_session_factory(engine)
        finally:
            await engine.dispose()

    return _open


@pytest.fixture()
def clock():
    return FakeClock(datetime(2026, 10, 17, 12, 0, tzinfo=TZ))
