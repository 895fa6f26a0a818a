"""Tests for the lazily connected, shared database handle."""
import asyncio

import pytest
from sqlalchemy import text

from notekeeper.config.database import Database
from notekeeper.exceptions import DatabaseUnavailable


def sqlite_url(tmp_path, name="notes.db"):
    return f"sqlite+aiosqlite:///{tmp_path / name}"


@pytest.mark.anyio
async def test_not_connected_until_first_use(tmp_path):
    db = Database(sqlite_url(tmp_path))
    assert not db.is_connected

    engine = await db.acquire()
    assert db.is_connected
    assert await db.acquire() is engine
    await db.dispose()
    assert not db.is_connected


@pytest.mark.anyio
async def test_concurrent_callers_share_one_attempt(tmp_path):
    db = Database(sqlite_url(tmp_path))
    real_connect = db._connect
    attempts = []

    async def slow_connect():
        attempts.append(1)
        await asyncio.sleep(0.01)
        return await real_connect()

    db._connect = slow_connect

    engines = await asyncio.gather(*(db.acquire() for _ in range(5)))

    assert len(attempts) == 1
    assert all(engine is engines[0] for engine in engines)
    await db.dispose()


@pytest.mark.anyio
async def test_failed_attempt_is_retried_on_next_call(tmp_path):
    db = Database(sqlite_url(tmp_path))
    real_connect = db._connect
    attempts = []

    async def flaky_connect():
        attempts.append(1)
        if len(attempts) == 1:
            raise OSError("connection refused")
        return await real_connect()

    db._connect = flaky_connect

    with pytest.raises(DatabaseUnavailable) as exc_info:
        await db.acquire()
    assert exc_info.value.status_code == 503
    assert exc_info.value.error_code == "CONNECTION_FAILED"
    assert not db.is_connected

    await db.acquire()
    assert db.is_connected
    assert len(attempts) == 2
    await db.dispose()


@pytest.mark.anyio
async def test_failed_attempt_is_forgotten_before_waiters_resume(tmp_path):
    db = Database(sqlite_url(tmp_path))
    real_connect = db._connect
    release = asyncio.Event()
    attempts = []

    async def connect():
        attempts.append(1)
        if len(attempts) == 1:
            await release.wait()
            raise OSError("connection refused")
        return await real_connect()

    db._connect = connect

    waiter = asyncio.ensure_future(db.acquire())
    await asyncio.sleep(0)
    failed = db._pending
    release.set()
    with pytest.raises(OSError):
        await failed

    # The first waiter has not resumed yet; a new caller still gets a fresh attempt
    assert db._pending is None
    await db.acquire()
    assert len(attempts) == 2
    assert db.is_connected

    with pytest.raises(DatabaseUnavailable):
        await waiter
    await db.dispose()


@pytest.mark.anyio
async def test_concurrent_callers_all_see_the_same_failure(tmp_path):
    db = Database(sqlite_url(tmp_path))
    attempts = []

    async def failing_connect():
        attempts.append(1)
        await asyncio.sleep(0.01)
        raise OSError("connection refused")

    db._connect = failing_connect

    results = await asyncio.gather(*(db.acquire() for _ in range(3)), return_exceptions=True)

    assert len(attempts) == 1
    assert all(isinstance(result, DatabaseUnavailable) for result in results)


@pytest.mark.anyio
async def test_unreachable_database_reports_unavailable(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'notes.db'}")

    assert await db.ping() is False
    with pytest.raises(DatabaseUnavailable):
        await db.acquire()


@pytest.mark.anyio
async def test_create_all_and_session(database):
    async with database.session() as session:
        result = await session.execute(text("SELECT count(*) FROM notes"))
        assert result.scalar() == 0
    assert await database.ping() is True
