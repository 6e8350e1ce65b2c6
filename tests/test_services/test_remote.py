"""Tests for RemoteCommandRunner."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import asyncssh
import pytest

from yeehaw.models import LOCAL_HOST, HostDescriptor
from yeehaw.services.remote import (
    ConfigIncompleteError,
    RemoteCommandRunner,
    TransportError,
)


@pytest.fixture
def host() -> HostDescriptor:
    return HostDescriptor(
        name="devbox", host="10.0.0.5", user="dev", port=22, identity_file="/k/id"
    )


def make_conn(stdout="ok\n", stderr="", exit_status=0) -> MagicMock:
    conn = MagicMock()
    result = MagicMock(stdout=stdout, stderr=stderr, exit_status=exit_status)
    conn.run = AsyncMock(return_value=result)
    return conn


def make_pool(*conns, reused: bool = False) -> MagicMock:
    pool = MagicMock()
    pool.has_connection.return_value = reused
    pool.get_connection = AsyncMock(side_effect=list(conns))
    pool.remove_connection = AsyncMock()
    return pool


@pytest.mark.asyncio
async def test_run_returns_output(host) -> None:
    """Output and exit status are returned, non-zero included."""
    conn = make_conn(stdout=b"line\n", stderr="warn", exit_status=1)
    runner = RemoteCommandRunner(make_pool(conn))

    result = await runner.run(host, "ls", timeout=5)

    assert result.output == "line\n"
    assert result.error == "warn"
    assert result.returncode == 1
    conn.run.assert_awaited_once_with("ls", check=False)


@pytest.mark.asyncio
async def test_ineligible_host_raises(host) -> None:
    """Hosts without SSH fields are rejected before connecting."""
    pool = make_pool()
    runner = RemoteCommandRunner(pool)

    with pytest.raises(ConfigIncompleteError):
        await runner.run(LOCAL_HOST, "ls", timeout=5)
    pool.get_connection.assert_not_awaited()


@pytest.mark.asyncio
async def test_connect_failure_is_transport_error(host) -> None:
    """Connection errors surface as TransportError and drop the connection."""
    pool = make_pool(OSError("refused"))
    runner = RemoteCommandRunner(pool)

    with pytest.raises(TransportError) as exc_info:
        await runner.run(host, "ls", timeout=5)

    assert exc_info.value.host_name == "devbox"
    pool.remove_connection.assert_awaited_with("devbox")


@pytest.mark.asyncio
async def test_timeout_is_transport_error(host) -> None:
    """The overall bound covers a hung command."""
    conn = MagicMock()

    async def hang(*args, **kwargs):
        await asyncio.sleep(1)

    conn.run = AsyncMock(side_effect=hang)
    pool = make_pool(conn)
    runner = RemoteCommandRunner(pool)

    with pytest.raises(TransportError, match="timed out"):
        await runner.run(host, "sleep 10", timeout=0.05)
    pool.remove_connection.assert_awaited_with("devbox")


@pytest.mark.asyncio
async def test_reused_connection_retries_once(host) -> None:
    """A dead pooled connection is replaced and the command retried."""
    dead = MagicMock()
    dead.run = AsyncMock(side_effect=asyncssh.ConnectionLost("gone"))
    fresh = make_conn(stdout="yeehaw:running\n")
    pool = make_pool(dead, fresh, reused=True)
    runner = RemoteCommandRunner(pool)

    result = await runner.run(host, "tmux has-session", timeout=5)

    assert result.output == "yeehaw:running\n"
    pool.remove_connection.assert_awaited_once_with("devbox")
    assert pool.get_connection.await_count == 2


@pytest.mark.asyncio
async def test_new_connection_does_not_retry(host) -> None:
    """A failure on a fresh connection is not retried."""
    dead = MagicMock()
    dead.run = AsyncMock(side_effect=asyncssh.ConnectionLost("gone"))
    pool = make_pool(dead, make_conn())
    runner = RemoteCommandRunner(pool)

    with pytest.raises(TransportError):
        await runner.run(host, "ls", timeout=5)
    assert pool.get_connection.await_count == 1
