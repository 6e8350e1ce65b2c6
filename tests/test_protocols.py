"""Tests for protocol interfaces."""

import pytest

from yeehaw.models import CommandResult, HostDescriptor
from yeehaw.protocols import CommandRunner, SSHConnectionPool
from yeehaw.services.pool import ConnectionPool
from yeehaw.services.prober import ReachabilityProber
from yeehaw.services.remote import RemoteCommandRunner


class FakeRunner:
    async def run(self, host, command, timeout):
        return CommandResult(output="yeehaw:running\n", error="", returncode=0)


def test_concrete_classes_satisfy_protocols() -> None:
    """Concrete SSH classes implement the protocols."""
    pool = ConnectionPool()

    assert isinstance(pool, SSHConnectionPool)
    assert isinstance(RemoteCommandRunner(pool), CommandRunner)


@pytest.mark.asyncio
async def test_prober_accepts_fake_runner() -> None:
    """Any object with a matching run() can drive the prober."""
    runner = FakeRunner()
    assert isinstance(runner, CommandRunner)

    host = HostDescriptor(name="devbox", host="h", user="u", port=22, identity_file="/k")
    record = await ReachabilityProber(runner).probe_host(host)

    assert record.state.value == "available"
