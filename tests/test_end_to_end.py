"""End-to-end reachability over a mocked SSH transport."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from yeehaw.config import Config, HostKeyVerifier, SSHConfigParser
from yeehaw.dependencies import Dependencies
from yeehaw.models import ReachabilityState

SSH_CONFIG = """
Host ranch
    HostName 10.0.0.1
    User cowboy
    IdentityFile /keys/ranch

Host corral
    HostName 10.0.0.2
    User cowboy
    IdentityFile /keys/corral

Host stable
    HostName 10.0.0.3
    User cowboy
"""


def fake_connect(host, **kwargs):
    if host == "10.0.0.2":
        raise ConnectionRefusedError("connection refused")
    conn = MagicMock()
    conn.is_closed.return_value = False
    conn.run = AsyncMock(
        return_value=MagicMock(stdout="yeehaw:running\n", stderr="", exit_status=0)
    )
    return conn


@pytest.fixture
def deps(tmp_path: Path) -> Dependencies:
    ssh_config = tmp_path / "ssh_config"
    ssh_config.write_text(SSH_CONFIG)
    config = Config(parser=SSHConfigParser(ssh_config), host_keys=HostKeyVerifier("none"))
    with patch("socket.gethostname", return_value="test-runner"):
        return Dependencies.from_config(config)


@pytest.mark.asyncio
async def test_three_host_scenario(deps: Dependencies) -> None:
    """Reachable, refusing and incomplete hosts."""
    with patch("asyncssh.connect", new_callable=AsyncMock) as mock_connect:
        mock_connect.side_effect = fake_connect
        records = await deps.coordinator.prober.probe(deps.coordinator.hosts)
        await deps.coordinator.refresh()

    states = {r.host_name: r.state for r in records}
    assert states == {
        "ranch": ReachabilityState.AVAILABLE,
        "corral": ReachabilityState.UNREACHABLE,
    }
    assert [env.host.name for env in deps.coordinator.environments()] == ["ranch"]
    assert deps.coordinator.state_of("stable") is ReachabilityState.NOT_CHECKED

    await deps.cleanup()
    assert deps.pool.pool_size == 0
