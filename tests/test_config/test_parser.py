"""Tests for SSHConfigParser."""

from pathlib import Path
from unittest.mock import patch

import pytest

from yeehaw.config.parser import SSHConfigParser
from yeehaw.models import is_ssh_eligible


@pytest.fixture
def sample_ssh_config(tmp_path: Path) -> Path:
    """Create sample SSH config file."""
    config = tmp_path / "ssh_config"
    config.write_text("""
# fleet
Host devbox
    HostName 192.168.1.100
    User admin
    Port 2222
    IdentityFile ~/.ssh/devbox_key

Host gpu-*
    User ml

Host nokey
    HostName 192.168.1.101

Host *
    User root
    IdentityFile /etc/yeehaw/fleet_key
""")
    return config


@pytest.fixture(autouse=True)
def remote_hostname():
    """Keep aliases from matching the test machine's hostname."""
    with patch("socket.gethostname", return_value="test-runner"):
        yield


def test_parse_ssh_config(sample_ssh_config: Path) -> None:
    """Parser turns host blocks into descriptors."""
    hosts = SSHConfigParser(sample_ssh_config).parse()

    devbox = hosts["devbox"]
    assert devbox.host == "192.168.1.100"
    assert devbox.user == "admin"
    assert devbox.port == 2222
    assert devbox.identity_file == str(Path.home() / ".ssh" / "devbox_key")
    assert is_ssh_eligible(devbox)


def test_wildcard_blocks_are_skipped(sample_ssh_config: Path) -> None:
    """Pattern hosts never become descriptors."""
    hosts = SSHConfigParser(sample_ssh_config).parse()

    assert set(hosts) == {"devbox", "nokey"}


def test_global_defaults_fill_missing_fields(sample_ssh_config: Path) -> None:
    """Host * values apply to hosts that leave them unset."""
    hosts = SSHConfigParser(sample_ssh_config).parse()

    nokey = hosts["nokey"]
    assert nokey.user == "root"
    assert nokey.identity_file == "/etc/yeehaw/fleet_key"
    assert nokey.port == 22


def test_missing_fields_stay_empty(tmp_path: Path) -> None:
    """A host without IdentityFile is kept but ineligible."""
    config = tmp_path / "ssh_config"
    config.write_text("Host bare\n    HostName 10.0.0.9\n    User me\n")

    hosts = SSHConfigParser(config).parse()

    assert hosts["bare"].identity_file is None
    assert not is_ssh_eligible(hosts["bare"])


def test_invalid_port_defaults_to_22(tmp_path: Path) -> None:
    """Unparseable ports fall back to 22."""
    config = tmp_path / "ssh_config"
    config.write_text("Host odd\n    HostName 10.0.0.9\n    Port ssh\n")

    assert SSHConfigParser(config).parse()["odd"].port == 22


def test_parse_respects_allowlist(sample_ssh_config: Path) -> None:
    """Allowlist globs restrict the hosts."""
    hosts = SSHConfigParser(sample_ssh_config, allowlist=["dev*"]).parse()

    assert list(hosts) == ["devbox"]


def test_parse_respects_blocklist(sample_ssh_config: Path) -> None:
    """Blocklist globs remove hosts."""
    hosts = SSHConfigParser(sample_ssh_config, blocklist=["nokey"]).parse()

    assert list(hosts) == ["devbox"]


def test_missing_config_returns_empty(tmp_path: Path) -> None:
    """No config file means no hosts."""
    assert SSHConfigParser(tmp_path / "absent").parse() == {}


def test_alias_for_this_machine_is_local(tmp_path: Path) -> None:
    """An alias naming this machine is marked local."""
    config = tmp_path / "ssh_config"
    config.write_text(
        "Host test-runner\n    HostName 127.0.0.1\n    User me\n    IdentityFile /k\n"
    )

    host = SSHConfigParser(config).parse()["test-runner"]

    assert host.is_local is True
    assert not is_ssh_eligible(host)


def test_local_alias_is_reserved(tmp_path: Path) -> None:
    """A Host named 'local' cannot shadow the local pseudo-host."""
    config = tmp_path / "ssh_config"
    config.write_text("Host local\n    HostName 10.0.0.1\n")

    assert SSHConfigParser(config).parse() == {}
