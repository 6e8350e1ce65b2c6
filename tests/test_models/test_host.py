"""Tests for host descriptor models."""

from dataclasses import replace

import pytest

from yeehaw.models import LOCAL_HOST, HostDescriptor, is_local_host, is_ssh_eligible


@pytest.fixture
def full_host() -> HostDescriptor:
    """Create a fully specified SSH host."""
    return HostDescriptor(
        name="devbox",
        host="10.0.0.5",
        user="dev",
        port=22,
        identity_file="/home/dev/.ssh/id_ed25519",
    )


def test_full_host_is_eligible(full_host: HostDescriptor) -> None:
    """A host with every SSH field is eligible."""
    assert is_ssh_eligible(full_host) is True


@pytest.mark.parametrize("field", ["host", "user", "identity_file"])
def test_missing_string_field_is_ineligible(full_host: HostDescriptor, field: str) -> None:
    """A missing or empty string field excludes the host."""
    assert is_ssh_eligible(replace(full_host, **{field: None})) is False
    assert is_ssh_eligible(replace(full_host, **{field: ""})) is False


def test_missing_port_is_ineligible(full_host: HostDescriptor) -> None:
    """Port must be an integer."""
    assert is_ssh_eligible(replace(full_host, port=None)) is False
    assert is_ssh_eligible(replace(full_host, port=True)) is False


def test_local_host_is_never_eligible(full_host: HostDescriptor) -> None:
    """The local pseudo-host is excluded even with SSH fields."""
    assert is_local_host(LOCAL_HOST)
    assert is_ssh_eligible(LOCAL_HOST) is False
    assert is_ssh_eligible(replace(full_host, name="local")) is False
    assert is_ssh_eligible(replace(full_host, is_local=True)) is False


def test_from_dict_uses_external_field_names() -> None:
    """from_dict reads name/host/user/port/identity_file."""
    host = HostDescriptor.from_dict(
        {"name": "web", "host": "web.example.com", "user": "ops", "port": 2222}
    )

    assert host.host == "web.example.com"
    assert host.port == 2222
    assert host.identity_file is None
    assert is_ssh_eligible(host) is False


def test_from_dict_requires_name() -> None:
    """A host entry without a name is rejected."""
    with pytest.raises(ValueError):
        HostDescriptor.from_dict({"host": "x"})


def test_target_renders_connection(full_host: HostDescriptor) -> None:
    """target is user@host:port."""
    assert full_host.target == "dev@10.0.0.5:22"
