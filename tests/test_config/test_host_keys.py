"""Tests for host key policy resolution."""

from pathlib import Path

import pytest

from yeehaw.config.host_keys import HostKeyPolicy, HostKeyVerifier


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, HostKeyPolicy.ACCEPT_NEW),
        ("", HostKeyPolicy.ACCEPT_NEW),
        ("yes", HostKeyPolicy.YES),
        ("TRUE", HostKeyPolicy.YES),
        ("accept-new", HostKeyPolicy.ACCEPT_NEW),
        ("no", HostKeyPolicy.NO),
        ("false", HostKeyPolicy.NO),
        ("sometimes", HostKeyPolicy.ACCEPT_NEW),
    ],
)
def test_policy_parse(value: str | None, expected: HostKeyPolicy) -> None:
    """Policy names and boolean aliases are recognized."""
    assert HostKeyPolicy.parse(value) is expected


def test_existing_known_hosts_is_used(tmp_path: Path) -> None:
    """An existing known_hosts file is passed through."""
    known = tmp_path / "known_hosts"
    known.write_text("")

    verifier = HostKeyVerifier(str(known), HostKeyPolicy.YES)

    assert verifier.get_known_hosts_path() == str(known)
    assert verifier.strict_checking is True


def test_strict_policy_requires_known_hosts(tmp_path: Path) -> None:
    """Strict checking fails closed without a known_hosts file."""
    with pytest.raises(FileNotFoundError):
        HostKeyVerifier(str(tmp_path / "missing"), HostKeyPolicy.YES)


def test_accept_new_tolerates_missing_known_hosts(tmp_path: Path) -> None:
    """accept-new skips verification when there is nothing to verify against."""
    verifier = HostKeyVerifier(str(tmp_path / "missing"), HostKeyPolicy.ACCEPT_NEW)

    assert verifier.get_known_hosts_path() is None
    assert verifier.strict_checking is False


def test_none_disables_verification(tmp_path: Path) -> None:
    """The literal 'none' disables verification."""
    verifier = HostKeyVerifier("none", HostKeyPolicy.ACCEPT_NEW)

    assert verifier.get_known_hosts_path() is None
