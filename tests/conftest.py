"""Shared pytest fixtures for the svcwatch test suite.

Provides explicit settings, canned ``systemctl`` / ``journalctl`` output,
and a ``fake_run`` factory that replaces the subprocess helper so tests
never touch the real service manager.
"""

from __future__ import annotations

import json

import pytest

from svcwatch.config import Settings
from svcwatch.errors import CommandFailedError


@pytest.fixture
def settings() -> Settings:
    """Settings with fixed tool names and a small deadline.

    Built explicitly rather than via ``from_env`` so a developer's
    ``SVCWATCH_*`` variables cannot leak into test expectations.
    """
    return Settings(systemctl="systemctl", journalctl="journalctl", timeout=5.0, page_size=1000)


@pytest.fixture
def show_output() -> str:
    """A trimmed but realistic ``systemctl show`` dump for a running unit."""
    return "\n".join(
        [
            "Type=notify",
            "Restart=on-failure",
            "MainPID=812",
            "ExecStart={ path=/usr/sbin/nginx ; argv[]=/usr/sbin/nginx -g daemon on; }",
            "Environment=LANG=C.UTF-8 PATH=/usr/bin",
            "UnitFileState=enabled",
            "ActiveState=active",
            "SubState=running",
            "Description=A high performance web server",
            "",
        ]
    )


def journal_record(n: int, **overrides) -> dict:
    """Return a ``journalctl -o json`` object for the *n*-th test entry."""
    rec = {
        "__CURSOR": f"s=abc;i={n:x};b=e41a;m=73{n};t=5bb232c88f8{n};x=5a6c",
        "__REALTIME_TIMESTAMP": str(1613134628976718 + n),
        "__MONOTONIC_TIMESTAMP": "30887910343",
        "_SYSTEMD_UNIT": "nginx.service",
        "_HOSTNAME": "bob6",
        "PRIORITY": "6",
        "SYSLOG_IDENTIFIER": "nginx",
        "MESSAGE": f"message {n}",
    }
    rec.update(overrides)
    return rec


@pytest.fixture
def record():
    """Expose :func:`journal_record` to tests that need custom fields."""
    return journal_record


@pytest.fixture
def journal_lines():
    """Factory building newline-delimited JSON output for entries 1..count."""

    def _make(count: int, start: int = 1) -> str:
        return "".join(json.dumps(journal_record(n)) + "\n" for n in range(start, start + count))

    return _make


@pytest.fixture
def fake_run(monkeypatch):
    """Replace ``run_cmd`` in the adapter modules with a scripted stub.

    Call the fixture with the stdout to return, or with ``returncode`` to
    simulate a failing command. Every executed command is recorded on the
    returned list.

    Example::

        calls = fake_run("UnitFileState=enabled\\n")
        ...
        assert calls[0][:2] == ["systemctl", "show"]
    """
    import svcwatch.journalctl as journalctl_mod
    import svcwatch.systemctl as systemctl_mod

    def _install(stdout: str = "", returncode: int = 0, stderr: str = "", error: Exception = None):
        calls = []

        def _run(cmd, *, timeout=None):
            calls.append(list(cmd))
            if error is not None:
                raise error
            if returncode != 0:
                raise CommandFailedError(cmd, returncode, stderr)
            return stdout

        monkeypatch.setattr(systemctl_mod, "run_cmd", _run)
        monkeypatch.setattr(journalctl_mod, "run_cmd", _run)
        return calls

    return _install
