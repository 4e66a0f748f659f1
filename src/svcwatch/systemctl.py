"""Read unit state and restart units via ``systemctl``."""

from __future__ import annotations

import logging
from typing import Dict, NamedTuple, Optional

from ._subprocess import run_cmd
from .config import Settings
from .errors import CommandFailedError, StateUnavailableError

logger = logging.getLogger(__name__)

# Values commonly reported by ``systemctl show``
ENABLED = "enabled"
DISABLED = "disabled"
STATIC = "static"

ACTIVE = "active"
INACTIVE = "inactive"
FAILED = "failed"

RUNNING = "running"
DEAD = "dead"
EXITED = "exited"

UNIT_SUFFIXES = (
    ".service",
    ".socket",
    ".timer",
    ".target",
    ".mount",
    ".automount",
    ".path",
    ".slice",
    ".scope",
    ".device",
    ".swap",
)

_STATE_KEYS = ("UnitFileState", "ActiveState", "SubState")


def unit_name(service: str) -> str:
    """Qualify a bare *service* name as a ``.service`` unit.

    Names that already carry a unit-type suffix are returned unchanged.
    """
    if service.endswith(UNIT_SUFFIXES):
        return service
    return service + ".service"


class UnitStatus(NamedTuple):
    """Unit-file, active and sub state of a unit as reported by systemd."""
    unit_file_state: str
    active_state: str
    sub_state: str

    @property
    def is_enabled(self) -> bool:
        return self.unit_file_state == ENABLED

    @property
    def is_active(self) -> bool:
        return self.active_state == ACTIVE

    @property
    def is_running(self) -> bool:
        return self.active_state == ACTIVE and self.sub_state == RUNNING

    @property
    def is_failed(self) -> bool:
        return self.active_state == FAILED


def parse_show(output: str) -> Dict[str, str]:
    """Parse ``key=value`` lines into a dict.

    Only the first ``=`` splits, so values may themselves contain ``=``.
    Lines without ``=`` are ignored.
    """
    props: Dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.partition("=")
        if not sep:
            continue
        props[key] = value
    return props


class Systemctl:
    """Stateless wrapper around the ``systemctl`` command.

    Every call spawns a fresh process, so one instance can be shared freely
    between threads.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings.from_env()

    def state(self, unit: str) -> UnitStatus:
        """Return the :class:`UnitStatus` of *unit*.

        *unit* must already be fully qualified (see :func:`unit_name`).

        Raises:
            StateUnavailableError: If ``systemctl show`` exits non-zero or
                omits any of ``UnitFileState``, ``ActiveState`` or ``SubState``.
            CommandNotFoundError: If ``systemctl`` is not installed.
            CommandFailedError: If ``systemctl`` cannot be started
                (``returncode`` is ``None``).
            CommandTimeoutError: If the deadline elapses.
        """
        cmd = [self.settings.systemctl, "show", unit, "--no-pager"]
        try:
            out = run_cmd(cmd, timeout=self.settings.timeout)
        except CommandFailedError as e:
            if e.returncode is None:
                # never started
                raise
            raise StateUnavailableError(unit) from e

        props = parse_show(out)
        missing = [k for k in _STATE_KEYS if not props.get(k)]
        if missing:
            raise StateUnavailableError(unit, missing)

        return UnitStatus(props["UnitFileState"], props["ActiveState"], props["SubState"])

    def restart(self, unit: str) -> None:
        """Restart *unit* with ``systemctl restart``.

        On failure the exit code hints at what went wrong (see the
        ``systemctl(1)`` man page for exit codes).

        Raises:
            CommandFailedError: If ``systemctl`` exits non-zero.
        """
        run_cmd([self.settings.systemctl, "restart", unit], timeout=self.settings.timeout)
        logger.debug("restarted %s", unit)
