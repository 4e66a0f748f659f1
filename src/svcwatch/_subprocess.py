"""Shared subprocess helper used by the systemctl and journalctl adapters.

Centralises command execution so error handling (missing binary, non-zero
exit, deadline) is consistent and not duplicated across adapter modules.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional

from .errors import CommandFailedError, CommandNotFoundError, CommandTimeoutError

logger = logging.getLogger(__name__)


def run_cmd(cmd: List[str], *, timeout: Optional[float] = None) -> str:
    """Run *cmd* and return its stdout as a string.

    Args:
        cmd: Command and arguments to execute.
        timeout: Seconds to wait for the process to exit. ``None`` waits
            forever. When exceeded the child is killed.

    Raises:
        CommandNotFoundError: If the executable is not found.
        CommandFailedError: If the process cannot be started or exits non-zero.
        CommandTimeoutError: If *timeout* elapses first.
    """
    logger.debug("running %s", cmd)
    try:
        p = subprocess.run(
            cmd,
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        logger.debug("command not found: %s", cmd[0])
        raise CommandNotFoundError(cmd) from None
    except subprocess.TimeoutExpired:
        logger.debug("command timed out after %ss: %s", timeout, cmd)
        raise CommandTimeoutError(cmd, timeout) from None
    except OSError as e:
        logger.debug("command could not start: %s: %s", cmd, e)
        raise CommandFailedError(cmd, None, str(e)) from e
    if p.returncode != 0:
        logger.debug("command exited %d: %s", p.returncode, cmd)
        raise CommandFailedError(cmd, p.returncode, p.stderr.strip())
    return p.stdout
