"""Environment-driven settings shared by the adapters."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_TIMEOUT = 30.0
DEFAULT_PAGE_SIZE = 1000


@dataclass(frozen=True)
class Settings:
    """Where the tools live and how long to wait for them.

    Attributes:
        systemctl: Executable used for unit state and control.
        journalctl: Executable used for journal queries.
        timeout: Per-invocation deadline in seconds, ``None`` for no deadline.
        page_size: Maximum number of journal entries returned per query.
    """
    systemctl: str = "systemctl"
    journalctl: str = "journalctl"
    timeout: Optional[float] = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {self.page_size}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive or None, got {self.timeout}")

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``SVCWATCH_*`` environment variables.

        ``SVCWATCH_TIMEOUT`` set to ``0`` or an empty string disables the
        deadline.

        Raises:
            ValueError: If a numeric variable cannot be parsed or is out of
                range (negative timeout, page size below 1).
        """
        env = os.environ if environ is None else environ

        raw_timeout = env.get("SVCWATCH_TIMEOUT", str(DEFAULT_TIMEOUT)).strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else 0.0
        except ValueError:
            raise ValueError(f"Invalid SVCWATCH_TIMEOUT: {raw_timeout!r}") from None

        raw_page = env.get("SVCWATCH_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)).strip()
        try:
            page_size = int(raw_page)
        except ValueError:
            raise ValueError(f"Invalid SVCWATCH_PAGE_SIZE: {raw_page!r}") from None

        return Settings(
            systemctl=env.get("SVCWATCH_SYSTEMCTL", "") or "systemctl",
            journalctl=env.get("SVCWATCH_JOURNALCTL", "") or "journalctl",
            timeout=None if timeout == 0 else timeout,
            page_size=page_size,
        )
