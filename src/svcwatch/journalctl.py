"""Read structured journal entries for a systemd unit via ``journalctl``.

Entries are requested as ``-o json`` (one JSON object per line) and decoded
into :class:`Entry` records. A tail is kept by feeding the cursor of the
newest entry of one call into the next::

    journal = Journalctl()
    cursor = journal.last_entry("nginx.service").cursor
    while True:
        entries = journal.entries_after("nginx.service", cursor)
        if entries:
            cursor = entries[-1].cursor
        ...

:meth:`Journalctl.follow` wraps exactly that loop in a generator.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

from ._subprocess import run_cmd
from .config import Settings
from .errors import EntryParseError

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# journalctl reports __REALTIME_TIMESTAMP in microseconds; the API uses nanoseconds
NS_PER_US = 1000


class Priority(str, Enum):
    """Syslog severity carried in the ``PRIORITY`` journal field."""
    EMERGENCY = "0"
    ALERT = "1"
    CRITICAL = "2"
    ERROR = "3"
    WARNING = "4"
    NOTICE = "5"
    INFORMATIONAL = "6"
    DEBUG = "7"


@dataclass(frozen=True)
class Entry:
    """A single journal record.

    Attributes:
        cursor: Opaque journal position of this record (``__CURSOR``).
        timestamp: Realtime timestamp, nanoseconds since the epoch.
        message: ``MESSAGE`` when it is text, otherwise ``""``.
        unit: Originating unit (``_SYSTEMD_UNIT``).
        priority: Severity, ``None`` when the record has no ``PRIORITY``.
        unit_result: ``UNIT_RESULT``, only set when the unit terminated.
    """
    cursor: str = ""
    timestamp: int = 0
    message: str = ""
    unit: str = ""
    priority: Optional[Priority] = None
    unit_result: str = ""

    @staticmethod
    def empty() -> "Entry":
        """Return the sentinel used when the journal has nothing to report."""
        return Entry()

    def is_empty(self) -> bool:
        return self.cursor == ""

    @property
    def time(self) -> datetime:
        """The timestamp as an aware UTC datetime (microsecond precision)."""
        return _EPOCH + timedelta(microseconds=self.timestamp // NS_PER_US)

    def __str__(self) -> str:
        prio = self.priority.value if self.priority is not None else "-"
        return f"{self.time.isoformat()} {prio} {self.unit} {self.message}"


def _text(value: Any) -> str:
    # Non-UTF-8 payloads arrive as an array of byte values; those are dropped
    return value if isinstance(value, str) else ""


def entry_from_json(d: Dict[str, Any]) -> Entry:
    """Build an :class:`Entry` from one decoded ``journalctl -o json`` object.

    Raises:
        ValueError: If the cursor is missing, or the timestamp or priority
            field is malformed.
    """
    cursor = _text(d.get("__CURSOR"))
    if not cursor:
        raise ValueError("missing __CURSOR")

    raw_ts = d.get("__REALTIME_TIMESTAMP", 0)
    try:
        ts = int(raw_ts)
    except (TypeError, ValueError):
        raise ValueError(f"invalid __REALTIME_TIMESTAMP: {raw_ts!r}") from None

    raw_prio = d.get("PRIORITY")
    priority = None
    if raw_prio is not None:
        try:
            priority = Priority(str(raw_prio))
        except ValueError:
            raise ValueError(f"invalid PRIORITY: {raw_prio!r}") from None

    return Entry(
        cursor=cursor,
        timestamp=ts * NS_PER_US,
        message=_text(d.get("MESSAGE")),
        unit=_text(d.get("_SYSTEMD_UNIT")),
        priority=priority,
        unit_result=_text(d.get("UNIT_RESULT")),
    )


def parse_entries(output: str) -> List[Entry]:
    """Decode newline-delimited JSON into entries, skipping blank lines.

    Raises:
        EntryParseError: On the first malformed line. The exception's
            ``entries`` holds everything decoded before it.
    """
    entries: List[Entry] = []
    for lineno, line in enumerate(output.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            d = json.loads(line)
            if not isinstance(d, dict):
                raise ValueError(f"expected a JSON object, got {type(d).__name__}")
            entries.append(entry_from_json(d))
        except ValueError as e:
            # json.JSONDecodeError is a ValueError subclass
            raise EntryParseError(str(e), entries, lineno) from e
    return entries


class Journalctl:
    """Stateless wrapper around the ``journalctl`` command.

    The only state a tail needs is the cursor, which the caller holds and
    passes back in.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings.from_env()

    def _query(self, unit: str, count: int, cursor: str = "") -> List[Entry]:
        cmd = [self.settings.journalctl, "-u", unit, "-o", "json", "-n", str(count), "--no-pager", "-q"]
        if cursor:
            cmd += ["--after-cursor", cursor]
        out = run_cmd(cmd, timeout=self.settings.timeout)
        return parse_entries(out)

    def last_entry(self, unit: str) -> Entry:
        """Return the most recent journal entry for *unit*.

        Returns :meth:`Entry.empty` when the unit has no entries.

        Raises:
            EntryParseError: If the record cannot be decoded.
            CommandFailedError: If ``journalctl`` exits non-zero.
        """
        entries = self._query(unit, 1)
        if not entries:
            return Entry.empty()
        return entries[-1]

    def entries_after(self, unit: str, cursor: str = "") -> List[Entry]:
        """Return entries for *unit* recorded after *cursor*, oldest first.

        With an empty *cursor* the newest ``page_size`` entries are returned;
        anything older is skipped. With a cursor, the oldest ``page_size``
        entries after it are returned, so a backlog larger than a page is
        drained over successive calls. The cursor to pass on the next call is
        ``entries[-1].cursor``.

        Raises:
            EntryParseError: On a malformed line, carrying the entries parsed
                before it.
            CommandFailedError: If ``journalctl`` exits non-zero.
        """
        return self._query(unit, self.settings.page_size, cursor)

    def follow(
        self,
        unit: str,
        cursor: str = "",
        interval: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Iterator[Entry]:
        """Yield entries for *unit* as they are written, forever.

        Polls :meth:`entries_after`, advancing the cursor past every batch.
        Sleeps *interval* seconds between polls unless the last poll filled a
        whole page, in which case it polls again straight away. Errors are
        not caught.

        Start from ``last_entry(unit).cursor`` to skip existing history.
        """
        while True:
            entries = self.entries_after(unit, cursor)
            for entry in entries:
                yield entry
            if entries:
                cursor = entries[-1].cursor
            if len(entries) < self.settings.page_size:
                sleep(interval)
