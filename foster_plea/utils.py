from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Sequence

from .config import DATE_FORMAT, TIMEZONE
from .models import PLEA_ENTRY_FIELDS, PleaEntry

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_today(now: datetime) -> str:
    return now.astimezone(TIMEZONE).strftime(DATE_FORMAT)


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def row_to_entry(row: Sequence[Any]) -> PleaEntry:
    """
    Map one sheet row to a PleaEntry by column position.

    Short rows are padded with blanks; columns past the last field are ignored.
    """
    cells = [cell_text(value) for value in row[: len(PLEA_ENTRY_FIELDS)]]
    cells.extend([""] * (len(PLEA_ENTRY_FIELDS) - len(cells)))
    return PleaEntry(**dict(zip(PLEA_ENTRY_FIELDS, cells)))


def entries_from_rows(rows: Iterable[Sequence[Any]]) -> List[PleaEntry]:
    entries: List[PleaEntry] = []
    for row in rows:
        entry = row_to_entry(row)
        if not entry.is_valid():
            continue
        entries.append(entry)
    return entries


def filter_entries(entries: Iterable[PleaEntry], predicate: Callable[[PleaEntry], bool]) -> List[PleaEntry]:
    return [entry for entry in entries if predicate(entry)]
