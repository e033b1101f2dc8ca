from __future__ import annotations

import csv
import io
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Protocol
from urllib.parse import parse_qs, urlencode, urlsplit

import httpx

from .utils import cell_text

logger = logging.getLogger(__name__)

GS_HOST = "docs.google.com"

_SHEET_ID_RE = re.compile(r"/spreadsheets/d/([a-zA-Z0-9\-_]+)")
_GID_RE = re.compile(r"gid=(\d+)")


class SheetError(Exception):
    """Raised when the sheet cannot be read."""


class SheetConnectionError(SheetError):
    """Raised when the sheet is unreachable (network/timeout)."""


class SheetApiError(SheetError):
    """Raised when the sheet host returns an error response or unreadable data."""


class SheetSource(Protocol):
    def get_max_rows(self) -> int: ...

    def get_values(self, row: int, column: int, num_rows: int, num_columns: int) -> List[List[str]]: ...


class _TableSheet(ABC):
    """Spreadsheet-style range access over a table that is loaded once."""

    def __init__(self) -> None:
        self._table: Optional[List[List[str]]] = None

    @abstractmethod
    def _load_table(self) -> List[List[str]]: ...

    def _rows(self) -> List[List[str]]:
        if self._table is None:
            self._table = self._load_table()
        return self._table

    def get_max_rows(self) -> int:
        return len(self._rows())

    def get_values(self, row: int, column: int, num_rows: int, num_columns: int) -> List[List[str]]:
        """
        Return a num_rows x num_columns block starting at (row, column), 1-based.

        Cells outside the loaded table come back as blanks, so every returned row
        has exactly num_columns values.
        """
        if row < 1 or column < 1:
            raise ValueError("row and column are 1-based")
        table = self._rows()
        block: List[List[str]] = []
        for r in range(row - 1, row - 1 + num_rows):
            source = table[r] if r < len(table) else []
            cells = [cell_text(v) for v in source[column - 1 : column - 1 + num_columns]]
            cells.extend([""] * (num_columns - len(cells)))
            block.append(cells)
        return block


def parse_csv_table(csv_text: str) -> List[List[str]]:
    try:
        return [list(row) for row in csv.reader(io.StringIO(csv_text))]
    except csv.Error as exc:
        raise SheetApiError(f"Sheet data is not valid CSV: {exc}") from exc


class CsvFileSheet(_TableSheet):
    """A sheet exported to a local CSV file."""

    def __init__(self, path: str | Path):
        super().__init__()
        self._path = Path(path)

    def _load_table(self) -> List[List[str]]:
        try:
            text = self._path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise SheetConnectionError(f"Failed to read sheet file {self._path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise SheetApiError(f"Sheet file {self._path} is not UTF-8: {exc}") from exc
        table = parse_csv_table(text)
        logger.info("Read %s rows from %s", len(table), self._path)
        return table


def to_export_csv_url(sheet_url: str) -> str:
    """
    Turn a Google Sheets sharing link into its CSV export URL.

    The tab is taken from gid= in the fragment or query string; defaults to the first tab.
    """
    parts = urlsplit(sheet_url)
    if GS_HOST not in parts.netloc:
        raise ValueError(f"Not a Google Sheets URL: {sheet_url}")
    match = _SHEET_ID_RE.search(parts.path)
    if not match:
        raise ValueError(f"Google Sheets URL has no spreadsheet id: {sheet_url}")

    gid = "0"
    gid_match = _GID_RE.search(parts.fragment)
    if gid_match:
        gid = gid_match.group(1)
    else:
        query_gid = parse_qs(parts.query).get("gid")
        if query_gid and query_gid[0].isdigit():
            gid = query_gid[0]

    query = urlencode({"format": "csv", "gid": gid})
    return f"https://{GS_HOST}/spreadsheets/d/{match.group(1)}/export?{query}"


class GoogleSheetClient(_TableSheet):
    def __init__(self, sheet_url: str, client: httpx.Client | None = None):
        super().__init__()
        self._export_url = to_export_csv_url(sheet_url)
        self._client = client or httpx.Client(timeout=20.0, follow_redirects=True)

    def close(self) -> None:
        self._client.close()

    def _load_table(self) -> List[List[str]]:
        logger.info("Fetching sheet export %s", self._export_url)
        try:
            response = self._client.get(self._export_url)
            response.raise_for_status()
        except httpx.RequestError as exc:
            raise SheetConnectionError(f"Sheet request failed: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise SheetApiError(f"Sheet request returned error: {exc}") from exc

        content_type = response.headers.get("content-type", "")
        if "text/html" in content_type:
            # Private sheets answer with a sign-in page instead of CSV
            raise SheetApiError("Sheet export returned HTML; is the sheet shared for viewing?")

        try:
            csv_text = response.content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise SheetApiError(f"Sheet export is not UTF-8: {exc}") from exc
        table = parse_csv_table(csv_text)
        logger.info("Fetched %s rows from sheet", len(table))
        return table
