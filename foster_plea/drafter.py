from __future__ import annotations

import base64
import logging
from email.message import EmailMessage
from pathlib import Path
from typing import Optional, Protocol

import httpx

logger = logging.getLogger(__name__)

GMAIL_DRAFTS_URL = "https://gmail.googleapis.com/gmail/v1/users/me/drafts"


class DraftError(Exception):
    """Raised when a draft cannot be created."""


class DraftService(Protocol):
    provider: str

    def create_draft(self, to: str, subject: str, body: str, *, html_body: str | None = None) -> None: ...


def build_message(to: str, subject: str, body: str, html_body: str | None = None) -> EmailMessage:
    msg = EmailMessage()
    if to:
        msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(body)
    if html_body is not None:
        msg.add_alternative(html_body, subtype="html")
    return msg


class GmailDraftService:
    provider = "gmail"

    def __init__(self, access_token: str, client: httpx.Client | None = None):
        self._client = client or httpx.Client(timeout=20.0)
        self._headers = {"Authorization": f"Bearer {access_token}"}

    def close(self) -> None:
        self._client.close()

    def create_draft(self, to: str, subject: str, body: str, *, html_body: str | None = None) -> None:
        msg = build_message(to, subject, body, html_body)
        raw = base64.urlsafe_b64encode(msg.as_bytes()).decode("ascii")
        try:
            response = self._client.post(GMAIL_DRAFTS_URL, json={"message": {"raw": raw}}, headers=self._headers)
            response.raise_for_status()
        except httpx.RequestError as exc:
            raise DraftError(f"Failed to create Gmail draft: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise DraftError(f"Gmail returned error status: {exc.response.status_code}") from exc
        try:
            draft_id = response.json().get("id")
        except ValueError:
            # The draft exists at this point; only the id is unknown
            logger.warning("Gmail draft created but the response was not JSON (status=%s)", response.status_code)
            return
        logger.info("Gmail draft created id=%s", draft_id)


class EmlDraftService:
    """Saves each draft as an .eml file for review in a mail client."""

    provider = "eml"

    def __init__(self, drafts_dir: str | Path):
        self._drafts_dir = Path(drafts_dir)

    def create_draft(self, to: str, subject: str, body: str, *, html_body: str | None = None) -> None:
        msg = build_message(to, subject, body, html_body)
        try:
            self._drafts_dir.mkdir(parents=True, exist_ok=True)
            path = self._next_path()
            path.write_bytes(msg.as_bytes())
        except OSError as exc:
            raise DraftError(f"Failed to write draft: {exc}") from exc
        logger.info("Draft saved to %s", path)

    def _next_path(self) -> Path:
        idx = len(list(self._drafts_dir.glob("draft_*.eml"))) + 1
        path = self._drafts_dir / f"draft_{idx:03d}.eml"
        while path.exists():
            idx += 1
            path = self._drafts_dir / f"draft_{idx:03d}.eml"
        return path


def build_draft_service(
    *,
    gmail_access_token: Optional[str],
    drafts_dir: Optional[str],
) -> DraftService:
    """
    Provider selection:
    - Gmail when an access token is set.
    - Otherwise .eml files in drafts_dir.
    """
    if gmail_access_token and gmail_access_token.strip():
        return GmailDraftService(gmail_access_token.strip())
    if drafts_dir and drafts_dir.strip():
        return EmlDraftService(drafts_dir.strip())
    raise DraftError("No draft service configured: set GMAIL_ACCESS_TOKEN or PLEA_DRAFTS_DIR.")
