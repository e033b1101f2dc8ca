from __future__ import annotations

import base64
import json
from email import message_from_bytes, policy

import httpx
import pytest

from foster_plea.drafter import (
    GMAIL_DRAFTS_URL,
    DraftError,
    EmlDraftService,
    GmailDraftService,
    build_draft_service,
    build_message,
)


def test_selects_gmail_when_token_is_set():
    drafts = build_draft_service(gmail_access_token="token", drafts_dir=None)
    assert drafts.provider == "gmail"


def test_selects_gmail_when_both_are_set(tmp_path):
    drafts = build_draft_service(gmail_access_token="token", drafts_dir=str(tmp_path))
    assert drafts.provider == "gmail"


def test_selects_eml_when_only_drafts_dir_is_set(tmp_path):
    drafts = build_draft_service(gmail_access_token=None, drafts_dir=str(tmp_path))
    assert drafts.provider == "eml"


def test_raises_when_no_draft_service_configured():
    with pytest.raises(DraftError):
        build_draft_service(gmail_access_token="  ", drafts_dir=None)


def test_build_message_without_recipient_has_html_alternative():
    msg = build_message("", "Subject", "", "<p>hi</p>")
    assert msg["To"] is None
    assert msg["Subject"] == "Subject"
    html_part = msg.get_body(preferencelist=("html",))
    assert html_part is not None
    assert "<p>hi</p>" in html_part.get_content()


def test_gmail_draft_service_posts_raw_message():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"id": "r-123", "message": {"id": "m-1"}})

    service = GmailDraftService("secret", client=httpx.Client(transport=httpx.MockTransport(handler)))
    service.create_draft("", "Neonatal Foster Plea - 12/06/24", "", html_body="<p>Biscuit</p>")

    assert len(requests) == 1
    request = requests[0]
    assert str(request.url) == GMAIL_DRAFTS_URL
    assert request.headers["Authorization"] == "Bearer secret"
    raw = json.loads(request.content)["message"]["raw"]
    msg = message_from_bytes(base64.urlsafe_b64decode(raw), policy=policy.default)
    assert msg["Subject"] == "Neonatal Foster Plea - 12/06/24"
    assert "<p>Biscuit</p>" in msg.get_body(preferencelist=("html",)).get_content()


def test_gmail_draft_service_raises_on_error_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "Invalid Credentials"}})

    service = GmailDraftService("secret", client=httpx.Client(transport=httpx.MockTransport(handler)))
    with pytest.raises(DraftError):
        service.create_draft("", "s", "", html_body="<p></p>")


def test_gmail_draft_service_raises_on_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timeout", request=request)

    service = GmailDraftService("secret", client=httpx.Client(transport=httpx.MockTransport(handler)))
    with pytest.raises(DraftError):
        service.create_draft("", "s", "", html_body="<p></p>")


def test_eml_draft_service_writes_one_file_per_draft(tmp_path):
    service = EmlDraftService(tmp_path / "drafts")
    service.create_draft("", "First", "", html_body="<p>1</p>")
    service.create_draft("", "Second", "", html_body="<p>2</p>")

    files = sorted((tmp_path / "drafts").glob("*.eml"))
    assert [f.name for f in files] == ["draft_001.eml", "draft_002.eml"]
    msg = message_from_bytes(files[1].read_bytes(), policy=policy.default)
    assert msg["Subject"] == "Second"


def test_gmail_draft_service_accepts_non_json_success_body(caplog):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text="<html>ok</html>")

    service = GmailDraftService("secret", client=httpx.Client(transport=httpx.MockTransport(handler)))
    with caplog.at_level("WARNING"):
        service.create_draft("", "s", "", html_body="<p></p>")

    assert len(requests) == 1
    assert any("not JSON" in message for message in caplog.messages)
