"""Tests for the Office 365 SDS mailbox client (Graph is mocked with httpx.MockTransport)."""

import base64
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from hmsnova.core.config import settings
from hmsnova.core.exceptions import UpstreamServiceError
from hmsnova.services.email_monitor import Office365EmailMonitor, get_email_monitor, is_sds_attachment

MAILBOX = "sds@bygg.no"
PDF = b"%PDF-1.4 sikkerhetsdatablad"


def _monitor() -> Office365EmailMonitor:
    return Office365EmailMonitor(
        tenant_id="entra-tenant", client_id="client", client_secret="secret", mailbox=MAILBOX,
    )


def _attachment(att_id: str, name: str, content_type: str = "application/pdf") -> dict:
    return {"id": att_id, "name": name, "contentType": content_type, "size": 2048}


def _graph(messages: list[dict], attachments: dict[str, list[dict]], files: dict[str, dict] | None = None):
    """Handler serving the token endpoint, the message search and attachment lookups."""
    files = files or {}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "login.microsoftonline.com":
            return httpx.Response(200, json={"access_token": "graph-token", "expires_in": 3600})
        path = request.url.path
        if path.endswith("/messages"):
            return httpx.Response(200, json={"value": messages})
        for msg_id, items in attachments.items():
            if path.endswith(f"/messages/{msg_id}/attachments"):
                return httpx.Response(200, json={"value": items})
        for att_id, body in files.items():
            if path.endswith(f"/attachments/{att_id}"):
                return httpx.Response(200, json=body)
        return httpx.Response(404, json={"error": {"code": "ErrorItemNotFound"}})

    return handler


@pytest.mark.parametrize(
    ("name", "content_type", "expected"),
    [
        ("Sikaflex_SDS_NO.pdf", "application/pdf", True),
        ("sikkerhetsdatablad-jotun.pdf", "application/pdf", True),
        ("produktblad.pdf", "application/pdf", False),
        ("sds.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document", False),
    ],
)
def test_is_sds_attachment(name, content_type, expected):
    assert is_sds_attachment(name, content_type) is expected


class TestSearch:
    async def test_returns_messages_with_sds_pdfs(self, mock_http):
        requests = mock_http(_graph(
            messages=[
                {
                    "id": "m1", "subject": "SDS Sikaflex 11FC", "hasAttachments": True,
                    "from": {"emailAddress": {"address": "docs@sika.no", "name": "Sika"}},
                    "receivedDateTime": "2026-02-20T08:30:00Z",
                },
                {"id": "m2", "subject": "Sikkerhetsdatablad", "hasAttachments": False},
                {"id": "m3", "subject": "SDS vedlagt", "hasAttachments": True},
            ],
            attachments={
                "m1": [_attachment("a1", "Sikaflex_SDS.pdf"), _attachment("a2", "logo.png", "image/png")],
                "m3": [_attachment("a3", "faktura.pdf")],
            },
        ))

        [message] = await _monitor().search_for_sds_emails(datetime(2026, 2, 13, tzinfo=timezone.utc))

        assert message.id == "m1"
        assert message.sender == "docs@sika.no"
        assert message.received_at == datetime(2026, 2, 20, 8, 30, tzinfo=timezone.utc)
        assert [a.name for a in message.attachments] == ["Sikaflex_SDS.pdf"]
        assert message.attachments[0].size == 2048

        token_request = requests[0]
        assert token_request.url.path == "/entra-tenant/oauth2/v2.0/token"
        assert b"grant_type=client_credentials" in token_request.content
        assert all(r.headers["Authorization"] == "Bearer graph-token" for r in requests[1:])
        # One token for the whole search; m2 has no attachments so it is never expanded
        assert len(requests) == 4

    async def test_filter_uses_utc_window_and_subject_terms(self, mock_http):
        requests = mock_http(_graph(messages=[], attachments={}))
        oslo = timezone(timedelta(hours=1))

        assert await _monitor().search_for_sds_emails(datetime(2026, 2, 13, 9, 0, tzinfo=oslo)) == []

        query = requests[1].url.params["$filter"]
        assert query.startswith("receivedDateTime ge 2026-02-13T08:00:00Z and (")
        for term in ("SDS", "Safety Data Sheet", "Sikkerhetsdatablad"):
            assert f"contains(subject, '{term}')" in query

    async def test_token_failure(self, mock_http):
        mock_http(lambda request: httpx.Response(401, json={"error": "invalid_client"}))

        with pytest.raises(UpstreamServiceError, match="access token"):
            await _monitor().search_for_sds_emails(datetime(2026, 2, 13, tzinfo=timezone.utc))

    async def test_network_error_is_wrapped(self, mock_http):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        mock_http(handler)

        with pytest.raises(UpstreamServiceError, match="mailbox search failed"):
            await _monitor().search_for_sds_emails(datetime(2026, 2, 13, tzinfo=timezone.utc))


class TestDownload:
    async def test_decodes_inline_content(self, mock_http):
        mock_http(_graph([], {}, files={"a1": {"contentBytes": base64.b64encode(PDF).decode()}}))

        assert await _monitor().download_attachment("m1", "a1") == PDF

    async def test_reference_attachment_raises(self, mock_http):
        mock_http(_graph([], {}, files={
            "a1": {"@odata.type": "#microsoft.graph.referenceAttachment", "name": "Sikaflex_SDS.pdf"},
        }))

        with pytest.raises(UpstreamServiceError, match="no inline content"):
            await _monitor().download_attachment("m1", "a1")

    async def test_invalid_base64_raises(self, mock_http):
        mock_http(_graph([], {}, files={"a1": {"contentBytes": "not base64!"}}))

        with pytest.raises(UpstreamServiceError, match="not valid base64"):
            await _monitor().download_attachment("m1", "a1")

    async def test_missing_attachment_raises(self, mock_http):
        mock_http(_graph([], {}))

        with pytest.raises(UpstreamServiceError):
            await _monitor().download_attachment("m1", "gone")


def test_factory_requires_graph_settings(monkeypatch):
    monkeypatch.setattr(settings, "sds_mailbox_email", None)

    with pytest.raises(UpstreamServiceError) as exc_info:
        get_email_monitor()

    assert exc_info.value.code == "SDS_MAILBOX_NOT_CONFIGURED"
