"""HTTP-level tests: envelopes, tenant scoping, cron auth, SDS endpoints, audit log."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from hmsnova.core.config import settings
from hmsnova.domain.audit import AuditLog
from hmsnova.domain.mixins import utcnow
from hmsnova.domain.reminder import ScheduledReminder
from hmsnova.domain.tenant import Tenant
from hmsnova.repositories.events import MeetingRepository
from hmsnova.routers.v1.chemicals import get_sds_mailbox, get_sds_parser
from hmsnova.services.sds_matching import EmailAttachment, EmailMessage
from hmsnova.services.sds_parser import SDSExtraction
from tests.conftest import TENANT_A, TENANT_B

API = "/api/v1"


async def _create_chemical(client, **extra):
    body = {"productName": "Sikaflex 11FC", "casNumber": "101-68-8", "supplier": "Sika"}
    body.update(extra)
    response = await client.post(f"{API}/chemicals", json=body)
    assert response.status_code == 201
    return response.json()["data"]


def _fake_parser(extraction: SDSExtraction):
    async def parse(contents: bytes) -> SDSExtraction:
        return extraction
    return parse


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class TestEnvelopesAndTenancy:
    async def test_camel_case_data_envelope(self, client):
        chemical = await _create_chemical(client)

        assert chemical["productName"] == "Sikaflex 11FC"
        assert chemical["tenantId"] == TENANT_A
        assert chemical["containsIsocyanates"] is False
        assert "product_name" not in chemical

    async def test_list_envelope_has_meta(self, client):
        await _create_chemical(client)
        await _create_chemical(client, productName="Jotun Lady", casNumber=None, supplier="Jotun")

        body = (await client.get(f"{API}/chemicals", params={"limit": 1})).json()

        assert len(body["data"]) == 1
        assert body["meta"] == {"total": 2, "page": 1, "limit": 1, "pages": 2}

    async def test_other_tenant_gets_not_found(self, client):
        chemical = await _create_chemical(client)

        response = await client.get(f"{API}/chemicals/{chemical['id']}", headers={"X-Tenant-ID": TENANT_B})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_unknown_tenant_is_rejected(self, client):
        response = await client.post(
            f"{API}/chemicals",
            json={"productName": "Sikaflex 11FC"},
            headers={"X-Tenant-ID": "no-such-tenant"},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"
        listed = (await client.get(f"{API}/chemicals")).json()
        assert listed["meta"]["total"] == 0

    async def test_suspended_tenant_is_forbidden(self, client, session):
        tenant = await session.get(Tenant, TENANT_B)
        tenant.status = "SUSPENDED"
        await session.commit()

        response = await client.get(f"{API}/chemicals", headers={"X-Tenant-ID": TENANT_B})

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    async def test_delete_archives_chemical(self, client):
        chemical = await _create_chemical(client)

        response = await client.delete(f"{API}/chemicals/{chemical['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "ARCHIVED"
        active = (await client.get(f"{API}/chemicals", params={"status": "ACTIVE"})).json()
        assert active["meta"]["total"] == 0


class TestOshaEndpoints:
    async def test_rates(self, client):
        response = await client.post(
            f"{API}/osha/rates",
            json={"totalRecordableCases": 2, "totalHoursWorked": 200000, "lostTimeCases": 1},
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"trir": 2.0, "dartRate": 0.0, "ltir": 1.0, "severityRate": 0.0}

    async def test_rates_without_hours(self, client):
        response = await client.post(f"{API}/osha/rates", json={"totalRecordableCases": 2, "totalHoursWorked": 0})

        assert response.json()["data"]["trir"] is None

    async def test_log_lifecycle(self, client):
        upsert = await client.put(
            f"{API}/osha/logs", json={"year": 2025, "totalHoursWorked": 100000, "avgEmployeeCount": 50},
        )
        assert upsert.status_code == 200

        certify = await client.post(
            f"{API}/osha/logs/2025/certify",
            json={"certifiedBy": "Kari Nordmann", "certifiedTitle": "Daglig leder"},
        )
        assert certify.json()["data"]["certifiedBy"] == "Kari Nordmann"

        missing = await client.get(f"{API}/osha/logs/2019")
        assert missing.status_code == 404


class TestReminderEndpoints:
    async def test_meeting_with_participants_fans_out_and_delete_cancels(self, client, seed):
        response = await client.post(
            f"{API}/meetings",
            json={
                "title": "AMU-møte",
                "meetingType": "AMU",
                "scheduledDate": "2099-01-15T09:00:00Z",
                "participantIds": [seed.alice.id, seed.bob.id, seed.carol.id],
            },
        )
        assert response.status_code == 201
        meeting_id = response.json()["data"]["id"]
        params = {"entityType": "Meeting", "entityId": meeting_id}

        reminders = (await client.get(f"{API}/reminders", params=params)).json()["data"]
        assert len(reminders) == 2
        assert {r["status"] for r in reminders} == {"PENDING"}

        assert (await client.delete(f"{API}/meetings/{meeting_id}")).status_code == 204

        reminders = (await client.get(f"{API}/reminders", params=params)).json()["data"]
        assert {r["status"] for r in reminders} == {"CANCELLED"}
        assert (await client.get(f"{API}/meetings/{meeting_id}")).status_code == 404

    async def test_create_and_cancel_directly(self, client, seed):
        meeting = (await client.post(
            f"{API}/meetings", json={"title": "BHT", "scheduledDate": "2099-02-01T08:00:00Z"},
        )).json()["data"]

        created = await client.post(
            f"{API}/reminders",
            json={
                "entityType": "Meeting", "entityId": meeting["id"], "userIds": [seed.alice.id],
                "scheduledDate": meeting["scheduledDate"], "title": meeting["title"],
            },
        )
        cancelled = await client.post(
            f"{API}/reminders/cancel", params={"entityType": "Meeting", "entityId": meeting["id"]},
        )

        assert created.json()["data"] == {"created": 1}
        assert cancelled.json()["data"] == {"cancelled": 1}

    @pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer wrong"}, {"Authorization": "s3cret"}])
    async def test_dispatch_requires_cron_secret(self, client, monkeypatch, headers):
        monkeypatch.setattr(settings, "cron_secret", "s3cret")

        response = await client.post(f"{API}/reminders/dispatch", headers=headers)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_dispatch_rejects_when_no_secret_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "cron_secret", None)

        response = await client.post(f"{API}/reminders/dispatch", headers={"Authorization": "Bearer "})

        assert response.status_code == 401

    async def test_dispatch_sends_due_reminders(self, client, session, seed, monkeypatch):
        monkeypatch.setattr(settings, "cron_secret", "s3cret")
        monkeypatch.setattr(settings, "resend_api_key", None)
        meeting = await MeetingRepository(session, TENANT_A).create(
            title="Vernerunde", scheduled_date=utcnow() + timedelta(hours=2),
        )
        session.add(ScheduledReminder(
            tenant_id=TENANT_A, user_id=seed.alice.id, type="MEETING_UPCOMING",
            entity_type="Meeting", entity_id=meeting.id, title=meeting.title,
            scheduled_for=utcnow() - timedelta(hours=1),
        ))
        await session.commit()

        response = await client.post(f"{API}/reminders/dispatch", headers={"Authorization": "Bearer s3cret"})

        assert response.status_code == 200
        assert response.json()["data"] == {"sent": 1, "failed": 0}


class TestSdsEndpoints:
    async def test_match_is_read_only(self, client):
        chemical = await _create_chemical(client)

        response = await client.post(
            f"{API}/chemicals/sds/match",
            json={"emails": [{
                "id": "m1", "subject": "SDS", "from": "docs@distributor.no",
                "attachments": [{"id": "a1", "name": "Sikaflex 11FC_101688_SDS.pdf"}],
            }]},
        )

        [match] = response.json()["data"]
        assert match["decision"] == "AUTO_APPLY"
        assert match["chemicalId"] == chemical["id"]
        assert match["confidence"] == pytest.approx(1.4)
        stored = (await client.get(f"{API}/chemicals/{chemical['id']}")).json()["data"]
        assert stored["sdsFileName"] is None

    async def test_inbox_process(self, app, client, mailbox):
        chemical = await _create_chemical(client)
        mailbox.emails = [EmailMessage(
            id="m1", subject="SDS", sender="docs@distributor.no",
            received_at=datetime(2026, 2, 20, tzinfo=timezone.utc),
            attachments=[EmailAttachment(id="a1", name="sikaflex 11fc_101688_sds.pdf")],
        )]
        app.dependency_overrides[get_sds_mailbox] = lambda: mailbox
        app.dependency_overrides[get_sds_parser] = lambda: _fake_parser(
            SDSExtraction(hazard_statements=["H334 Kan gi astma"], signal_word="FARE", confidence=0.95)
        )

        response = await client.post(f"{API}/chemicals/sds/inbox/process", params={"days": 3})

        assert response.status_code == 200
        assert response.json()["data"] == {"emailsScanned": 1, "processed": 1, "suggestions": []}
        assert mailbox.searched_since > utcnow() - timedelta(days=3, minutes=1)
        stored = (await client.get(f"{API}/chemicals/{chemical['id']}")).json()["data"]
        assert stored["sdsSource"] == "email"
        assert stored["signalWord"] == "FARE"

    async def test_inbox_without_mailbox_configuration(self, client, monkeypatch):
        monkeypatch.setattr(settings, "graph_client_secret", None)

        response = await client.post(f"{API}/chemicals/sds/inbox/process")

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "SDS_MAILBOX_NOT_CONFIGURED"

    async def test_upload_sds(self, app, client):
        chemical = await _create_chemical(client)
        app.dependency_overrides[get_sds_parser] = lambda: _fake_parser(
            SDSExtraction(hazard_statements=["H319 Gir alvorlig øyeirritasjon"], confidence=0.6)
        )

        response = await client.post(
            f"{API}/chemicals/{chemical['id']}/sds",
            files={"file": ("sikaflex.pdf", b"%PDF-1.4 test", "application/pdf")},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["sdsSource"] == "upload"
        assert data["sdsFileName"] == "sikaflex.pdf"
        assert data["requiredPpe"] == ["ISO_7010_M004.svg.png"]

    async def test_upload_rejects_non_pdf(self, client):
        chemical = await _create_chemical(client)

        response = await client.post(
            f"{API}/chemicals/{chemical['id']}/sds",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 415
        assert response.json()["error"]["code"] == "UNSUPPORTED_MEDIA_TYPE"

    async def test_upload_rejects_empty_file(self, client):
        chemical = await _create_chemical(client)

        response = await client.post(
            f"{API}/chemicals/{chemical['id']}/sds",
            files={"file": ("empty.pdf", b"", "application/pdf")},
        )

        assert response.status_code == 422


class TestEnvironmentAndWorkersComp:
    async def test_aspect_and_measurement(self, client):
        aspect = (await client.post(
            f"{API}/environment/aspects",
            json={"title": "Avfall", "category": "WASTE", "severity": 2, "likelihood": 4},
        )).json()["data"]
        assert aspect["significanceScore"] == 8

        measurement = await client.post(
            f"{API}/environment/aspects/{aspect['id']}/measurements",
            json={
                "parameter": "Restavfall", "unit": "kg", "measuredValue": 120, "limitValue": 100,
                "measurementDate": "2026-01-31T00:00:00Z",
            },
        )
        assert measurement.status_code == 201
        assert measurement.json()["data"]["status"] == "NON_COMPLIANT"

        assert (await client.delete(f"{API}/environment/aspects/{aspect['id']}")).status_code == 204

    async def test_claims_and_summary(self, client):
        claim = (await client.post(
            f"{API}/workers-comp/claims",
            json={
                "claimNumber": "WC-100", "carrierName": "Tryg", "claimantName": "Ola",
                "injuryDate": "2025-10-01", "reportedDate": "2025-10-02",
            },
        )).json()["data"]
        await client.post(f"{API}/workers-comp/claims/{claim['id']}/close", json={"paidAmount": 900})
        again = await client.post(f"{API}/workers-comp/claims/{claim['id']}/close", json={})
        await client.put(f"{API}/workers-comp/emr", json={"year": 2025, "emrValue": 0.92})

        summary = (await client.get(f"{API}/workers-comp/summary")).json()["data"]

        assert again.status_code == 409
        assert summary["totalClaims"] == 1
        assert summary["openClaims"] == 0
        assert summary["totalPaid"] == 900
        assert summary["currentEmr"]["emrValue"] == 0.92


class TestIncidentEndpoints:
    async def _report(self, client, title, **extra):
        body = {
            "incidentType": "SKADE", "title": title, "description": "Registrert fra verkstedet.",
            "severity": 3, "occurredAt": "2025-06-01T13:30:00Z", "reportedBy": "Alice",
        }
        body.update(extra)
        response = await client.post(f"{API}/incidents", json=body)
        assert response.status_code == 201
        return response.json()["data"]

    async def test_reported_incidents_feed_the_300a_rates(self, client):
        cut = await self._report(client, "Kuttskade vinkelsliper")
        strain = await self._report(client, "Belastningsskade lager")
        await self._report(client, "Nestenulykke truck", incidentType="NESTEN")

        await client.put(
            f"{API}/osha/incidents/{cut['id']}/recordable",
            json={
                "oshaRecordable": True, "oshaClassification": "DAYS_AWAY", "eventType": "INJURY",
                "daysAwayFromWork": 5, "osha300LogYear": 2025,
            },
        )
        await client.put(
            f"{API}/osha/incidents/{strain['id']}/recordable",
            json={
                "oshaRecordable": True, "oshaClassification": "OTHER_RECORDABLE", "eventType": "INJURY",
                "osha300LogYear": 2025,
            },
        )
        log = (await client.put(
            f"{API}/osha/logs", json={"year": 2025, "totalHoursWorked": 200000, "avgEmployeeCount": 100},
        )).json()["data"]

        assert (log["totalDaysAway"], log["totalOtherRecordable"], log["totalInjuries"]) == (1, 1, 2)
        assert (log["trir"], log["dartRate"], log["ltir"], log["severityRate"]) == (2.0, 1.0, 1.0, 5.0)

    async def test_lifecycle(self, client):
        incident = await self._report(client, "Oljesøl ved tank", incidentType="MILJO", location="")
        assert incident["status"] == "OPEN"
        assert incident["location"] is None

        updated = (await client.put(f"{API}/incidents/{incident['id']}", json={"severity": 4})).json()["data"]
        investigated = (await client.post(
            f"{API}/incidents/{incident['id']}/investigate",
            json={"rootCause": "Defekt pakning på påfyllingsventil", "investigatedBy": "Bob"},
        )).json()["data"]
        closed = (await client.post(
            f"{API}/incidents/{incident['id']}/close",
            json={"closedBy": "Alice", "effectivenessReview": "Pakning byttet, ingen nye lekkasjer."},
        )).json()["data"]
        listed = (await client.get(f"{API}/incidents", params={"status": "CLOSED"})).json()
        stats = (await client.get(f"{API}/incidents/stats")).json()["data"]

        assert updated["severity"] == 4
        assert investigated["status"] == "INVESTIGATING"
        assert closed["status"] == "CLOSED"
        assert listed["meta"]["total"] == 1
        assert stats["byType"] == {"MILJO": 1}

        assert (await client.delete(f"{API}/incidents/{incident['id']}")).status_code == 204
        assert (await client.get(f"{API}/incidents/{incident['id']}")).status_code == 404

    async def test_invalid_payload(self, client):
        response = await client.post(f"{API}/incidents", json={"incidentType": "SKADE", "title": "x"})

        assert response.status_code == 422


class TestNotificationSettings:
    async def test_switching_off_meetings_suppresses_reminders(self, client, seed):
        url = f"{API}/users/{seed.alice.id}/notification-settings"
        response = await client.put(url, json={"notifyMeetings": False})
        assert response.status_code == 200
        assert response.json()["data"]["notifyMeetings"] is False

        meeting = (await client.post(
            f"{API}/meetings",
            json={"title": "AMU-møte", "scheduledDate": "2099-01-15T09:00:00Z", "participantIds": [seed.alice.id]},
        )).json()["data"]
        reminders = (await client.get(
            f"{API}/reminders", params={"entityType": "Meeting", "entityId": meeting["id"]},
        )).json()["data"]

        assert reminders == []
        assert (await client.get(url)).json()["data"]["notifyMeetings"] is False

    async def test_sms_without_phone_is_rejected(self, client, seed):
        response = await client.put(
            f"{API}/users/{seed.alice.id}/notification-settings", json={"notifyBySms": True},
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_other_tenants_users_are_not_found(self, client, seed):
        response = await client.get(f"{API}/users/{seed.outsider.id}/notification-settings")

        assert response.status_code == 404


async def test_write_requests_are_audited(client, session_factory):
    chemical = await _create_chemical(client)

    async with session_factory() as session:
        rows = (await session.execute(select(AuditLog))).scalars().all()

    [row] = rows
    assert row.tenant_id == TENANT_A
    assert row.action == "POST:201"
    assert row.resource == f"{API}/chemicals"
    assert row.metadata_json["entity_id"] is None
    assert chemical["id"]
