"""
HTTP surface tests.

Tests cover:
- Identity header handling (401 missing/malformed, 403 unknown identity)
- Domain error mapping (404 / 403 / 409 / 503 + Retry-After)
- Happy-path inquiry routing over HTTP
"""

import uuid

import pytest

from opsdesk.db.models import QuickReplyTemplate


def as_user(user_id) -> dict[str, str]:
    """Gateway identity header for ``user_id``."""
    return {"X-User-Id": str(user_id)}


@pytest.mark.asyncio
async def test_missing_identity_header(client, org):
    resp = await client.get("/inquiries")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_malformed_identity_header(client, org):
    resp = await client.get("/inquiries", headers={"X-User-Id": "not-a-uuid"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_unknown_identity_is_forbidden(client, org):
    resp = await client.get("/inquiries", headers=as_user(uuid.uuid4()))
    assert resp.status_code == 403
    assert resp.json()["kind"] == "forbidden"


@pytest.mark.asyncio
async def test_inquiry_routing_flow(client, org):
    resp = await client.post(
        "/inquiries",
        json={"type": "payment", "subject": "Double charge", "message": "I was charged twice."},
        headers=as_user(org.customer.id),
    )
    assert resp.status_code == 201, resp.text
    inquiry_id = resp.json()["id"]
    assert resp.json()["status"] == "OPEN"
    assert resp.json()["internal_notes"] is None

    resp = await client.post(
        f"/inquiries/{inquiry_id}/messages",
        json={"message": "Looking into it"},
        headers=as_user(org.cs_agent.user_id),
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["assigned_to_staff_id"] == str(org.cs_agent.id)
    assert resp.json()["status"] == "IN_PROGRESS"

    resp = await client.post(
        f"/inquiries/{inquiry_id}/notes",
        json={"note": "Refund needs finance"},
        headers=as_user(org.cs_agent.user_id),
    )
    assert resp.status_code == 201, resp.text

    resp = await client.post(
        f"/inquiries/{inquiry_id}/escalate",
        json={"to_department_id": str(org.fin.id)},
        headers=as_user(org.cs_agent.user_id),
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "ESCALATED"
    assert resp.json()["department_id"] == str(org.fin.id)

    resp = await client.get(f"/inquiries/{inquiry_id}", headers=as_user(org.customer.id))
    assert resp.status_code == 200
    assert resp.json()["internal_notes"] is None
    assert len(resp.json()["messages"]) == 2

    resp = await client.get(f"/inquiries/{inquiry_id}/audit", headers=as_user(org.fin_agent.user_id))
    assert resp.status_code == 200
    assert {row["action"] for row in resp.json()} == {"CREATED", "ASSIGNED", "STATUS_CHANGED", "ESCALATED"}


@pytest.mark.asyncio
async def test_list_inquiries_is_scoped(client, org, file_inquiry):
    mine = file_inquiry()
    file_inquiry(org.other_customer)

    resp = await client.get("/inquiries", headers=as_user(org.customer.id))
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert [item["id"] for item in body["items"]] == [str(mine.id)]

    resp = await client.get("/inquiries?limit=1&page=2", headers=as_user(org.cs_agent.user_id))
    assert resp.json()["total"] == 2
    assert len(resp.json()["items"]) == 1


@pytest.mark.asyncio
async def test_not_found_maps_to_404(client, org):
    resp = await client.get(f"/inquiries/{uuid.uuid4()}", headers=as_user(org.admin.id))
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Inquiry not found", "kind": "not_found"}


@pytest.mark.asyncio
async def test_cross_department_assign_maps_to_403(client, org, file_inquiry):
    inquiry = file_inquiry()
    resp = await client.post(
        f"/inquiries/{inquiry.id}/assign",
        json={"staff_profile_id": str(org.fin_agent.id)},
        headers=as_user(org.cs_agent.user_id),
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_closed_inquiry_maps_to_409(client, org, file_inquiry):
    inquiry = file_inquiry()
    headers = as_user(org.cs_agent.user_id)

    resp = await client.patch(f"/inquiries/{inquiry.id}/status", json={"status": "CLOSED"}, headers=headers)
    assert resp.status_code == 200, resp.text

    resp = await client.patch(f"/inquiries/{inquiry.id}/status", json={"status": "OPEN"}, headers=headers)
    assert resp.status_code == 409
    assert resp.json()["kind"] == "invalid_state"


@pytest.mark.asyncio
async def test_overview_requires_admin(client, org):
    resp = await client.get("/inquiries/overview", headers=as_user(org.cs_agent.user_id))
    assert resp.status_code == 403

    resp = await client.get("/inquiries/overview?days=7", headers=as_user(org.admin.id))
    assert resp.status_code == 200
    assert resp.json()["totals"]["total"] == 0


@pytest.mark.asyncio
async def test_template_endpoints(client, org):
    headers = as_user(org.cs_agent.user_id)

    resp = await client.get("/inquiries/templates?type=order", headers=headers)
    assert resp.status_code == 200
    assert {t["type"] for t in resp.json()} == {"COMMON", "order"}

    resp = await client.post(
        "/inquiries/templates",
        json={"title": "Tracking link", "body": "Here is your tracking link for the parcel.", "type": "order"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    template_id = resp.json()["id"]

    resp = await client.patch(
        f"/inquiries/templates/{template_id}", json={"title": "Parcel tracking"}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["title"] == "Parcel tracking"

    resp = await client.delete(f"/inquiries/templates/{template_id}", headers=headers)
    assert resp.status_code == 204


@pytest.mark.asyncio
async def test_unavailable_templates_map_to_503(client, org, engine):
    QuickReplyTemplate.__table__.drop(engine)
    headers = as_user(org.cs_agent.user_id)

    resp = await client.get("/inquiries/templates", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == []

    resp = await client.post(
        "/inquiries/templates",
        json={"title": "Tracking link", "body": "Here is your tracking link for the parcel."},
        headers=headers,
    )
    assert resp.status_code == 503
    assert resp.headers["Retry-After"] == "30"
    assert resp.json()["kind"] == "unavailable"


@pytest.mark.asyncio
async def test_contact_submission(client, org):
    resp = await client.post(
        "/contact",
        json={
            "type": "business",
            "name": "Pat Partner",
            "email": "pat@partner.io",
            "message": "We would like to stock your titles.",
        },
    )
    assert resp.status_code == 202, resp.text
    assert resp.json()["routed"] is True
    assert resp.json()["department_id"] == str(org.fin.id)


@pytest.mark.asyncio
async def test_contact_submission_validates_email(client, org):
    resp = await client.post(
        "/contact",
        json={"type": "support", "name": "Pat", "email": "not-an-email", "message": "Hi"},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_staff_directory(client, org):
    resp = await client.get("/staff", headers=as_user(org.admin.id))
    assert resp.status_code == 200
    assert len(resp.json()) == 3
