import json
import time

from portfolio.core.config import settings
from portfolio.core.exceptions import RepositoryException
from portfolio.models.user_role import UserRole
from portfolio.models.webhook_event import WebhookEvent
from portfolio.repositories.user_role_repository import UserRoleRepository
from portfolio.routes.v1.webhooks_clerk import compute_svix_signature

URL = "/api/v1/webhooks/clerk"


def _deliver(client, payload, *, msg_id="msg_1", signature=None, timestamp=None):
    body = json.dumps(payload).encode()
    ts = timestamp or str(int(time.time()))
    secret = settings.clerk_webhook_secret.get_secret_value()
    sig = signature or f"v1,{compute_svix_signature(secret, msg_id, ts, body)}"
    return client.post(
        URL,
        content=body,
        headers={
            "svix-id": msg_id,
            "svix-timestamp": ts,
            "svix-signature": sig,
            "content-type": "application/json",
        },
    )


def _roles(db, user_id):
    return sorted(row.role for row in db.query(UserRole).filter(UserRole.user_id == user_id))


def _user_event(event_type, roles=None, user_id="user_1", **metadata):
    public = dict(metadata)
    if roles is not None:
        public["roles"] = roles
    return {"type": event_type, "data": {"id": user_id, "public_metadata": public}}


def test_missing_headers_rejected(client):
    response = client.post(URL, json={"type": "user.created"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing svix headers"


def test_bad_signature_rejected(client):
    response = _deliver(client, _user_event("user.created"), signature="v1,AAAA")
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid signature"


def test_stale_timestamp_rejected(client):
    response = _deliver(client, _user_event("user.created"), timestamp=str(int(time.time()) - 3600))
    assert response.status_code == 401
    assert response.json()["detail"] == "Stale webhook"


def test_user_created_grants_roles_and_logs_event(client, db):
    response = _deliver(client, _user_event("user.created", ["admin", "editor"]))

    assert response.json() == {"ok": True, "event_type": "user.created", "outcome": "processed", "duplicate": False}
    assert _roles(db, "user_1") == ["admin", "editor"]
    event = db.query(WebhookEvent).one()
    assert (event.status, event.related_user_id, event.event_id) == ("processed", "user_1", "msg_1")


def test_superadmin_flag_implies_admin(client, db):
    _deliver(client, _user_event("user.created", superAdmin=True))
    assert _roles(db, "user_1") == ["admin"]


def test_user_updated_prunes_roles(client, db):
    _deliver(client, _user_event("user.created", ["admin", "editor"]), msg_id="msg_1")
    _deliver(client, _user_event("user.updated", ["editor"]), msg_id="msg_2")
    assert _roles(db, "user_1") == ["editor"]


def test_user_deleted_removes_all_roles(client, db):
    _deliver(client, _user_event("user.created", ["admin"]), msg_id="msg_1")
    response = _deliver(client, {"type": "user.deleted", "data": {"id": "user_1", "deleted": True}}, msg_id="msg_2")

    assert response.json()["outcome"] == "processed"
    assert _roles(db, "user_1") == []


def test_redelivery_is_acknowledged_once(client, db):
    _deliver(client, _user_event("user.created", ["admin"]))

    again = _deliver(client, _user_event("user.created", ["admin"]))

    assert again.json()["duplicate"] is True
    assert db.query(WebhookEvent).count() == 1


def test_unhandled_event_is_ignored(client, db):
    response = _deliver(client, {"type": "session.created", "data": {"id": "sess_1"}})

    assert response.json()["outcome"] == "ignored"
    assert db.query(WebhookEvent).one().status == "ignored"


def test_processing_failure_is_recorded(client, db):
    response = _deliver(client, {"type": "user.created", "data": {}})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Webhook processing failed"}
    event = db.query(WebhookEvent).one()
    assert event.status == "failed"
    assert "no user id" in event.processing_error


def test_failed_delivery_is_retried(client, db):
    _deliver(client, {"type": "user.created", "data": {}})

    retry = _deliver(client, _user_event("user.created", ["viewer"]))

    assert retry.json()["outcome"] == "processed"
    event = db.query(WebhookEvent).one()
    assert event.retry_count == 1
    assert event.status == "processed"


def test_database_failure_during_processing_is_recorded(client, db, monkeypatch):
    def fail_add_role(self, user_id, role):
        raise RepositoryException("Failed to create UserRole: disk full")

    monkeypatch.setattr(UserRoleRepository, "add_role", fail_add_role)

    response = _deliver(client, _user_event("user.created", ["admin"]))

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Webhook processing failed"}
    event = db.query(WebhookEvent).one()
    assert event.status == "failed"
    assert "disk full" in event.processing_error
    assert _roles(db, "user_1") == []
