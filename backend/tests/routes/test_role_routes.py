from tests.helpers import SUPER_ADMIN_USER_ID, VISITOR_USER_ID, as_user


def test_me_requires_authentication(client):
    assert client.get("/api/v1/admin/roles/me").status_code == 401


def test_self_sync_pulls_roles_from_clerk(client, clerk_stub):
    clerk_stub.metadata[VISITOR_USER_ID] = {"roles": ["editor", "owner"]}

    report = client.post("/api/v1/admin/roles/sync", headers=as_user(VISITOR_USER_ID)).json()

    assert report["added"] == ["editor"]
    assert report["supabase_roles"] == ["editor"]
    assert report["admin_role_assigned"] is False
    me = client.get("/api/v1/admin/roles/me", headers=as_user(VISITOR_USER_ID)).json()
    assert me == {"user_id": VISITOR_USER_ID, "roles": ["editor"], "is_admin": False}


def test_super_admin_sync_grants_admin(client):
    report = client.post("/api/v1/admin/roles/sync", headers=as_user(SUPER_ADMIN_USER_ID)).json()

    assert report["is_super_admin"] is True
    assert report["admin_role_assigned"] is True


def test_syncing_someone_else_needs_super_admin(client, clerk_stub):
    clerk_stub.metadata["user_other"] = {"roles": ["viewer"]}

    denied = client.post(
        "/api/v1/admin/roles/sync", json={"userId": "user_other"}, headers=as_user(VISITOR_USER_ID)
    )
    assert denied.status_code == 403

    allowed = client.post(
        "/api/v1/admin/roles/sync", json={"userId": "user_other"}, headers=as_user(SUPER_ADMIN_USER_ID)
    )
    assert allowed.json()["supabase_roles"] == ["viewer"]


def test_clerk_outage_surfaces_as_bad_gateway(client, clerk_stub):
    clerk_stub.fail_with = 503

    response = client.post("/api/v1/admin/roles/sync", headers=as_user(VISITOR_USER_ID))

    assert response.status_code == 502
    assert response.json()["code"] == "CLERK_USER_LOOKUP_FAILED"


def test_toggle_role_mirrors_into_clerk(client, clerk_stub):
    added = client.post(
        "/api/v1/admin/roles/toggle",
        json={"userId": "user_other", "role": "admin", "action": "add"},
        headers=as_user(SUPER_ADMIN_USER_ID),
    ).json()

    assert added["changed"] is True
    assert added["roles"] == ["admin"]
    assert added["clerk_synced"] is True
    assert clerk_stub.role_writes[-1] == ("user_other", ["admin"])

    removed = client.post(
        "/api/v1/admin/roles/toggle",
        json={"userId": "user_other", "role": "admin", "action": "remove"},
        headers=as_user(SUPER_ADMIN_USER_ID),
    ).json()
    assert removed["roles"] == []


def test_toggle_role_validation(client):
    bad_action = client.post(
        "/api/v1/admin/roles/toggle",
        json={"userId": "user_other", "role": "admin", "action": "flip"},
        headers=as_user(SUPER_ADMIN_USER_ID),
    )
    assert bad_action.status_code == 400
    assert bad_action.json()["code"] == "INVALID_ACTION"

    bad_role = client.post(
        "/api/v1/admin/roles/toggle",
        json={"userId": "user_other", "role": "owner", "action": "add"},
        headers=as_user(SUPER_ADMIN_USER_ID),
    )
    assert bad_role.json()["code"] == "INVALID_ROLE"


def test_toggle_requires_super_admin(client, admin_user):
    response = client.post(
        "/api/v1/admin/roles/toggle",
        json={"userId": "user_other", "role": "admin", "action": "add"},
        headers=as_user(admin_user),
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Super admin access required"


def test_lookup_other_user_roles(client, admin_user, grant_role):
    grant_role("user_other", "viewer")

    response = client.get("/api/v1/admin/roles/user_other", headers=as_user(admin_user))

    assert response.json() == {"user_id": "user_other", "roles": ["viewer"], "is_admin": False}
    assert client.get("/api/v1/admin/roles/user_other", headers=as_user(VISITOR_USER_ID)).status_code == 403
