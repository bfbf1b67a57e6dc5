from app.models.audit import AuditLog, AuditLogType


def _create_log(db_session, person, action, **overrides):
    defaults = dict(
        action=action,
        type=AuditLogType.document,
        actor_id=person.id,
        actor_name=person.name,
        actor_email=person.email,
        actor_role=person.role.value,
        actor_department=person.department,
    )
    defaults.update(overrides)
    entry = AuditLog(**defaults)
    db_session.add(entry)
    db_session.commit()
    return entry


class TestAuditLogEndpoints:
    def test_add_log(self, client, auth_headers, person):
        resp = client.post(
            "/logs",
            json={"action": "Exported monthly register", "type": "system"},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["action"] == "Exported monthly register"
        assert data["actor_email"] == person.email
        assert data["actor_role"] == "user"
        assert data["actor_department"] == "Finance"

    def test_add_log_requires_action(self, client, auth_headers):
        resp = client.post("/logs", json={"type": "auth"}, headers=auth_headers)
        assert resp.status_code == 422

    def test_list_logs(self, client, admin_headers, db_session, person):
        _create_log(db_session, person, "first")
        _create_log(db_session, person, "second")
        resp = client.get("/logs", headers=admin_headers)
        assert resp.status_code == 200
        assert [e["action"] for e in resp.json()] == ["second", "first"]

    def test_list_logs_limit(self, client, admin_headers, db_session, person):
        for i in range(3):
            _create_log(db_session, person, f"entry {i}")
        resp = client.get("/logs?limit=2", headers=admin_headers)
        assert len(resp.json()) == 2

    def test_list_logs_limit_capped(self, client, admin_headers):
        resp = client.get("/logs?limit=5000", headers=admin_headers)
        assert resp.status_code == 422

    def test_list_logs_requires_admin(self, client, auth_headers):
        resp = client.get("/logs", headers=auth_headers)
        assert resp.status_code == 403
