"""HTTP tests for in-app notifications."""


def _publish(client, headers, **body):
    body.setdefault("title", "Monsoon sale")
    body.setdefault("message", "20% off on Ayurvedic products")
    response = client.post("/notifications", headers=headers, json=body)
    assert response.status_code == 201
    return response.json()["notification_id"]


class TestAdminNotifications:
    def test_create_requires_admin(self, client, customer_headers):
        response = client.post("/notifications", headers=customer_headers, json={"title": "x", "message": "y"})
        assert response.status_code == 403

    def test_title_and_message_required(self, client, admin_headers):
        response = client.post("/notifications", headers=admin_headers, json={"title": "Only a title"})
        assert response.status_code == 400
        assert response.json()["message"] == "Title and message are required"

    def test_list_all(self, client, admin_headers):
        _publish(client, admin_headers, title="First")
        _publish(client, admin_headers, title="Second")

        notifications = client.get("/notifications/all", headers=admin_headers).json()
        assert {n["title"] for n in notifications} == {"First", "Second"}
        assert all(n["read_count"] == 0 for n in notifications)

    def test_update(self, client, admin_headers):
        notification_id = _publish(client, admin_headers)
        response = client.put(
            f"/notifications/{notification_id}",
            headers=admin_headers,
            json={"title": "Flash sale", "type": "success"},
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Flash sale"
        assert response.json()["type"] == "success"

    def test_delete(self, client, admin_headers):
        notification_id = _publish(client, admin_headers)
        assert client.delete(f"/notifications/{notification_id}", headers=admin_headers).status_code == 200
        assert client.get("/notifications/all", headers=admin_headers).json() == []

    def test_delete_unknown(self, client, admin_headers):
        response = client.delete("/notifications/missing", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Notification not found"


class TestMyNotifications:
    def test_specific_recipients(self, client, admin_headers, customer, customer_headers, make_user, auth_headers):
        other = make_user(name="Ravi")
        _publish(client, admin_headers, recipientType="specific", recipients=[customer.id])

        assert len(client.get("/notifications/my", headers=customer_headers).json()) == 1
        assert client.get("/notifications/my", headers=auth_headers(other)).json() == []

    def test_read_flow(self, client, admin_headers, customer_headers):
        notification_id = _publish(client, admin_headers)
        assert client.get("/notifications/unread-count", headers=customer_headers).json() == {"unread_count": 1}

        for _ in range(2):
            response = client.put(f"/notifications/read/{notification_id}", headers=customer_headers)
            assert response.status_code == 200

        assert client.get("/notifications/unread-count", headers=customer_headers).json() == {"unread_count": 0}
        mine = client.get("/notifications/my", headers=customer_headers).json()
        assert mine[0]["is_read"] is True
        assert mine[0]["read_at"] is not None

        all_notifications = client.get("/notifications/all", headers=admin_headers).json()
        assert all_notifications[0]["read_count"] == 1

    def test_requires_login(self, client):
        assert client.get("/notifications/my").status_code == 401
