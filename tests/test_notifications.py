"""Tests for sending and reading notifications."""

import pytest
from fastapi.testclient import TestClient

from waitify.repositories.waitlist import WaitlistEntryRepository


class FakeEmailService:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send_notification_email(self, to, subject, message):
        if self.fail:
            raise RuntimeError("Resend is down")
        self.sent.append((to, subject, message))
        return True

    def send_waitlist_ready_email(self, to, customer_name, business_name, waitlist_name):
        self.sent.append((to, business_name, waitlist_name))
        return True


@pytest.fixture
def email_service(monkeypatch) -> FakeEmailService:
    service = FakeEmailService()
    monkeypatch.setattr("waitify.services.notifications.get_email_service", lambda: service)
    monkeypatch.setattr("waitify.api.routes.waitlists.get_email_service", lambda: service)
    return service


class TestSendNotification:

    def test_in_app_notification(self, business_client: TestClient, fake_db, customer, email_service):
        response = business_client.post("/notifications/send", json={
            "userId": customer["id"],
            "message": "Your table is almost ready",
            "type": "general",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["email_sent"] is False
        assert fake_db.rows("notifications")[0]["title"] == "Notification"
        assert email_service.sent == []

    def test_email_notification(self, business_client: TestClient, customer, email_service):
        response = business_client.post("/notifications/send", json={
            "userId": customer["id"],
            "message": "See you soon",
            "type": "email",
            "email": "ana@example.com",
            "subject": "Reminder",
        })
        assert response.json()["email_sent"] is True
        assert email_service.sent == [("ana@example.com", "Reminder", "See you soon")]

    def test_email_failure_still_succeeds(self, business_client: TestClient, fake_db, customer, email_service):
        email_service.fail = True
        response = business_client.post("/notifications/send", json={
            "userId": customer["id"],
            "message": "See you soon",
            "type": "email",
            "email": "ana@example.com",
            "subject": "Reminder",
        })
        assert response.status_code == 200
        assert response.json()["email_sent"] is False
        assert len(fake_db.rows("notifications")) == 1

    def test_waitlist_notification_marks_entry_notified(self, business_client: TestClient, customer, waitlist, email_service):
        entry = WaitlistEntryRepository.add(waitlist["id"], user_id=customer["id"])
        response = business_client.post("/notifications/send", json={
            "userId": customer["id"],
            "message": "Your table is ready",
            "type": "waitlist",
            "waitlistId": waitlist["id"],
            "entryId": entry["id"],
        })
        assert response.json()["entry_updated"] is True
        assert WaitlistEntryRepository.get_by_id(entry["id"])["status"] == "notified"

    def test_sms_requires_plan_feature(self, business_client: TestClient, customer, set_plan, email_service):
        body = {
            "userId": customer["id"],
            "message": "Your table is ready",
            "type": "waitlist",
            "phoneNumber": "+15550100",
        }
        response = business_client.post("/notifications/send", json=body)
        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "FEATURE_NOT_AVAILABLE"

        set_plan("professional")
        response = business_client.post("/notifications/send", json=body)
        assert response.status_code == 200
        assert response.json()["sms_sent"] is False

    def test_foreign_waitlist_rejected(self, client: TestClient, login, make_profile, customer, waitlist):
        login(make_profile("business", business_name="Rival"))
        response = client.post("/notifications/send", json={
            "userId": customer["id"],
            "message": "hi",
            "type": "waitlist",
            "waitlistId": waitlist["id"],
        })
        assert response.status_code == 404

    def test_entry_from_another_business_rejected(self, client: TestClient, fake_db, login, make_profile, customer, waitlist):
        victim_entry = WaitlistEntryRepository.add(waitlist["id"], user_id=customer["id"])
        rival = make_profile("business", business_name="Rival")
        rival_waitlist = fake_db.insert("waitlists", {"business_id": rival["id"], "name": "Lunch", "is_active": True})

        login(rival)
        response = client.post("/notifications/send", json={
            "userId": customer["id"],
            "message": "Your table is ready",
            "type": "waitlist",
            "waitlistId": rival_waitlist["id"],
            "entryId": victim_entry["id"],
        })

        assert response.status_code == 404
        assert WaitlistEntryRepository.get_by_id(victim_entry["id"])["status"] == "waiting"
        assert fake_db.rows("notifications") == []

    def test_entry_without_waitlist_must_be_owned(self, client: TestClient, fake_db, login, make_profile, customer, waitlist):
        entry = WaitlistEntryRepository.add(waitlist["id"], user_id=customer["id"])
        login(make_profile("business", business_name="Rival"))
        response = client.post("/notifications/send", json={
            "userId": customer["id"],
            "message": "hi",
            "entryId": entry["id"],
        })
        assert response.status_code == 404

    def test_get_email_action(self, business_client: TestClient, customer):
        response = business_client.post("/notifications/send", json={"action": "get-email", "userId": customer["id"]})
        assert response.json() == {"email": "ana@example.com"}

    def test_message_required(self, business_client: TestClient, customer):
        response = business_client.post("/notifications/send", json={"userId": customer["id"]})
        assert response.status_code == 400

    def test_customers_cannot_send(self, client: TestClient, login, customer):
        login(customer)
        response = client.post("/notifications/send", json={"userId": customer["id"], "message": "hi"})
        assert response.status_code == 403


class TestGuestReadyEmail:

    def test_notifying_guest_entry_emails_them(self, business_client: TestClient, waitlist, email_service):
        entry = WaitlistEntryRepository.add(waitlist["id"], guest_name="Walk In", guest_email="walkin@example.com")
        response = business_client.put(
            f"/waitlists/{waitlist['id']}/entries/{entry['id']}", json={"status": "notified"}
        )
        assert response.status_code == 200
        assert email_service.sent == [("walkin@example.com", "Luigi's", "Dinner")]


class TestMyNotifications:

    def test_list_read_and_delete(self, client: TestClient, fake_db, login, customer):
        first = fake_db.insert("notifications", {"user_id": customer["id"], "title": "A", "message": "a", "type": "general", "is_read": False})
        fake_db.insert("notifications", {"user_id": customer["id"], "title": "B", "message": "b", "type": "general", "is_read": False})
        fake_db.insert("notifications", {"user_id": "someone-else", "title": "C", "message": "c", "type": "general", "is_read": False})

        login(customer)
        assert len(client.get("/me/notifications").json()) == 2

        assert client.put(f"/me/notifications/{first['id']}/read").json()["is_read"] is True
        assert client.put("/me/notifications/read-all").json() == {"updated": 1}

        assert client.delete(f"/me/notifications/{first['id']}").status_code == 200
        assert len(client.get("/me/notifications").json()) == 1

    def test_cannot_touch_others_notifications(self, client: TestClient, fake_db, login, customer):
        other = fake_db.insert("notifications", {"user_id": "someone-else", "title": "C", "message": "c", "type": "general", "is_read": False})
        login(customer)
        assert client.put(f"/me/notifications/{other['id']}/read").status_code == 404
