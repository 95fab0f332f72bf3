"""Tests for waitlists, entry positions and joining."""

from fastapi.testclient import TestClient

from waitify.repositories.waitlist import WaitlistEntryRepository


class TestWaitlistPositions:

    def test_first_entries_get_sequential_positions(self, fake_db, waitlist):
        first = WaitlistEntryRepository.add(waitlist["id"], guest_name="Ana")
        second = WaitlistEntryRepository.add(waitlist["id"], guest_name="Ben")
        assert first["position"] == 1
        assert second["position"] == 2

    def test_removed_position_is_not_reused(self, fake_db, waitlist):
        WaitlistEntryRepository.add(waitlist["id"], guest_name="Ana")
        last = WaitlistEntryRepository.add(waitlist["id"], guest_name="Ben")
        WaitlistEntryRepository.delete(last["id"])

        following = WaitlistEntryRepository.add(waitlist["id"], guest_name="Cy")
        assert following["position"] == 3

    def test_removal_does_not_renumber(self, fake_db, waitlist):
        first = WaitlistEntryRepository.add(waitlist["id"], guest_name="Ana")
        WaitlistEntryRepository.add(waitlist["id"], guest_name="Ben")
        WaitlistEntryRepository.delete(first["id"])

        remaining = WaitlistEntryRepository.get_by_waitlist(waitlist["id"])
        assert [e["position"] for e in remaining] == [2]

    def test_none_fields_are_not_sent(self, fake_db, waitlist):
        entry = WaitlistEntryRepository.add(waitlist["id"], guest_name="Ana", notes=None)
        assert "notes" not in entry


class TestWaitlistEndpoints:

    def test_create_and_list(self, business_client: TestClient):
        response = business_client.post("/waitlists", json={"name": "Lunch"})
        assert response.status_code == 201
        assert response.json()["name"] == "Lunch"

        response = business_client.get("/waitlists")
        assert response.status_code == 200
        assert [w["name"] for w in response.json()] == ["Lunch"]

    def test_free_plan_allows_one_waitlist(self, business_client: TestClient, waitlist):
        response = business_client.post("/waitlists", json={"name": "Second"})
        assert response.status_code == 403
        detail = response.json()["detail"]
        assert detail["code"] == "LIMIT_EXCEEDED"
        assert detail["limit"] == 1
        assert detail["current"] == 1

    def test_basic_plan_allows_three(self, business_client: TestClient, set_plan):
        set_plan("basic")
        for name in ("A", "B", "C"):
            assert business_client.post("/waitlists", json={"name": name}).status_code == 201
        assert business_client.post("/waitlists", json={"name": "D"}).status_code == 403

    def test_customer_cannot_manage_waitlists(self, client: TestClient, login, customer):
        login(customer)
        assert client.get("/waitlists").status_code == 403

    def test_anonymous_is_unauthorized(self, client: TestClient):
        assert client.get("/waitlists").status_code == 401

    def test_other_business_waitlist_is_not_found(self, client: TestClient, login, make_profile, waitlist):
        login(make_profile("business", business_name="Rival"))
        assert client.get(f"/waitlists/{waitlist['id']}").status_code == 404

    def test_update_and_delete(self, business_client: TestClient, waitlist):
        response = business_client.put(f"/waitlists/{waitlist['id']}", json={"is_active": False})
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        assert business_client.delete(f"/waitlists/{waitlist['id']}").status_code == 200
        assert business_client.get(f"/waitlists/{waitlist['id']}").status_code == 404

    def test_entries_in_position_order(self, business_client: TestClient, waitlist):
        for name in ("Ana", "Ben", "Cy"):
            response = business_client.post(f"/waitlists/{waitlist['id']}/entries", json={"guest_name": name})
            assert response.status_code == 201

        entries = business_client.get(f"/waitlists/{waitlist['id']}/entries").json()
        assert [e["guest_name"] for e in entries] == ["Ana", "Ben", "Cy"]
        assert [e["position"] for e in entries] == [1, 2, 3]

    def test_entry_needs_a_name_or_user(self, business_client: TestClient, waitlist):
        response = business_client.post(f"/waitlists/{waitlist['id']}/entries", json={})
        assert response.status_code == 400

    def test_any_status_transition_is_allowed(self, business_client: TestClient, waitlist):
        entry = business_client.post(
            f"/waitlists/{waitlist['id']}/entries", json={"guest_name": "Ana"}
        ).json()
        url = f"/waitlists/{waitlist['id']}/entries/{entry['id']}"

        assert business_client.put(url, json={"status": "seated"}).json()["status"] == "seated"
        assert business_client.put(url, json={"status": "waiting"}).json()["status"] == "waiting"

    def test_invalid_status_rejected(self, business_client: TestClient, waitlist):
        entry = business_client.post(
            f"/waitlists/{waitlist['id']}/entries", json={"guest_name": "Ana"}
        ).json()
        response = business_client.put(
            f"/waitlists/{waitlist['id']}/entries/{entry['id']}", json={"status": "eaten"}
        )
        assert response.status_code == 422

    def test_remove_entry_then_next_position(self, business_client: TestClient, waitlist):
        url = f"/waitlists/{waitlist['id']}/entries"
        business_client.post(url, json={"guest_name": "Ana"})
        ben = business_client.post(url, json={"guest_name": "Ben"}).json()

        assert business_client.delete(f"{url}/{ben['id']}").status_code == 200
        assert business_client.post(url, json={"guest_name": "Cy"}).json()["position"] == 3

    def test_qr_code(self, business_client: TestClient, waitlist):
        response = business_client.get(f"/waitlists/{waitlist['id']}/qr")
        assert response.status_code == 200
        data = response.json()
        assert data["url"].endswith(f"/join-waitlist/{waitlist['id']}")
        assert data["qr_code"].startswith("data:image/png;base64,")


class TestJoiningAsCustomer:

    def test_join_and_list_my_entries(self, client: TestClient, login, customer, waitlist):
        login(customer)
        response = client.post(f"/waitlists/{waitlist['id']}/join")
        assert response.status_code == 201
        assert response.json()["position"] == 1

        mine = client.get("/me/waitlist-entries").json()
        assert [e["waitlist_id"] for e in mine] == [waitlist["id"]]

    def test_cannot_join_twice(self, client: TestClient, login, customer, waitlist):
        login(customer)
        client.post(f"/waitlists/{waitlist['id']}/join")
        assert client.post(f"/waitlists/{waitlist['id']}/join").status_code == 400

    def test_leave_waitlist(self, client: TestClient, login, customer, waitlist):
        login(customer)
        entry = client.post(f"/waitlists/{waitlist['id']}/join").json()
        response = client.post(f"/me/waitlist-entries/{entry['id']}/cancel")
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_full_waitlist_rejects_join(self, client: TestClient, login, customer, fake_db, waitlist):
        fake_db.rows("waitlists")[0]["max_capacity"] = 1
        WaitlistEntryRepository.add(waitlist["id"], guest_name="Ana", status="waiting")

        login(customer)
        response = client.post(f"/waitlists/{waitlist['id']}/join")
        assert response.status_code == 400
        assert response.json()["detail"] == "This waitlist is full"
