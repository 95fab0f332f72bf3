"""Tests for floor tables and reservations."""

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient


def days_from_today(n: int) -> str:
    return (datetime.now(timezone.utc).date() + timedelta(days=n)).isoformat()


def create_table(client: TestClient, number: int = 1, capacity: int = 4) -> dict:
    response = client.post("/tables", json={"number": number, "capacity": capacity})
    assert response.status_code == 201
    return response.json()


class TestTables:

    def test_create_and_list_by_number(self, business_client: TestClient):
        create_table(business_client, number=2)
        create_table(business_client, number=1)
        tables = business_client.get("/tables").json()
        assert [t["number"] for t in tables] == [1, 2]
        assert all(t["status"] == "available" for t in tables)

    def test_duplicate_number_rejected(self, business_client: TestClient):
        create_table(business_client, number=1)
        response = business_client.post("/tables", json={"number": 1, "capacity": 2})
        assert response.status_code == 400

    def test_seat_and_clear(self, business_client: TestClient):
        table = create_table(business_client)
        assert business_client.post(f"/tables/{table['id']}/seat").json()["status"] == "occupied"
        assert business_client.post(f"/tables/{table['id']}/clear").json()["status"] == "available"

    def test_cancel_requires_reserved_table(self, business_client: TestClient):
        table = create_table(business_client)
        assert business_client.post(f"/tables/{table['id']}/cancel").status_code == 400

    def test_filter_by_status(self, business_client: TestClient):
        first = create_table(business_client, number=1)
        create_table(business_client, number=2)
        business_client.post(f"/tables/{first['id']}/seat")

        occupied = business_client.get("/tables", params={"status": "occupied"}).json()
        assert [t["id"] for t in occupied] == [first["id"]]


class TestReservations:

    def reserve(self, client: TestClient, table_id: str, party_size: int = 2, day: str = "2026-11-01", name: str = "Ana"):
        return client.post("/reservations", json={
            "table_id": table_id,
            "customer_name": name,
            "date": day,
            "time": "19:30",
            "party_size": party_size,
        })

    def test_reservation_marks_table_reserved(self, business_client: TestClient, fake_db):
        table = create_table(business_client)
        response = self.reserve(business_client, table["id"])
        assert response.status_code == 201
        assert fake_db.rows("tables")[0]["status"] == "reserved"

    def test_party_larger_than_table(self, business_client: TestClient):
        table = create_table(business_client, capacity=2)
        assert self.reserve(business_client, table["id"], party_size=6).status_code == 400

    def test_cancel_reservation_frees_table(self, business_client: TestClient, fake_db):
        table = create_table(business_client)
        reservation = self.reserve(business_client, table["id"]).json()

        response = business_client.delete(f"/reservations/{reservation['id']}")
        assert response.status_code == 200
        assert fake_db.rows("reservations") == []
        assert fake_db.rows("tables")[0]["status"] == "available"

    def test_cancel_on_table_releases_nearest_reservation(self, business_client: TestClient, fake_db):
        table = create_table(business_client)
        tonight = self.reserve(business_client, table["id"], day=days_from_today(0), name="Tonight").json()
        self.reserve(business_client, table["id"], day=days_from_today(1), name="Tomorrow")
        self.reserve(business_client, table["id"], day=days_from_today(-2), name="Last week")

        response = business_client.post(f"/tables/{table['id']}/cancel")
        assert response.status_code == 200
        assert response.json()["status"] == "available"

        remaining = {r["customer_name"] for r in fake_db.rows("reservations")}
        assert remaining == {"Tomorrow", "Last week"}
        assert tonight["id"] not in [r["id"] for r in fake_db.rows("reservations")]

    def test_clearing_table_keeps_reservations(self, business_client: TestClient, fake_db):
        table = create_table(business_client)
        self.reserve(business_client, table["id"], day=days_from_today(0), name="Tonight")
        self.reserve(business_client, table["id"], day=days_from_today(1), name="Tomorrow")
        business_client.post(f"/tables/{table['id']}/seat")

        response = business_client.post(f"/tables/{table['id']}/clear")
        assert response.status_code == 200
        assert response.json()["status"] == "available"
        assert len(fake_db.rows("reservations")) == 2

    def test_marking_available_keeps_reservations(self, business_client: TestClient, fake_db):
        table = create_table(business_client)
        self.reserve(business_client, table["id"], day=days_from_today(1))

        response = business_client.put(f"/tables/{table['id']}", json={"status": "available"})
        assert response.json()["status"] == "available"
        assert len(fake_db.rows("reservations")) == 1

    def test_list_by_date(self, business_client: TestClient):
        table = create_table(business_client)
        self.reserve(business_client, table["id"])
        assert len(business_client.get("/reservations", params={"date": "2026-11-01"}).json()) == 1
        assert business_client.get("/reservations", params={"date": "2026-11-02"}).json() == []

    def test_cannot_reserve_other_business_table(self, client: TestClient, login, make_profile, fake_db):
        rival = make_profile("business", business_name="Rival")
        table = fake_db.insert("tables", {"business_id": rival["id"], "number": 1, "capacity": 4, "status": "available"})

        login(make_profile("business", business_name="Mine"))
        assert self.reserve(client, table["id"]).status_code == 404
