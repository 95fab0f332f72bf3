"""Tests for profile registration, the profile page and admin role management."""

from fastapi.testclient import TestClient


class TestProfileRegistration:

    def test_create_customer_profile(self, client: TestClient, fake_db, login):
        fake_db.auth_users["new-user"] = "sam@example.com"
        login({"id": "new-user"})

        response = client.post("/profile", json={
            "first_name": "Sam",
            "business_name": "ignored for customers",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "new-user"
        assert data["role"] == "customer"
        assert data["email"] == "sam@example.com"
        assert data["business_name"] is None

    def test_create_business_profile_resolves_type(self, client: TestClient, fake_db, login):
        fake_db.auth_users["owner-2"] = "hello@salon.test"
        login({"id": "owner-2"})

        response = client.post("/profile", json={
            "role": "business",
            "business_name": "Shear Joy",
            "business_type": "Salon",
        })

        assert response.status_code == 201
        assert response.json()["business_type"] == "salon"

    def test_business_name_is_required(self, client: TestClient, fake_db, login):
        login({"id": "owner-3"})
        response = client.post("/profile", json={"role": "business"})
        assert response.status_code == 400

    def test_cannot_self_register_as_admin(self, client: TestClient, login):
        login({"id": "sneaky"})
        assert client.post("/profile", json={"role": "admin"}).status_code == 422

    def test_duplicate_profile(self, client: TestClient, login, customer):
        login(customer)
        response = client.post("/profile", json={"first_name": "Ana"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Profile already exists"

    def test_missing_profile_is_404(self, client: TestClient, login):
        login({"id": "ghost"})
        assert client.get("/profile/me").status_code == 404


class TestMyProfile:

    def test_get_me(self, client: TestClient, login, customer):
        login(customer)
        data = client.get("/profile/me").json()
        assert data["first_name"] == "Ana"
        assert data["email"] == "ana@example.com"

    def test_update_me(self, client: TestClient, fake_db, login, customer):
        login(customer)
        response = client.put("/profile/me", json={"last_name": "Lopez-Garcia"})

        assert response.status_code == 200
        assert response.json()["last_name"] == "Lopez-Garcia"
        assert fake_db.rows("profiles")[0]["last_name"] == "Lopez-Garcia"

    def test_upload_and_delete_avatar(self, client: TestClient, fake_db, login, customer):
        login(customer)
        response = client.post(
            "/profile/avatar",
            files={"file": ("me.png", b"\x89PNG fake", "image/png")},
        )

        assert response.status_code == 200
        path = f"{customer['id']}/avatar.png"
        assert response.json()["url"] == f"https://storage.test/profiles/{path}"
        assert path in fake_db.objects["profiles"]

        assert client.delete("/profile/avatar").status_code == 200
        assert fake_db.objects["profiles"] == {}
        assert fake_db.rows("profiles")[0]["avatar_url"] is None

    def test_avatar_rejects_other_types(self, client: TestClient, login, customer):
        login(customer)
        response = client.post(
            "/profile/avatar",
            files={"file": ("me.gif", b"GIF89a", "image/gif")},
        )
        assert response.status_code == 400


class TestAdmin:

    def test_list_profiles_by_role(self, client: TestClient, login, make_profile, business, customer):
        login(make_profile("admin"))
        response = client.get("/admin/profiles", params={"role": "business"})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [business["id"]]

    def test_change_role(self, client: TestClient, login, make_profile, customer):
        login(make_profile("admin"))
        response = client.put(f"/admin/profiles/{customer['id']}/role", json={"role": "business"})

        assert response.status_code == 200
        assert response.json()["role"] == "business"

    def test_admin_cannot_demote_self(self, client: TestClient, login, make_profile):
        admin = make_profile("admin")
        login(admin)
        response = client.put(f"/admin/profiles/{admin['id']}/role", json={"role": "customer"})
        assert response.status_code == 400

    def test_unknown_profile(self, client: TestClient, login, make_profile):
        login(make_profile("admin"))
        response = client.put("/admin/profiles/nope/role", json={"role": "business"})
        assert response.status_code == 404

    def test_non_admin_is_forbidden(self, business_client: TestClient, customer):
        assert business_client.get("/admin/profiles").status_code == 403
        response = business_client.put(f"/admin/profiles/{customer['id']}/role", json={"role": "admin"})
        assert response.status_code == 403
