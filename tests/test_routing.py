"""Tests for client route guards."""

import pytest

from waitify.core.routing import Session, Shell, match_shell, resolve_route

USER = {"sub": "user-1", "email": "user@example.com"}


class TestMatchShell:

    @pytest.mark.parametrize("path,shell", [
        ("/", Shell.PUBLIC),
        ("/pricing", Shell.PUBLIC),
        ("/dashboard", Shell.BUSINESS),
        ("/patients/abc-123", Shell.BUSINESS),
        ("/customer/waitlists", Shell.CUSTOMER),
        ("/join-waitlist/w-1", Shell.GUEST),
        ("/customer/book/b-1", Shell.GUEST),
        ("/customer/book-appointment?businessId=b-1&join=true", Shell.GUEST),
        ("/admin", Shell.ADMIN),
        ("/nope/nothing-here", Shell.NOT_FOUND),
    ])
    def test_shells(self, path, shell):
        assert match_shell(path) == shell


class TestResolveRoute:

    def test_loading_session_waits(self):
        decision = resolve_route("/dashboard", Session(loading=True))
        assert decision.action == "loading"

    def test_anonymous_visitor_redirected_from_dashboard(self):
        decision = resolve_route("/dashboard", Session())
        assert decision.action == "redirect"
        assert decision.redirect_to == "/signin"

    def test_signed_in_user_renders_dashboard(self):
        decision = resolve_route("/dashboard", Session(user=USER, profile={"role": "business"}))
        assert decision.action == "render"
        assert decision.shell == Shell.BUSINESS

    def test_guest_route_renders_for_anyone(self):
        assert resolve_route("/join-waitlist/w-1", Session()).action == "render"
        assert resolve_route("/join-waitlist/w-1", Session(loading=True)).action == "render"

    @pytest.mark.parametrize("profile", [None, {"role": "business"}, {"role": "customer"}, {"role": "Admin"}, {}])
    def test_admin_requires_exact_admin_role(self, profile):
        decision = resolve_route("/admin", Session(user=USER, profile=profile))
        assert decision.action == "redirect"
        assert decision.redirect_to == "/signin"

    def test_admin_renders_for_admin(self):
        decision = resolve_route("/admin", Session(user=USER, profile={"role": "admin"}))
        assert decision.action == "render"

    def test_unknown_path_renders_not_found(self):
        decision = resolve_route("/does-not-exist", Session())
        assert decision.action == "render"
        assert decision.shell == Shell.NOT_FOUND
