"""
Client route table and guard decisions.

The web app mounts three shells (business dashboard, customer portal,
public marketing) plus guest booking/join routes and the admin page.
resolve_route() is the single place that decides whether a path renders,
waits for the session, or redirects to sign-in.
"""
import re
from dataclasses import dataclass
from enum import Enum

SIGNIN_PATH = "/signin"


class Shell(str, Enum):
    PUBLIC = "public"
    BUSINESS = "business"
    CUSTOMER = "customer"
    GUEST = "guest"
    ADMIN = "admin"
    NOT_FOUND = "not_found"


class Guard(str, Enum):
    NONE = "none"
    AUTHENTICATED = "authenticated"
    ALLOW_GUEST = "allow_guest"
    ADMIN = "admin"


SHELL_GUARDS: dict[Shell, Guard] = {
    Shell.PUBLIC: Guard.NONE,
    Shell.BUSINESS: Guard.AUTHENTICATED,
    Shell.CUSTOMER: Guard.AUTHENTICATED,
    Shell.GUEST: Guard.ALLOW_GUEST,
    Shell.ADMIN: Guard.ADMIN,
    Shell.NOT_FOUND: Guard.NONE,
}

# Ordered: first match wins. ":param" matches one path segment.
ROUTES: list[tuple[str, Shell]] = [
    ("/", Shell.PUBLIC),
    ("/pricing", Shell.PUBLIC),
    ("/industry-features", Shell.PUBLIC),
    ("/contact", Shell.PUBLIC),
    ("/signin", Shell.PUBLIC),
    ("/signup", Shell.PUBLIC),
    ("/signup/business", Shell.PUBLIC),
    ("/signup/user", Shell.PUBLIC),
    ("/dashboard", Shell.BUSINESS),
    ("/waitlist", Shell.BUSINESS),
    ("/waitlist/:id", Shell.BUSINESS),
    ("/customers", Shell.BUSINESS),
    ("/tables", Shell.BUSINESS),
    ("/table-reservations", Shell.BUSINESS),
    ("/appointments", Shell.BUSINESS),
    ("/practitioners", Shell.BUSINESS),
    ("/patients", Shell.BUSINESS),
    ("/patients/:id", Shell.BUSINESS),
    ("/services", Shell.BUSINESS),
    ("/locations", Shell.BUSINESS),
    ("/staff", Shell.BUSINESS),
    ("/reports", Shell.BUSINESS),
    ("/notifications", Shell.BUSINESS),
    ("/settings", Shell.BUSINESS),
    ("/subscription", Shell.BUSINESS),
    ("/customer/dashboard", Shell.CUSTOMER),
    ("/customer/waitlists", Shell.CUSTOMER),
    ("/customer/appointments", Shell.CUSTOMER),
    ("/customer/profile", Shell.CUSTOMER),
    ("/customer/book-appointment", Shell.GUEST),
    ("/customer/book/:businessId", Shell.GUEST),
    ("/join-waitlist/:waitlistId", Shell.GUEST),
    ("/admin", Shell.ADMIN),
]


def _compile(pattern: str) -> re.Pattern:
    regex = re.sub(r":[A-Za-z]+", r"[^/]+", pattern)
    return re.compile(f"^{regex}/?$")


_COMPILED = [(_compile(pattern), shell) for pattern, shell in ROUTES]


@dataclass
class Session:
    """What the client knows about the visitor when a route is entered."""
    loading: bool = False
    user: dict | None = None
    profile: dict | None = None


@dataclass
class RouteDecision:
    action: str  # "loading" | "render" | "redirect"
    shell: Shell
    redirect_to: str | None = None


def match_shell(path: str) -> Shell:
    """Shell a path belongs to, ignoring any query string."""
    path = path.split("?", 1)[0] or "/"
    for regex, shell in _COMPILED:
        if regex.match(path):
            return shell
    return Shell.NOT_FOUND


def resolve_route(path: str, session: Session) -> RouteDecision:
    """Guard decision for entering a path with the given session."""
    shell = match_shell(path)
    guard = SHELL_GUARDS[shell]

    if guard in (Guard.NONE, Guard.ALLOW_GUEST):
        return RouteDecision("render", shell)

    if session.loading:
        return RouteDecision("loading", shell)

    if not session.user:
        return RouteDecision("redirect", shell, SIGNIN_PATH)

    if guard is Guard.ADMIN:
        role = (session.profile or {}).get("role")
        if role != "admin":
            return RouteDecision("redirect", shell, SIGNIN_PATH)

    return RouteDecision("render", shell)
