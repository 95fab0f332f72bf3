"""
Join links encoded in QR codes, and parsing of scanned payloads.

Two kinds of link are printed:
    {origin}/join-waitlist/{waitlist_id}
    {origin}/customer/book-appointment?businessId=..&appointmentId=..

A scan resolves to the client route the scanner should navigate to.
"""

from urllib.parse import parse_qs, urlencode, urlparse


class InvalidQRCodeError(ValueError):
    """The scanned payload is not a Waitify join or booking link."""

    def __init__(self, payload: str | None = None):
        super().__init__("Invalid QR Code")
        self.payload = payload


BOOKING_ROUTE = "/customer/book-appointment"
JOIN_WAITLIST_SEGMENT = "join-waitlist"


def build_waitlist_join_url(origin: str, waitlist_id: str) -> str:
    return f"{origin.rstrip('/')}/{JOIN_WAITLIST_SEGMENT}/{waitlist_id}"


def build_appointment_booking_url(origin: str, business_id: str, appointment_id: str | None = None) -> str:
    params = {"businessId": business_id}
    if appointment_id:
        params["appointmentId"] = appointment_id
    return f"{origin.rstrip('/')}{BOOKING_ROUTE}?{urlencode(params)}"


def _booking_route(business_id: str | None, appointment_id: str | None) -> str:
    params = {}
    if business_id:
        params["businessId"] = business_id
    if appointment_id:
        params["appointmentId"] = appointment_id
    params["join"] = "true"
    return f"{BOOKING_ROUTE}?{urlencode(params)}"


def resolve_scanned_payload(payload: str | None) -> str:
    """Map a decoded QR payload to the route to open.

    Raises:
        InvalidQRCodeError: empty, unparseable or unrecognized payloads
    """
    text = (payload or "").strip()
    if not text:
        raise InvalidQRCodeError(payload)

    if not text.startswith("http"):
        # A bare identifier is an appointment id
        return _booking_route(None, text)

    try:
        url = urlparse(text)
    except ValueError:
        raise InvalidQRCodeError(payload)
    if not url.scheme or not url.netloc:
        raise InvalidQRCodeError(payload)

    if "book-appointment" in url.path:
        query = parse_qs(url.query)
        business_id = query.get("businessId", [None])[0]
        appointment_id = query.get("appointmentId", [None])[0]
        if not business_id and not appointment_id:
            raise InvalidQRCodeError(payload)
        return _booking_route(business_id, appointment_id)

    segments = [s for s in url.path.split("/") if s]
    if len(segments) >= 2 and segments[-2] == JOIN_WAITLIST_SEGMENT:
        return f"/{JOIN_WAITLIST_SEGMENT}/{segments[-1]}"

    raise InvalidQRCodeError(payload)
