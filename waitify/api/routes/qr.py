from fastapi import APIRouter, HTTPException

from waitify.domain.schemas import QRResolveRequest
from waitify.services.qr_links import InvalidQRCodeError, resolve_scanned_payload

router = APIRouter()


@router.post("/resolve")
def resolve_qr(data: QRResolveRequest):
    """Route the scanner should open for a decoded QR payload."""
    try:
        return {"route": resolve_scanned_payload(data.payload)}
    except InvalidQRCodeError as e:
        raise HTTPException(status_code=400, detail=str(e))
