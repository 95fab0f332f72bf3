from typing import Optional

from fastapi import APIRouter, Depends, Query

from waitify.core.permissions import get_optional_profile
from waitify.core.routing import Session, resolve_route
from waitify.core.security import get_current_user
from waitify.domain.schemas import RouteResolveResponse

router = APIRouter()


@router.get("/resolve", response_model=RouteResolveResponse)
def resolve(
    path: str = Query(..., min_length=1),
    user: Optional[dict] = Depends(get_current_user),
    profile: Optional[dict] = Depends(get_optional_profile),
):
    """Guard decision for a client route with the caller's session."""
    decision = resolve_route(path, Session(loading=False, user=user, profile=profile))
    return RouteResolveResponse(
        action=decision.action,
        shell=decision.shell.value,
        redirect_to=decision.redirect_to,
    )
