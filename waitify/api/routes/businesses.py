from fastapi import APIRouter, Depends

from waitify.core.business_types import BusinessType
from waitify.core.permissions import BusinessContext, require_business_access

router = APIRouter()


@router.get("/features")
def get_my_business_features(ctx: BusinessContext = Depends(require_business_access)):
    """Dashboard feature cards for the caller's business type."""
    business_type = BusinessType.resolve(ctx.business_type)
    return {"business_type": business_type.value, "features": business_type.features}
