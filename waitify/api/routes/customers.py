from fastapi import APIRouter, Depends

from waitify.core.permissions import BusinessContext, require_business_access
from waitify.services.analytics import derive_customers, get_business_entries

router = APIRouter()


@router.get("")
def list_customers(ctx: BusinessContext = Depends(require_business_access)):
    """Customers who joined any of the business's waitlists, most recent first."""
    return derive_customers(get_business_entries(ctx.business_id))
