from fastapi import APIRouter

from .routes import (
    admin,
    appointments,
    billing,
    businesses,
    client_routes,
    customers,
    health,
    invoices,
    locations,
    me,
    notifications,
    patients,
    practitioners,
    profile,
    public,
    qr,
    reports,
    reservations,
    services,
    staff,
    subscription,
    tables,
    waitlists,
)

api_router = APIRouter()

# Health check
api_router.include_router(health.router, tags=["health"])

# Accounts
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(me.router, prefix="/me", tags=["me"])
api_router.include_router(businesses.router, prefix="/businesses", tags=["businesses"])

# Business-scoped resources
api_router.include_router(waitlists.router, prefix="/waitlists", tags=["waitlists"])
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(locations.router, prefix="/locations", tags=["locations"])
api_router.include_router(staff.router, prefix="/staff", tags=["staff"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])

# Restaurant
api_router.include_router(tables.router, prefix="/tables", tags=["tables"])
api_router.include_router(reservations.router, prefix="/reservations", tags=["reservations"])

# Clinic / salon
api_router.include_router(practitioners.router, prefix="/practitioners", tags=["practitioners"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])

# Subscription & billing
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])
api_router.include_router(subscription.router, prefix="/subscription", tags=["subscription"])

# QR scanning and client route guards
api_router.include_router(qr.router, prefix="/qr", tags=["qr"])
api_router.include_router(client_routes.router, prefix="/routes", tags=["routes"])

# Public endpoints (no auth required)
api_router.include_router(public.router, prefix="/public", tags=["public"])

# Admin
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
