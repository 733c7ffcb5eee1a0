from fastapi import APIRouter

from ursol.api.endpoints import (
    activities,
    beneficiaries,
    claims,
    dashboard,
    loans,
    payments,
    policies,
    staking,
    user,
    verify,
)

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(user.router, prefix="/user", tags=["User"])
api_router.include_router(policies.router, prefix="/policies", tags=["Policies"])
api_router.include_router(staking.router, prefix="/staking", tags=["Staking"])
api_router.include_router(loans.router, prefix="/loans", tags=["Loans"])
api_router.include_router(beneficiaries.router, prefix="/beneficiaries", tags=["Beneficiaries"])
api_router.include_router(claims.router, prefix="/claims", tags=["Claims"])
api_router.include_router(activities.router, prefix="/activities", tags=["Activities"])
api_router.include_router(payments.router, tags=["Payments"])
api_router.include_router(verify.router, tags=["World ID"])
api_router.include_router(dashboard.router, tags=["Dashboard"])

__all__ = ["api_router"]
