"""
V1 API router aggregator: wires all endpoint modules together.
"""

from fastapi import APIRouter

from shiftledger.api.v1.endpoints import (admin, auth, employees, holidays,
                                          punches, records, reports,
                                          submissions)

api_router = APIRouter()

# Auth (login, refresh, user management)
api_router.include_router(auth.router)

# Employee registry
api_router.include_router(employees.router)

# Punch intake, leave, off-days
api_router.include_router(punches.router)

# Daily-record review and corrections
api_router.include_router(records.router)

# Self-service shift submissions
api_router.include_router(submissions.router)

# Holiday calendar, double-time days
api_router.include_router(holidays.router)

# Approved hours, health, status
api_router.include_router(reports.router)

# Full reset
api_router.include_router(admin.router)
