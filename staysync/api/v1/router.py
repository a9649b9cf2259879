"""
API v1 Router - Main Entry Point
Aggregates all v1 endpoint routers of the dormitory management backend
"""
from fastapi import APIRouter

from staysync.api.v1.endpoints import (
    audit,
    auth,
    backup,
    billing,
    bookings,
    broadcast,
    central_meter,
    cron,
    dashboard,
    expenses,
    issues,
    notify,
    recurring_expenses,
    reports,
    residents,
    rooms,
    settings,
    users,
    webhook,
)

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(auth.router)
router.include_router(users.router)
router.include_router(settings.router)
router.include_router(rooms.router)
router.include_router(residents.router)
router.include_router(billing.router)
router.include_router(notify.router)
router.include_router(broadcast.router)
router.include_router(cron.router)
router.include_router(expenses.router)
router.include_router(recurring_expenses.router)
router.include_router(central_meter.router)
router.include_router(issues.router)
router.include_router(bookings.router)
router.include_router(bookings.admin_router)
router.include_router(dashboard.router)
router.include_router(reports.router)
router.include_router(audit.router)
router.include_router(backup.router)
router.include_router(webhook.router)
