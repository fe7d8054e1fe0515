# interview_notifications/routes/health.py
"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from interview_notifications.config import settings
from interview_notifications.services.notifications.reminder_service import reminder_cache

router = APIRouter()


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "interview-notifications"}


@router.get("/readyz")
async def readyz():
    """
    Readiness check: every setting a send or a reminder scan needs is present.
    """
    checks = {}

    missing_email = settings.missing_email_settings()
    checks["email"] = {
        "ok": not missing_email,
        "provider": settings.EMAIL_PROVIDER,
        "issues": [f"{name} not set" for name in missing_email] or None,
    }

    store_issues = []
    if not settings.INTERVIEW_STORE_URL:
        store_issues.append("INTERVIEW_STORE_URL not set")
    checks["interview_store"] = {"ok": not store_issues, "issues": store_issues or None}

    cron_issues = []
    if not settings.CRON_SECRET:
        cron_issues.append("CRON_SECRET not set")
    checks["cron"] = {
        # Only fatal in production; elsewhere the trigger runs unauthenticated
        "ok": not (cron_issues and settings.is_production()),
        "issues": cron_issues or None,
    }

    checks["reminder_cache"] = {"ok": True, "entries": len(reminder_cache)}

    overall_ok = all(check["ok"] for check in checks.values())

    return {
        "overall_ok": overall_ok,
        "checks": checks,
        "environment": settings.environment,
        "timestamp": time.time(),
    }
