import hmac
import logging
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Header
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.services.sync import ReconciliationError, run_full_reconciliation

logger = logging.getLogger(__name__)

router = APIRouter()

def is_authorized(authorization: Optional[str]) -> bool:
    """Only production demands the scheduler's bearer secret."""
    if not settings.is_production:
        return True
    if not settings.CRON_SECRET or not authorization:
        return False
    expected = f"Bearer {settings.CRON_SECRET}"
    return hmac.compare_digest(authorization.encode(), expected.encode())

@router.get("/sync-db")
def sync_db(authorization: Optional[str] = Header(None)):
    if not is_authorized(authorization):
        logger.warning("[DB-SYNC] rejected cron trigger with invalid credentials")
        return JSONResponse(status_code=401, content={"success": False, "error": "Unauthorized"})

    try:
        results = run_full_reconciliation()
    except ReconciliationError as e:
        logger.error("[DB-SYNC] cron reconciliation failed: %s", e)
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    return {
        "success": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "results": results,
    }
