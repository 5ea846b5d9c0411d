# quidax_ticker/api/health.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])

APP_STARTED_AT = time.time()


def _now_meta() -> Dict[str, Any]:
    now_ts = time.time()
    now_dt = datetime.fromtimestamp(now_ts, tz=timezone.utc)
    return {
        "now_unix": int(now_ts),
        "now_iso": now_dt.isoformat().replace("+00:00", "Z"),
        "uptime_s": int(now_ts - APP_STARTED_AT),
    }


@router.get("/live")
async def live():
    return {"status": "ok"}


@router.get("/health")
async def health(request: Request):
    # Local only: Quidax is not called, so a slow upstream can't fail this probe.
    client = getattr(request.app.state, "quidax_client", None)
    return {
        "status": "ok",
        **_now_meta(),
        "upstream": {"base_url": client.base_url if client is not None else None},
    }
