from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from probesync.api.auth import require_admin
from probesync.services.watcher_registry import WatcherRegistry


class StartWatchersRequest(BaseModel):
    locations: List[str]
    poll_interval_seconds: Optional[int] = None


def create_watchers_router(watcher_registry: WatcherRegistry):
    router = APIRouter(prefix="/watchers", tags=["Watchers"])

    @router.get("")
    def list_active_watchers():
        return {"active": watcher_registry.list_active()}

    @router.get("/{watcher_id}")
    def get_watcher(watcher_id: str):
        rec = watcher_registry.get(watcher_id)
        if not rec:
            raise HTTPException(status_code=404, detail="watcher not found")
        return rec

    @router.post("", status_code=201, dependencies=[Depends(require_admin)])
    def start_watchers(req: StartWatchersRequest):
        if not req.locations:
            raise HTTPException(status_code=400, detail="missing locations")
        if req.poll_interval_seconds is not None and req.poll_interval_seconds < 1:
            raise HTTPException(status_code=400, detail="poll_interval_seconds must be >= 1")
        result = watcher_registry.start(req.locations, poll_interval_seconds=req.poll_interval_seconds)
        return {
            "started": [{"watcher_id": h.watcher_id, "location": h.location.value} for h in result.handles],
            "failures": [{"location": str(f.location), "reason": f.reason} for f in result.failures],
        }

    @router.delete("/{watcher_id}", dependencies=[Depends(require_admin)])
    def cancel_watcher(watcher_id: str):
        if not watcher_registry.cancel(watcher_id):
            raise HTTPException(status_code=404, detail="watcher not found or already cancelled")
        return {"status": "cancelled", "watcher_id": watcher_id}

    return router
