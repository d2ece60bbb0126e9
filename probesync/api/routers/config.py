from fastapi import APIRouter, HTTPException

from probesync.services.config_snapshot import ConfigSnapshot


def create_config_router(snapshot: ConfigSnapshot):
    router = APIRouter(prefix="/config", tags=["Config"])

    @router.get("")
    def get_current_config():
        document = snapshot.get()
        if document is None:
            raise HTTPException(status_code=404, detail="no config loaded yet")
        return {
            "version": snapshot.version,
            "fingerprint": document.fingerprint,
            "config": document.to_dict(),
        }

    @router.get("/probes/{probe_id}")
    def get_probe(probe_id: str):
        document = snapshot.get()
        probe = document.get_probe(probe_id) if document is not None else None
        if probe is None:
            raise HTTPException(status_code=404, detail="probe not found")
        return probe.to_dict()

    return router
