import os
import logging
import secrets
from fastapi import HTTPException, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

logger = logging.getLogger(__name__)

# Bearer token auth for endpoints that start or cancel watchers.
# No ADMIN_TOKEN means those endpoints are disabled (fail closed).
security = HTTPBearer()


def require_admin(creds: HTTPAuthorizationCredentials = Security(security)):
    token = creds.credentials if creds is not None else None
    admin = os.getenv("ADMIN_TOKEN")
    if not admin:
        logger.error("ADMIN_TOKEN not set - watcher control endpoints are disabled")
        raise HTTPException(status_code=503, detail="ADMIN_TOKEN not configured")
    if not secrets.compare_digest(token or "", admin):
        raise HTTPException(status_code=401, detail="Unauthorized")
    return True
