"""
Session gate middleware.

Runs before routing for the protected report area. Requests without a valid
session credential are turned away here, so no report handler (and no store
access) ever runs for them:

- UI paths (``/reports...``) are redirected to the login page.
- API paths (``/api/reports...``) get a 401.

Admitted requests carry the subject id on ``request.state.subject_id``.
"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from health_reporter.auth import SessionGate
from health_reporter.exceptions import Unauthenticated

logger = logging.getLogger(__name__)

UI_PREFIXES = ("/reports",)
API_PREFIXES = ("/api/reports",)
LOGIN_PATH = "/login"


def _under(path: str, prefixes) -> bool:
    return any(path == p or path.startswith(p + "/") for p in prefixes)


class SessionGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, gate: SessionGate):
        super().__init__(app)
        self.gate = gate

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        is_api = _under(path, API_PREFIXES)
        if not is_api and not _under(path, UI_PREFIXES):
            return await call_next(request)

        try:
            request.state.subject_id = self.gate.authenticate(request)
        except Unauthenticated as e:
            logger.debug("Session gate denied %s %s", request.method, path)
            if is_api:
                return JSONResponse(status_code=e.status_code, content={"message": e.message})
            return RedirectResponse(url=LOGIN_PATH, status_code=307)
        return await call_next(request)
