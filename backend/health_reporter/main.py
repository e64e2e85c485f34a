import logging
from contextlib import asynccontextmanager
from typing import Optional
import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from health_reporter.auth import SessionGate, TokenService
from health_reporter.config import Settings, get_settings
from health_reporter.database import Database
from health_reporter.exceptions import HealthReporterError
from health_reporter.middleware.session_gate import SessionGateMiddleware
from health_reporter.routers import auth as auth_router
from health_reporter.routers import reports
from health_reporter.services.account_service import AccountService
from health_reporter.services.push_service import PushOrchestrator
from health_reporter.services.registry_client import RegistryClient
from health_reporter.services.report_store import ReportStore

logger = logging.getLogger(__name__)


async def seed_demo_user(accounts: AccountService, settings: Settings):
    """Create the configured demo account if it doesn't exist. Idempotent."""
    if settings.demo_user_email and settings.demo_user_password:
        await accounts.ensure_account(settings.demo_user_email, settings.demo_user_password)


def create_app(
    settings: Optional[Settings] = None,
    registry_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Composition root. Builds every component from ``settings``.

    Raises ConfigurationError when JWT_SECRET is missing, so a misconfigured
    process never starts serving.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    tokens = TokenService(settings.jwt_secret)
    gate = SessionGate(tokens, cookie_name=settings.session_cookie_name)
    database = Database(settings.database_url, echo=settings.database_echo)
    accounts = AccountService(database, tokens, bcrypt_rounds=settings.bcrypt_rounds)
    report_store = ReportStore(database)
    registry = RegistryClient(
        settings.registry_url,
        timeout=settings.registry_timeout_seconds,
        transport=registry_transport,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: create tables then seed the demo account
        await database.connect()
        await seed_demo_user(accounts, settings)
        logger.info("Health reporter started (environment=%s)", settings.environment)
        yield
        # Shutdown
        await database.dispose()

    app = FastAPI(
        title="Health Reporter",
        description="Local health reports with one-time push to the national registry",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.gate = gate
    app.state.accounts = accounts
    app.state.reports = report_store
    app.state.pusher = PushOrchestrator(report_store, registry)

    app.add_middleware(SessionGateMiddleware, gate=gate)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HealthReporterError)
    async def health_reporter_error_handler(request: Request, exc: HealthReporterError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Submitted values are not echoed back (they may hold passwords)
        errors = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"message": "Invalid request data", "errors": errors})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": HealthReporterError.message})

    app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])

    @app.get("/api/health")
    async def health_check():
        return {"status": "healthy", "service": "health-reporter"}

    return app
