"""Accessors for the components the application factory puts on ``app.state``."""

from fastapi import Request
from health_reporter.config import Settings
from health_reporter.services.account_service import AccountService
from health_reporter.services.push_service import PushOrchestrator
from health_reporter.services.report_store import ReportStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_account_service(request: Request) -> AccountService:
    return request.app.state.accounts


def get_report_store(request: Request) -> ReportStore:
    return request.app.state.reports


def get_push_orchestrator(request: Request) -> PushOrchestrator:
    return request.app.state.pusher
