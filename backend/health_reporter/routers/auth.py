from fastapi import APIRouter, Depends, Response
from health_reporter.auth import TOKEN_LIFETIME_SECONDS, get_current_subject
from health_reporter.config import Settings
from health_reporter.dependencies import get_account_service, get_app_settings
from health_reporter.schemas.auth import LoginRequest, LoginResponse, SessionResponse, TokenResponse
from health_reporter.services.account_service import AccountService

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    Exchange email + password for a session credential.
    The credential only travels in the HTTP-only cookie, never in the body.
    """
    user, token = await accounts.login(body.email, body.password)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=TOKEN_LIFETIME_SECONDS,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return LoginResponse(subject_id=user.id, email=user.email)


@router.post("/token", response_model=TokenResponse)
async def get_token(body: LoginRequest, accounts: AccountService = Depends(get_account_service)):
    """
    Exchange email + password for a Bearer credential, for API clients that
    do not use cookies. No cookie is set.
    """
    user, token = await accounts.login(body.email, body.password)
    return TokenResponse(subject_id=user.id, access_token=token)


@router.post("/logout")
async def logout(response: Response, settings: Settings = Depends(get_app_settings)):
    response.delete_cookie(key=settings.session_cookie_name, path="/")
    return {"logged_out": True}


@router.get("/session", response_model=SessionResponse)
async def current_session(subject_id: str = Depends(get_current_subject)):
    return SessionResponse(subject_id=subject_id)
