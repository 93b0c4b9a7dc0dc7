"""Supabase Auth: session resolution, FastAPI dependencies, cookies and the sign-in API."""

import logging

from fastapi import APIRouter, Depends, Request, Response
from supabase import AuthError

from aiplayground.config import get_settings
from aiplayground.exceptions import AuthenticationError
from aiplayground.models.auth import AuthResponse, AuthSession, AuthUser, Credentials
from aiplayground.models.history import SuccessResponse
from aiplayground.services.supabase_client import get_auth_client, get_service_client

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "sb-access-token"
REFRESH_COOKIE = "sb-refresh-token"
REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 30


def is_configured() -> bool:
    settings = get_settings()
    return bool(settings.supabase_url and settings.supabase_anon_key)


def _to_user(user) -> AuthUser:
    return AuthUser(id=str(user.id), email=user.email)


def _to_session(session) -> AuthSession:
    return AuthSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in or 3600,
        user=_to_user(session.user),
    )


# --- Token checks ---

def get_user_for_token(access_token: str) -> AuthUser | None:
    """Return the user an access token belongs to, or None if Supabase rejects it."""
    try:
        resp = get_service_client().auth.get_user(access_token)
    except AuthError as e:
        logger.debug("Access token rejected: %s", e)
        return None
    if resp is None or resp.user is None:
        return None
    return _to_user(resp.user)


def refresh_session(refresh_token: str) -> AuthSession | None:
    try:
        resp = get_auth_client().auth.refresh_session(refresh_token)
    except AuthError as e:
        logger.debug("Refresh token rejected: %s", e)
        return None
    if resp.session is None:
        return None
    return _to_session(resp.session)


def resolve_session(access_token: str | None, refresh_token: str | None) -> tuple[AuthUser | None, AuthSession | None]:
    """Find the signed-in user from session cookies.

    Returns (user, refreshed_session); refreshed_session is set only when the access
    token had expired and a new one was issued from the refresh token.
    """
    if not (access_token or refresh_token):
        return None, None
    if not is_configured():
        logger.warning("Session cookies present but Supabase is not configured")
        return None, None
    if access_token:
        user = get_user_for_token(access_token)
        if user is not None:
            return user, None
    if refresh_token:
        session = refresh_session(refresh_token)
        if session is not None:
            return session.user, session
    return None, None


def sign_in(email: str, password: str) -> AuthSession:
    try:
        resp = get_auth_client().auth.sign_in_with_password({"email": email, "password": password})
    except AuthError as e:
        raise AuthenticationError(f"Sign in failed: {e}") from e
    if resp.session is None:
        raise AuthenticationError("Sign in failed: no session returned")
    return _to_session(resp.session)


def sign_up(email: str, password: str) -> tuple[AuthUser, AuthSession | None]:
    """Create an account. The session is None while the email address awaits confirmation."""
    try:
        resp = get_auth_client().auth.sign_up({"email": email, "password": password})
    except AuthError as e:
        raise AuthenticationError(f"Sign up failed: {e}") from e
    if resp.user is None:
        raise AuthenticationError("Sign up failed: no user returned")
    session = _to_session(resp.session) if resp.session is not None else None
    return _to_user(resp.user), session


# --- Cookies ---

def set_session_cookies(response: Response, session: AuthSession) -> None:
    secure = get_settings().cookie_secure
    response.set_cookie(
        ACCESS_COOKIE, session.access_token,
        max_age=session.expires_in, httponly=True, samesite="lax", secure=secure,
    )
    response.set_cookie(
        REFRESH_COOKIE, session.refresh_token,
        max_age=REFRESH_COOKIE_MAX_AGE, httponly=True, samesite="lax", secure=secure,
    )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)


# --- FastAPI dependencies ---

def _token_from_request(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return request.cookies.get(ACCESS_COOKIE)


def get_optional_user(request: Request) -> AuthUser | None:
    token = _token_from_request(request)
    if not token:
        return None
    if not is_configured():
        logger.warning("Access token sent but Supabase is not configured")
        return None
    return get_user_for_token(token)


def get_current_user(user: AuthUser | None = Depends(get_optional_user)) -> AuthUser:
    if user is None:
        raise AuthenticationError("Not signed in. Sign in at /auth/signin or send a Bearer token.")
    return user


# --- Auth router ---

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signin")
def signin(credentials: Credentials, response: Response) -> AuthResponse:
    session = sign_in(credentials.email, credentials.password)
    set_session_cookies(response, session)
    return AuthResponse(user=session.user, message="Signed in")


@router.post("/signup")
def signup(credentials: Credentials, response: Response) -> AuthResponse:
    user, session = sign_up(credentials.email, credentials.password)
    if session is None:
        return AuthResponse(user=user, message="Check your email to confirm your account, then sign in.")
    set_session_cookies(response, session)
    return AuthResponse(user=user, message="Account created")


@router.post("/signout")
def signout(response: Response) -> SuccessResponse:
    clear_session_cookies(response)
    return SuccessResponse(success=True)


@router.get("/user")
def current_user(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    return user
