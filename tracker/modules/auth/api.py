from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from tracker.db.session import get_db
from tracker.modules.auth.model import User
from tracker.modules.auth.schema import RegisterRequest, LoginRequest, RefreshRequest, UserResponse
from tracker.modules.auth import service
from tracker.core.config import settings
from tracker.core.dependencies import get_current_user
from tracker.core.response import success

from tracker.routes.auth import AUTH_ROUTES, AUTH_PREFIX, AUTH_TAG

router = APIRouter(prefix=AUTH_PREFIX, tags=[AUTH_TAG])

_CLEAN_RESPONSES = {
    422: {"description": "excluded"},
    500: {"description": "excluded"},
}


@router.post(
    AUTH_ROUTES["register"],
    status_code=201,
    responses={
        201: {"description": "User registered successfully"},
        400: {"description": "Email already registered"},
        **_CLEAN_RESPONSES,
    },
)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    user = service.register_user(db, data)
    return success(data=_serialize_user(user), message="User registered successfully", status_code=201)


@router.post(
    AUTH_ROUTES["login"],
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
        403: {"description": "Account inactive"},
        **_CLEAN_RESPONSES,
    },
)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = service.authenticate(db, data)
    tokens = service.issue_tokens(user)

    response = success(
        data={**tokens, "user": _serialize_user(user)},
        message="Login successful",
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=tokens["access_token"],
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.post(
    AUTH_ROUTES["refresh"],
    responses={
        200: {"description": "Token refreshed successfully"},
        401: {"description": "Invalid or expired refresh token"},
        **_CLEAN_RESPONSES,
    },
)
def refresh(data: RefreshRequest, db: Session = Depends(get_db)):
    _, tokens = service.refresh_tokens(db, data.refresh_token)
    return success(data=tokens, message="Token refreshed successfully")


@router.post(
    AUTH_ROUTES["logout"],
    responses={200: {"description": "Signed out"}},
)
def logout():
    response = success(message="Signed out")
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get(
    AUTH_ROUTES["profile"],
    responses={
        200: {"description": "Current user info"},
        401: {"description": "Unauthorized"},
        **_CLEAN_RESPONSES,
    },
)
def me(current_user: User = Depends(get_current_user)):
    return success(data=_serialize_user(current_user), message="User fetched successfully")


# ================================================================
# SERIALIZER
# ================================================================

def _serialize_user(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")
