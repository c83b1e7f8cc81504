"""
auth/service.py

Registration and credential checks. Self-registered accounts are always
plain users; administrators are promoted directly in the database or
created by the seed script.
"""

from datetime import timedelta
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from tracker.modules.auth.model import User, UserRole
from tracker.modules.auth.schema import RegisterRequest, LoginRequest
from tracker.core.config import settings
from tracker.core.jwt import create_access_token, create_refresh_token, decode_token
from tracker.core.security import hash_password, verify_password
from tracker.core.logger import logger


def register_user(db: Session, data: RegisterRequest) -> User:
    email = data.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user = User(
        first_name=data.first_name,
        last_name=data.last_name,
        email=email,
        hashed_password=hash_password(data.password),
        role=UserRole.USER,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"[Auth] New user registered: {user.email}")
    return user


def authenticate(db: Session, data: LoginRequest) -> User:
    user = db.query(User).filter(User.email == data.email.lower()).first()

    if not user or not verify_password(data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive. Contact an administrator.",
        )
    return user


def issue_tokens(user: User) -> dict:
    access_token = create_access_token(
        data={"sub": str(user.id), "type": "access"},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    refresh_token = create_refresh_token(
        data={"sub": str(user.id), "type": "refresh"},
        expires_delta=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )
    return {"access_token": access_token, "refresh_token": refresh_token, "token_type": "bearer"}


def refresh_tokens(db: Session, refresh_token: str) -> tuple[User, dict]:
    payload = decode_token(refresh_token)

    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token is invalid or expired",
        )
    if payload.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type, a refresh token is required",
        )

    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )
    return user, issue_tokens(user)
