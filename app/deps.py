# app/deps.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from .db import get_db
from .config import settings
from .models.user import User
from .utils.security import decode_jwt


# ------------------ Session token ------------------

def _token_from_request(request: Request, authorization: Optional[str]) -> Optional[str]:
    # 1) API-клиенты: Authorization: Bearer <jwt>
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    # 2) браузер: httpOnly-кука
    return request.cookies.get(settings.COOKIE_NAME)


def read_session(request: Request, db: Session) -> tuple[Optional[User], Optional[str]]:
    """
    (user, claimed_role) или (None, None). Для страниц, где нужен редирект, а не 401.
    """
    token = _token_from_request(request, request.headers.get("Authorization"))
    claims = decode_jwt(token) if token else None
    if not claims or not str(claims.get("sub", "")).isdigit():
        return None, None
    user = db.get(User, int(claims["sub"]))
    if not user:
        return None, None
    return user, claims.get("role")


def get_session_claims(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> dict:
    token = _token_from_request(request, authorization)
    claims = decode_jwt(token) if token else None
    if not claims or not str(claims.get("sub", "")).isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return claims


def get_current_user(
    claims: dict = Depends(get_session_claims),
    db: Session = Depends(get_db),
) -> User:
    user = db.get(User, int(claims["sub"]))
    if not user:
        # учётку удалили, а кука осталась
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def get_current_role(claims: dict = Depends(get_session_claims)) -> str:
    return claims.get("role") or ""


# ------------------ Role guards ------------------

def require_role(*roles: str):
    """
    Пропускает, если роль в токене из списка. Иначе 403.
    """
    def _guard(
        user: User = Depends(get_current_user),
        role: str = Depends(get_current_role),
    ) -> User:
        if role in roles:
            return user
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"{' or '.join(roles)} access required",
        )
    return _guard


require_customer = require_role("customer", "admin")
require_driver = require_role("driver", "admin")
