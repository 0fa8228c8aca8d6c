# app/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..deps import get_current_user, get_current_role
from ..models.user import User
from ..admin.security import require_admin
from ..schemas.auth import SignupIn, LoginIn, SwitchRoleIn, PromoteIn
from ..services import users as users_service
from ..utils.security import session_token_for

router = APIRouter(tags=["auth"])


def set_session_cookie(resp: Response, token: str) -> None:
    resp.set_cookie(
        settings.COOKIE_NAME,
        token,
        max_age=settings.JWT_TTL_SEC,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def clear_session_cookie(resp: Response) -> None:
    resp.delete_cookie(settings.COOKIE_NAME)


def _session_response(user: User, token: str, role: str, message: str | None = None) -> JSONResponse:
    resp = JSONResponse({
        "ok": True,
        "token": token,
        "role": role,
        "redirect": users_service.home_for_role(role),
        "user": user.to_dict(),
        "message": message,
    })
    set_session_cookie(resp, token)
    # ответ с токеном не кэшируем
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/api/auth/signup", status_code=201)
def api_signup(body: SignupIn, db: Session = Depends(get_db)):
    u = users_service.signup(db, body.full_name, body.email, body.password, body.confirm_password)
    return {"ok": True, "user": u.to_dict(), "message": "Account created successfully! Please sign in."}


@router.post("/api/auth/login")
def api_login(body: LoginIn, db: Session = Depends(get_db)):
    try:
        u, role = users_service.authenticate(db, body.email, body.password, body.role)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return _session_response(u, session_token_for(u, role), role)


@router.post("/api/auth/logout")
def api_logout():
    resp = JSONResponse({"ok": True})
    clear_session_cookie(resp)
    return resp


@router.post("/api/auth/switch-role")
def api_switch_role(
    body: SwitchRoleIn,
    user: User = Depends(get_current_user),
):
    token = users_service.switch_role(user, body.role)
    role = users_service.normalize_role(body.role)
    return _session_response(user, token, role)


@router.get("/api/me")
def me(
    user: User = Depends(get_current_user),
    role: str = Depends(get_current_role),
):
    return {
        "ok": True,
        "user": user.to_dict(),
        "role": role,
        "is_admin": users_service.is_admin_account(user),
    }


@router.post("/api/admin/promote")
def api_promote(
    body: PromoteIn,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    u = users_service.promote_to_admin(db, body.email)
    return {"ok": True, "message": "User promoted to admin successfully", "user": u.to_dict()}
