# app/admin/security.py
from fastapi import Depends, HTTPException, status

from ..deps import get_current_user, get_current_role
from ..models.user import User
from ..services.users import is_admin_account


def is_admin_user(user: User, claimed_role: str | None) -> bool:
    """
    Админ-доступ, если:
    1) учётка админская (users.role == 'admin' или email в ADMIN_EMAILS)
    2) и в токене сейчас роль admin (после переключения на customer уже нет)
    """
    return claimed_role == "admin" and is_admin_account(user)


def require_admin(
    user: User = Depends(get_current_user),
    role: str = Depends(get_current_role),
) -> User:
    if not is_admin_user(user, role):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="admin only")
    return user
