import time
from jose import jwt, JWTError
from passlib.context import CryptContext
from ..config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def create_jwt(payload: dict) -> str:
    exp = int(time.time()) + settings.JWT_TTL_SEC
    return jwt.encode({**payload, "exp": exp}, settings.SECRET_KEY, algorithm=settings.JWT_ALG)


def decode_jwt(token: str):
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALG])
    except JWTError:
        return None


def session_token_for(user, role: str | None = None) -> str:
    """
    Claims: sub (id строкой, так требует jose), name, email, role.
    role можно подменить: так работает переключение ролей у админа.
    """
    claimed = role or _role_value(user.role)
    return create_jwt({
        "sub": str(user.id),
        "name": user.full_name,
        "email": user.email,
        "role": claimed,
    })


def _role_value(role) -> str:
    return role.value if hasattr(role, "value") else str(role)
