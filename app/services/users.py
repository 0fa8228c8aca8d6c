from sqlalchemy.orm import Session
from sqlalchemy import select

from app.config import settings
from app.models.user import User, UserRole
from app.utils.logger import get_logger
from app.utils.security import hash_password, verify_password, session_token_for

logger = get_logger(__name__)

# куда вести после входа
ROLE_HOME = {
    UserRole.DRIVER.value: "/driver",
    UserRole.ADMIN.value: "/admin",
    UserRole.CUSTOMER.value: "/dashboard",
}

# на что админ может переключиться
SWITCHABLE_ROLES = {UserRole.ADMIN.value, UserRole.CUSTOMER.value}


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def role_of(user: User) -> str:
    return user.role.value if hasattr(user.role, "value") else str(user.role)


def home_for_role(role: str | None) -> str:
    return ROLE_HOME.get(normalize_role(role) or "", "/dashboard")


def normalize_role(role: str | None) -> str | None:
    if not role:
        return None
    role = role.strip()
    if role == "Administrator":
        return UserRole.ADMIN.value
    return role.lower()


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == normalize_email(email))).scalar_one_or_none()


def validate_password(password: str, confirm: str | None = None) -> None:
    if len(password or "") < settings.PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters")
    if confirm is not None and password != confirm:
        raise ValueError("Passwords don't match")


def signup(db: Session, full_name: str, email: str, password: str, confirm_password: str) -> User:
    """
    Регистрация всегда создаёт customer, водителей заводит только админ.
    """
    name = (full_name or "").strip()
    if not name:
        raise ValueError("Name is required")
    validate_password(password, confirm_password)

    email = normalize_email(email)
    if get_user_by_email(db, email):
        raise ValueError("An account with this email already exists")

    u = User(
        email=email,
        full_name=name,
        password_hash=hash_password(password),
        role=UserRole.CUSTOMER,
    )
    db.add(u); db.commit(); db.refresh(u)
    logger.info(f"signup: user {u.id} <{email}>")
    return u


def authenticate(db: Session, email: str, password: str, requested_role: str | None = None) -> tuple[User, str]:
    """
    Проверяет пароль и запрошенную роль. Возвращает (user, claimed_role).
    Админ может войти под любой ролью; остальные только под своей.
    """
    u = get_user_by_email(db, email)
    if not u or not verify_password(password or "", u.password_hash):
        logger.warning(f"login failed for <{normalize_email(email)}>")
        raise PermissionError("Invalid email or password")

    actual = role_of(u)
    requested = normalize_role(requested_role) or actual

    if is_admin_account(u):
        if requested not in ROLE_HOME:
            raise ValueError("Invalid role")
        return u, requested
    if requested == actual and actual in (UserRole.CUSTOMER.value, UserRole.DRIVER.value):
        return u, actual

    logger.warning(f"login for user {u.id} rejected: asked {requested}, registered {actual}")
    raise PermissionError(f"Invalid role. You are registered as a {actual}")


def is_admin_account(user: User) -> bool:
    """
    Админ, если users.role == admin или email в ADMIN_EMAILS.
    Смотрим на учётку, а не на роль в токене.
    """
    if role_of(user) == UserRole.ADMIN.value:
        return True
    return normalize_email(user.email) in settings.admin_emails


def switch_role(user: User, role: str) -> str:
    if not is_admin_account(user):
        raise PermissionError("Unauthorized")
    role = normalize_role(role)
    if role not in SWITCHABLE_ROLES:
        raise ValueError("Invalid role")
    logger.info(f"user {user.id} switched view to {role}")
    return session_token_for(user, role)


def promote_to_admin(db: Session, email: str) -> User:
    u = get_user_by_email(db, email)
    if not u:
        raise LookupError("User not found")
    u.role = UserRole.ADMIN
    db.commit(); db.refresh(u)
    logger.info(f"user {u.id} <{u.email}> promoted to admin")
    return u
