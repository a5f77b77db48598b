import logging
import uuid
from typing import Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from smartsync.errors import AuthError, ConflictError, ValidationError
from smartsync.models.user import User
from smartsync.repositories import UserRepository
from smartsync.utils.auth import create_token, decode_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Canonical form of ``email``, the same one pydantic's ``EmailStr`` yields.

    Raises EmailNotValidError for addresses that do not parse.
    """
    return validate_email(email, check_deliverability=False).normalized


def register(users: UserRepository, name: Optional[str], email: Optional[str], password: Optional[str]) -> Tuple[str, str]:
    """Create a user and return ``(user_id, token)``.

    Raises ValidationError when a field is missing, blank or not an email
    address, and ConflictError when the email is already registered.
    """
    if not name or not name.strip() or not email or not password:
        raise ValidationError("name, email and password are required")
    try:
        email = normalize_email(email)
    except EmailNotValidError as exc:
        raise ValidationError(f"invalid email: {exc}")
    if users.get_by_email(email) is not None:
        raise ConflictError("Email already exists")

    user = User(
        id=uuid.uuid4().hex,
        name=name.strip(),
        email=email,
        password=hash_password(password),
    )
    users.add(user)
    logger.info("Registered user %s", user.id)
    return user.id, create_token(user.id)


def login(users: UserRepository, email: Optional[str], password: Optional[str]) -> Tuple[str, str]:
    logger.info("Login attempt for %s", email)
    user = None
    if email:
        try:
            user = users.get_by_email(normalize_email(email))
        except EmailNotValidError:
            user = None
    # same error for unknown email, unparseable email and wrong password
    if user is None or not password or not verify_password(password, user.password):
        logger.info("Login failed for %s", email)
        raise AuthError("Invalid credentials")

    token = create_token(user.id)
    logger.info("Login successful for %s, token %s...", email, token[:10])
    return user.id, token


def verify(token: Optional[str]) -> str:
    payload = decode_token(token)
    user_id = payload.get("userId")
    if not user_id:
        raise AuthError("Invalid token: missing user")
    return user_id
