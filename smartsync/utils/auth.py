import secrets
from datetime import datetime, timedelta, UTC
from typing import Optional
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from smartsync.config import SECRET_KEY, ALGORITHM
from smartsync.errors import AuthError, ValidationError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str):
    """Hash a password after validating bcrypt's 72-byte limit.

    Raises ValidationError if the UTF-8 encoding of the password exceeds 72 bytes.
    """
    if isinstance(password, str):
        b = password.encode("utf-8")
        if len(b) > 72:
            raise ValidationError("password too long: must be at most 72 bytes when UTF-8 encoded")
    return pwd_context.hash(password)


def verify_password(plain, hashed):
    """Verify a plaintext password against a hash.

    If verification raises a ValueError (for example plain >72 bytes), return False
    so the caller answers with an authentication failure instead of an error.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_token(user_id: str, **claims):
    data = {"userId": user_id, **claims}
    # read expiry at call-time so tests (and runtime overrides) that modify
    # smartsync.config.ACCESS_TOKEN_EXPIRE_MINUTES take effect immediately
    import smartsync.config as _cfg
    if _cfg.ACCESS_TOKEN_EXPIRE_MINUTES > 0:
        expire = datetime.now(UTC) + timedelta(minutes=_cfg.ACCESS_TOKEN_EXPIRE_MINUTES)
        data["exp"] = int(expire.timestamp())
    return jwt.encode(data, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Return the verified claims of ``token`` or raise AuthError.

    jwt.decode checks ``exp`` only when the claim is present.
    """
    if not token:
        raise AuthError("Unauthorized")
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise AuthError("Token has expired")
    except JWTError:
        raise AuthError("Invalid token")


def create_oauth_state(user_id: str) -> str:
    """Signed OAuth ``state`` naming the user the delegated grant belongs to.

    Uses its own claim so a leaked state is never accepted as a bearer token.
    """
    return jwt.encode({"oauthUser": user_id, "nonce": secrets.token_hex(8)}, SECRET_KEY, algorithm=ALGORITHM)


def read_oauth_state(state: Optional[str]) -> Optional[str]:
    if not state:
        return None
    try:
        return jwt.decode(state, SECRET_KEY, algorithms=[ALGORITHM]).get("oauthUser")
    except JWTError:
        return None
