# conselho/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError

from conselho.config import Settings
from conselho.errors import InvalidCredential, MissingCredential

# pbkdf2_sha256: sem dependência nativa do bcrypt
pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

bearer = HTTPBearer(auto_error=False)


class TokenIdentity(BaseModel):
    id: int
    username: str
    role: str


def hash_password(raw: str) -> str:
    return pwd.hash(raw)


def verify_password(raw: str, hashed: str) -> bool:
    """Comparação em tempo constante; hash ausente ou corrompido -> False."""
    if not raw or not hashed:
        return False
    try:
        return pwd.verify(raw, hashed)
    except (ValueError, TypeError):
        return False


def create_access_token(
    user: dict,
    settings: Settings,
    expires: Optional[timedelta] = None,
    issued_at: Optional[datetime] = None,
) -> str:
    now = issued_at or datetime.now(timezone.utc)
    if expires is None:
        expires = timedelta(hours=settings.TOKEN_EXPIRE_HOURS)

    payload = {
        "id": user["id"],
        "username": user["username"],
        "role": user.get("role", "admin"),
        "iat": now,
        "exp": now + expires,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(token: str, settings: Settings) -> TokenIdentity:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
        return TokenIdentity(**payload)
    except (JWTError, ValidationError, TypeError):
        raise InvalidCredential()


def authenticate(users, username: str, password: str) -> Optional[dict]:
    user = users.find_by_username(username)
    if not user:
        return None
    if not users.verify_password(user, password):
        return None
    return user


def get_current_user(
    request: Request,
    cred: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> TokenIdentity:
    if cred is None or not cred.credentials:
        raise MissingCredential()
    return decode_access_token(cred.credentials, request.app.state.settings)
