from datetime import timedelta, datetime, timezone
from typing import Optional

from core.config import SECRET_KEY, ALGORITHM
from fastapi import Request
from fastapi.security import HTTPBearer
from jose import JWTError, jwt

from models.document import Actor

# Tokens are issued by the identity provider; this service only reads them
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def get_uid_from_token(token: str) -> str:
    """Return the ``sub`` claim; raises JWTError for bad or subject-less tokens."""
    payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    uid = payload.get("sub")
    if not uid:
        raise JWTError("Token has no subject")
    return uid


def actor_from_uid(uid: Optional[str]) -> Optional[Actor]:
    if not uid:
        return None
    return Actor(uid=uid)


def get_current_actor(request: Request) -> Optional[Actor]:
    return actor_from_uid(getattr(request.state, "user", None))
