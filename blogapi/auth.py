import os
import secrets
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext

# Prefer JWT_SECRET but support legacy JWT_SECRET_KEY for compatibility
SECRET = os.getenv('JWT_SECRET') or os.getenv('JWT_SECRET_KEY', 'devsecret')
ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', str(60 * 24 * 7)))

SESSION_COOKIE_NAME = os.getenv('SESSION_COOKIE_NAME', 'session')

pwd_ctx = CryptContext(schemes=['pbkdf2_sha256'], deprecated='auto')


def hash_password(password: str) -> str:
    return pwd_ctx.hash(password)


def verify_password(password: str, stored: str) -> bool:
    """Check a password against a stored hash or a legacy plaintext value"""
    if not isinstance(stored, str) or not stored:
        return False
    if pwd_ctx.identify(stored) is None:
        return secrets.compare_digest(password.encode('utf-8'), stored.encode('utf-8'))
    return pwd_ctx.verify(password, stored)


def needs_rehash(stored: str) -> bool:
    if pwd_ctx.identify(stored) is None:
        return True
    return pwd_ctx.needs_update(stored)


def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({'exp': expire})
    encoded = jwt.encode(to_encode, SECRET, algorithm=ALGORITHM)
    return encoded


def decode_token(token: str):
    try:
        payload = jwt.decode(token, SECRET, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def session_token(email: str) -> str:
    return create_access_token({'sub': email})


def session_email(token: str | None) -> str | None:
    if not token:
        return None
    payload = decode_token(token)
    if not payload:
        return None
    return payload.get('sub')
