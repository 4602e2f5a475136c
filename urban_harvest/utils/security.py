# urban_harvest/utils/security.py
from datetime import datetime, timezone, timedelta

from jose import jwt
from werkzeug.security import generate_password_hash, check_password_hash

from urban_harvest.utils.settings import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRES_DAYS


def hash_password(raw_password: str) -> str:
    return generate_password_hash(raw_password)


def check_password(raw_password: str, hashed_password: str) -> bool:
    return check_password_hash(hashed_password, raw_password)


def create_access_token(user_id: int, email: str, role: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(days=JWT_EXPIRES_DAYS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    # raises jose.ExpiredSignatureError / jose.JWTError
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
