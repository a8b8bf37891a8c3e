import hmac
from datetime import datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from .config import settings

ALGORITHM = "HS256"
TRAINER_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days
CLIENT_TOKEN_EXPIRE_MINUTES = 60 * 24 * 30  # 30 days
MAX_BCRYPT_BYTES = 72  # bcrypt limit


def hash_password(password: str) -> str:
    p = password.encode("utf-8")[:MAX_BCRYPT_BYTES]
    return bcrypt.hashpw(p, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    p = plain.encode("utf-8")[:MAX_BCRYPT_BYTES]
    try:
        return bcrypt.checkpw(p, hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in TRAINER_PASSWORD_HASH
        return False


def verify_trainer_password(plain: str) -> bool:
    if settings.trainer_password_hash:
        return verify_password(plain, settings.trainer_password_hash)
    return hmac.compare_digest(plain.encode("utf-8"), settings.trainer_password.encode("utf-8"))


def create_access_token(role: str, client_id: int | None = None) -> str:
    minutes = CLIENT_TOKEN_EXPIRE_MINUTES if role == "client" else TRAINER_TOKEN_EXPIRE_MINUTES
    to_encode: dict = {
        "sub": f"client:{client_id}" if role == "client" else "trainer",
        "role": role,
        "exp": datetime.utcnow() + timedelta(minutes=minutes),
    }
    if client_id is not None:
        to_encode["client_id"] = client_id
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None
