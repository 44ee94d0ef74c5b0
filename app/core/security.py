"""Password hashing and session cookie signing (session-based auth)."""
import base64
import hmac
import hashlib
import time

from passlib.context import CryptContext

from app.core.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# Session token: base64(user_id:timestamp).hmac
def _signature(payload: bytes) -> str:
    settings = get_settings()
    return hmac.new(settings.secret_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def create_session_token(user_id: int, issued_at: int | None = None) -> str:
    """Create a signed session token for the user (for the session cookie)."""
    ts = int(time.time()) if issued_at is None else issued_at
    payload = f"{user_id}:{ts}".encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=") + "." + _signature(payload)


def verify_session_token(token: str | None) -> int | None:
    """Verify signed token and return user_id if valid and not expired; None otherwise."""
    if not token or "." not in token:
        return None
    try:
        encoded, sig = token.rsplit(".", 1)
        pad = 4 - len(encoded) % 4
        if pad != 4:
            encoded += "=" * pad
        payload = base64.urlsafe_b64decode(encoded)
        if not hmac.compare_digest(_signature(payload), sig):
            return None
        user_id, ts = payload.decode("utf-8").split(":", 1)
        if time.time() - int(ts) > get_settings().session_max_age:
            return None
        return int(user_id)
    except (ValueError, UnicodeDecodeError):
        return None
