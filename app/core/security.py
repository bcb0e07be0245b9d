import logging
import uuid
import bcrypt
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import jwt, JWTError
from pydantic import BaseModel, ValidationError
from app.core.config import SECRET_KEY, ALGORITHM, BCRYPT_ROUNDS

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(minutes=15)
REFRESH_TOKEN_TTL = timedelta(days=7)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Passlib only verifies hashes written by older deployments; new hashes use bcrypt directly
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_BCRYPT_MAX_BYTES = 72


class TokenClaims(BaseModel):
    """Decoded and verified credential."""

    sub: str
    email: str
    role: str
    name: str
    typ: str
    jti: str
    iat: int
    exp: int

    model_config = {"frozen": True, "extra": "ignore"}

    def identity(self) -> Dict[str, str]:
        """The principal claim set the token was issued from."""
        return {"sub": self.sub, "email": self.email, "role": self.role, "name": self.name}


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt directly.

    Request schemas reject passwords over 72 bytes, so the slice here never
    changes a password that got past validation.

    Args:
        password: Plain text password

    Returns:
        Hashed password string (bcrypt format compatible with passlib)
    """
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """
    Verify a password against its hash.

    Supports both bcrypt-native hashes and passlib-wrapped hashes for backward compatibility.

    Args:
        password: Plain text password
        hashed: Hashed password string

    Returns:
        True if password matches hash, False otherwise
    """
    if not password or not hashed:
        return False
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        # Not a bcrypt-native hash, let passlib try the legacy formats
        try:
            return pwd_context.verify(password, hashed)
        except (ValueError, TypeError) as e:
            logger.warning(f"Password verification failed on unrecognized hash: {e}")
            return False


def principal_claims(user) -> Dict[str, str]:
    """Claim set identifying a user inside a credential."""
    return {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "name": user.name,
    }


def issue_token(
    claims: Dict[str, Any],
    ttl: timedelta,
    token_type: str,
    now: Optional[datetime] = None,
) -> str:
    """
    Sign a credential that expires ttl after issuance.

    Args:
        claims: Principal claims (sub, email, role, name)
        ttl: Lifetime of the token
        token_type: "access" or "refresh"
        now: Issuance instant (defaults to the current time)

    Returns:
        Encoded JWT
    """
    issued_at = int((now or datetime.now(timezone.utc)).timestamp())
    to_encode = dict(claims)
    to_encode.update({
        "typ": token_type,
        "jti": uuid.uuid4().hex,
        "iat": issued_at,
        "exp": issued_at + int(ttl.total_seconds()),
    })
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_access_token(claims: Dict[str, Any], now: Optional[datetime] = None) -> str:
    return issue_token(claims, ACCESS_TOKEN_TTL, ACCESS_TOKEN_TYPE, now=now)


def create_refresh_token(claims: Dict[str, Any], now: Optional[datetime] = None) -> str:
    return issue_token(claims, REFRESH_TOKEN_TTL, REFRESH_TOKEN_TYPE, now=now)


def verify_token(
    token: Optional[str],
    expected_type: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[TokenClaims]:
    """
    Check signature, structure, type and expiry of a credential.

    Every failure returns None. Callers never learn why a token was rejected.
    The expiry instant itself is already expired: a token is valid while now < exp.
    """
    if not token or not isinstance(token, str):
        return None

    try:
        # Expiry is checked below so the boundary is exclusive
        payload = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"verify_exp": False},
        )
        claims = TokenClaims(**payload)
    except (JWTError, ValidationError, TypeError):
        return None

    if expected_type is not None and claims.typ != expected_type:
        return None

    current = (now or datetime.now(timezone.utc)).timestamp()
    if current >= claims.exp:
        return None

    return claims
