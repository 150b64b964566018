"""
Security utilities for authentication
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.config import settings
from app.schemas import TokenPayload


# Password hashing context using Argon2
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__memory_cost=65536,  # 64 MB
    argon2__time_cost=3,        # 3 iterations
    argon2__parallelism=1,      # 1 thread
)


def hash_password(password: str) -> str:
    """Hash a password using Argon2"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

    to_encode.update({
        "exp": expire,
        "iat": now,
        "type": "access"
    })

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def verify_token(token: str) -> Optional[TokenPayload]:
    """Verify and decode JWT token"""
    try:
        # jose rejects expired tokens on decode
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm]
        )

        if payload.get("type") != "access":
            return None

        user_id = payload.get("sub")
        email = payload.get("email")
        if user_id is None or email is None:
            return None

        return TokenPayload(
            sub=user_id,
            email=email,
            org_id=payload.get("org_id"),
            role=payload.get("role", "staff"),
            exp=payload["exp"],
            iat=payload.get("iat", 0)
        )

    except JWTError:
        return None


def create_token_data(user_id: str, email: str, org_id: Optional[str] = None, role: str = "staff") -> Dict[str, Any]:
    """Create token data dictionary"""
    return {
        "sub": user_id,
        "email": email,
        "org_id": org_id,
        "role": role,
    }
